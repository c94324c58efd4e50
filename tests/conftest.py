"""Shared fixtures for cover letter pipeline tests."""

import pytest

from src.cover_letter_pipeline.context import ContactInfo


@pytest.fixture
def contact():
    return ContactInfo(
        full_name="Jane Doe",
        email="jane@example.com",
        location="Seattle, WA",
        professional_title="Backend Engineer",
        phone="555-0100",
        linkedin="linkedin.com/in/janedoe",
    )
