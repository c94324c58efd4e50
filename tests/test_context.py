"""Tests for generation context building."""

from dataclasses import FrozenInstanceError

import pytest

from src.cover_letter_pipeline.analysis import Tone
from src.cover_letter_pipeline.context import (
    COMPANY_SENTINEL,
    POSITION_SENTINEL,
    ContactInfo,
    build_context,
)

from tests.sample_data import FIXED_NOW, JOB_DESCRIPTION, RESUME


class TestContactInfo:
    """Tests for ContactInfo construction."""

    def test_from_camel_case_mapping(self):
        """Test that camelCase keys used by callers are accepted."""
        contact = ContactInfo.from_dict({
            "fullName": "Jane  Doe",
            "email": "jane@example.com",
            "location": "Seattle, WA",
            "professionalTitle": "Engineer",
            "phone": "",
            "linkedin": "linkedin.com/in/janedoe",
            "unknownKey": "ignored",
        })
        assert contact.full_name == "Jane Doe"
        assert contact.professional_title == "Engineer"
        assert contact.phone is None
        assert contact.linkedin == "linkedin.com/in/janedoe"

    def test_from_snake_case_mapping(self):
        """Test that snake_case keys are accepted."""
        contact = ContactInfo.from_dict({"full_name": "Jane Doe", "email": "j@x.io", "location": "Leeds"})
        assert contact == ContactInfo(full_name="Jane Doe", email="j@x.io", location="Leeds")


class TestBuildContext:
    """Tests for build_context."""

    def test_extracted_fields(self, contact):
        """Test that company, position and lists come from the inputs."""
        context = build_context(RESUME, JOB_DESCRIPTION, contact, now=FIXED_NOW)

        assert context.company == "Acme Corp"
        assert context.position == "Backend Engineer"
        assert context.requirements == (
            "Python services at scale",
            "AWS infrastructure experience",
            "Payment APIs",
        )
        assert len(context.achievements) == 3
        assert context.achievements[0].startswith("Increased checkout conversion by 25%")
        assert context.tone == Tone.PROFESSIONAL
        assert context.date_iso == "2024-03-05T09:30:00+00:00"
        assert context.company_from_source == "Acme Corp"

    def test_lists_are_capped_at_three(self, contact):
        """Test that requirements are deduplicated and truncated to three."""
        job = "Requirements:\n- Go\n- Rust\n- go\n- Kafka\n- Redis\n- SQL"
        context = build_context("", job, contact, now=FIXED_NOW)
        assert context.requirements == ("Go", "Rust", "Kafka")

    def test_sentinels_when_extraction_fails(self, contact):
        """Test that company and position are never empty."""
        context = build_context("", "", contact, now=FIXED_NOW)
        assert context.company == COMPANY_SENTINEL
        assert context.position == POSITION_SENTINEL
        assert context.company_from_source is None
        assert not context.has_extracted_company
        assert not context.has_extracted_position

    def test_hints_used_only_on_miss(self, contact):
        """Test that caller hints fill in for failed extraction only."""
        missing = build_context("", "", contact, now=FIXED_NOW, company_name="Initech", job_title="QA Lead")
        assert missing.company == "Initech"
        assert missing.position == "QA Lead"

        found = build_context("", JOB_DESCRIPTION, contact, now=FIXED_NOW, company_name="Initech")
        assert found.company == "Acme Corp"

    def test_tone_and_locale(self, contact):
        """Test that tone overrides and locale are carried through."""
        context = build_context("", "", contact, tone="direct", locale="de-DE", now=FIXED_NOW)
        assert context.tone == Tone.DIRECT
        assert context.locale == "de-DE"

    def test_mapping_contact(self):
        """Test that a plain mapping is accepted as contact."""
        context = build_context("", "", {"fullName": "Jane Doe", "email": "", "location": ""}, now=FIXED_NOW)
        assert context.contact.full_name == "Jane Doe"

    def test_deterministic(self, contact):
        """Test that identical inputs and time give identical contexts."""
        first = build_context(RESUME, JOB_DESCRIPTION, contact, now=FIXED_NOW)
        second = build_context(RESUME, JOB_DESCRIPTION, contact, now=FIXED_NOW)
        assert first == second

    def test_context_is_immutable(self, contact):
        """Test that the context cannot be modified."""
        context = build_context(RESUME, JOB_DESCRIPTION, contact, now=FIXED_NOW)
        with pytest.raises(FrozenInstanceError):
            context.company = "Other"
