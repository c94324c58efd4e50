"""Unit tests for utility functions."""

import unittest

from src.cover_letter_pipeline.utils import (
    create_folder_name_from_details,
    dedupe_list,
    is_bullet_line,
    normalize_whitespace,
    strip_bullet,
)


class TestUtils(unittest.TestCase):
    """Test utility functions."""

    def test_create_folder_name_from_details(self):
        """Test folder name creation."""
        timestamp = "20231025_120000"

        # Test with all details
        name = create_folder_name_from_details("Acme Corp", "Backend Engineer", timestamp)
        self.assertEqual(name, "Acme Corp - Backend Engineer - 2023-10-25")

        # Test with special characters
        name = create_folder_name_from_details("ACME/Inc.", "Dev/Ops", timestamp)
        self.assertEqual(name, "ACMEInc. - DevOps - 2023-10-25")

        # Test with only company
        name = create_folder_name_from_details("Acme Corp", None, timestamp)
        self.assertEqual(name, "Acme Corp - 2023-10-25")

        # Test fallback
        name = create_folder_name_from_details(None, None, timestamp)
        self.assertEqual(name, "Application_20231025_120000")

        # Test truncation
        name = create_folder_name_from_details("A" * 100, "B" * 100, timestamp)
        self.assertTrue(len(name) <= 120)
        self.assertTrue(name.endswith("- 2023-10-25"))

    def test_normalize_whitespace(self):
        """Test collapsing of whitespace runs."""
        self.assertEqual(normalize_whitespace("  Acme \n\t Corp  "), "Acme Corp")
        self.assertEqual(normalize_whitespace(None), "")

    def test_bullets(self):
        """Test bullet detection and removal."""
        for line in ("- Python", "* Python", "• Python", "1. Python", "2) Python"):
            self.assertTrue(is_bullet_line(line))
            self.assertEqual(strip_bullet(line), "Python")
        self.assertFalse(is_bullet_line("Python-based services"))
        self.assertFalse(is_bullet_line("2024 results"))

    def test_dedupe_list(self):
        """Test case-insensitive deduplication with a cap."""
        items = ["Python ", "python", "", "AWS", "Docker", "Kafka"]
        self.assertEqual(dedupe_list(items, 3), ["Python", "AWS", "Docker"])
        self.assertEqual(dedupe_list([], 3), [])


if __name__ == "__main__":
    unittest.main()
