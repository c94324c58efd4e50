"""Tests for industry, experience level and tone detection."""

import pytest

from src.cover_letter_pipeline.analysis import (
    ExperienceLevel,
    Industry,
    Tone,
    coerce_tone,
    detect_experience_level,
    detect_industry,
    detect_tone,
    parse_years_of_experience,
    score_industries,
)


class TestIndustryDetection:
    """Tests for industry classification."""

    @pytest.mark.parametrize("text,expected", [
        ("We are hiring a software engineer to build cloud services in Python.", Industry.TECH),
        ("Join our investment banking team as an analyst covering equity deals.", Industry.FINANCE),
        ("Lead brand marketing campaigns and social media content.", Industry.CREATIVE),
        ("Warehouse supervisor for the night shift.", Industry.GENERAL),
        ("", Industry.GENERAL),
    ])
    def test_detect_industry(self, text, expected):
        """Test classification of typical postings."""
        assert detect_industry(text) == expected

    def test_first_bucket_with_hits_wins(self):
        """Test that priority order decides even when a later bucket has more hits."""
        text = "Financial analyst for investment banking and accounting, some software use."
        scores = score_industries(text)
        assert scores[Industry.FINANCE] > scores[Industry.TECH] > 0
        assert detect_industry(text) == Industry.TECH

    def test_finance_without_tech_terms(self):
        """Test that finance wins when no tech keyword appears."""
        assert detect_industry("Financial analyst for investment banking") == Industry.FINANCE

    def test_plurals_and_derived_forms(self):
        """Test that keywords match plurals and longer forms of the word."""
        text = "We are hiring developers and engineers to grow our platform."
        assert score_industries(text)[Industry.TECH] == 2
        assert detect_industry(text) == Industry.TECH

    def test_keywords_match_at_word_start(self):
        """Test that keywords do not match in the middle of a word."""
        assert score_industries("capital gains")[Industry.TECH] == 0


class TestExperienceLevel:
    """Tests for experience level classification."""

    def test_five_years_is_mid(self):
        """Test that 5+ years without seniority keywords is mid level."""
        resume = "Backend developer with 5+ years of experience building APIs in Python."
        assert detect_experience_level(resume) == ExperienceLevel.MID

    def test_many_years_is_senior(self):
        """Test that 7 or more years is senior."""
        assert detect_experience_level("Accountant with 10 years in audit.") == ExperienceLevel.SENIOR

    def test_leadership_keyword_is_senior(self):
        """Test that leadership keywords make a résumé senior."""
        assert detect_experience_level("Engineering Manager for a platform group") == ExperienceLevel.SENIOR

    def test_leadership_is_senior(self):
        """Test that derived leadership words count as seniority signals."""
        resume = "Demonstrated leadership of a 10-person team. 5 years experience."
        assert detect_experience_level(resume) == ExperienceLevel.SENIOR

    def test_internal_is_not_intern(self):
        """Test that entry keywords only match whole words."""
        resume = "Built internal tooling and international payment flows. 4 years experience."
        assert detect_experience_level(resume) == ExperienceLevel.MID
        assert detect_experience_level("Summer interns program alumna") == ExperienceLevel.ENTRY

    def test_senior_check_runs_first(self):
        """Test that senior keywords win over entry keywords."""
        assert detect_experience_level("Senior engineer who mentors each intern") == ExperienceLevel.SENIOR

    def test_few_years_is_entry(self):
        """Test that 2 or fewer years is entry level."""
        assert detect_experience_level("Analyst with 1 year of experience") == ExperienceLevel.ENTRY

    def test_entry_keyword(self):
        """Test that entry keywords make a résumé entry level."""
        assert detect_experience_level("Recent graduate seeking a role") == ExperienceLevel.ENTRY

    def test_no_signals_is_mid(self):
        """Test the mid-level default."""
        assert detect_experience_level("") == ExperienceLevel.MID

    def test_largest_year_figure_is_used(self):
        """Test that the largest 'N years' figure is parsed."""
        assert parse_years_of_experience("2 years at A, then 8 yrs at B") == 8
        assert parse_years_of_experience("no figures here") is None


class TestTone:
    """Tests for tone selection."""

    def test_default_is_professional(self):
        """Test the default tone."""
        assert detect_tone() == Tone.PROFESSIONAL
        assert detect_tone(None) == Tone.PROFESSIONAL

    def test_override_by_name(self):
        """Test that a tone name is accepted case-insensitively."""
        assert detect_tone("Friendly") == Tone.FRIENDLY
        assert detect_tone(Tone.DIRECT) == Tone.DIRECT

    def test_unknown_tone_raises(self):
        """Test that unknown tone names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown tone"):
            coerce_tone("sarcastic")
