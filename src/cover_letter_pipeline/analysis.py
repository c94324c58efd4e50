"""Industry, experience level and tone classification for example selection."""

import re
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class Industry(Enum):
    """Industry bucket of a job posting."""
    TECH = "tech"
    FINANCE = "finance"
    CREATIVE = "creative"
    GENERAL = "general"


class ExperienceLevel(Enum):
    """Seniority bucket of a candidate."""
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"


class Tone(Enum):
    """Writing tone of a cover letter."""
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    DIRECT = "direct"


# Buckets in priority order: the first bucket with a hit wins
INDUSTRY_KEYWORDS: Tuple[Tuple[Industry, Tuple[str, ...]], ...] = (
    (Industry.TECH, (
        "software", "engineer", "engineering", "developer", "programming", "tech",
        "technology", "cloud", "devops", "backend", "frontend", "full-stack", "api",
        "kubernetes", "python", "javascript", "machine learning",
    )),
    (Industry.FINANCE, (
        "financial", "finance", "analyst", "investment", "banking", "accounting",
        "portfolio", "audit", "fintech", "valuation", "cfa", "equity", "trading",
    )),
    (Industry.CREATIVE, (
        "marketing", "design", "designer", "creative", "brand", "content",
        "copywriting", "campaign", "social media", "advertising", "ux", "illustration",
    )),
)

SENIOR_KEYWORDS = (
    "senior", "lead", "manager", "director", "principal", "head of", "vp",
    "vice president", "chief",
)
ENTRY_KEYWORDS = ("junior", "graduate", "entry", "entry-level", "intern", "internship", "trainee")

SENIOR_MIN_YEARS = 7
ENTRY_MAX_YEARS = 2

YEARS_PATTERN = re.compile(r"\b(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)


def _keyword_hits(text: str, keywords: Tuple[str, ...]) -> int:
    """Count keyword occurrences at word starts, so plurals and derived forms count."""
    return sum(
        len(re.findall(rf"\b{re.escape(keyword)}", text))
        for keyword in keywords
    )


def _whole_word_hits(text: str, keywords: Tuple[str, ...]) -> int:
    # Plurals only: "intern" must not match "internal"
    return sum(
        len(re.findall(rf"\b{re.escape(keyword)}s?\b", text))
        for keyword in keywords
    )


def score_industries(job_description: str) -> Dict[Industry, int]:
    """Count keyword hits per industry bucket.

    Args:
        job_description: Raw job description text

    Returns:
        Mapping of industry to hit count, in priority order
    """
    text = (job_description or "").lower()
    return {industry: _keyword_hits(text, keywords) for industry, keywords in INDUSTRY_KEYWORDS}


def detect_industry(job_description: str) -> Industry:
    """Classify a job description into an industry bucket.

    Buckets are checked in priority order (tech, finance, creative) and the
    first with any keyword hit wins. With no hits at all the posting is
    general.
    """
    for industry, hits in score_industries(job_description).items():
        if hits > 0:
            return industry
    return Industry.GENERAL


def parse_years_of_experience(text: str) -> Optional[int]:
    """Return the largest "N years" figure in the text, or None."""
    figures = [int(value) for value in YEARS_PATTERN.findall(text or "")]
    return max(figures) if figures else None


def detect_experience_level(resume: str) -> ExperienceLevel:
    """Classify a résumé as entry, mid or senior.

    Senior when 7+ years are mentioned or leadership keywords appear; entry
    when at most 2 years are mentioned or entry keywords appear; mid
    otherwise. The senior check runs first.
    """
    text = (resume or "").lower()
    years = parse_years_of_experience(text)

    if (years is not None and years >= SENIOR_MIN_YEARS) or _keyword_hits(text, SENIOR_KEYWORDS):
        return ExperienceLevel.SENIOR
    if (years is not None and years <= ENTRY_MAX_YEARS) or _whole_word_hits(text, ENTRY_KEYWORDS):
        return ExperienceLevel.ENTRY
    return ExperienceLevel.MID


def coerce_tone(tone: Union[Tone, str, None]) -> Optional[Tone]:
    """Convert a tone name to a Tone, passing None through.

    Raises:
        ValueError: If the name is not a known tone
    """
    if tone is None or isinstance(tone, Tone):
        return tone
    try:
        return Tone(str(tone).strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in Tone)
        raise ValueError(f"Unknown tone '{tone}'. Expected one of: {valid}")


def detect_tone(override: Union[Tone, str, None] = None) -> Tone:
    """Pick the letter tone: the caller's override, else professional."""
    return coerce_tone(override) or Tone.PROFESSIONAL
