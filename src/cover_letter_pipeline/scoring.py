"""Quality scoring for generated cover letters.

Each completion is scored on five dimensions with simple pattern checks.
The weighted overall score decides whether the generator retries.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Set, Tuple, Union

from .config import QualityConfig, QualityThresholds, QualityWeights
from .context import ContactInfo, as_contact_info
from .job_parser import extract_company_name, extract_position_title

GREETING_PATTERN = re.compile(r"Dear\s+(?:Hiring\s+Manager|[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),", re.IGNORECASE)
CLOSING_PATTERN = re.compile(r"Sincerely,|Best\s+regards,|Kind\s+regards,", re.IGNORECASE)
QUANTIFIED_PATTERN = re.compile(r"\d+%|\$\d+|\d+\+")
MIN_QUANTIFIED_RESULTS = 2
PLACEHOLDER_PATTERN = re.compile(r"\[[^\]]+\]")
PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
SENTENCE_SPLIT = re.compile(r"[.!?]+")
WORD_SPLIT = re.compile(r"\W+")

MIN_PARAGRAPH_LENGTH = 50
MIN_PARAGRAPHS = 3
MAX_PARAGRAPHS = 5
LONG_SENTENCE_WORDS = 25
MAX_LONG_SENTENCES = 2
MIN_KEYWORD_LENGTH = 4

# Action phrases that signal concrete contributions
PROFESSIONAL_INDICATORS = (
    "contributed to", "achieved", "implemented", "developed", "managed",
    "increased", "improved", "reduced", "led", "collaborated",
)

CLICHE_PHRASES = (
    "i am writing to apply", "please find attached", "look forward to hearing",
    "thank you for your time", "i believe i would be", "perfect fit",
    "passionate about", "think outside the box", "hit the ground running",
)

PERK_TERMS = ("benefits", "discounted flights", "health insurance", "perks", "wellness", "gym")
PERK_PENALTY_PER_HIT = 0.03
MAX_PERK_PENALTY = 0.1

STOPWORDS = frozenset({"this", "that", "with", "from", "they", "have", "will", "been", "were"})

DIMENSIONS = (
    "format_compliance",
    "personalization",
    "achievement_integration",
    "professional_tone",
    "content_relevance",
)

IMPROVEMENTS = {
    "format_compliance": "Ensure proper business letter format with greeting, body paragraphs, and professional closing",
    "personalization": "Include specific company name, job title, and personal details",
    "achievement_integration": "Add more quantified achievements and specific examples from experience",
    "professional_tone": "Use more professional language and avoid clichéd phrases",
    "content_relevance": "Better align content with job requirements and company needs",
}


@dataclass(frozen=True)
class QualityMetrics:
    """Sub-scores of one completion, each in [0, 1]."""
    format_compliance: float
    personalization: float
    achievement_integration: float
    professional_tone: float
    content_relevance: float
    overall_score: float

    @classmethod
    def from_scores(
        cls,
        format_compliance: float,
        personalization: float,
        achievement_integration: float,
        professional_tone: float,
        content_relevance: float,
        weights: Optional[QualityWeights] = None,
    ) -> "QualityMetrics":
        """Build metrics and compute the weighted overall score."""
        weights = weights or QualityWeights()
        overall = (
            format_compliance * weights.format_compliance
            + personalization * weights.personalization
            + achievement_integration * weights.achievement_integration
            + professional_tone * weights.professional_tone
            + content_relevance * weights.content_relevance
        )
        return cls(
            format_compliance=format_compliance,
            personalization=personalization,
            achievement_integration=achievement_integration,
            professional_tone=professional_tone,
            content_relevance=content_relevance,
            overall_score=overall,
        )


@dataclass(frozen=True)
class QualityValidationResult:
    """Scores plus the retry decision for one completion."""
    metrics: QualityMetrics
    should_retry: bool
    weaknesses: Tuple[str, ...]
    improvements: Tuple[str, ...]
    has_placeholders: bool = False


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


def _count_phrases(text_lower: str, phrases: Tuple[str, ...]) -> int:
    return sum(1 for phrase in phrases if phrase in text_lower)


def _long_words(text_lower: str) -> List[str]:
    return [word for word in WORD_SPLIT.split(text_lower) if len(word) >= MIN_KEYWORD_LENGTH]


def extract_keywords(text: str) -> Set[str]:
    """Unique lower-cased words of 4+ characters, stopwords removed."""
    return {word for word in _long_words((text or "").lower()) if word not in STOPWORDS}


def count_common_terms(content: str, resume: str) -> int:
    """Count distinct 4+ character words shared by the letter and the résumé."""
    return len(set(_long_words(content.lower())) & set(_long_words((resume or "").lower())))


def count_paragraphs(content: str) -> int:
    """Count blank-line separated blocks longer than 50 characters."""
    return sum(
        1 for block in PARAGRAPH_SPLIT.split(content)
        if len(block.strip()) > MIN_PARAGRAPH_LENGTH
    )


def count_quantified_results(content: str) -> int:
    """Count figures such as "25%", "$40000" or "10+"."""
    return len(QUANTIFIED_PATTERN.findall(content or ""))


def has_placeholders(content: str) -> bool:
    """Check for bracketed template text such as "[Company Name]"."""
    return bool(PLACEHOLDER_PATTERN.search(content or ""))


def check_format_compliance(content: str, contact: ContactInfo) -> float:
    """Greeting, closing, signature name and 3-5 paragraphs, 0.25 each."""
    score = 0.0
    if GREETING_PATTERN.search(content):
        score += 0.25
    if CLOSING_PATTERN.search(content):
        score += 0.25
    if contact.full_name and contact.full_name in content:
        score += 0.25
    if MIN_PARAGRAPHS <= count_paragraphs(content) <= MAX_PARAGRAPHS:
        score += 0.25
    return _clamp(score)


def check_personalization(
    content: str,
    contact: ContactInfo,
    company_name: Optional[str],
    job_title: Optional[str],
) -> float:
    """Name 0.3, company 0.3, job title 0.2, location 0.2."""
    score = 0.0
    if contact.full_name and contact.full_name in content:
        score += 0.3
    if company_name and company_name in content:
        score += 0.3
    if job_title and job_title.lower() in content.lower():
        score += 0.2
    if contact.location and contact.location in content:
        score += 0.2
    return _clamp(score)


def check_achievement_integration(content: str, resume: str) -> float:
    """Quantified results 0.4, action verbs 0.3, résumé terms 0.3."""
    content_lower = content.lower()
    score = 0.0
    if count_quantified_results(content) >= MIN_QUANTIFIED_RESULTS:
        score += 0.4
    if _count_phrases(content_lower, PROFESSIONAL_INDICATORS) >= 3:
        score += 0.3
    if count_common_terms(content, resume) >= 3:
        score += 0.3
    return _clamp(score)


def check_professional_tone(content: str) -> float:
    """Start at 1.0, penalise clichés, long sentences and perk talk, reward action phrases."""
    content_lower = content.lower()
    score = 1.0
    score -= 0.1 * _count_phrases(content_lower, CLICHE_PHRASES)
    score += 0.05 * _count_phrases(content_lower, PROFESSIONAL_INDICATORS)

    sentences = SENTENCE_SPLIT.split(content)
    long_sentences = sum(1 for sentence in sentences if len(sentence.split()) > LONG_SENTENCE_WORDS)
    if long_sentences > MAX_LONG_SENTENCES:
        score -= 0.1

    perk_hits = _count_phrases(content_lower, PERK_TERMS)
    if perk_hits:
        score -= min(MAX_PERK_PENALTY, PERK_PENALTY_PER_HIT * perk_hits)

    return _clamp(score)


def check_content_relevance(content: str, job_description: str) -> float:
    """Share of job-description keywords the letter repeats, scaled so 30% overlap scores 1.0."""
    job_keywords = extract_keywords(job_description)
    overlap = len(job_keywords & extract_keywords(content))
    return _clamp(overlap / max(len(job_keywords) * 0.3, 1))


def identify_weaknesses(metrics: QualityMetrics, thresholds: QualityThresholds) -> Tuple[str, ...]:
    """Names of the dimensions scoring below their threshold."""
    return tuple(
        dimension for dimension in DIMENSIONS
        if getattr(metrics, dimension) < getattr(thresholds, dimension)
    )


def validate_cover_letter(
    content: str,
    contact: Union[ContactInfo, Mapping[str, Any]],
    resume: str,
    job_description: str,
    company_name: Optional[str] = None,
    job_title: Optional[str] = None,
    config: Optional[QualityConfig] = None,
) -> QualityValidationResult:
    """Score a cover letter and decide whether to retry.

    Args:
        content: Letter text from the LLM
        contact: Candidate contact details
        resume: Résumé text
        job_description: Job description text
        company_name: Company to look for (extracted from the posting if omitted)
        job_title: Job title to look for (extracted from the posting if omitted)
        config: Weights and thresholds (defaults if omitted)

    Returns:
        QualityValidationResult with metrics, retry decision and suggestions
    """
    config = config or QualityConfig()
    contact = as_contact_info(contact)
    content = content or ""
    company_name = company_name or extract_company_name(job_description)
    job_title = job_title or extract_position_title(job_description)

    metrics = QualityMetrics.from_scores(
        format_compliance=check_format_compliance(content, contact),
        personalization=check_personalization(content, contact, company_name, job_title),
        achievement_integration=check_achievement_integration(content, resume),
        professional_tone=check_professional_tone(content),
        content_relevance=check_content_relevance(content, job_description),
        weights=config.weights,
    )

    placeholders = has_placeholders(content)
    should_retry = metrics.overall_score < config.thresholds.overall
    if placeholders and config.reject_placeholders:
        should_retry = True
    if config.require_quantified and count_quantified_results(content) < MIN_QUANTIFIED_RESULTS:
        should_retry = True

    weaknesses = identify_weaknesses(metrics, config.thresholds)
    return QualityValidationResult(
        metrics=metrics,
        should_retry=should_retry,
        weaknesses=weaknesses,
        improvements=tuple(IMPROVEMENTS[weakness] for weakness in weaknesses),
        has_placeholders=placeholders,
    )


def get_quality_insights(result: QualityValidationResult) -> str:
    """One-line summary of a validation result for logs."""
    score = result.metrics.overall_score
    if score >= 0.9:
        verdict = "Excellent quality"
    elif score >= 0.75:
        verdict = "Good quality, minor improvements possible"
    else:
        verdict = "Needs improvement"

    summary = f"Quality Score: {score * 100:.1f}% - {verdict}"
    if result.weaknesses:
        summary += f" (weak: {', '.join(result.weaknesses)})"
    if result.has_placeholders:
        summary += " [contains placeholders]"
    return summary
