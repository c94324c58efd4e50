"""Runtime configuration for generation and quality scoring."""

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Prompt strategies
STRUCTURED_STRATEGY = "structured"
FEW_SHOT_STRATEGY = "few_shot"

DEFAULT_MODEL = "gpt-4o"


@dataclass(frozen=True)
class QualityWeights:
    """Weights of each sub-score in the overall quality score."""
    format_compliance: float = 0.30
    personalization: float = 0.25
    achievement_integration: float = 0.20
    professional_tone: float = 0.15
    content_relevance: float = 0.10


@dataclass(frozen=True)
class QualityThresholds:
    """Minimum acceptable value per dimension, plus the overall bar."""
    format_compliance: float = 0.8
    personalization: float = 0.7
    achievement_integration: float = 0.6
    professional_tone: float = 0.7
    content_relevance: float = 0.6
    overall: float = 0.75


@dataclass(frozen=True)
class QualityConfig:
    """Scoring configuration used by the quality validator.

    The weights and thresholds are hand-tuned and can be overridden per
    generator instance or through COVER_LETTER_QUALITY_THRESHOLD.
    With require_quantified set, a letter citing fewer than two figures
    is retried whatever its score.
    """
    weights: QualityWeights = field(default_factory=QualityWeights)
    thresholds: QualityThresholds = field(default_factory=QualityThresholds)
    reject_placeholders: bool = True
    require_quantified: bool = False

    @classmethod
    def from_env(cls) -> "QualityConfig":
        config = cls()
        overall = _env_float("COVER_LETTER_QUALITY_THRESHOLD")
        if overall is not None:
            config = replace(config, thresholds=replace(config.thresholds, overall=overall))
        if _env_flag("COVER_LETTER_REQUIRE_QUANTIFIED"):
            config = replace(config, require_quantified=True)
        return config


@dataclass(frozen=True)
class GenerationSettings:
    """Settings for the generation retry loop."""
    max_attempts: int = 3
    retry_delay_seconds: float = 2.0
    min_content_length: int = 50
    examples_per_prompt: int = 3
    prompt_strategy: str = STRUCTURED_STRATEGY
    model_name: str = DEFAULT_MODEL

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.examples_per_prompt < 1:
            raise ValueError("examples_per_prompt must be at least 1")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds cannot be negative")

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        max_attempts = _env_int("COVER_LETTER_MAX_ATTEMPTS")
        retry_delay = _env_float("COVER_LETTER_RETRY_DELAY")
        min_length = _env_int("COVER_LETTER_MIN_LENGTH")
        example_count = _env_int("COVER_LETTER_EXAMPLE_COUNT")
        return cls(
            max_attempts=defaults.max_attempts if max_attempts is None else max_attempts,
            retry_delay_seconds=defaults.retry_delay_seconds if retry_delay is None else retry_delay,
            min_content_length=defaults.min_content_length if min_length is None else min_length,
            examples_per_prompt=defaults.examples_per_prompt if example_count is None else example_count,
            prompt_strategy=os.getenv("COVER_LETTER_PROMPT_STRATEGY", defaults.prompt_strategy).strip().lower(),
            model_name=os.getenv("LLM_MODEL", defaults.model_name).strip(),
        )


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")
