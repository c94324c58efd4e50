"""Quality-assured cover letter generation.

The generator runs a bounded, sequential retry loop: select examples, build
the prompt, call the LLM, parse and score the completion. The first
completion that clears the quality bar is assembled and returned. When no
attempt clears it, the best-scoring attempt is returned instead, so low
quality never fails a request on its own.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .analysis import Tone, detect_experience_level, detect_industry
from .assembler import assemble_cover_letter, extract_letter_body, strip_placeholders
from .config import GenerationSettings, QualityConfig
from .context import ContactInfo, GenerationContext, build_context
from .errors import (
    CompletionTooShortError,
    CoverLetterGenerationError,
    GenerationCancelledError,
    GeneratorNotInitializedError,
)
from .examples import select_examples
from .llm_client import CompletionClient, HistoryItem, create_completion_client
from .logging_config import get_logger
from .prompts import PromptBuilder, build_initial_history, get_prompt_builder
from .response_parser import parse_completion
from .scoring import QualityValidationResult, get_quality_insights, validate_cover_letter

logger = get_logger("generator")


class GenerationState(Enum):
    """States of one generation request."""
    IDLE = "idle"
    BUILDING_PROMPT = "building_prompt"
    AWAITING_COMPLETION = "awaiting_completion"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class GenerationAttempt:
    """One scored completion."""
    content: str
    quality_result: QualityValidationResult
    attempt_number: int
    example_ids: Tuple[str, ...] = ()

    @property
    def overall_score(self) -> float:
        return self.quality_result.metrics.overall_score


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generation request."""
    cover_letter: str
    body: str
    accepted: bool
    best_attempt: GenerationAttempt
    attempts: Tuple[GenerationAttempt, ...]
    context: GenerationContext
    states: Tuple[GenerationState, ...] = ()


def select_best_attempt(attempts: Sequence[GenerationAttempt]) -> Optional[GenerationAttempt]:
    """Highest overall score wins; the earliest attempt wins ties."""
    if not attempts:
        return None
    return max(attempts, key=lambda attempt: attempt.overall_score)


class _StateTrace:
    """Records the state transitions of a single request."""

    def __init__(self):
        self.states = [GenerationState.IDLE]

    @property
    def current(self) -> GenerationState:
        return self.states[-1]

    def move(self, state: GenerationState, attempt_number: int = 0) -> None:
        logger.debug("Attempt %d: %s -> %s", attempt_number, self.current.value, state.value)
        self.states.append(state)


class CoverLetterGenerator:
    """Generate cover letters with few-shot prompting and quality control.

    Each call to generate_cover_letter is independent: the context,
    conversation history and attempts live only for that call, so one
    generator can serve concurrent requests.
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        settings: Optional[GenerationSettings] = None,
        quality_config: Optional[QualityConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """Initialize the cover letter generator.

        Args:
            client: Completion client (created from settings.model_name if omitted)
            settings: Retry loop settings (read from the environment if omitted)
            quality_config: Scoring weights and thresholds (read from the environment if omitted)
            prompt_builder: Prompt strategy (chosen from settings.prompt_strategy if omitted)
        """
        self.settings = settings or GenerationSettings.from_env()
        self.quality_config = quality_config or QualityConfig.from_env()
        self.prompt_builder = prompt_builder or get_prompt_builder(self.settings.prompt_strategy)
        self.client = client or create_completion_client(self.settings.model_name)

    def generate_cover_letter(
        self,
        resume: str,
        job_description: str,
        contact: Union[ContactInfo, Mapping[str, Any]],
        tone: Union[Tone, str, None] = None,
        locale: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        now=None,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a cover letter for one application.

        Args:
            resume: Résumé text
            job_description: Job description text
            contact: Candidate contact details
            tone: Optional tone override
            locale: Optional locale for the letter date
            cancel_event: Set by the caller to abandon the request
            now: Timestamp for the letter date (defaults to current UTC time)
            job_title: Title to use when none can be extracted
            company_name: Company to use when none can be extracted

        Returns:
            GenerationResult with the assembled letter

        Raises:
            CoverLetterGenerationError: If no attempt produced usable content
            GenerationCancelledError: If cancel_event was set
        """
        context = build_context(
            resume,
            job_description,
            contact,
            tone=tone,
            locale=locale,
            now=now,
            job_title=job_title,
            company_name=company_name,
        )
        history = build_initial_history(resume, job_description)
        return self.generate_with_quality_assurance(context, resume, job_description, history, cancel_event)

    def generate_with_quality_assurance(
        self,
        context: GenerationContext,
        resume: str,
        job_description: str,
        history: Sequence[HistoryItem],
        cancel_event: Optional[threading.Event] = None,
    ) -> GenerationResult:
        """Run the retry loop for an already-built context.

        Args:
            context: Generation context
            resume: Résumé text, used for scoring and level detection
            job_description: Job description text, used for scoring and industry detection
            history: Conversation seed sent with every prompt
            cancel_event: Set by the caller to abandon the request

        Returns:
            GenerationResult
        """
        max_attempts = self.settings.max_attempts
        industry = detect_industry(job_description)
        level = detect_experience_level(resume)
        logger.debug(
            "Detected industry=%s level=%s tone=%s",
            industry.value, level.value, context.tone.value
        )

        trace = _StateTrace()
        attempts: List[GenerationAttempt] = []
        improvements: Tuple[str, ...] = ()
        last_error: Optional[BaseException] = None

        for attempt_number in range(1, max_attempts + 1):
            trace.move(GenerationState.BUILDING_PROMPT, attempt_number)
            examples = select_examples(
                industry,
                level,
                context.tone,
                count=self.settings.examples_per_prompt,
                attempt_number=attempt_number,
            )
            example_ids = tuple(example.id for example in examples)
            logger.debug("Attempt %d examples: %s", attempt_number, ", ".join(example_ids))
            prompt = self.prompt_builder.build_prompt(examples, context, attempt_number, improvements)

            self._check_cancelled(cancel_event)
            trace.move(GenerationState.AWAITING_COMPLETION, attempt_number)
            try:
                raw_content = self.client.complete(history, prompt)
                # A result that arrives after cancellation is discarded
                self._check_cancelled(cancel_event)
                content = self._parse_content(raw_content)
            except GenerationCancelledError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("Attempt %d/%d failed: %s", attempt_number, max_attempts, e)
                if attempt_number < max_attempts:
                    trace.move(GenerationState.RETRYING, attempt_number)
                    self._wait_before_retry(cancel_event, attempt_number)
                continue

            trace.move(GenerationState.VALIDATING, attempt_number)
            validation = validate_cover_letter(
                content,
                context.contact,
                resume,
                job_description,
                company_name=context.company if context.has_extracted_company else None,
                job_title=context.position if context.has_extracted_position else None,
                config=self.quality_config,
            )
            attempt = GenerationAttempt(
                content=content,
                quality_result=validation,
                attempt_number=attempt_number,
                example_ids=example_ids,
            )
            attempts.append(attempt)
            logger.info("Attempt %d/%d %s", attempt_number, max_attempts, get_quality_insights(validation))

            if not validation.should_retry:
                trace.move(GenerationState.ACCEPTED, attempt_number)
                return self._build_result(context, attempt, attempts, True, trace)

            improvements = validation.improvements
            if attempt_number < max_attempts:
                trace.move(GenerationState.RETRYING, attempt_number)
                self._wait_before_retry(cancel_event, attempt_number)

        trace.move(GenerationState.EXHAUSTED, max_attempts)
        best_attempt = select_best_attempt(attempts)
        if best_attempt is None:
            raise CoverLetterGenerationError(
                f"Failed to generate cover letter after {max_attempts} attempts: {last_error}",
                attempts_made=max_attempts,
            ) from last_error

        logger.info(
            "No attempt met the quality bar; using attempt %d (score %.2f)",
            best_attempt.attempt_number, best_attempt.overall_score
        )
        return self._build_result(context, best_attempt, attempts, False, trace)

    def _parse_content(self, raw_content: str) -> str:
        content = parse_completion(raw_content).content.strip()
        if len(content) < self.settings.min_content_length:
            raise CompletionTooShortError(
                f"Generated cover letter is too short ({len(content)} characters)"
            )
        return content

    def _build_result(
        self,
        context: GenerationContext,
        attempt: GenerationAttempt,
        attempts: List[GenerationAttempt],
        accepted: bool,
        trace: _StateTrace,
    ) -> GenerationResult:
        body = strip_placeholders(extract_letter_body(attempt.content))
        return GenerationResult(
            cover_letter=assemble_cover_letter(context, body),
            body=body,
            accepted=accepted,
            best_attempt=attempt,
            attempts=tuple(attempts),
            context=context,
            states=tuple(trace.states),
        )

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError("Cover letter generation was cancelled")

    def _wait_before_retry(self, cancel_event: Optional[threading.Event], attempt_number: int) -> None:
        delay = self.settings.retry_delay_seconds
        logger.info("Waiting %.0f seconds before retry attempt %d...", delay, attempt_number + 1)
        if cancel_event is not None:
            if cancel_event.wait(delay):
                raise GenerationCancelledError("Cover letter generation was cancelled")
        elif delay > 0:
            time.sleep(delay)


class GenerationSession:
    """Two-step generation for callers that load materials before contact details.

    initialize() stores the résumé, job description and conversation seed;
    generate() can then be called with contact details.
    """

    def __init__(self, generator: Optional[CoverLetterGenerator] = None):
        self.generator = generator or CoverLetterGenerator()
        self.reset()

    @property
    def is_initialized(self) -> bool:
        return bool(self._history) and self._resume is not None and self._job_description is not None

    def initialize(self, resume: str, job_description: str, profile: Optional[str] = None) -> None:
        """Store the application materials and build the conversation seed.

        Args:
            resume: Résumé text
            job_description: Job description text
            profile: Optional free-text candidate profile
        """
        self._resume = resume
        self._job_description = job_description
        self._history = build_initial_history(resume, job_description, profile)

    def generate(
        self,
        contact: Union[ContactInfo, Mapping[str, Any]],
        tone: Union[Tone, str, None] = None,
        locale: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        now=None,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a cover letter from the stored materials.

        Raises:
            GeneratorNotInitializedError: If initialize() has not been called
        """
        if not self.is_initialized:
            raise GeneratorNotInitializedError(
                "Cover letter generator not initialized. Call initialize() first."
            )
        context = build_context(
            self._resume,
            self._job_description,
            contact,
            tone=tone,
            locale=locale,
            now=now,
            job_title=job_title,
            company_name=company_name,
        )
        return self.generator.generate_with_quality_assurance(
            context,
            self._resume,
            self._job_description,
            list(self._history),
            cancel_event,
        )

    def reset(self) -> None:
        """Forget the stored materials."""
        self._resume: Optional[str] = None
        self._job_description: Optional[str] = None
        self._history: List[HistoryItem] = []
