"""Tests for the quality-assured generation loop."""

import json
import threading
from unittest.mock import Mock, patch

import pytest

from src.cover_letter_pipeline.config import GenerationSettings, QualityConfig
from src.cover_letter_pipeline.errors import (
    CompletionTooShortError,
    CoverLetterGenerationError,
    GenerationCancelledError,
    GeneratorNotInitializedError,
)
from src.cover_letter_pipeline.generator import (
    CoverLetterGenerator,
    GenerationSession,
    GenerationState,
    select_best_attempt,
)
from src.cover_letter_pipeline.scoring import IMPROVEMENTS

from tests.sample_data import (
    FIXED_NOW,
    GOOD_BODY,
    GOOD_LETTER,
    JOB_DESCRIPTION,
    LOW_LETTER,
    MEDIUM_LETTER,
    RESUME,
)

PLACEHOLDER_LETTER = GOOD_LETTER.replace("payment platform.", "payment platform on [Platform].")


def _make_generator(responses, **settings):
    client = Mock()
    client.complete.side_effect = responses
    options = {"retry_delay_seconds": 0}
    options.update(settings)
    generator = CoverLetterGenerator(
        client=client,
        settings=GenerationSettings(**options),
        quality_config=QualityConfig(),
    )
    return generator, client


def _generate(generator, contact, **kwargs):
    return generator.generate_cover_letter(RESUME, JOB_DESCRIPTION, contact, now=FIXED_NOW, **kwargs)


class TestAcceptance:
    """Tests for accepted completions."""

    def test_accepts_first_good_attempt(self, contact):
        """Test that a passing first completion is assembled without retries."""
        generator, client = _make_generator([json.dumps({"content": GOOD_LETTER})])
        result = _generate(generator, contact)

        assert result.accepted
        assert client.complete.call_count == 1
        assert result.best_attempt.attempt_number == 1
        assert result.body == GOOD_BODY
        assert result.cover_letter.count("Dear Hiring Manager,") == 1
        assert result.cover_letter.count("Sincerely,") == 1
        assert result.cover_letter.startswith("Jane Doe\n")
        assert result.states == (
            GenerationState.IDLE,
            GenerationState.BUILDING_PROMPT,
            GenerationState.AWAITING_COMPLETION,
            GenerationState.VALIDATING,
            GenerationState.ACCEPTED,
        )

    def test_retry_then_accept(self, contact):
        """Test that a weak first attempt is retried with improvement focus."""
        generator, client = _make_generator([LOW_LETTER, GOOD_LETTER])
        result = _generate(generator, contact)

        assert result.accepted
        assert result.best_attempt.attempt_number == 2
        assert len(result.attempts) == 2

        first_prompt = client.complete.call_args_list[0].args[1]
        second_prompt = client.complete.call_args_list[1].args[1]
        assert "IMPROVEMENT FOCUS" not in first_prompt
        assert "IMPROVEMENT FOCUS FOR THIS ATTEMPT:" in second_prompt
        assert IMPROVEMENTS["format_compliance"] in second_prompt

    def test_failure_then_success(self, contact):
        """Test that a failed call is retried."""
        generator, client = _make_generator([RuntimeError("API down"), GOOD_LETTER])
        result = _generate(generator, contact)

        assert result.accepted
        assert client.complete.call_count == 2
        assert result.best_attempt.attempt_number == 2
        assert len(result.attempts) == 1

    def test_placeholders_are_retried(self, contact):
        """Test that a placeholder completion is retried even when it scores well."""
        generator, client = _make_generator([PLACEHOLDER_LETTER, GOOD_LETTER])
        result = _generate(generator, contact)

        assert result.accepted
        assert client.complete.call_count == 2
        assert result.attempts[0].quality_result.has_placeholders


class TestBestOf:
    """Tests for the best-of fallback when nothing passes."""

    def test_best_attempt_is_returned(self, contact):
        """Test that the highest-scoring attempt is used when none pass."""
        generator, client = _make_generator([LOW_LETTER, MEDIUM_LETTER, LOW_LETTER])
        result = _generate(generator, contact)

        assert not result.accepted
        assert client.complete.call_count == 3
        assert result.best_attempt.attempt_number == 2
        assert result.body == GOOD_BODY
        assert result.states[-1] == GenerationState.EXHAUSTED
        assert all(
            result.best_attempt.overall_score >= attempt.overall_score
            for attempt in result.attempts
        )
        for attempt in result.attempts:
            assert attempt.overall_score == attempt.quality_result.metrics.overall_score
            assert attempt.quality_result.should_retry

    def test_best_of_survives_later_failures(self, contact):
        """Test that errors after a scored attempt still return that attempt."""
        generator, _client = _make_generator([MEDIUM_LETTER, RuntimeError("boom"), RuntimeError("boom")])
        result = _generate(generator, contact)

        assert not result.accepted
        assert result.best_attempt.attempt_number == 1

    def test_placeholders_are_stripped_from_fallback(self, contact):
        """Test that placeholders never reach the assembled letter."""
        generator, _client = _make_generator([PLACEHOLDER_LETTER] * 3)
        result = _generate(generator, contact)

        assert not result.accepted
        assert result.best_attempt.attempt_number == 1
        assert "[" not in result.cover_letter
        assert "payment platform on." in result.body

    def test_select_best_attempt_prefers_earliest_on_tie(self):
        """Test the tie-breaking rule."""
        first = Mock(overall_score=0.6, attempt_number=1)
        second = Mock(overall_score=0.6, attempt_number=2)
        assert select_best_attempt([first, second]) is first
        assert select_best_attempt([]) is None


class TestFailures:
    """Tests for requests that produce no usable content."""

    def test_all_attempts_fail(self, contact):
        """Test that the last error is chained when every call fails."""
        generator, client = _make_generator(RuntimeError("API down"))

        with pytest.raises(CoverLetterGenerationError) as exc_info:
            _generate(generator, contact)

        assert exc_info.value.attempts_made == 3
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert client.complete.call_count == 3

    def test_short_completions_fail(self, contact):
        """Test that too-short completions count as failed attempts."""
        generator, _client = _make_generator(["Too short."] * 3)

        with pytest.raises(CoverLetterGenerationError) as exc_info:
            _generate(generator, contact)

        assert isinstance(exc_info.value.__cause__, CompletionTooShortError)

    def test_attempts_are_bounded(self, contact):
        """Test that the client is called at most max_attempts times."""
        generator, client = _make_generator([LOW_LETTER] * 10, max_attempts=2)
        result = _generate(generator, contact)

        assert client.complete.call_count == 2
        assert len(result.attempts) == 2


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancel_before_first_call(self, contact):
        """Test that a pre-set event stops the request before any LLM call."""
        generator, client = _make_generator([GOOD_LETTER])
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(GenerationCancelledError):
            _generate(generator, contact, cancel_event=cancel_event)
        client.complete.assert_not_called()

    def test_result_after_cancel_is_discarded(self, contact):
        """Test that a completion arriving after cancellation is not used."""
        cancel_event = threading.Event()

        def complete(history, prompt):
            cancel_event.set()
            return GOOD_LETTER

        generator, client = _make_generator(complete)
        with pytest.raises(GenerationCancelledError):
            _generate(generator, contact, cancel_event=cancel_event)
        assert client.complete.call_count == 1

    def test_cancel_during_retry_wait(self, contact):
        """Test that the retry delay is interrupted by cancellation."""
        generator, client = _make_generator([LOW_LETTER] * 3, retry_delay_seconds=30)
        cancel_event = threading.Event()
        timer = threading.Timer(0.05, cancel_event.set)
        timer.start()
        try:
            with pytest.raises(GenerationCancelledError):
                _generate(generator, contact, cancel_event=cancel_event)
        finally:
            timer.cancel()
        assert client.complete.call_count == 1


class TestExampleRotation:
    """Tests for example selection across attempts."""

    def test_retries_use_different_examples(self, contact):
        """Test that each retry sees a different set of examples."""
        generator, _client = _make_generator([LOW_LETTER] * 3)
        result = _generate(generator, contact)

        first, second = result.attempts[0].example_ids, result.attempts[1].example_ids
        assert len(first) == 3
        assert first != second


class TestGeneratorSetup:
    """Tests for generator construction."""

    @patch("src.cover_letter_pipeline.generator.create_completion_client")
    def test_client_created_from_settings(self, mock_factory):
        """Test that the completion client is created for the configured model."""
        generator = CoverLetterGenerator(settings=GenerationSettings(model_name="sonnet"))
        mock_factory.assert_called_once_with("sonnet")
        assert generator.client is mock_factory.return_value

    def test_unknown_prompt_strategy(self):
        """Test that an invalid strategy fails at construction."""
        with pytest.raises(ValueError, match="Unknown prompt strategy"):
            CoverLetterGenerator(client=Mock(), settings=GenerationSettings(prompt_strategy="bogus"))


class TestGenerationSession:
    """Tests for the two-step session wrapper."""

    def test_generate_before_initialize(self, contact):
        """Test that generation requires initialization."""
        generator, _client = _make_generator([GOOD_LETTER])
        session = GenerationSession(generator)

        assert not session.is_initialized
        with pytest.raises(GeneratorNotInitializedError, match="Call initialize"):
            session.generate(contact)

    def test_initialize_then_generate(self, contact):
        """Test that the stored history is sent with the prompt."""
        generator, client = _make_generator([GOOD_LETTER])
        session = GenerationSession(generator)
        session.initialize(RESUME, JOB_DESCRIPTION, profile="Enjoys payments work")

        result = session.generate(contact, now=FIXED_NOW)

        assert result.accepted
        history = client.complete.call_args.args[0]
        assert [item.role for item in history] == ["user", "model"]
        assert "CANDIDATE PROFILE:\nEnjoys payments work" in history[0].text

    def test_reset(self):
        """Test that reset clears the stored materials."""
        generator, _client = _make_generator([])
        session = GenerationSession(generator)
        session.initialize(RESUME, JOB_DESCRIPTION)
        session.reset()
        assert not session.is_initialized
