"""Exceptions raised by the cover letter pipeline.

Extraction misses and low-quality completions are not errors: the first is
resolved with sentinel values and the second with a best-effort letter. Only
the conditions below reach the caller.
"""


class CoverLetterPipelineError(RuntimeError):
    """Base class for pipeline errors."""


class CoverLetterGenerationError(CoverLetterPipelineError):
    """Every attempt failed to produce usable content."""

    def __init__(self, message: str, attempts_made: int = 0):
        super().__init__(message)
        self.attempts_made = attempts_made


class CompletionTooShortError(CoverLetterPipelineError):
    """The completion was empty or too short after parsing."""


class GenerationCancelledError(CoverLetterPipelineError):
    """The caller cancelled the request."""


class GeneratorNotInitializedError(CoverLetterPipelineError):
    """Generation was requested before the résumé and job description were supplied."""
