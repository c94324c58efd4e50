"""Cover Letter Pipeline - quality-assured cover letter generation with few-shot prompting."""

__version__ = "0.1.0"

# Expose main classes and functions for external use
from .assembler import assemble_cover_letter
from .context import ContactInfo, GenerationContext, build_context
from .errors import (
    CoverLetterGenerationError,
    CoverLetterPipelineError,
    GenerationCancelledError,
    GeneratorNotInitializedError,
)
from .examples import select_examples
from .generator import CoverLetterGenerator, GenerationResult, GenerationSession
from .job_parser import extract_company_name, extract_position_title, parse_job_description
from .llm_client import create_completion_client
from .scoring import validate_cover_letter

__all__ = [
    "ContactInfo",
    "CoverLetterGenerationError",
    "CoverLetterGenerator",
    "CoverLetterPipelineError",
    "GenerationCancelledError",
    "GenerationContext",
    "GenerationResult",
    "GenerationSession",
    "GeneratorNotInitializedError",
    "assemble_cover_letter",
    "build_context",
    "create_completion_client",
    "extract_company_name",
    "extract_position_title",
    "parse_job_description",
    "select_examples",
    "validate_cover_letter",
]
