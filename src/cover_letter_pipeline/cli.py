"""Command-line interface for cover letter generation."""

import argparse
import os
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .analysis import Tone
from .config import GenerationSettings
from .context import ContactInfo
from .errors import CoverLetterPipelineError
from .generator import CoverLetterGenerator, GenerationResult
from .llm_client import AVAILABLE_MODELS
from .logging_config import configure_logging
from .resume_parser import load_resume_text
from .utils import create_folder_name_from_details

# Load environment variables
load_dotenv()

SEPARATOR_LINE = "=" * 80
OUTPUT_FILENAME = "cover_letter.txt"


def get_contact_from_env() -> ContactInfo:
    """Read the candidate's contact details from USER_* environment variables."""
    return ContactInfo(
        full_name=os.getenv("USER_NAME", "").strip(),
        email=os.getenv("USER_EMAIL", "").strip(),
        location=os.getenv("USER_LOCATION", "").strip(),
        professional_title=os.getenv("USER_TITLE", "").strip(),
        phone=os.getenv("USER_PHONE", "").strip() or None,
        linkedin=os.getenv("USER_LINKEDIN", "").strip() or None,
        portfolio=os.getenv("USER_PORTFOLIO", "").strip() or None,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cover-letter-pipeline",
        description="Generate a quality-checked cover letter from a résumé and a job description",
    )
    parser.add_argument("--resume", required=True, help="Résumé file (.txt, .md or .docx)")
    parser.add_argument("--job", required=True, help="Job description text file")
    parser.add_argument("--tone", choices=[tone.value for tone in Tone], help="Letter tone (default: professional)")
    parser.add_argument("--locale", help="Locale for the letter date, e.g. en-US or de-DE")
    parser.add_argument("--model", choices=sorted(AVAILABLE_MODELS), help="Model alias (default: LLM_MODEL or gpt-4o)")
    parser.add_argument("--output-dir", type=Path, help="Directory to save the letter in")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    return parser


def save_cover_letter(result: GenerationResult, output_dir: Path) -> Path:
    """Save the letter into a "Company - Title - date" folder under output_dir.

    Args:
        result: Generation result
        output_dir: Base directory

    Returns:
        Path of the written file
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    context = result.context
    folder_name = create_folder_name_from_details(
        context.company if context.has_extracted_company else None,
        context.position if context.has_extracted_position else None,
        timestamp,
    )

    application_dir = output_dir / folder_name
    application_dir.mkdir(parents=True, exist_ok=True)

    filepath = application_dir / OUTPUT_FILENAME
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(result.cover_letter + "\n")
    return filepath


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    contact = get_contact_from_env()
    if not contact.full_name:
        print("\nError: USER_NAME not set in .env file")
        print('Please add USER_NAME="Your Full Name" to your .env file')
        return 1

    missing_fields = [name for name, value in (("USER_EMAIL", contact.email), ("USER_LOCATION", contact.location)) if not value]
    if missing_fields:
        print(f"\nWarning: Missing contact information: {', '.join(missing_fields)}")
        print("Cover letters may be generated without complete contact details.")

    try:
        resume = load_resume_text(args.resume)
        with open(Path(args.job).expanduser(), "r", encoding="utf-8") as f:
            job_description = f.read()
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    settings = GenerationSettings.from_env()
    if args.model:
        settings = replace(settings, model_name=args.model)

    try:
        generator = CoverLetterGenerator(settings=settings)
    except ValueError as e:
        print(f"Error: {e}")
        print("\nPlease ensure the API key for the selected model is set in your .env file.")
        return 1

    print(f"\nGenerating cover letter with {generator.client.model_name}...")
    try:
        result = generator.generate_cover_letter(
            resume,
            job_description,
            contact,
            tone=args.tone,
            locale=args.locale,
        )
    except CoverLetterPipelineError as e:
        print(f"\nError generating cover letter: {e}")
        print("Please try again later.")
        return 1
    except KeyboardInterrupt:
        print("\n\nExiting...")
        return 130

    print("\n" + SEPARATOR_LINE)
    print("GENERATED COVER LETTER")
    print(SEPARATOR_LINE)
    print(result.cover_letter)
    print(SEPARATOR_LINE)

    score = result.best_attempt.overall_score
    status = "accepted" if result.accepted else "best effort"
    print(f"\nQuality: {score * 100:.1f}% ({status}, {len(result.attempts)} attempt(s))")
    cost = generator.client.get_cost_summary()
    print(f"💰 Cost: ${cost['total_cost']:.4f}")

    if args.output_dir:
        filepath = save_cover_letter(result, args.output_dir.expanduser())
        print("\n✓ Cover letter saved:")
        print(f"  {filepath}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
