"""Résumé loading and achievement extraction."""

import re
from pathlib import Path
from typing import List, Union

from docx import Document

from .job_parser import collect_section_lines, extract_frequent_terms
from .logging_config import get_logger
from .utils import dedupe_list, strip_bullet

logger = get_logger("resume_parser")

DEFAULT_MAX_ACHIEVEMENTS = 5
MIN_ACHIEVEMENT_LENGTH = 20

ACHIEVEMENT_HEADERS = re.compile(
    r"^(?:key\s+|selected\s+|notable\s+|professional\s+|work\s+)?"
    r"(?:achievements|accomplishments|highlights|experience|employment(?:\s+history)?|impact)\s*:?$",
    re.IGNORECASE)
RESUME_SECTION_BREAK = re.compile(
    r"^(?:education|skills|technical\s+skills|certifications?|languages|interests|references|"
    r"publications|projects|summary|profile)\b\s*:?$",
    re.IGNORECASE)
ACHIEVEMENT_VERBS = re.compile(
    r"\b(?:achieved|increased|improved|reduced|led|managed|delivered|launched|optimized|"
    r"built|implemented|grew|saved|scaled|drove)\b",
    re.IGNORECASE)


def score_achievement(line: str) -> int:
    """Score how strongly a line reads as a quantified achievement.

    Percentages count 3 each, currency amounts 2 each, other multi-digit
    numbers 1 each, and an achievement verb adds 2.
    """
    score = len(re.findall(r"\d+%", line)) * 3
    score += len(re.findall(r"\$\s?\d+[\d,]*", line)) * 2
    score += len(re.findall(r"\b\d{2,}\b", line))
    if ACHIEVEMENT_VERBS.search(line):
        score += 2
    return score


def extract_top_achievements(text: str, max_items: int = DEFAULT_MAX_ACHIEVEMENTS) -> List[str]:
    """Extract the strongest achievement statements from résumé text.

    Lines inside an achievements or experience section are preferred; the
    whole document is used when no such section exists. Lines are ranked
    by score_achievement (stable for ties). Falls back to frequent
    number-bearing or capitalised terms when no line scores.

    Args:
        text: Raw résumé text
        max_items: Maximum number of achievements to return

    Returns:
        Achievement phrases, strongest first
    """
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    candidates = collect_section_lines(lines, ACHIEVEMENT_HEADERS, RESUME_SECTION_BREAK) or lines

    scored = []
    for line in candidates:
        item = strip_bullet(line)
        score = score_achievement(item)
        if score > 0 and len(item) > MIN_ACHIEVEMENT_LENGTH:
            scored.append((score, item))
    scored.sort(key=lambda pair: pair[0], reverse=True)

    achievements = dedupe_list((item for _score, item in scored), max_items)
    if achievements:
        return achievements
    return extract_frequent_terms(text, max_items)


def extract_text_from_docx(docx_path: Union[str, Path]) -> str:
    """Extract text content from a DOCX résumé, including table cells.

    Args:
        docx_path: Path to the DOCX file

    Returns:
        Extracted text, one paragraph per line
    """
    doc = Document(str(docx_path))
    lines = [paragraph.text for paragraph in doc.paragraphs]

    # Résumés laid out in tables keep their content in cells
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                for para in cell.paragraphs:
                    if para.text.strip():
                        lines.append(para.text.strip())
            lines.append("")

    return "\n".join(lines).strip()


def load_resume_text(path: Union[str, Path]) -> str:
    """Load résumé text from a plain-text or DOCX file.

    Args:
        path: Path to a .txt, .md or .docx file

    Returns:
        Résumé text

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type is not supported
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Résumé not found at {path}")

    suffix = path.suffix.lower()
    if suffix == ".docx":
        logger.debug("Reading DOCX résumé %s", path.name)
        return extract_text_from_docx(path)
    if suffix in (".txt", ".md", ""):
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    raise ValueError(f"Unsupported résumé format '{suffix}'. Use .txt, .md or .docx")
