"""Utility functions for cover letter generation."""

import re
from typing import Iterable, List, Optional

BULLET_PREFIX = re.compile(r"^\s*(?:[-*•·▪●‣–]|\d{1,2}[.)])\s+")


def normalize_whitespace(value: Optional[str]) -> str:
    """Collapse runs of whitespace into single spaces and trim.

    Args:
        value: Text to normalize (None is treated as empty)

    Returns:
        Normalized string
    """
    return re.sub(r"\s+", " ", value or "").strip()


def strip_bullet(line: str) -> str:
    """Remove a leading bullet or list number from a line."""
    return BULLET_PREFIX.sub("", line).strip()


def is_bullet_line(line: str) -> bool:
    """Check whether a line starts with a bullet or list number."""
    return bool(BULLET_PREFIX.match(line))


def dedupe_list(items: Iterable[str], max_items: int) -> List[str]:
    """Normalize, deduplicate case-insensitively, and cap a list of phrases.

    Args:
        items: Candidate phrases in ranked order
        max_items: Maximum number of phrases to keep

    Returns:
        Up to max_items unique, whitespace-normalized phrases, order preserved
    """
    seen = set()
    result = []
    for raw in items:
        value = normalize_whitespace(raw)
        if not value:
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
        if len(result) >= max_items:
            break
    return result


def create_folder_name_from_details(
    company_name: Optional[str],
    job_title: Optional[str],
    timestamp: str
) -> str:
    """Create a folder name from company name and job title with date applied.

    Args:
        company_name: Company name
        job_title: Job title
        timestamp: Timestamp string in format YYYYMMDD_HHMMSS

    Returns:
        Formatted folder name like "Company Name - Job Title - YYYY-MM-DD" or fallback
    """
    date_applied = f"{timestamp[:4]}-{timestamp[4:6]}-{timestamp[6:8]}"

    if company_name and job_title:
        clean_company = re.sub(r'[<>:"/\\|?*]', '', company_name).strip()
        clean_title = re.sub(r'[<>:"/\\|?*]', '', job_title).strip()

        folder_name = f"{clean_company} - {clean_title} - {date_applied}"

        if len(folder_name) > 120:
            # Truncate company and title parts while keeping date
            max_name_length = 120 - len(date_applied) - 3
            base_name = f"{clean_company} - {clean_title}"[:max_name_length]
            folder_name = f"{base_name} - {date_applied}"

        return folder_name
    elif company_name:
        clean_company = re.sub(r'[<>:"/\\|?*]', '', company_name).strip()
        return f"{clean_company} - {date_applied}"
    else:
        return f"Application_{timestamp}"
