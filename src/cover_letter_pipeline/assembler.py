"""Deterministic rendering of the final cover letter text."""

import re
from datetime import datetime
from typing import Optional

from .context import ContactInfo, GenerationContext

GREETING_LINE = "Dear Hiring Manager,"
CLOSING_LINE = "Sincerely,"

# Greeting and closing must stand on their own line; "I sincerely, ..." is body text
LETTER_GREETING = re.compile(r"^[ \t]*Dear[ \t]+[^,\n]+,[ \t]*$", re.IGNORECASE | re.MULTILINE)
LETTER_CLOSING = re.compile(
    r"^[ \t]*(?i:Sincerely|Best[ \t]+regards|Kind[ \t]+regards|Warm[ \t]+regards|Regards),"
    r"[ \t]*(?:[A-Z][\w.'\-]*(?:[ \t]+[A-Z][\w.'\-]*){0,3})?[ \t]*$",
    re.MULTILINE)
PLACEHOLDER = re.compile(r"\[[^\]\n]+\]")

ENGLISH_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
GERMAN_MONTHS = (
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
)
SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)
FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)

# English variants that write the day before the month
DAY_FIRST_ENGLISH = frozenset({"gb", "au", "nz", "ie", "za", "in"})


def _parse_date(date_iso: str) -> Optional[datetime]:
    value = (date_iso or "").strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_letter_date(date_iso: str, locale: Optional[str] = None) -> str:
    """Format an ISO timestamp as a long-form letter date.

    Args:
        date_iso: ISO 8601 timestamp
        locale: Locale tag such as "en-US", "de-DE" or "ja"; unknown locales use US English

    Returns:
        Date string, e.g. "March 5, 2024" or "5. März 2024". An unparseable
        timestamp is returned unchanged.

    Examples:
        format_letter_date("2024-03-05T10:00:00+00:00") -> "March 5, 2024"
        format_letter_date("2024-03-05", "es") -> "5 de marzo de 2024"
    """
    parsed = _parse_date(date_iso)
    if parsed is None:
        return date_iso

    parts = re.split(r"[-_]", (locale or "en").strip().lower())
    language = parts[0]
    region = parts[1] if len(parts) > 1 else ""
    day, month, year = parsed.day, parsed.month, parsed.year

    if language == "de":
        return f"{day}. {GERMAN_MONTHS[month - 1]} {year}"
    if language == "es":
        return f"{day} de {SPANISH_MONTHS[month - 1]} de {year}"
    if language == "fr":
        day_text = "1er" if day == 1 else str(day)
        return f"{day_text} {FRENCH_MONTHS[month - 1]} {year}"
    if language in ("ja", "zh"):
        return f"{year}年{month}月{day}日"
    if language == "ko":
        return f"{year}년 {month}월 {day}일"
    if language == "en" and region in DAY_FIRST_ENGLISH:
        return f"{day} {ENGLISH_MONTHS[month - 1]} {year}"
    return f"{ENGLISH_MONTHS[month - 1]} {day}, {year}"


def format_cover_letter_header(contact: ContactInfo) -> str:
    """Render the contact block: name, contact line, then LinkedIn or portfolio."""
    lines = []
    if contact.full_name:
        lines.append(contact.full_name)

    contact_line = " | ".join(value for value in (contact.email, contact.phone, contact.location) if value)
    if contact_line:
        lines.append(contact_line)

    if contact.linkedin:
        lines.append(contact.linkedin)
    elif contact.portfolio:
        lines.append(contact.portfolio)

    return "\n".join(lines)


def format_cover_letter_body(body: str) -> str:
    """Normalize body text into punctuated paragraphs separated by blank lines."""
    paragraphs = []
    for line in re.split(r"\n+", body or ""):
        paragraph = re.sub(r"\s+", " ", line).strip()
        if not paragraph:
            continue
        if not re.search(r"[.!?]$", paragraph):
            paragraph += "."
        paragraphs.append(paragraph)
    return "\n\n".join(paragraphs)


def extract_letter_body(text: str) -> str:
    """Drop any header, greeting, closing and signature around the body.

    Only a whole greeting line ("Dear Hiring Manager,") and a whole closing
    line ("Sincerely," optionally followed by a name) delimit the body, so
    the same words used inside a sentence are kept. Text without a greeting
    or closing is returned trimmed but otherwise unchanged.
    """
    body = text or ""
    greeting = LETTER_GREETING.search(body)
    if greeting:
        body = body[greeting.end():]
    closing = LETTER_CLOSING.search(body)
    if closing:
        body = body[:closing.start()]
    return body.strip()


def strip_placeholders(text: str) -> str:
    """Remove bracketed template placeholders such as "[Company Name]"."""
    cleaned = PLACEHOLDER.sub("", text or "")
    cleaned = re.sub(r"[ \t]{2,}", " ", cleaned)
    cleaned = re.sub(r"[ \t]+([,.;:!?])", r"\1", cleaned)
    return "\n".join(line.strip() for line in cleaned.split("\n")).strip()


def assemble_cover_letter(context: GenerationContext, body: str) -> str:
    """Render the final letter from the context and the generated body.

    Args:
        context: Generation context
        body: Letter body paragraphs

    Returns:
        Complete letter text, identical for identical inputs
    """
    sections = [
        format_cover_letter_header(context.contact),
        format_letter_date(context.date_iso, context.locale),
        context.company,
        f"Re: Application for {context.position}",
        GREETING_LINE,
        format_cover_letter_body(body),
        CLOSING_LINE,
        context.contact.full_name,
    ]
    return "\n\n".join(sections)
