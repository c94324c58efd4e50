"""Normalized generation context shared by prompting and assembly."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union

from .analysis import Tone, detect_tone
from .job_parser import extract_company_name, extract_position_title, extract_top_requirements
from .resume_parser import extract_top_achievements
from .utils import dedupe_list, normalize_whitespace

COMPANY_SENTINEL = "Company Name"
POSITION_SENTINEL = "Position"
MAX_CONTEXT_ITEMS = 3

# Caller-facing keys (camelCase) mapped to field names
_CONTACT_KEYS = {
    "fullName": "full_name",
    "name": "full_name",
    "professionalTitle": "professional_title",
    "title": "professional_title",
}


@dataclass(frozen=True)
class ContactInfo:
    """Candidate contact details printed in the letter header and signature."""
    full_name: str
    email: str
    location: str
    professional_title: str = ""
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactInfo":
        """Build contact info from a mapping with camelCase or snake_case keys."""
        values = {}
        for key, value in data.items():
            field_name = _CONTACT_KEYS.get(key, key)
            if field_name in cls.__dataclass_fields__:
                values[field_name] = normalize_whitespace(value) if value else None
        return cls(
            full_name=values.get("full_name") or "",
            email=values.get("email") or "",
            location=values.get("location") or "",
            professional_title=values.get("professional_title") or "",
            phone=values.get("phone"),
            linkedin=values.get("linkedin"),
            portfolio=values.get("portfolio"),
        )


@dataclass(frozen=True)
class GenerationContext:
    """Facts about one application, built once per generation request."""
    company: str
    position: str
    requirements: Tuple[str, ...]
    achievements: Tuple[str, ...]
    contact: ContactInfo
    tone: Tone
    date_iso: str
    locale: Optional[str] = None
    # Raw extraction results, kept for debugging
    company_from_source: Optional[str] = None
    position_from_source: Optional[str] = None

    @property
    def has_extracted_company(self) -> bool:
        return self.company != COMPANY_SENTINEL

    @property
    def has_extracted_position(self) -> bool:
        return self.position != POSITION_SENTINEL


def as_contact_info(contact: Union[ContactInfo, Mapping[str, Any]]) -> ContactInfo:
    """Accept either a ContactInfo or a plain mapping."""
    if isinstance(contact, ContactInfo):
        return contact
    return ContactInfo.from_dict(contact)


def build_context(
    resume: str,
    job_description: str,
    contact: Union[ContactInfo, Mapping[str, Any]],
    tone: Union[Tone, str, None] = None,
    locale: Optional[str] = None,
    now: Optional[datetime] = None,
    job_title: Optional[str] = None,
    company_name: Optional[str] = None,
) -> GenerationContext:
    """Build the generation context from raw inputs.

    Pure apart from reading the clock, which can be pinned with `now`.

    Args:
        resume: Résumé text
        job_description: Job description text
        contact: Contact details
        tone: Optional tone override (defaults to professional)
        locale: Optional locale used to format the letter date
        now: Timestamp to stamp on the context (defaults to current UTC time)
        job_title: Title to use when none can be extracted from the posting
        company_name: Company to use when none can be extracted from the posting

    Returns:
        Immutable GenerationContext with sentinel company/position on misses
    """
    company_from_source = extract_company_name(job_description) or company_name or None
    position_from_source = extract_position_title(job_description) or job_title or None

    company = normalize_whitespace(company_from_source) or COMPANY_SENTINEL
    position = normalize_whitespace(position_from_source) or POSITION_SENTINEL

    requirements = dedupe_list(extract_top_requirements(job_description), MAX_CONTEXT_ITEMS)
    achievements = dedupe_list(extract_top_achievements(resume), MAX_CONTEXT_ITEMS)

    stamp = now or datetime.now(timezone.utc)

    return GenerationContext(
        company=company,
        position=position,
        requirements=tuple(requirements),
        achievements=tuple(achievements),
        contact=as_contact_info(contact),
        tone=detect_tone(tone),
        date_iso=stamp.isoformat(),
        locale=locale,
        company_from_source=company_from_source,
        position_from_source=position_from_source,
    )
