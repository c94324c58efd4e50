"""Job description parser for extracting company, title and requirements.

Extraction is heuristic and never raises: a miss yields None or an empty
list and callers substitute their own defaults.

Company and title heuristics are ordered lists of named patterns. Patterns
are tried in priority order over the first lines of the posting and the
first candidate that passes the sanity checks wins, so an explicit
"Company:" label anywhere near the top beats a title-case guess on line one.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from .utils import dedupe_list, is_bullet_line, normalize_whitespace, strip_bullet

COMPANY_SCAN_LINES = 15
TITLE_SCAN_LINES = 10
MIN_CANDIDATE_LENGTH = 2
MAX_CANDIDATE_LENGTH = 60
DEFAULT_MAX_REQUIREMENTS = 5

_COMPANY_WORD = r"[A-Z0-9][\w&.'\-]*"
_COMPANY_NAME = rf"{_COMPANY_WORD}(?:\s+(?:&\s+)?{_COMPANY_WORD})*"

COMPANY_PATTERNS: Tuple[Tuple[str, Pattern], ...] = (
    ("labeled", re.compile(
        r"^(?:company|organi[sz]ation|employer|hiring company)(?:\s+name)?\s*:\s*(.+)$", re.IGNORECASE)),
    ("hiring_statement", re.compile(
        r"^(.+?)\s+(?:is hiring|is looking for|is seeking|seeks|are hiring|are looking for)\b", re.IGNORECASE)),
    ("title_dash_company", re.compile(rf"^.+?\s+(?:-|–|—|\||@|at)\s+({_COMPANY_NAME})\s*$")),
    ("join_or_work_at", re.compile(
        rf"\b(?i:join|work at|employed by|position at|role at|career at)\s+({_COMPANY_NAME})")),
    ("leading_preposition", re.compile(rf"^(?i:at|for|with)\s+({_COMPANY_NAME})")),
    ("corporate_suffix", re.compile(
        r"^([A-Z][\w&.,'\-\s]*?\s(?:Inc|Ltd|LLC|LLP|GmbH|Corp|Corporation|Group|Holdings|"
        r"Solutions|Technologies|Systems|Labs)\.?)$")),
)

_ROLE_WORD = (
    r"(?:manager|director|analyst|consultant|engineer|developer|designer|specialist|"
    r"coordinator|assistant|lead|architect|scientist|administrator|officer|intern|"
    r"accountant|writer|strategist|associate|representative)s?"
)
# Sentences announcing the opening are not titles themselves
_NOT_A_SENTENCE = r"(?!.*\b(?i:(?:is|are)\s+(?:hiring|looking|seeking)|seeks|join)\b)"
MAX_TITLE_WORDS = 8

TITLE_PATTERNS: Tuple[Tuple[str, Pattern], ...] = (
    ("labeled", re.compile(r"^(?:job\s+title|position(?:\s+title)?|role|title|job)\s*:\s*(.+)$", re.IGNORECASE)),
    ("title_suffix", re.compile(r"^(.+?)\s+(?:position|role|opening|vacancy)$", re.IGNORECASE)),
    ("hiring_statement", re.compile(
        r"\b(?i:(?:is|are)\s+(?:hiring|looking\s+for|seeking)|seeks)\s+(?i:(?:an?|the)\s+)?"
        rf"((?:[A-Z][\w/&+#.\-]*\s+){{0,5}}(?i:{_ROLE_WORD}))\b")),
    ("role_keyword", re.compile(
        rf"^{_NOT_A_SENTENCE}(?=(?:\S+\s+){{0,{MAX_TITLE_WORDS - 1}}}\S+$)(.*\b{_ROLE_WORD}\b.*)$",
        re.IGNORECASE)),
    ("title_case_line", re.compile(rf"^{_NOT_A_SENTENCE}([A-Z][A-Za-z&,/\- ]{{4,59}})$")),
)

COMPANY_BLACKLIST = frozenset({
    "position", "company", "role", "job", "we", "our", "us", "you", "your", "team",
    "description", "about", "remote", "hybrid", "onsite", "worldwide", "anywhere",
    "temporary", "freelance",
})
# Headline suffixes such as "- Full-time" or "| USA" describe the job, not the employer
WORK_ARRANGEMENT_WORDS = frozenset({
    "on", "site", "in", "office", "full", "part", "time", "contract", "contractor", "permanent",
    "temp", "flexible", "usa", "us", "uk", "eu", "emea", "apac", "global", "international",
})
COMPANY_ROLE_WORDS = re.compile(
    r"\b(?:analyst|engineer|developer|manager|director|consultant|specialist|designer|"
    r"coordinator|officer|architect|scientist)s?\b", re.IGNORECASE)
TITLE_BLACKLIST = frozenset({
    "company", "about", "description", "summary", "overview", "responsibilities",
    "requirements", "qualifications", "benefits", "location", "salary", "we", "our", "you",
})

REQUIREMENT_HEADERS = re.compile(
    r"^(?:key\s+|minimum\s+|basic\s+|preferred\s+|required\s+)?"
    r"(?:requirements|qualifications|skills|"
    r"what\s+you(?:'ll|\s+will)?\s+(?:need|bring)|what\s+we(?:'re|\s+are)\s+looking\s+for|"
    r"who\s+you\s+are|you\s+have|must[\s-]haves?)"
    r"(?:\s*(?:and|&)\s*(?:qualifications|requirements|skills|experience))?\s*:?$",
    re.IGNORECASE)
SECTION_BREAK_HEADERS = re.compile(
    r"^(?:about|benefits|perks|what\s+we\s+offer|compensation|salary|responsibilities|"
    r"what\s+you(?:'ll|\s+will)\s+do|how\s+to\s+apply|location|equal\s+opportunity|nice\s+to\s+have)\b",
    re.IGNORECASE)
MIN_LONG_LINE_LENGTH = 25

# Capitalised words too common to be a requirement on their own
COMMON_CAPITALIZED = frozenset({
    "the", "a", "an", "and", "or", "we", "you", "our", "your", "this", "that", "about", "with",
    "for", "in", "on", "at", "as", "to", "of", "is", "are", "be", "will", "if", "it", "job",
    "role", "position", "company", "team", "requirements", "responsibilities", "qualifications",
    "benefits", "location", "salary", "apply", "join", "us", "remote", "full", "time",
})
TOKEN_PATTERN = re.compile(r"\d+\+?\s*(?:years?|yrs)\b|[A-Z][A-Za-z0-9+#]*(?:\.[A-Za-z0-9]+)*")


@dataclass
class ParsedJobInfo:
    """Company and title extracted from a job description."""
    company_name: Optional[str]
    job_title: Optional[str]

    def __str__(self):
        return f"{self.company_name or 'Unknown'} - {self.job_title or 'Unknown'}"


def _content_lines(text: str, limit: Optional[int] = None) -> List[str]:
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    return lines[:limit] if limit is not None else lines


def _contains_blacklisted(candidate: str, blacklist: frozenset) -> bool:
    words = re.findall(r"[a-z]+", candidate.lower())
    return any(word in blacklist for word in words)


def _trim_candidate(candidate: str) -> str:
    candidate = normalize_whitespace(candidate).strip(" ,;:|-–—\"'")
    # Keep the period of abbreviations like "Inc." and "Corp."
    if candidate.endswith(".") and not re.search(r"\b(?:Inc|Ltd|Co|Corp|Bros)\.$", candidate):
        candidate = candidate[:-1].rstrip()
    return candidate


def _is_work_arrangement(candidate: str) -> bool:
    words = re.findall(r"[a-z]+", candidate.lower())
    return bool(words) and all(word in WORK_ARRANGEMENT_WORDS for word in words)


def _valid_company(candidate: str) -> bool:
    if not MIN_CANDIDATE_LENGTH <= len(candidate) <= MAX_CANDIDATE_LENGTH:
        return False
    if _contains_blacklisted(candidate, COMPANY_BLACKLIST):
        return False
    if _is_work_arrangement(candidate):
        return False
    return not COMPANY_ROLE_WORDS.search(candidate)


def _valid_title(candidate: str) -> bool:
    if not MIN_CANDIDATE_LENGTH <= len(candidate) <= MAX_CANDIDATE_LENGTH:
        return False
    return not _contains_blacklisted(candidate, TITLE_BLACKLIST)


def _first_match(
    lines: Sequence[str],
    patterns: Sequence[Tuple[str, Pattern]],
    clean,
    is_valid,
) -> Optional[str]:
    for _name, pattern in patterns:
        for line in lines:
            match = pattern.search(line)
            if not match or not match.group(1):
                continue
            candidate = clean(match.group(1))
            if candidate and is_valid(candidate):
                return candidate
    return None


def clean_job_title(title: str) -> str:
    """Clean job title by removing parenthetical content and location suffixes.

    Args:
        title: Job title string

    Returns:
        Cleaned job title

    Examples:
        "Mobile/Web Software Engineering Manager (Remote - USA)" -> "Mobile/Web Software Engineering Manager"
        "Engineering Manager - Remote" -> "Engineering Manager"
        "Senior Engineer | Acme" -> "Senior Engineer"
    """
    cleaned = re.sub(r'\s*\([^)]*\)', '', title or '')
    cleaned = re.split(r'\s+(?:-|–|—|\||@)\s+|\s+at\s+(?=[A-Z])', cleaned, maxsplit=1)[0]
    return _trim_candidate(cleaned)


def extract_company_name(text: str) -> Optional[str]:
    """Extract the hiring company's name from a job description.

    Args:
        text: Raw job description text

    Returns:
        Company name or None if no pattern produced a plausible candidate
    """
    lines = _content_lines(text, COMPANY_SCAN_LINES)
    return _first_match(lines, COMPANY_PATTERNS, _trim_candidate, _valid_company)


def extract_position_title(text: str) -> Optional[str]:
    """Extract the advertised position title from a job description.

    Args:
        text: Raw job description text

    Returns:
        Position title or None if no pattern produced a plausible candidate
    """
    lines = _content_lines(text, TITLE_SCAN_LINES)
    # Bullets and lines with several non-letter characters are rarely titles
    lines = [
        line for line in lines
        if not is_bullet_line(line)
        and len(re.findall(r"[^A-Za-z\s&,/\-:()|–—@.']", line)) <= 2
    ]
    return _first_match(lines, TITLE_PATTERNS, clean_job_title, _valid_title)


def parse_job_description(text: str) -> ParsedJobInfo:
    """Extract company name and job title in one pass."""
    return ParsedJobInfo(
        company_name=extract_company_name(text),
        job_title=extract_position_title(text),
    )


def collect_section_lines(
    lines: Sequence[str],
    header: Pattern,
    section_break: Pattern = SECTION_BREAK_HEADERS,
) -> List[str]:
    """Collect bullet-like or long lines following the first matching header.

    Args:
        lines: Non-empty, stripped lines of the document
        header: Pattern matched against candidate header lines (colon removed)
        section_break: Pattern of headers that end the section

    Returns:
        Section items with bullet markers removed, in document order
    """
    collected = []
    in_section = False
    for line in lines:
        bullet = is_bullet_line(line)
        short = len(line) <= 60
        if not bullet and short and header.match(line.rstrip(":").strip()):
            if in_section and collected:
                break
            in_section = True
            continue
        if not in_section:
            continue
        if not bullet and (section_break.match(line) or (short and line.endswith(":"))):
            break
        if bullet or len(line) >= MIN_LONG_LINE_LENGTH:
            item = strip_bullet(line)
            if item:
                collected.append(item)
    return collected


def extract_frequent_terms(text: str, max_items: int) -> List[str]:
    """Rank capitalised or number-bearing tokens by frequency.

    Ties keep first-occurrence order.

    Args:
        text: Free text to scan
        max_items: Maximum number of terms to return

    Returns:
        Terms ordered by descending frequency
    """
    counts = Counter()
    first_seen = {}
    display = {}
    for index, match in enumerate(TOKEN_PATTERN.finditer(text or "")):
        token = normalize_whitespace(match.group(0)).rstrip(".")
        key = token.lower()
        if len(token) < 2 or key in COMMON_CAPITALIZED:
            continue
        counts[key] += 1
        first_seen.setdefault(key, index)
        display.setdefault(key, token)
    ranked = sorted(counts, key=lambda k: (-counts[k], first_seen[k]))
    return dedupe_list((display[key] for key in ranked), max_items)


def extract_top_requirements(text: str, max_items: int = DEFAULT_MAX_REQUIREMENTS) -> List[str]:
    """Extract the leading requirement phrases from a job description.

    Args:
        text: Raw job description text
        max_items: Maximum number of requirements to return

    Returns:
        Requirement phrases in document order, deduplicated
    """
    lines = _content_lines(text)
    requirements = dedupe_list(collect_section_lines(lines, REQUIREMENT_HEADERS), max_items)
    if requirements:
        return requirements
    return extract_frequent_terms(text, max_items)
