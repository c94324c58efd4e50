"""Parsing of LLM completions that may be a JSON envelope or raw text."""

import json
import re
from dataclasses import dataclass
from typing import Union

CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class Envelope:
    """Completion returned as {"content": "..."}."""
    content: str


@dataclass(frozen=True)
class RawText:
    """Completion used as-is because no usable envelope was found."""
    content: str


ParsedCompletion = Union[Envelope, RawText]


def parse_completion(raw: str) -> ParsedCompletion:
    """Parse a completion into an envelope or raw text.

    Code fences are stripped and the outermost {...} is decoded. A string
    "content" field makes an Envelope; anything missing or garbled falls
    back to the raw text.

    Args:
        raw: Completion text from the LLM

    Returns:
        Envelope or RawText
    """
    raw = raw or ""
    without_fences = CODE_FENCE.sub("", raw).strip()
    match = JSON_OBJECT.search(without_fences)
    candidate = match.group(0) if match else without_fences

    try:
        parsed = json.loads(candidate)
    except ValueError:
        return RawText(raw)

    if isinstance(parsed, dict) and isinstance(parsed.get("content"), str):
        return Envelope(parsed["content"])
    return RawText(raw)
