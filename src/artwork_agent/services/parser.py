"""Parse free-text vision answers into identification records."""

import re

from artwork_agent.domain.identification import (
    UNKNOWN,
    Confidence,
    IdentificationRecord,
)


def _field_pattern(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[ \t]*{label}[ \t]*:[ \t]*(.*?)[ \t]*$", re.IGNORECASE | re.MULTILINE
    )


_NAME = _field_pattern("Name")
_ARTIST = _field_pattern("Artist")
_YEAR = _field_pattern("Year")
_MEDIUM = _field_pattern("Medium")
_CONFIDENCE = re.compile(
    r"^[ \t]*Confidence[ \t]*:[ \t]*(\w+)", re.IGNORECASE | re.MULTILINE
)


def parse_identification(text: str | None) -> IdentificationRecord:
    """Return a best-effort record, degrading missing fields instead of failing.

    Name and artist fall back to "Unknown", year and medium to None, and any
    confidence outside high/medium/low to low.
    """
    raw_text = text if isinstance(text, str) else ""
    return IdentificationRecord(
        name=_match(_NAME, raw_text) or UNKNOWN,
        artist=_match(_ARTIST, raw_text) or UNKNOWN,
        year=_match(_YEAR, raw_text),
        medium=_match(_MEDIUM, raw_text),
        confidence=parse_confidence(_match(_CONFIDENCE, raw_text)),
        raw_text=raw_text,
    )


def parse_confidence(token: str | None) -> Confidence:
    """Map a confidence token onto the closed set, defaulting to low."""
    if not token:
        return Confidence.LOW
    try:
        return Confidence(token.strip().lower())
    except ValueError:
        return Confidence.LOW


def _match(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if match is None:
        return None
    value = match.group(1).strip()
    return value or None
