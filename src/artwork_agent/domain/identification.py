"""Models for vision-model identification results."""

from dataclasses import dataclass
from enum import StrEnum

UNKNOWN = "Unknown"


class Confidence(StrEnum):
    """Confidence reported by the vision model."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class IdentificationRecord:
    """Structured identification parsed from a model answer."""

    name: str
    artist: str
    year: str | None
    medium: str | None
    confidence: Confidence
    raw_text: str
