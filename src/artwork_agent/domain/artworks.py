"""Domain models for identified artworks."""

from dataclasses import dataclass, field

from artwork_agent.domain.identification import Confidence


@dataclass(frozen=True)
class ArtworkContext:
    """Identified artwork handed to the conversation layer."""

    id: str
    name: str
    artist: str
    year: str
    medium: str
    confidence: Confidence
    description: str
    conversation_context: str
    image_url_4k: str = ""
    wikiart_url: str = ""


@dataclass(frozen=True)
class CatalogEntry:
    """Reference record from the artwork catalog."""

    id: str
    name: str
    artist: str
    year: str
    medium: str
    image_url_4k: str
    wikiart_url: str
    description: str
    historical_context: str = ""
    technical_details: str = ""
    interesting_facts: tuple[str, ...] = field(default_factory=tuple)
