"""Artwork catalog stub and conversation context construction."""

import logging
import re
from dataclasses import dataclass, field

from artwork_agent.domain.artworks import ArtworkContext, CatalogEntry
from artwork_agent.domain.identification import UNKNOWN, IdentificationRecord

logger = logging.getLogger(__name__)

FATHER_HIDALGO = CatalogEntry(
    id="father-hidalgo-1949",
    name="Father Hidalgo",
    artist="José Clemente Orozco",
    year="1949",
    medium="Fresco",
    image_url_4k=(
        "https://www.wikiart.org/en/jose-clemente-orozco/father-hidalgo-1949"
    ),
    wikiart_url="https://www.wikiart.org/en/jose-clemente-orozco/father-hidalgo-1949",
    description=(
        "A powerful fresco depicting Miguel Hidalgo y Costilla, the Mexican "
        "priest who initiated the Mexican War of Independence in 1810."
    ),
    historical_context=(
        "Painted in 1949 at the Palacio de Gobierno in Guadalajara as part of "
        "Orozco's series on Mexican history."
    ),
    technical_details=(
        "Traditional fresco on wet plaster with bold reds, blacks and "
        "dramatic contrasts."
    ),
    interesting_facts=(
        'Orozco was one of "Los Tres Grandes" of Mexican muralism, alongside '
        "Diego Rivera and David Alfaro Siqueiros.",
        "Hidalgo is shown holding a torch, a symbol of revolutionary fire.",
    ),
)


@dataclass
class ArtworkCatalog:
    """In-memory catalog keyed by normalized artwork and artist names."""

    _entries: dict[tuple[str, str], CatalogEntry] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "ArtworkCatalog":
        catalog = cls()
        catalog.add(FATHER_HIDALGO)
        return catalog

    def add(self, entry: CatalogEntry) -> None:
        self._entries[(_normalize(entry.name), _normalize(entry.artist))] = entry

    def lookup(self, name: str, artist: str) -> CatalogEntry | None:
        """Return the catalog entry matching an identification, if any."""
        entry = self._entries.get((_normalize(name), _normalize(artist)))
        if entry is None:
            logger.info("Artwork not in catalog", extra={"artwork_name": name})
        return entry

    def all(self) -> list[CatalogEntry]:
        return list(self._entries.values())


def build_artwork_context(
    record: IdentificationRecord, entry: CatalogEntry | None = None
) -> ArtworkContext:
    """Enrich an identification with an id, a narrative and reference URLs."""
    return ArtworkContext(
        id=artwork_id(record),
        name=record.name,
        artist=record.artist,
        year=record.year or UNKNOWN,
        medium=record.medium or UNKNOWN,
        confidence=record.confidence,
        description=record.raw_text,
        conversation_context=_conversation_context(record),
        image_url_4k=entry.image_url_4k if entry else "",
        wikiart_url=entry.wikiart_url if entry else "",
    )


def artwork_id(record: IdentificationRecord) -> str:
    slug = re.sub(r"\s+", "-", record.name.lower())
    year = record.year if record.year and record.year != UNKNOWN else "unknown"
    return f"{slug}-{year}"


def _conversation_context(record: IdentificationRecord) -> str:
    headline = f'This artwork is "{record.name}" by {record.artist}'
    if record.year and record.year != UNKNOWN:
        headline += f", created in {record.year}"
    if record.medium and record.medium != UNKNOWN:
        headline += f", using {record.medium}"
    return (
        f"{headline}.\n\n"
        f"Based on the image analysis: {record.raw_text}\n\n"
        "Discuss this artwork naturally with the user, sharing your knowledge "
        "about the piece, the artist, the historical context, and answering "
        "any questions they may have."
    )


def _normalize(value: str) -> str:
    return " ".join(value.lower().split())
