"""Pydantic models for the HTTP API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from artwork_agent.domain.artworks import ArtworkContext
from artwork_agent.domain.identification import IdentificationRecord
from artwork_agent.domain.session import SessionSnapshot


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CaptureRequest(_CamelModel):
    """Optional uploaded image for a session capture."""

    image_data: str | None = Field(default=None, alias="imageData")


class IdentificationPayload(_CamelModel):
    """Identification fields returned by /analyze."""

    name: str
    artist: str
    year: str | None = None
    medium: str | None = None
    confidence: str

    @classmethod
    def from_record(cls, record: IdentificationRecord) -> "IdentificationPayload":
        return cls(
            name=record.name,
            artist=record.artist,
            year=record.year,
            medium=record.medium,
            confidence=str(record.confidence),
        )


class ArtworkPayload(_CamelModel):
    """Artwork context returned to the UI."""

    id: str
    name: str
    artist: str
    year: str
    medium: str
    image_url_4k: str = Field(alias="imageUrl4k")
    wikiart_url: str = Field(alias="wikiartUrl")
    description: str
    conversation_context: str = Field(alias="conversationContext")

    @classmethod
    def from_context(cls, context: ArtworkContext) -> "ArtworkPayload":
        return cls(
            id=context.id,
            name=context.name,
            artist=context.artist,
            year=context.year,
            medium=context.medium,
            image_url_4k=context.image_url_4k,
            wikiart_url=context.wikiart_url,
            description=context.description,
            conversation_context=context.conversation_context,
        )


class AnalyzeResponse(_CamelModel):
    """Successful /analyze response."""

    success: bool = True
    identified: bool = True
    in_database: bool = Field(default=True, alias="inDatabase")
    identification: IdentificationPayload
    artwork: ArtworkPayload
    message: str = "Artwork successfully identified using OpenAI Vision."


class SessionResponse(BaseModel):
    """Session snapshot rendered by the UI."""

    state: str
    status: str
    error: str | None
    generation: int
    artwork: ArtworkPayload | None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionResponse":
        return cls(
            state=str(snapshot.state),
            status=snapshot.status,
            error=snapshot.error,
            generation=snapshot.generation,
            artwork=(
                ArtworkPayload.from_context(snapshot.artwork)
                if snapshot.artwork
                else None
            ),
        )

    def to_json_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
