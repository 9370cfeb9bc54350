"""Client tools that let the voice agent read the current artwork."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from artwork_agent.domain.artworks import ArtworkContext
from artwork_agent.domain.identification import UNKNOWN
from artwork_agent.services.context_store import ArtworkContextStore

agent_logger = logging.getLogger("artwork_agent.agent")
logger = logging.getLogger(__name__)

FETCH_TOOL_NAME = "fetchArtworkIdentification"
LOG_TOOL_NAME = "logDiagnostic"

NO_ARTWORK_ERROR = (
    "No artwork has been captured yet. Please ask the user to capture or "
    "upload an artwork image first."
)


class ToolRegistry(Protocol):
    """Registry accepting synchronous tool handlers."""

    def register(
        self,
        tool_name: str,
        handler: Callable[[dict[str, Any]], Any],
        is_async: bool = False,
    ) -> None:
        """Register a handler under a tool name."""


class ToolArtwork(BaseModel):
    """Artwork fields returned to the agent."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    artist: str
    year: str
    medium: str
    confidence: str
    image_url: str = Field(alias="imageUrl")
    wikiart_url: str = Field(alias="wikiartUrl")
    description: str
    conversation_context: str = Field(alias="conversationContext")


class ToolResult(BaseModel):
    """Wire contract for tool results."""

    success: bool
    artwork: ToolArtwork | None = None
    message: str | None = None
    error: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


@dataclass
class ToolBridge:
    """Exposes the context store to the voice agent as JSON-returning tools."""

    store: ArtworkContextStore

    def fetch_artwork_identification(
        self, parameters: dict[str, Any] | None = None
    ) -> str:
        """Return the artwork current at call time."""
        context = self.store.read()
        if context is None:
            logger.info("Agent requested artwork before any was identified")
            return ToolResult(success=False, error=NO_ARTWORK_ERROR).to_json()
        logger.info(
            "Returning artwork to agent", extra={"artwork_name": context.name}
        )
        return ToolResult(
            success=True,
            artwork=_tool_artwork(context),
            message=summarize_artwork(context),
        ).to_json()

    def log_diagnostic(self, parameters: dict[str, Any] | None = None) -> str:
        """Forward an agent diagnostic message to the log."""
        message = (parameters or {}).get("message")
        if not isinstance(message, str):
            return ToolResult(
                success=False, error="message must be a string"
            ).to_json()
        agent_logger.info(message)
        return ToolResult(success=True).to_json()

    def register(self, tools: ToolRegistry) -> None:
        tools.register(FETCH_TOOL_NAME, self.fetch_artwork_identification)
        tools.register(LOG_TOOL_NAME, self.log_diagnostic)


def summarize_artwork(context: ArtworkContext) -> str:
    """Render a one-line summary, skipping unknown year and medium."""
    summary = f'Artwork details: "{context.name}" by {context.artist}'
    if context.year and context.year != UNKNOWN:
        summary += f" ({context.year})"
    summary += "."
    if context.medium and context.medium != UNKNOWN:
        summary += f" Medium: {context.medium}."
    return summary


def _tool_artwork(context: ArtworkContext) -> ToolArtwork:
    return ToolArtwork(
        id=context.id,
        name=context.name,
        artist=context.artist,
        year=context.year,
        medium=context.medium,
        confidence=str(context.confidence),
        image_url=context.image_url_4k,
        wikiart_url=context.wikiart_url,
        description=context.description,
        conversation_context=context.conversation_context,
    )
