"""Domain models for the capture and conversation lifecycle."""

from dataclasses import dataclass
from enum import StrEnum

from artwork_agent.domain.artworks import ArtworkContext


class SessionState(StrEnum):
    """Lifecycle states of a user session."""

    IDLE = "idle"
    CAPTURING = "capturing"
    ANALYZING = "analyzing"
    IDENTIFIED = "identified"
    CONVERSING = "conversing"
    ERROR = "error"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for rendering."""

    state: SessionState
    status: str
    error: str | None
    artwork: ArtworkContext | None
    generation: int
