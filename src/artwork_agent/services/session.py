"""State machine for the capture, identification and conversation lifecycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from artwork_agent.domain.errors import (
    ArtworkAgentError,
    ConfigurationError,
    UpstreamError,
)
from artwork_agent.domain.images import ImagePayload
from artwork_agent.domain.session import SessionSnapshot, SessionState
from artwork_agent.services.artworks import ArtworkCatalog, build_artwork_context
from artwork_agent.services.context_store import ArtworkContextStore
from artwork_agent.services.identification import IdentificationService
from artwork_agent.services.tool_bridge import ToolBridge

logger = logging.getLogger(__name__)

READY_STATUS = "Ready"


class FrameSource(Protocol):
    """Camera collaborator producing the current frame."""

    async def capture(self) -> ImagePayload:
        """Return the current frame as an encoded image."""


class VoiceSession(Protocol):
    """Live voice-agent session with client tools."""

    async def start(self, bridge: ToolBridge) -> None:
        """Connect to the agent and register the bridge's tools."""

    async def end(self) -> None:
        """Tear the session down; safe to call more than once."""


@dataclass
class ArtworkSession:
    """Owns the session state, the context store and the live voice session.

    Each analysis runs under a generation number. Resets bump the generation,
    so a result that resolves after a reset is dropped instead of written.
    """

    identification_service: IdentificationService
    catalog: ArtworkCatalog
    store: ArtworkContextStore
    frame_source: FrameSource
    voice_session_factory: Callable[[], VoiceSession]
    debug_errors: bool = False
    state: SessionState = field(default=SessionState.IDLE, init=False)
    status: str = field(default=READY_STATUS, init=False)
    error: str | None = field(default=None, init=False)
    generation: int = field(default=0, init=False)
    _voice: VoiceSession | None = field(default=None, init=False, repr=False)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            status=self.status,
            error=self.error,
            artwork=self.store.read(),
            generation=self.generation,
        )

    def begin_capture(self) -> bool:
        """Idle or Error -> Capturing, unless an artwork is already held."""
        if self.state not in {SessionState.IDLE, SessionState.ERROR}:
            return self._reject("begin_capture")
        if self.store.read() is not None:
            return self._reject("begin_capture")
        self.state = SessionState.CAPTURING
        self.status = "Capturing artwork..."
        self.error = None
        return True

    async def analyze(self, payload: ImagePayload | None = None) -> bool:
        """Capturing -> Analyzing -> Identified (or Error).

        Without a payload the current camera frame is captured first.
        """
        if self.state is not SessionState.CAPTURING:
            return self._reject("analyze")
        self.generation += 1
        generation = self.generation
        self.state = SessionState.ANALYZING
        self.status = "Analyzing artwork..."

        try:
            if payload is None:
                payload = await self.frame_source.capture()
            record = await self.identification_service.identify(payload)
        except ArtworkAgentError as exc:
            return self._fail_analysis(generation, exc)
        except Exception as exc:
            logger.exception("Unexpected failure while analyzing artwork")
            return self._fail_analysis(
                generation, UpstreamError("Failed to analyze artwork", str(exc))
            )

        if not self._owns_analysis(generation):
            logger.info(
                "Discarding identification from a superseded capture",
                extra={"generation": generation, "current": self.generation},
            )
            return False

        entry = self.catalog.lookup(record.name, record.artist)
        context = build_artwork_context(record, entry)
        self.store.write(context)
        self.state = SessionState.IDENTIFIED
        self.status = f'Identified "{context.name}" by {context.artist}'
        return True

    async def capture(self, payload: ImagePayload | None = None) -> bool:
        """Begin a capture and analyze it in one step."""
        if not self.begin_capture():
            return False
        return await self.analyze(payload)

    async def start_conversation(self) -> bool:
        """Identified -> Conversing; registers the tool bridge on the session."""
        if self.state is not SessionState.IDENTIFIED or self._voice is not None:
            return self._reject("start_conversation")
        voice = self.voice_session_factory()
        self._voice = voice
        self.status = "Initializing conversation..."
        self.error = None

        try:
            await voice.start(ToolBridge(self.store))
        except Exception as exc:
            if self._voice is not voice or self.state is not SessionState.IDENTIFIED:
                logger.info(
                    "Ignoring voice start failure after reset",
                    extra={"detail": str(exc)},
                )
                return False
            self._voice = None
            error = exc if isinstance(exc, ArtworkAgentError) else None
            if error is None:
                logger.exception("Failed to start voice session")
                error = UpstreamError("Failed to start conversation", str(exc))
            self._record_error(error)
            self.status = "Error"
            return False

        if self._voice is not voice or self.state is not SessionState.IDENTIFIED:
            logger.info("Session reset while the conversation was starting")
            await _teardown(voice)
            return False
        self.state = SessionState.CONVERSING
        self.status = "Ready to talk"
        return True

    async def end_conversation(self) -> bool:
        """Conversing -> Identified, keeping the current artwork."""
        if self.state is not SessionState.CONVERSING:
            return self._reject("end_conversation")
        voice, self._voice = self._voice, None
        self.state = SessionState.IDENTIFIED
        self.status = "Session ended"
        await _teardown(voice)
        return True

    async def reset(self) -> bool:
        """Any non-idle state -> Idle.

        The voice session is torn down first, then the store is cleared.
        """
        if self.state is SessionState.IDLE and self._voice is None:
            return self._reject("reset")
        self.generation += 1
        voice, self._voice = self._voice, None
        await _teardown(voice)
        self.store.clear()
        self.state = SessionState.IDLE
        self.status = READY_STATUS
        self.error = None
        return True

    async def close(self) -> None:
        voice, self._voice = self._voice, None
        await _teardown(voice)

    def _owns_analysis(self, generation: int) -> bool:
        return (
            generation == self.generation and self.state is SessionState.ANALYZING
        )

    def _fail_analysis(self, generation: int, exc: ArtworkAgentError) -> bool:
        if not self._owns_analysis(generation):
            logger.info(
                "Ignoring failure from a superseded capture",
                extra={"generation": generation, "detail": exc.detail},
            )
            return False
        self.state = SessionState.ERROR
        self.status = "Error"
        self._record_error(exc)
        return False

    def _record_error(self, exc: ArtworkAgentError) -> None:
        if isinstance(exc, ConfigurationError):
            logger.error(
                "Configuration error: %s", exc.message, extra={"detail": exc.detail}
            )
        else:
            logger.warning(
                "%s: %s", type(exc).__name__, exc.message, extra={"detail": exc.detail}
            )
        self.error = format_error(exc, debug=self.debug_errors)

    def _reject(self, operation: str) -> bool:
        logger.info(
            "Rejected session transition",
            extra={"operation": operation, "state": str(self.state)},
        )
        return False


def format_error(exc: ArtworkAgentError, *, debug: bool) -> str:
    """Return user-facing error text, with the upstream detail when debugging."""
    if debug and exc.detail and exc.detail != exc.message:
        return f"{exc.message} (debug: {type(exc).__name__}: {exc.detail})"
    return exc.message


async def _teardown(voice: VoiceSession | None) -> None:
    if voice is None:
        return
    try:
        await voice.end()
    except Exception:
        logger.exception("Failed to end voice session")
