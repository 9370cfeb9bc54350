"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from artwork_agent.config import Settings
from artwork_agent.containers import AppContainer
from artwork_agent.domain.images import ImagePayload
from artwork_agent.services.artworks import ArtworkCatalog
from artwork_agent.services.context_store import ArtworkContextStore
from artwork_agent.services.identification import IdentificationService, VisionClient
from artwork_agent.services.session import ArtworkSession, FrameSource, VoiceSession
from artwork_agent.services.tool_bridge import ToolBridge

OROZCO_ANSWER = (
    "Name: Father Hidalgo\n"
    "Artist: José Clemente Orozco\n"
    "Year: 1949\n"
    "Medium: Fresco\n"
    "Confidence: high"
)

STARRY_NIGHT_ANSWER = (
    "Name: The Starry Night\n"
    "Artist: Vincent van Gogh\n"
    "Year: 1889\n"
    "Medium: Oil on canvas\n"
    "Confidence: medium"
)

# base64 of b"fake-image"
TINY_IMAGE = "ZmFrZS1pbWFnZQ=="


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning canned answers."""

    answers: list[str] = field(default_factory=lambda: [OROZCO_ANSWER])
    error: Exception | None = None
    gate: asyncio.Event | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "prompt": prompt,
                "image_data_url": image_data_url,
                "max_tokens": max_tokens,
            }
        )
        answer = self.answers[min(len(self.calls), len(self.answers)) - 1]
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return answer


@dataclass
class FakeFrameSource(FrameSource):
    """Frame source returning a fixed payload."""

    payload: ImagePayload = field(
        default_factory=lambda: ImagePayload(data=TINY_IMAGE)
    )
    error: Exception | None = None
    captures: int = 0

    async def capture(self) -> ImagePayload:
        self.captures += 1
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeVoiceSession(VoiceSession):
    """Voice session that records lifecycle calls."""

    start_error: Exception | None = None
    end_error: Exception | None = None
    start_gate: asyncio.Event | None = None
    bridge: ToolBridge | None = None
    started: bool = False
    end_calls: int = 0

    async def start(self, bridge: ToolBridge) -> None:
        if self.start_gate is not None:
            await self.start_gate.wait()
        if self.start_error is not None:
            raise self.start_error
        self.bridge = bridge
        self.started = True

    async def end(self) -> None:
        self.end_calls += 1
        if self.end_error is not None:
            raise self.end_error
        self.started = False


@dataclass
class FakeToolRegistry:
    """Collects registered client tools."""

    handlers: dict[str, object] = field(default_factory=dict)

    def register(self, tool_name, handler, is_async=False) -> None:  # type: ignore[no-untyped-def]
        self.handlers[tool_name] = handler


@dataclass
class VoiceSessions:
    """Factory handing out fake voice sessions and remembering them."""

    start_error: Exception | None = None
    end_error: Exception | None = None
    start_gate: asyncio.Event | None = None
    created: list[FakeVoiceSession] = field(default_factory=list)

    def __call__(self) -> FakeVoiceSession:
        voice = FakeVoiceSession(
            start_error=self.start_error,
            end_error=self.end_error,
            start_gate=self.start_gate,
        )
        self.created.append(voice)
        return voice


def build_session(
    vision_client: FakeVisionClient | None = None,
    voice_sessions: VoiceSessions | None = None,
    frame_source: FakeFrameSource | None = None,
    timeout_seconds: float = 30.0,
) -> ArtworkSession:
    """Create an ArtworkSession wired to fakes."""
    return ArtworkSession(
        identification_service=IdentificationService(
            client=vision_client or FakeVisionClient(),
            model="gpt-4o",
            timeout_seconds=timeout_seconds,
        ),
        catalog=ArtworkCatalog.default(),
        store=ArtworkContextStore(),
        frame_source=frame_source or FakeFrameSource(),
        voice_session_factory=voice_sessions or VoiceSessions(),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        elevenlabs_agent_id="agent-123",
        environment="test",
    )


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def voice_sessions() -> VoiceSessions:
    return VoiceSessions()


@pytest.fixture
def container(
    settings: Settings,
    vision_client: FakeVisionClient,
    voice_sessions: VoiceSessions,
) -> AppContainer:
    artwork_session = build_session(vision_client, voice_sessions)

    async def close_resources() -> None:
        await artwork_session.close()

    return AppContainer(
        settings=settings,
        identification_service=artwork_session.identification_service,
        catalog=artwork_session.catalog,
        context_store=artwork_session.store,
        artwork_session=artwork_session,
        close_resources=close_resources,
    )
