"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from artwork_agent.adapters.elevenlabs_voice_session import ElevenLabsVoiceSession
from artwork_agent.adapters.openai_vision_client import OpenAIVisionClient
from artwork_agent.adapters.opencv_frame_source import OpenCVFrameSource
from artwork_agent.adapters.snapshot_frame_source import HttpxSnapshotFrameSource
from artwork_agent.config import Settings
from artwork_agent.services.artworks import ArtworkCatalog
from artwork_agent.services.context_store import ArtworkContextStore
from artwork_agent.services.identification import IdentificationService
from artwork_agent.services.session import ArtworkSession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identification_service: IdentificationService
    catalog: ArtworkCatalog
    context_store: ArtworkContextStore
    artwork_session: ArtworkSession
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    vision_client = OpenAIVisionClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.identification_timeout_seconds,
    )
    identification_service = IdentificationService(
        client=vision_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
        timeout_seconds=resolved_settings.identification_timeout_seconds,
    )
    if resolved_settings.camera_snapshot_url:
        frame_source: HttpxSnapshotFrameSource | OpenCVFrameSource = (
            HttpxSnapshotFrameSource.create(resolved_settings.camera_snapshot_url)
        )
    else:
        frame_source = OpenCVFrameSource(camera_index=resolved_settings.camera_index)

    def voice_session_factory() -> ElevenLabsVoiceSession:
        return ElevenLabsVoiceSession(
            agent_id=resolved_settings.elevenlabs_agent_id,
            api_key=resolved_settings.elevenlabs_api_key,
        )

    catalog = ArtworkCatalog.default()
    context_store = ArtworkContextStore()
    artwork_session = ArtworkSession(
        identification_service=identification_service,
        catalog=catalog,
        store=context_store,
        frame_source=frame_source,
        voice_session_factory=voice_session_factory,
        debug_errors=resolved_settings.debug_errors,
    )

    async def close_resources() -> None:
        await artwork_session.close()
        await vision_client.close()
        await frame_source.close()

    return AppContainer(
        settings=resolved_settings,
        identification_service=identification_service,
        catalog=catalog,
        context_store=context_store,
        artwork_session=artwork_session,
        close_resources=close_resources,
    )
