"""ElevenLabs Conversational AI session with artwork client tools."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from elevenlabs.client import ElevenLabs
from elevenlabs.conversational_ai.conversation import (
    AudioInterface,
    ClientTools,
    Conversation,
)
from elevenlabs.conversational_ai.default_audio_interface import (
    DefaultAudioInterface,
)

from artwork_agent.domain.errors import ConfigurationError, UpstreamError
from artwork_agent.services.tool_bridge import ToolBridge

logger = logging.getLogger(__name__)


@dataclass
class ElevenLabsVoiceSession:
    """Voice session driven by the ElevenLabs SDK's worker thread."""

    agent_id: str | None
    api_key: str | None = None
    audio_interface_factory: Callable[[], AudioInterface] = DefaultAudioInterface
    _conversation: Conversation | None = field(default=None, init=False, repr=False)

    async def start(self, bridge: ToolBridge) -> None:
        """Open the session with the bridge's tools registered."""
        if not self.agent_id:
            raise ConfigurationError(
                "Voice agent is not configured. Please set ELEVENLABS_AGENT_ID.",
                detail="ELEVENLABS_AGENT_ID not configured",
            )
        client_tools = ClientTools()
        bridge.register(client_tools)
        try:
            conversation = Conversation(
                ElevenLabs(api_key=self.api_key),
                self.agent_id,
                requires_auth=bool(self.api_key),
                audio_interface=self.audio_interface_factory(),
                client_tools=client_tools,
                callback_agent_response=_log_agent_response,
                callback_user_transcript=_log_user_transcript,
            )
            await asyncio.to_thread(conversation.start_session)
        except Exception as exc:
            raise UpstreamError("Failed to start conversation", str(exc)) from exc
        self._conversation = conversation
        logger.info("Voice session started", extra={"agent_id": self.agent_id})

    async def end(self) -> None:
        """End the session and wait for the worker thread to finish."""
        conversation, self._conversation = self._conversation, None
        if conversation is None:
            return
        await asyncio.to_thread(conversation.end_session)
        conversation_id = await asyncio.to_thread(conversation.wait_for_session_end)
        logger.info(
            "Voice session ended", extra={"conversation_id": conversation_id}
        )


def _log_agent_response(response: str) -> None:
    logger.info("Agent: %s", response)


def _log_user_transcript(transcript: str) -> None:
    logger.info("User: %s", transcript)
