"""Tests for the ElevenLabs voice session adapter."""

import asyncio
import json

import pytest

from artwork_agent.adapters import elevenlabs_voice_session
from artwork_agent.adapters.elevenlabs_voice_session import ElevenLabsVoiceSession
from artwork_agent.domain.errors import ConfigurationError, UpstreamError
from artwork_agent.services.context_store import ArtworkContextStore
from artwork_agent.services.tool_bridge import FETCH_TOOL_NAME, ToolBridge
from tests.conftest import FakeToolRegistry


class _FakeConversation:
    instances: list["_FakeConversation"] = []

    def __init__(self, client, agent_id, **kwargs) -> None:  # type: ignore[no-untyped-def]
        self.client = client
        self.agent_id = agent_id
        self.kwargs = kwargs
        self.calls: list[str] = []
        _FakeConversation.instances.append(self)

    def start_session(self) -> None:
        self.calls.append("start")

    def end_session(self) -> None:
        self.calls.append("end")

    def wait_for_session_end(self) -> str:
        self.calls.append("wait")
        return "conv-1"


class _FailingConversation(_FakeConversation):
    def start_session(self) -> None:
        raise RuntimeError("websocket refused")


@pytest.fixture
def fake_sdk(monkeypatch):  # type: ignore[no-untyped-def]
    _FakeConversation.instances = []
    monkeypatch.setattr(elevenlabs_voice_session, "Conversation", _FakeConversation)
    monkeypatch.setattr(elevenlabs_voice_session, "ClientTools", FakeToolRegistry)
    monkeypatch.setattr(
        elevenlabs_voice_session, "ElevenLabs", lambda api_key=None: object()
    )
    return _FakeConversation


def _voice(agent_id: str | None = "agent-123") -> ElevenLabsVoiceSession:
    return ElevenLabsVoiceSession(
        agent_id=agent_id, api_key="xi-key", audio_interface_factory=object
    )


def test_missing_agent_id_is_configuration_error() -> None:
    voice = _voice(agent_id=None)

    with pytest.raises(ConfigurationError):
        asyncio.run(voice.start(ToolBridge(ArtworkContextStore())))


def test_start_registers_tools_and_opens_session(fake_sdk) -> None:
    voice = _voice()

    asyncio.run(voice.start(ToolBridge(ArtworkContextStore())))

    conversation = fake_sdk.instances[0]
    assert conversation.agent_id == "agent-123"
    assert conversation.kwargs["requires_auth"] is True
    assert conversation.calls == ["start"]
    tools = conversation.kwargs["client_tools"]
    fetch = tools.handlers[FETCH_TOOL_NAME]
    assert json.loads(fetch({}))["success"] is False


def test_end_closes_session_once(fake_sdk) -> None:
    voice = _voice()

    async def scenario() -> None:
        await voice.start(ToolBridge(ArtworkContextStore()))
        await voice.end()
        await voice.end()

    asyncio.run(scenario())

    assert fake_sdk.instances[0].calls == ["start", "end", "wait"]


def test_end_without_start_is_noop() -> None:
    asyncio.run(_voice().end())


def test_start_failure_is_upstream_error(fake_sdk, monkeypatch) -> None:
    monkeypatch.setattr(
        elevenlabs_voice_session, "Conversation", _FailingConversation
    )

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(_voice().start(ToolBridge(ArtworkContextStore())))

    assert excinfo.value.detail == "websocket refused"
