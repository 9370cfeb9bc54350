"""Tests for the identification service."""

import asyncio

import pytest

from artwork_agent.domain.errors import (
    ConfigurationError,
    UpstreamError,
    ValidationError,
)
from artwork_agent.domain.identification import Confidence
from artwork_agent.domain.images import ImagePayload
from artwork_agent.services.identification import (
    MAX_IMAGE_BYTES,
    SYSTEM_PROMPT,
    IdentificationService,
    classify_upstream_error,
)
from tests.conftest import TINY_IMAGE, FakeVisionClient


def _service(client: FakeVisionClient, timeout: float = 30.0) -> IdentificationService:
    return IdentificationService(
        client=client, model="gpt-4o", max_tokens=500, timeout_seconds=timeout
    )


def test_identify_returns_parsed_record() -> None:
    client = FakeVisionClient()

    record = asyncio.run(_service(client).identify(ImagePayload(data=TINY_IMAGE)))

    assert record.name == "Father Hidalgo"
    assert record.confidence is Confidence.HIGH
    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["system_prompt"] == SYSTEM_PROMPT
    assert call["max_tokens"] == 500
    assert call["image_data_url"] == f"data:image/jpeg;base64,{TINY_IMAGE}"


def test_system_prompt_describes_output_format() -> None:
    for label in ("Name:", "Artist:", "Year:", "Medium:", "Confidence:"):
        assert label in SYSTEM_PROMPT


def test_missing_payload_is_rejected() -> None:
    client = FakeVisionClient()

    with pytest.raises(ValidationError):
        asyncio.run(_service(client).identify(None))

    assert client.calls == []


def test_oversized_payload_is_rejected_before_calling_model() -> None:
    client = FakeVisionClient()
    oversized = ImagePayload(data="A" * (MAX_IMAGE_BYTES * 4 // 3 + 8))

    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(_service(client).identify(oversized))

    assert "10MB" in excinfo.value.message
    assert client.calls == []


def test_non_image_media_type_is_rejected() -> None:
    client = FakeVisionClient()
    payload = ImagePayload.from_base64(f"data:text/plain;base64,{TINY_IMAGE}")

    with pytest.raises(ValidationError):
        asyncio.run(_service(client).identify(payload))

    assert client.calls == []


def test_invalid_base64_is_rejected() -> None:
    client = FakeVisionClient()

    with pytest.raises(ValidationError):
        asyncio.run(_service(client).identify(ImagePayload(data="not base64!")))

    assert client.calls == []


def test_api_key_failures_are_configuration_errors() -> None:
    client = FakeVisionClient(error=RuntimeError("Incorrect API key provided: sk-x"))

    with pytest.raises(ConfigurationError) as excinfo:
        asyncio.run(_service(client).identify(ImagePayload(data=TINY_IMAGE)))

    assert "OPENAI_API_KEY" in excinfo.value.message
    assert excinfo.value.detail == "Incorrect API key provided: sk-x"


def test_other_failures_are_upstream_errors() -> None:
    client = FakeVisionClient(error=RuntimeError("model overloaded"))

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(_service(client).identify(ImagePayload(data=TINY_IMAGE)))

    assert excinfo.value.detail == "model overloaded"


def test_timeout_is_an_upstream_error() -> None:
    async def scenario() -> None:
        client = FakeVisionClient(gate=asyncio.Event())
        await _service(client, timeout=0.01).identify(ImagePayload(data=TINY_IMAGE))

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(scenario())

    assert "timed out" in excinfo.value.message


def test_empty_answer_degrades_to_unknown() -> None:
    client = FakeVisionClient(answers=[""])

    record = asyncio.run(_service(client).identify(ImagePayload(data=TINY_IMAGE)))

    assert record.name == "Unknown"
    assert record.confidence is Confidence.LOW


def test_classify_upstream_error_uses_exception_name_when_message_empty() -> None:
    error = classify_upstream_error(ConnectionError())

    assert isinstance(error, UpstreamError)
    assert error.detail == "ConnectionError"
