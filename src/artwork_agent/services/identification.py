"""Artwork identification through a vision model."""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Protocol

from artwork_agent.domain.errors import (
    ConfigurationError,
    UpstreamError,
    ValidationError,
)
from artwork_agent.domain.identification import IdentificationRecord
from artwork_agent.domain.images import ImagePayload
from artwork_agent.services.parser import parse_identification

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024

SYSTEM_PROMPT = """You are an expert art historian specializing in identifying artworks.
When shown an image of an artwork, identify it by providing:
1. The exact name of the artwork
2. The artist's full name
3. The year it was created (if known)
4. The medium (e.g., oil on canvas, fresco, sculpture)

Format your response as:
Name: [exact artwork name]
Artist: [artist full name]
Year: [year or "Unknown"]
Medium: [medium or "Unknown"]
Confidence: [high/medium/low]

If you cannot identify the specific artwork, provide your best assessment and mark confidence as low."""

USER_PROMPT = "Please identify this artwork with as much detail as possible."

_CREDENTIAL_MARKER = "API key"


class VisionClient(Protocol):
    """Interface for free-text vision model calls."""

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        """Return the model's free-text answer for an image."""


@dataclass
class IdentificationService:
    """Validates image payloads and turns vision answers into records."""

    client: VisionClient
    model: str
    max_tokens: int = 500
    timeout_seconds: float = 30.0

    async def identify(self, payload: ImagePayload | None) -> IdentificationRecord:
        """Identify the artwork in a still frame."""
        validate_payload(payload)
        try:
            raw_text = await asyncio.wait_for(
                self.client.describe(
                    model=self.model,
                    system_prompt=SYSTEM_PROMPT,
                    prompt=USER_PROMPT,
                    image_data_url=payload.data_url,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise UpstreamError(
                "Artwork identification timed out",
                detail=f"No answer within {self.timeout_seconds:g}s",
            ) from exc
        except Exception as exc:
            raise classify_upstream_error(exc) from exc

        record = parse_identification(raw_text)
        logger.info(
            "Artwork identified",
            extra={
                "artwork_name": record.name,
                "artist": record.artist,
                "confidence": str(record.confidence),
            },
        )
        return record


def validate_payload(payload: ImagePayload | None) -> None:
    """Reject missing, non-image, undecodable or oversized payloads."""
    if payload is None:
        raise ValidationError(
            "Invalid request: imageData is required and must be a base64 string"
        )
    if not isinstance(payload.data, str) or not payload.data:
        raise ValidationError(
            "Invalid request: imageData is required and must be a base64 string"
        )
    if not payload.media_type.startswith("image/"):
        raise ValidationError(
            "Invalid request: imageData must be an image",
            detail=f"Unsupported media type {payload.media_type}",
        )
    if payload.estimated_size_bytes > MAX_IMAGE_BYTES:
        raise ValidationError(
            "Image too large. Please upload an image smaller than 10MB."
        )
    try:
        base64.b64decode(payload.data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(
            "Invalid request: imageData is not valid base64", detail=str(exc)
        ) from exc


def classify_upstream_error(exc: Exception) -> ConfigurationError | UpstreamError:
    """Map an upstream failure onto the error taxonomy by its message."""
    detail = str(exc) or type(exc).__name__
    if _CREDENTIAL_MARKER in detail:
        return ConfigurationError(
            "Server configuration error. Please ensure OPENAI_API_KEY is set.",
            detail=detail,
        )
    return UpstreamError("Failed to analyze artwork", detail=detail)
