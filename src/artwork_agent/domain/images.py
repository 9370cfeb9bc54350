"""Still-frame payloads handed to the identification client."""

import base64
from dataclasses import dataclass

_DATA_URL_PREFIX = "data:"


@dataclass(frozen=True)
class ImagePayload:
    """Base64-encoded still frame with its media type."""

    data: str
    media_type: str = "image/jpeg"

    @classmethod
    def from_bytes(cls, image_bytes: bytes) -> "ImagePayload":
        """Encode raw image bytes, sniffing the media type."""
        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return cls(data=encoded, media_type=detect_media_type(image_bytes))

    @classmethod
    def from_base64(cls, image_data: str) -> "ImagePayload":
        """Build a payload from base64 text, with or without a data URI prefix."""
        if not image_data.startswith(_DATA_URL_PREFIX):
            return cls(data=image_data.strip())
        header, _, encoded = image_data.partition(",")
        media_type = header[len(_DATA_URL_PREFIX) :].split(";", maxsplit=1)[0]
        return cls(data=encoded.strip(), media_type=media_type or "image/jpeg")

    @property
    def estimated_size_bytes(self) -> int:
        """Decoded size estimated from the encoded length."""
        return len(self.data) * 3 // 4

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


def detect_media_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
