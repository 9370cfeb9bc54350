"""Frame source that pulls still images from an HTTP snapshot endpoint."""

from dataclasses import dataclass

import httpx

from artwork_agent.domain.errors import UpstreamError
from artwork_agent.domain.images import ImagePayload


@dataclass
class HttpxSnapshotFrameSource:
    """Fetches the current frame from a camera's snapshot URL."""

    snapshot_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, snapshot_url: str) -> "HttpxSnapshotFrameSource":
        """Create a frame source with a managed httpx session."""
        return cls(snapshot_url=snapshot_url, http_client=httpx.AsyncClient())

    async def capture(self) -> ImagePayload:
        """Download the current snapshot."""
        try:
            response = await self.http_client.get(self.snapshot_url, timeout=10)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamError("Unable to capture a camera frame", str(exc)) from exc
        if not response.content:
            raise UpstreamError("Unable to capture a camera frame", "Empty snapshot")
        return ImagePayload.from_bytes(response.content)

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
