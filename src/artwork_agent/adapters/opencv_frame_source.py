"""Frame source reading from a local webcam through OpenCV."""

import asyncio
import logging
import threading
from dataclasses import dataclass, field

import cv2

from artwork_agent.domain.errors import UpstreamError
from artwork_agent.domain.images import ImagePayload

logger = logging.getLogger(__name__)


@dataclass
class OpenCVFrameSource:
    """Grabs JPEG-encoded frames from a webcam opened on first use."""

    camera_index: int = 0
    jpeg_quality: int = 90
    width: int = 1280
    height: int = 720
    _capture: cv2.VideoCapture | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    async def capture(self) -> ImagePayload:
        """Return the current frame; blocking camera I/O runs in a thread."""
        jpeg_bytes = await asyncio.to_thread(self._grab_jpeg)
        return ImagePayload.from_bytes(jpeg_bytes)

    def _grab_jpeg(self) -> bytes:
        with self._lock:
            capture = self._open()
            ok, frame = capture.read()
            if not ok or frame is None:
                raise UpstreamError(
                    "Unable to capture a camera frame",
                    f"Camera {self.camera_index} returned no frame",
                )
            ok, encoded = cv2.imencode(
                ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]
            )
            if not ok:
                raise UpstreamError(
                    "Unable to capture a camera frame", "JPEG encoding failed"
                )
            return encoded.tobytes()

    def _open(self) -> cv2.VideoCapture:
        if self._capture is not None and self._capture.isOpened():
            return self._capture
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            raise UpstreamError(
                "Unable to access camera. Please check permissions.",
                f"Camera {self.camera_index} could not be opened",
            )
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        logger.info("Opened camera", extra={"camera_index": self.camera_index})
        self._capture = capture
        return capture

    async def close(self) -> None:
        """Release the camera device."""
        with self._lock:
            if self._capture is not None:
                self._capture.release()
                self._capture = None
