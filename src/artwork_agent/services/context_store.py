"""Single source of truth for the currently identified artwork."""

import threading

from artwork_agent.domain.artworks import ArtworkContext


class ArtworkContextStore:
    """Mutable slot holding the current artwork, last write wins.

    Consumers keep a reference to the store and call read() when they need
    the artwork, so callbacks registered before a write still see it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._context: ArtworkContext | None = None

    def write(self, context: ArtworkContext) -> None:
        with self._lock:
            self._context = context

    def read(self) -> ArtworkContext | None:
        with self._lock:
            return self._context

    def clear(self) -> None:
        with self._lock:
            self._context = None
