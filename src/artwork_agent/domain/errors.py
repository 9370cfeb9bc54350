"""Error taxonomy for identification and voice-session failures."""


class ArtworkAgentError(Exception):
    """Base error carrying a user-facing message and an upstream detail."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or message


class ValidationError(ArtworkAgentError):
    """Raised for missing, malformed or oversized input."""


class ConfigurationError(ArtworkAgentError):
    """Raised when credentials or identifiers are missing or rejected."""


class UpstreamError(ArtworkAgentError):
    """Raised when the vision model, voice agent or camera fails."""
