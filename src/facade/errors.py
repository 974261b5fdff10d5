"""Error taxonomy shared by the streaming core, the providers and the API.

Frame decode failures are intentionally absent: a malformed frame is dropped
by the decoder and never surfaces as an exception.
"""


class FacadeError(Exception):
    """Base class for all facade errors."""


class ValidationError(FacadeError):
    """Malformed request: no backend call is attempted."""

    def __init__(self, message: str):
        super().__init__(f"Invalid request: {message}")


class ConfigurationError(FacadeError):
    """Required configuration (such as the API key) is missing."""


class TransportError(FacadeError):
    """Network failure or non-success status from the backend."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StreamCancelledError(FacadeError):
    """The consumer abandoned a streaming session before it completed."""

    def __init__(self, message: str = "Stream cancelled"):
        super().__init__(message)
