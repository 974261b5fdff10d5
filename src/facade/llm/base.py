from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .models import ChatMessage, StreamCallbacks, ThinkingResult

if TYPE_CHECKING:
    from ..streaming.session import CancellationToken


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This module hides the design decision of which backend serves a model.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Mapping backend failures onto TransportError

    The model is chosen per call by catalog key, so one provider instance
    can serve concurrent requests for different models.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            result = await provider.complete(messages, "NOUS_DEEPHERMES")
        # Automatically cleaned up
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model_key: str,
        system_prompt: str | None = None,
    ) -> ThinkingResult:
        """Generate a complete (non-streamed) response.

        Args:
            messages: Conversation history
            model_key: Catalog key of the model to use
            system_prompt: Optional system prompt placed before the thinking instruction

        Returns:
            ThinkingResult with the reasoning split from the answer

        Raises:
            ValidationError: If the request is malformed
            TransportError: If the backend call fails
        """
        pass

    @abstractmethod
    async def stream_completion(
        self,
        messages: list[ChatMessage],
        model_key: str,
        callbacks: StreamCallbacks,
        cancel: "CancellationToken | None" = None,
        system_prompt: str | None = None,
    ) -> None:
        """Stream a response, reporting progress through callbacks.

        Failures, including validation failures, are delivered to
        ``callbacks.on_error`` rather than raised.

        Args:
            messages: Conversation history
            model_key: Catalog key of the model to use
            callbacks: Consumer hooks for tokens, thinking and the terminal event
            cancel: Optional token to stop reading the stream early
            system_prompt: Optional system prompt placed before the thinking instruction
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise
