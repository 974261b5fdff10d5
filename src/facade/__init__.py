"""
Facade: chat with reasoning models and see their thinking as it streams.

The core is the incremental response protocol in ``facade.streaming``: a raw
completion stream is reassembled into frames, decoded into token deltas and
split into a thinking trace and a response, reported through callbacks.
"""

__version__ = "0.1.0"

from .config import OpenRouterCredentials
from .errors import (
    ConfigurationError,
    FacadeError,
    StreamCancelledError,
    TransportError,
    ValidationError,
)
from .llm import (
    ChatMessage,
    LLMProvider,
    OpenRouterProvider,
    StreamCallbacks,
    ThinkingResult,
    create_llm_provider,
)
from .streaming import CancellationToken, StreamingSession, split_thinking

__all__ = [
    "OpenRouterCredentials",
    "ConfigurationError",
    "FacadeError",
    "StreamCancelledError",
    "TransportError",
    "ValidationError",
    "ChatMessage",
    "LLMProvider",
    "OpenRouterProvider",
    "StreamCallbacks",
    "ThinkingResult",
    "create_llm_provider",
    "CancellationToken",
    "StreamingSession",
    "split_thinking",
]
