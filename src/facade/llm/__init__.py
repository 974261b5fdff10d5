from .base import LLMProvider
from .catalog import DEFAULT_MODEL_KEY, MODEL_CATALOG, get_model, list_models
from .models import (
    ChatMessage,
    ContentPart,
    ImagePart,
    ImageURL,
    ModelCapabilities,
    ModelDescriptor,
    StreamCallbacks,
    TextPart,
    ThinkingResult,
)
from .request import ChatRequestBuilder, validate_request, with_thinking_instruction

# Providers import facade.streaming, which needs the modules above
from .factory import create_llm_provider
from .providers import OpenRouterProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "DEFAULT_MODEL_KEY",
    "MODEL_CATALOG",
    "get_model",
    "list_models",
    "ChatMessage",
    "ContentPart",
    "ImagePart",
    "ImageURL",
    "ModelCapabilities",
    "ModelDescriptor",
    "StreamCallbacks",
    "TextPart",
    "ThinkingResult",
    "ChatRequestBuilder",
    "validate_request",
    "with_thinking_instruction",
    "OpenRouterProvider",
]
