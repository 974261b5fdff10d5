"""Request construction for chat-completion backends.

Hides how the thinking instruction is injected and how the outbound HTTP
request (URL, headers, JSON body) is laid out.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pydantic

from ..config import DEFAULT_TEMPERATURE, OpenRouterCredentials
from ..errors import ValidationError
from .catalog import get_model
from .models import ChatMessage, ModelDescriptor

THINK_OPEN_TAG = "<think>"
THINK_CLOSE_TAG = "</think>"

THINKING_INSTRUCTION = f"""When reasoning through a problem, please wrap your step-by-step thinking in {THINK_OPEN_TAG} tags.
Example:
{THINK_OPEN_TAG}
This is my reasoning process:
1. First, I need to understand the question
2. Then, I'll break it down into steps
3. Finally, I'll provide a clear answer
{THINK_CLOSE_TAG}

Your actual response will come after the thinking section."""


def with_thinking_instruction(
    messages: Sequence[ChatMessage],
    system_prompt: str | None = None,
) -> list[ChatMessage]:
    """Prefix the conversation with the thinking instruction.

    When a custom system prompt is given it replaces any system messages
    already present in the conversation.
    """
    content = THINKING_INSTRUCTION
    if system_prompt:
        content = f"{system_prompt}\n\n{THINKING_INSTRUCTION}"
    instruction = ChatMessage(role="system", content=content)

    if system_prompt:
        return [instruction, *(m for m in messages if m.role != "system")]
    return [instruction, *messages]


def validate_request(
    messages: Any,
    model_key: Any,
) -> tuple[list[ChatMessage], ModelDescriptor]:
    """Check an inbound request before anything touches the network.

    Accepts ``ChatMessage`` instances or plain dicts in the wire shape.

    Returns:
        Parsed messages and the catalog entry for ``model_key``

    Raises:
        ValidationError: If messages are missing, empty or malformed, the
            model key is unknown, or images are sent to a text-only model
    """
    if not isinstance(messages, (list, tuple)):
        raise ValidationError("messages must be an array")
    if not messages:
        raise ValidationError("messages must not be empty")
    if not model_key:
        raise ValidationError("modelKey is required")

    descriptor = get_model(model_key)

    parsed: list[ChatMessage] = []
    for index, message in enumerate(messages):
        if isinstance(message, ChatMessage):
            parsed.append(message)
            continue
        try:
            parsed.append(ChatMessage.model_validate(message))
        except pydantic.ValidationError as e:
            raise ValidationError(f"messages[{index}] is malformed: {e.errors()[0]['msg']}") from e

    if not descriptor.capabilities.image_input and any(m.has_images for m in parsed):
        raise ValidationError(f"model {descriptor.key} does not accept image input")

    return parsed, descriptor


@dataclass(frozen=True)
class ChatRequestBuilder:
    """Immutable builder for one backend request.

    Binding the model and credentials per request means a later change of the
    selected model never affects a request that is already in flight.
    """

    model: ModelDescriptor
    credentials: OpenRouterCredentials
    temperature: float = DEFAULT_TEMPERATURE

    @property
    def url(self) -> str:
        return f"{self.credentials.base_url.rstrip('/')}/chat/completions"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credentials.api_key.get_secret_value()}",
            "Content-Type": "application/json",
            **self.credentials.attribution_headers,
        }

    def messages(
        self,
        messages: Sequence[ChatMessage],
        system_prompt: str | None = None,
    ) -> list[dict[str, Any]]:
        """Wire-format messages with the thinking instruction prepended."""
        return [
            m.model_dump(mode="json")
            for m in with_thinking_instruction(messages, system_prompt)
        ]

    def payload(
        self,
        messages: Sequence[ChatMessage],
        stream: bool,
        system_prompt: str | None = None,
    ) -> dict[str, Any]:
        return {
            "model": self.model.id,
            "messages": self.messages(messages, system_prompt),
            "stream": stream,
            "temperature": self.temperature,
        }
