from collections.abc import Callable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    """Plain text part of a multimodal message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str = Field(description="Text content")


class ImageURL(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(description="HTTP(S) or data: URL of the image")


class ImagePart(BaseModel):
    """Image reference part, only accepted by image-capable models."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL = Field(description="Image location")


ContentPart = Annotated[TextPart | ImagePart, Field(discriminator="type")]


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"] = Field(
        description="Role of the message sender: 'user', 'assistant', or 'system'"
    )
    content: str | list[ContentPart] = Field(
        description="Text content, or an ordered list of content parts"
    )

    @property
    def has_images(self) -> bool:
        """Whether any content part references an image."""
        if isinstance(self.content, str):
            return False
        return any(isinstance(part, ImagePart) for part in self.content)


class ModelCapabilities(BaseModel):
    """What a catalog model accepts and produces."""

    model_config = ConfigDict(frozen=True)

    text_input: bool = True
    image_input: bool = False
    thinking: bool = False
    context_window: int = Field(gt=0, description="Context window in tokens")


class ModelDescriptor(BaseModel):
    """Static catalog entry for one selectable backend model."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Catalog key used by clients")
    id: str = Field(description="Backend model identifier")
    name: str = Field(description="Display name")
    description: str = Field(description="Brief description")
    capabilities: ModelCapabilities
    icon_url: str | None = Field(default=None, description="Icon path for the UI")


class ThinkingResult(BaseModel):
    """Response text split into the thinking trace and the final answer."""

    model_config = ConfigDict(frozen=True)

    thinking: str = Field(default="", description="Reasoning inside <think> tags")
    response: str = Field(default="", description="Answer with the reasoning removed")


class StreamCallbacks(BaseModel):
    """Consumer hooks for one streaming session.

    Every hook is optional. For a session that opens the transport exactly
    one of ``on_complete`` / ``on_error`` is invoked.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    on_token: Callable[[str], None] | None = None
    on_thinking: Callable[[str], None] | None = None
    on_complete: Callable[[str], None] | None = None
    on_error: Callable[[Exception], None] | None = None
