"""Static catalog of selectable models.

The catalog is built once at import time and never mutated afterwards, so it
can be read from any number of concurrent sessions.
"""

from collections.abc import Mapping
from types import MappingProxyType

from ..errors import ValidationError
from .models import ModelCapabilities, ModelDescriptor

DEFAULT_MODEL_KEY = "NOUS_DEEPHERMES"

MODEL_CATALOG: Mapping[str, ModelDescriptor] = MappingProxyType({
    "NOUS_DEEPHERMES": ModelDescriptor(
        key="NOUS_DEEPHERMES",
        id="nousresearch/deephermes-3-llama-3-8b-preview:free",
        name="DeepHermes 3",
        description="Fast LLaMA 3-based model with strong reasoning",
        capabilities=ModelCapabilities(
            text_input=True,
            image_input=False,
            thinking=True,
            context_window=8192,
        ),
        icon_url="/icons/nous-icon.svg",
    ),
    "MOONSHOT_KIMI": ModelDescriptor(
        key="MOONSHOT_KIMI",
        id="moonshotai/kimi-vl-a3b-thinking:free",
        name="Kimi Vision",
        description="Multimodal model that can understand images",
        capabilities=ModelCapabilities(
            text_input=True,
            image_input=True,
            thinking=True,
            context_window=4096,
        ),
        icon_url="/icons/moonshot-icon.svg",
    ),
})


def get_model(model_key: str) -> ModelDescriptor:
    """Look up a catalog entry.

    Raises:
        ValidationError: If the key is not in the catalog
    """
    try:
        return MODEL_CATALOG[model_key]
    except (KeyError, TypeError):
        raise ValidationError(
            f"unknown modelKey {model_key!r}. "
            f"Available models: {', '.join(MODEL_CATALOG)}"
        ) from None


def list_models() -> list[ModelDescriptor]:
    """All catalog entries in declaration order."""
    return list(MODEL_CATALOG.values())
