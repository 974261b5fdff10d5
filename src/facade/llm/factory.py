from typing import Any

from ..config import OpenRouterCredentials
from .base import LLMProvider
from .providers import OpenRouterProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type (currently only 'openrouter')
        **config: Provider-specific configuration
            For OpenRouter, either:
                - credentials: OpenRouterCredentials
            or:
                - api_key: str (required)
                - base_url: str (default: 'https://openrouter.ai/api/v1')
                - site_url: str (default: 'http://localhost:3000')
                - site_name: str (default: 'Facade')
            plus optionally:
                - http_client: httpx.AsyncClient
                - timeout: float

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "openrouter",
        ...     api_key="sk-or-...",
        ...     site_name="Facade"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "openrouter":
        if "credentials" not in config:
            if "api_key" not in config:
                raise TypeError("OpenRouter provider requires 'api_key' or 'credentials' in config")
            credential_fields = {
                name: config.pop(name)
                for name in ("api_key", "base_url", "site_url", "site_name")
                if name in config
            }
            config["credentials"] = OpenRouterCredentials(**credential_fields)
        return OpenRouterProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openrouter'"
    )
