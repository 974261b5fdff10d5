"""Runtime configuration read from environment variables.

Environment variables:
    OPENROUTER_API_KEY: API key (required)
    OPENROUTER_BASE_URL: API base URL (default: https://openrouter.ai/api/v1)
    FACADE_SITE_URL: Attribution URL sent as HTTP-Referer (default: http://localhost:3000)
    FACADE_SITE_NAME: Attribution name sent as X-Title (default: Facade)
    FACADE_LOG_LEVEL: Log level used by the CLI (default: WARNING)
"""

import os

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_SITE_URL = "http://localhost:3000"
DEFAULT_SITE_NAME = "Facade"
DEFAULT_LOG_LEVEL = "WARNING"

# Sampling temperature used for every completion request
DEFAULT_TEMPERATURE = 0.7


class OpenRouterCredentials(BaseModel):
    """Credentials and attribution for the OpenRouter API."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = Field(description="Bearer token for the API")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    site_url: str = Field(default=DEFAULT_SITE_URL, description="HTTP-Referer attribution")
    site_name: str = Field(default=DEFAULT_SITE_NAME, description="X-Title attribution")

    @classmethod
    def from_env(cls) -> "OpenRouterCredentials":
        """Read credentials from the environment.

        Raises:
            ConfigurationError: If OPENROUTER_API_KEY is not set
        """
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is not defined in environment variables")

        return cls(
            api_key=api_key,
            base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL),
            site_url=os.getenv("FACADE_SITE_URL", DEFAULT_SITE_URL),
            site_name=os.getenv("FACADE_SITE_NAME", DEFAULT_SITE_NAME),
        )

    @property
    def attribution_headers(self) -> dict[str, str]:
        """The attribution header pair OpenRouter uses for app rankings."""
        return {
            "HTTP-Referer": self.site_url,
            "X-Title": self.site_name,
        }


def log_level_from_env() -> str:
    """Log level name for the CLI, upper-cased."""
    return os.getenv("FACADE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
