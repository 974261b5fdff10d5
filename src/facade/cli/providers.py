"""Provider factory functions for CLI.

Centralizes creation of the LLM provider from environment variables.
Hides configuration details from command implementations.
"""

from rich.console import Console

from ..config import OpenRouterCredentials
from ..errors import ConfigurationError
from ..llm import LLMProvider, create_llm_provider

# Default console for output
_console = Console()


def require_provider(console: Console | None = None) -> LLMProvider:
    """Create the OpenRouter provider, exiting if it is not configured.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance

    Raises:
        SystemExit: If OPENROUTER_API_KEY is not set

    Environment variables:
        OPENROUTER_API_KEY: OpenRouter API key (required)
        OPENROUTER_BASE_URL: API base URL (default: https://openrouter.ai/api/v1)
        FACADE_SITE_URL: Attribution URL (default: http://localhost:3000)
        FACADE_SITE_NAME: Attribution name (default: Facade)
    """
    import typer

    con = console or _console
    try:
        credentials = OpenRouterCredentials.from_env()
    except ConfigurationError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    return create_llm_provider("openrouter", credentials=credentials)
