"""Main CLI application using Typer."""
import asyncio
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import log_level_from_env
from ..errors import FacadeError
from ..llm import DEFAULT_MODEL_KEY, MODEL_CATALOG, list_models
from ..llm.models import ChatMessage, ImagePart, ImageURL, StreamCallbacks, TextPart
from .providers import require_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="facade",
    help="Chat with reasoning models and watch their thinking as it streams",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _check_model(model: str) -> str:
    if model not in MODEL_CATALOG:
        raise typer.BadParameter(f"choose one of: {', '.join(MODEL_CATALOG)}")
    return model


def _render(thinking: str, response: str) -> Group:
    parts = []
    if thinking:
        parts.append(Panel(Text(thinking, style="dim"), title="Thinking", border_style="cyan"))
    parts.append(Markdown(response) if response else Text(""))
    return Group(*parts)


@app.callback()
def main_options(
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (default: FACADE_LOG_LEVEL or WARNING)"
    )
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=(log_level or log_level_from_env()).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@app.command()
def models():
    """List the available models."""
    table = Table(title="Models")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description", style="dim")
    table.add_column("Images", justify="center")
    table.add_column("Thinking", justify="center")
    table.add_column("Context", justify="right")

    for model in list_models():
        caps = model.capabilities
        table.add_row(
            model.key,
            model.name,
            model.description,
            "yes" if caps.image_input else "-",
            "yes" if caps.thinking else "-",
            f"{caps.context_window:,}",
        )

    console.print(table)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question to ask"),
    model: str = typer.Option(
        DEFAULT_MODEL_KEY,
        "--model",
        "-m",
        callback=_check_model,
        help="Model key (see 'facade models')"
    ),
    image: list[str] = typer.Option(
        None,
        "--image",
        "-i",
        help="Image URL to attach (image-capable models only)"
    ),
    system: str = typer.Option(
        None,
        "--system",
        "-s",
        help="System prompt placed before the thinking instruction"
    )
):
    """Ask a single question and print the thinking and the answer."""
    async def _ask():
        provider = require_provider(console)

        if image:
            content = [TextPart(text=prompt)]
            content += [ImagePart(image_url=ImageURL(url=url)) for url in image]
            message = ChatMessage(role="user", content=content)
        else:
            message = ChatMessage(role="user", content=prompt)

        try:
            with console.status(f"[dim]Asking {MODEL_CATALOG[model].name}...[/dim]"):
                result = await provider.complete([message], model, system_prompt=system)
            console.print(_render(result.thinking, result.response))
        except FacadeError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await provider.close()

    asyncio.run(_ask())


@app.command()
def chat(
    model: str = typer.Option(
        DEFAULT_MODEL_KEY,
        "--model",
        "-m",
        callback=_check_model,
        help="Model key (see 'facade models')"
    ),
    system: str = typer.Option(
        None,
        "--system",
        "-s",
        help="System prompt placed before the thinking instruction"
    )
):
    """Interactive chat with streamed thinking and responses."""
    async def _turn(provider, history: list[ChatMessage]) -> str | None:
        raw: list[str] = []
        state = {"thinking": "", "response": None, "error": None}

        with Live(Text(""), console=console, refresh_per_second=12) as live:
            def on_token(token: str) -> None:
                raw.append(token)
                live.update(_render(state["thinking"], "".join(raw)))

            def on_thinking(thinking: str) -> None:
                state["thinking"] = thinking

            def on_complete(response: str) -> None:
                state["response"] = response
                live.update(_render(state["thinking"], response))

            def on_error(error: Exception) -> None:
                state["error"] = error

            await provider.stream_completion(
                history,
                model,
                StreamCallbacks(
                    on_token=on_token,
                    on_thinking=on_thinking,
                    on_complete=on_complete,
                    on_error=on_error,
                ),
                system_prompt=system,
            )

        if state["error"] is not None:
            console.print(f"[red]Error: {state['error']}[/red]")
        return state["response"]

    async def _chat():
        provider = require_provider(console)
        history: list[ChatMessage] = []

        console.print(f"[bold cyan]Facade Chat[/bold cyan] [dim]({MODEL_CATALOG[model].name})[/dim]")
        console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue

                if user_input.strip().lower() in ('exit', 'quit', 'q'):
                    console.print("[dim]Goodbye![/dim]")
                    break

                history.append(ChatMessage(role="user", content=user_input))
                response = await _turn(provider, history)
                if response is None:
                    # Drop the unanswered message so the next turn can retry
                    history.pop()
                else:
                    history.append(ChatMessage(role="assistant", content=response))
                console.print()
        finally:
            await provider.close()

    asyncio.run(_chat())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes")
):
    """Serve the chat HTTP API (/api/chat, /api/stream, /api/models)."""
    import uvicorn

    console.print(f"[dim]Serving on http://{host}:{port}[/dim]")
    uvicorn.run(
        "facade.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
