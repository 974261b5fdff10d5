"""Re-emit a streaming session to the UI layer as Server-Sent Events.

Frames are ``data: {"type": ..., "content": ...}`` for token, thinking and
complete events, ``data: {"type": "error", "error": ...}`` for failures, and
a final ``data: [DONE]`` after a successful completion.
"""

import asyncio
import contextlib
import json
from collections.abc import AsyncIterator, Awaitable, Callable

from ..llm.models import StreamCallbacks
from .session import CancellationToken

DONE_FRAME = "data: [DONE]\n\n"

SessionRunner = Callable[[StreamCallbacks, CancellationToken], Awaitable[None]]


def encode_event(event_type: str, content: str) -> str:
    """Encode a token, thinking or complete event."""
    return f"data: {json.dumps({'type': event_type, 'content': content})}\n\n"


def encode_error(message: str) -> str:
    return f"data: {json.dumps({'type': 'error', 'error': message})}\n\n"


async def stream_events(run: SessionRunner) -> AsyncIterator[str]:
    """Run a session in a task and yield its callbacks as SSE frames.

    Closing the generator early (client disconnect) cancels the session
    through its cancellation token.

    Args:
        run: Coroutine function that starts the session with the given
            callbacks and cancellation token
    """
    queue: asyncio.Queue[str | None] = asyncio.Queue()

    def on_complete(response: str) -> None:
        queue.put_nowait(encode_event("complete", response))
        queue.put_nowait(DONE_FRAME)

    callbacks = StreamCallbacks(
        on_token=lambda token: queue.put_nowait(encode_event("token", token)),
        on_thinking=lambda thinking: queue.put_nowait(encode_event("thinking", thinking)),
        on_complete=on_complete,
        on_error=lambda error: queue.put_nowait(encode_error(str(error))),
    )
    cancel = CancellationToken()
    task = asyncio.create_task(run(callbacks, cancel))
    task.add_done_callback(lambda _: queue.put_nowait(None))

    try:
        while True:
            frame = await queue.get()
            if frame is None:
                break
            yield frame

        if not task.cancelled() and task.exception() is not None:
            yield encode_error(str(task.exception()))
    finally:
        cancel.cancel()
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
