"""Streaming session controller.

Drives one streaming completion: transport chunks are reassembled into
frames, frames are decoded into token deltas, and the deltas are accumulated
and split into thinking and response text while the consumer's callbacks
are fired in decode order.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from ..errors import FacadeError, StreamCancelledError, TransportError, ValidationError
from ..llm.models import ChatMessage, ModelDescriptor, StreamCallbacks, ThinkingResult
from ..llm.request import validate_request
from .decoder import FrameKind, decode_frame
from .reassembler import LineReassembler
from .splitter import ThinkTagParser

logger = logging.getLogger(__name__)

# Opens the backend stream for already validated messages and yields raw chunks
ChunkSource = Callable[[list[ChatMessage], ModelDescriptor], AsyncIterator[bytes | str]]


class CancellationToken:
    """Cooperative cancellation flag shared between a consumer and a session.

    The session checks the token around every awaited chunk, so an abandoned
    request stops reading from the backend at the next suspension point.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class StreamingSession:
    """One streaming completion request, from transport open to a terminal callback.

    A session runs once. For every run that passes validation exactly one of
    ``on_complete`` or ``on_error`` fires, and nothing fires after it.
    Exceptions raised by the consumer's own callbacks are not caught.

    Usage:
        session = StreamingSession(provider.open_stream)
        await session.run(messages, "NOUS_DEEPHERMES", StreamCallbacks(on_token=print))
    """

    def __init__(self, open_stream: ChunkSource) -> None:
        self._open_stream = open_stream
        self._reassembler = LineReassembler()
        self._parser = ThinkTagParser()
        self._last_thinking = ""
        self._started = False
        self._finished = False
        self.result: ThinkingResult | None = None

    @property
    def finished(self) -> bool:
        """Whether a terminal callback has been delivered."""
        return self._finished

    async def run(
        self,
        messages: Any,
        model_key: Any,
        callbacks: StreamCallbacks,
        cancel: CancellationToken | None = None,
    ) -> None:
        """Stream a completion and report it through ``callbacks``.

        Args:
            messages: Conversation as ChatMessage instances or wire-shaped dicts
            model_key: Catalog key of the model to use
            callbacks: Consumer hooks
            cancel: Optional token to abandon the stream early
        """
        if self._started:
            raise RuntimeError("StreamingSession.run() can only be called once")
        self._started = True

        try:
            parsed, model = validate_request(messages, model_key)
        except ValidationError as e:
            logger.info("Rejected streaming request: %s", e)
            self._fail(callbacks, e)
            return

        logger.debug("Opening stream for %s (%d messages)", model.id, len(parsed))
        chunks = self._open_stream(parsed, model)
        try:
            await self._consume(chunks, callbacks, cancel)
        except asyncio.CancelledError:
            self._fail(callbacks, StreamCancelledError("Stream task cancelled"))
            raise
        except (TransportError, StreamCancelledError) as e:
            self._fail(callbacks, e)
            return
        finally:
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()

        self.result = self._parser.result()
        self._finished = True
        logger.debug(
            "Stream for %s complete: %d chars thinking, %d chars response",
            model.id, len(self.result.thinking), len(self.result.response),
        )
        if callbacks.on_complete:
            callbacks.on_complete(self.result.response)

    async def _consume(
        self,
        chunks: AsyncIterator[bytes | str],
        callbacks: StreamCallbacks,
        cancel: CancellationToken | None,
    ) -> None:
        while True:
            self._check_cancelled(cancel)
            chunk = await self._next_chunk(chunks)
            self._check_cancelled(cancel)

            if chunk is None:
                # Transport ended without the sentinel; the last line may lack a newline
                self._handle_lines(self._reassembler.flush(), callbacks)
                return
            if self._handle_lines(self._reassembler.feed(chunk), callbacks):
                return

    async def _next_chunk(self, chunks: AsyncIterator[bytes | str]) -> bytes | str | None:
        try:
            return await chunks.__anext__()
        except StopAsyncIteration:
            return None
        except FacadeError:
            raise
        except Exception as e:
            raise TransportError(f"Stream interrupted: {e}") from e

    def _handle_lines(self, lines: list[str], callbacks: StreamCallbacks) -> bool:
        """Process complete frames. Returns True once the terminal sentinel is seen."""
        for line in lines:
            event = decode_frame(line)
            if event is None:
                continue
            if event.kind is FrameKind.DONE:
                return True
            self._handle_token(event.token, callbacks)
        return False

    def _handle_token(self, delta: str, callbacks: StreamCallbacks) -> None:
        if callbacks.on_token:
            callbacks.on_token(delta)

        self._parser.feed(delta)
        thinking = self._parser.thinking
        if thinking and thinking != self._last_thinking:
            self._last_thinking = thinking
            if callbacks.on_thinking:
                callbacks.on_thinking(thinking)

    def _check_cancelled(self, cancel: CancellationToken | None) -> None:
        if cancel is not None and cancel.cancelled:
            raise StreamCancelledError()

    def _fail(self, callbacks: StreamCallbacks, error: Exception) -> None:
        if self._finished:
            return
        self._finished = True
        if not isinstance(error, ValidationError):
            logger.warning("Stream failed: %s", error)
        if callbacks.on_error:
            callbacks.on_error(error)
