"""Incremental response protocol: chunks to frames to tokens to thinking/response."""

from .decoder import DONE_EVENT, FrameEvent, FrameKind, decode_frame
from .reassembler import LineReassembler
from .session import CancellationToken, ChunkSource, StreamingSession
from .splitter import ThinkTagParser, split_thinking
from .sse import DONE_FRAME, encode_error, encode_event, stream_events

__all__ = [
    "DONE_EVENT",
    "DONE_FRAME",
    "CancellationToken",
    "ChunkSource",
    "FrameEvent",
    "FrameKind",
    "LineReassembler",
    "StreamingSession",
    "ThinkTagParser",
    "decode_frame",
    "encode_error",
    "encode_event",
    "split_thinking",
    "stream_events",
]
