"""Decode Server-Sent-Events frames from a chat-completions stream."""

import json
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class FrameKind(str, Enum):
    """What a decoded frame means to the session."""

    TOKEN = "token"  # Incremental response text
    DONE = "done"    # Terminal sentinel


@dataclass(frozen=True)
class FrameEvent:
    kind: FrameKind
    token: str = ""


DONE_EVENT = FrameEvent(FrameKind.DONE)


def decode_frame(line: str) -> FrameEvent | None:
    """Classify one frame.

    Returns ``None`` for anything that carries no token: comments, other SSE
    fields, malformed JSON and records without ``choices[0].delta.content``.
    Never raises.
    """
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]

    if payload.strip() == DONE_SENTINEL:
        return DONE_EVENT

    try:
        record = json.loads(payload)
    except (ValueError, RecursionError):
        logger.debug("Dropping malformed frame: %.200s", payload)
        return None

    token = _extract_delta(record)
    if not token:
        return None
    return FrameEvent(FrameKind.TOKEN, token)


def _extract_delta(record: object) -> str | None:
    if not isinstance(record, dict):
        return None
    choices = record.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None
