"""Separate the ``<think>`` reasoning region from the answer text.

``split_thinking`` is the pure reference function over a complete buffer.
``ThinkTagParser`` produces the same result while text arrives token by
token, scanning each character only about once instead of re-matching the
whole buffer per token.
"""

from ..llm.models import ThinkingResult
from ..llm.request import THINK_CLOSE_TAG, THINK_OPEN_TAG


def split_thinking(
    buffer: str,
    open_tag: str = THINK_OPEN_TAG,
    close_tag: str = THINK_CLOSE_TAG,
) -> ThinkingResult:
    """Split ``buffer`` into thinking and response text.

    Only the first closed region is honoured; a second one stays inside the
    response untouched. An unclosed region is left in the response as-is.

    Examples:
        >>> split_thinking("<think>step one</think>Hello")
        ThinkingResult(thinking='step one', response='Hello')
        >>> split_thinking("<think>partial").response
        '<think>partial'
    """
    start = buffer.find(open_tag)
    if start != -1:
        end = buffer.find(close_tag, start + len(open_tag))
        if end != -1:
            return ThinkingResult(
                thinking=buffer[start + len(open_tag):end].strip(),
                response=(buffer[:start] + buffer[end + len(close_tag):]).strip(),
            )
    return ThinkingResult(thinking="", response=buffer.strip())


class ThinkTagParser:
    """Incremental equivalent of :func:`split_thinking`.

    Remembers whether the opening tag has been seen and only scans newly
    appended text (plus a tag-length overlap, for tags split across
    deltas) while looking for the next tag.
    """

    def __init__(
        self,
        open_tag: str = THINK_OPEN_TAG,
        close_tag: str = THINK_CLOSE_TAG,
    ) -> None:
        self.open_tag = open_tag
        self.close_tag = close_tag
        self._text = ""
        self._scan_from = 0
        self._open_at: int | None = None
        self._close_at: int | None = None
        self._thinking = ""

    @property
    def text(self) -> str:
        """Everything fed so far."""
        return self._text

    @property
    def closed(self) -> bool:
        """Whether a complete thinking region has been seen."""
        return self._close_at is not None

    @property
    def thinking(self) -> str:
        """Trimmed thinking text, empty until the closing tag arrives."""
        return self._thinking

    def feed(self, delta: str) -> None:
        """Append a token delta and advance the tag search."""
        if not delta:
            return
        self._text += delta

        if self._close_at is not None:
            return

        text = self.text
        if self._open_at is None:
            found = text.find(self.open_tag, self._scan_from)
            if found == -1:
                self._scan_from = max(0, len(text) - len(self.open_tag) + 1)
                return
            self._open_at = found
            self._scan_from = found + len(self.open_tag)

        found = text.find(self.close_tag, self._scan_from)
        if found == -1:
            self._scan_from = max(
                self._open_at + len(self.open_tag),
                len(text) - len(self.close_tag) + 1,
            )
            return
        self._close_at = found
        self._thinking = text[self._open_at + len(self.open_tag):found].strip()

    def result(self) -> ThinkingResult:
        """Current split of everything fed so far."""
        text = self.text
        if self._close_at is None:
            return ThinkingResult(thinking="", response=text.strip())
        return ThinkingResult(
            thinking=self.thinking,
            response=(text[:self._open_at] + text[self._close_at + len(self.close_tag):]).strip(),
        )
