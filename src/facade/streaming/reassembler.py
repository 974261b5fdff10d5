import codecs


class LineReassembler:
    """Rebuild newline-delimited frames from arbitrarily split chunks.

    Holds the unterminated tail between calls, so a line whose terminator
    arrives in a later chunk is emitted once, whole, when it completes.
    Byte chunks go through an incremental UTF-8 decoder, which keeps
    multi-byte characters intact when a chunk boundary cuts through them.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """The buffered partial line."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        """Add a chunk and return the lines it completed, in order."""
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        if not chunk:
            return []

        lines = (self._buffer + chunk).split("\n")
        self._buffer = lines.pop()
        return [line.removesuffix("\r") for line in lines]

    def flush(self) -> list[str]:
        """Return the unterminated tail once the transport has ended."""
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        tail = tail.removesuffix("\r")
        return [tail] if tail else []
