from __future__ import annotations

from typing import Tuple

from typing_extensions import Protocol

from .token_types import Span

# Spans index this encoding of the source text
ENCODING = "utf-8"


class SpannedError(Protocol):
    message: str
    span: Span


def source_bytes(source: str) -> bytes:
    return source.encode(ENCODING, "surrogatepass")


def byte_len(text: str) -> int:
    return len(source_bytes(text))


def _display(data: bytes) -> str:
    return data.decode(ENCODING, "replace")


def span_text(source: str, span: Span) -> str:
    """Source text covered by a span."""
    return source_bytes(source)[span.start:span.end].decode(ENCODING, "surrogatepass")


def line_col(source: str, offset: int) -> Tuple[int, int]:
    """Translate a byte offset into a 1-based (line, column) pair; columns count characters."""
    data = source_bytes(source)
    offset = max(0, min(offset, len(data)))
    line = data.count(b"\n", 0, offset) + 1
    line_start = data.rfind(b"\n", 0, offset) + 1
    return line, len(_display(data[line_start:offset])) + 1


def format_diagnostic(source: str, err: SpannedError) -> str:
    """Render an error as a message, the offending source line and a caret underline."""
    data = source_bytes(source)
    start = max(0, min(err.span.start, len(data)))
    line, column = line_col(source, start)

    line_start = data.rfind(b"\n", 0, start) + 1
    line_end = data.find(b"\n", start)
    if line_end == -1:
        line_end = len(data)

    text = _display(data[line_start:line_end]).rstrip("\r")
    marked = _display(data[start:max(start, min(err.span.end, line_end))])

    # tabs in front of the error are copied so the caret stays under its column
    padding = "".join(ch if ch == "\t" else " " for ch in _display(data[line_start:start]))
    underline = padding + "^" * max(1, len(marked))

    return f"line {line}, col {column}: {err.message}\n{text}\n{underline}"
