"""
Token Types for the neoteric front end

Shared between the scanner, the indentation normalizer and the parser to
avoid circular dependencies.
"""

from typing import Any, NamedTuple
from dataclasses import dataclass
from enum import Enum, auto


class Span(NamedTuple):
    """Half-open [start, end) offset range into the source text"""

    start: int
    end: int

    def __repr__(self):
        return f"{self.start}..{self.end}"


class TT(Enum):
    """Token Types - mirrors the scanner terminals"""

    # Atoms
    IDENTIFIER = auto()
    STRING = auto()

    # Delimiters
    PAREN_OPEN = auto()
    PAREN_CLOSE = auto()
    CURLY_OPEN = auto()
    CURLY_CLOSE = auto()
    BRACKET_OPEN = auto()
    BRACKET_CLOSE = auto()

    # Whitespace
    NEWLINE = auto()
    SPACES = auto()
    COMMENT = auto()

    # Unscannable input / invalid indentation
    ERROR = auto()

    # Synthetic, only produced by the normalizer
    INDENT = auto()
    DEDENT = auto()


OPENERS = frozenset({TT.PAREN_OPEN, TT.CURLY_OPEN, TT.BRACKET_OPEN})
CLOSERS = frozenset({TT.PAREN_CLOSE, TT.CURLY_CLOSE, TT.BRACKET_CLOSE})

# Opening delimiter -> the closer the parser requires
MATCHING_CLOSER = {
    TT.PAREN_OPEN: TT.PAREN_CLOSE,
    TT.CURLY_OPEN: TT.CURLY_CLOSE,
    TT.BRACKET_OPEN: TT.BRACKET_CLOSE,
}


@dataclass(frozen=True)
class Tok:
    """Token with its source span"""

    type: TT
    value: Any
    span: Span

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.span!r})"
