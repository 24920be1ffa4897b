"""
Indentation normalizer for neoteric

Turns the raw token stream into the logical stream the parser consumes.

Based on Python's indentation model:
- Track stack of indentation levels
- Emit INDENT when level increases
- Emit DEDENT when level decreases
- Blank and comment-only lines never touch the stack
- Inside (), {} and [] whitespace is invisible, so argument lists can be
  wrapped freely
"""

import logging
from enum import Enum, auto
from typing import Iterable, Iterator, List, Optional

from .token_types import CLOSERS, OPENERS, Span, TT, Tok

logger = logging.getLogger(__name__)

INVALID_INDENTATION = "Invalid indentation"

# Dropped everywhere except NEWLINE, which separates lines outside brackets
_BLANKS = (TT.SPACES, TT.NEWLINE, TT.COMMENT)


class LineState(Enum):
    """Where the normalizer is relative to the current line"""

    START_OF_INPUT = auto()
    START_OF_LINE = auto()
    IN_LINE = auto()
    SUPPRESSED = auto()  # inside an explicit bracket group, see depth


class Normalizer:
    """
    Single-pass state machine from raw tokens to logical tokens.

    One instance handles one run; process() resets it first.
    """

    def __init__(self, close_blocks_at_eof: bool = False):
        self.close_blocks_at_eof = close_blocks_at_eof
        self.reset()

    def reset(self):
        self.indent_stack: List[int] = []
        self.state = LineState.START_OF_INPUT
        self.depth = 0
        self.pending: Optional[Tok] = None  # SPACES seen before the line's content
        self.end = 0

    # ========================================================================
    # Main Loop
    # ========================================================================

    def process(self, tokens: Iterable[Tok]) -> Iterator[Tok]:
        """Yield the logical token stream for tokens"""
        self.reset()

        for tok in tokens:
            self.end = tok.span.end

            if tok.type == TT.ERROR:
                yield tok
                continue

            if self.state in (LineState.START_OF_INPUT, LineState.START_OF_LINE):
                yield from self.at_line_start(tok)
            elif self.state == LineState.IN_LINE:
                yield from self.in_line(tok)
            else:
                yield from self.suppressed(tok)

        if self.close_blocks_at_eof:
            eof = Span(self.end, self.end)
            while self.indent_stack:
                self.indent_stack.pop()
                yield Tok(TT.DEDENT, None, eof)

    # ========================================================================
    # Transitions
    # ========================================================================

    def at_line_start(self, tok: Tok) -> Iterator[Tok]:
        if tok.type == TT.SPACES:
            if self.pending is None:
                self.pending = tok
            else:
                self.pending = Tok(
                    TT.SPACES,
                    self.pending.value + tok.value,
                    Span(self.pending.span.start, tok.span.end),
                )
            return

        if tok.type == TT.COMMENT:
            return

        if tok.type == TT.NEWLINE:
            # Blank line
            self.pending = None
            return

        yield from self.measure(tok)
        self.pending = None
        yield from self.enter(tok)

    def in_line(self, tok: Tok) -> Iterator[Tok]:
        if tok.type in (TT.SPACES, TT.COMMENT):
            return

        if tok.type == TT.NEWLINE:
            yield tok
            self.state = LineState.START_OF_LINE
            return

        yield from self.enter(tok)

    def suppressed(self, tok: Tok) -> Iterator[Tok]:
        if tok.type in _BLANKS:
            return

        yield tok

        if tok.type in OPENERS:
            self.depth += 1
        elif tok.type in CLOSERS:
            self.depth -= 1
            if self.depth == 0:
                self.state = LineState.IN_LINE

    def enter(self, tok: Tok) -> Iterator[Tok]:
        """Emit a content token and move into the line (or a bracket group)"""
        yield tok

        if tok.type in OPENERS:
            self.depth = 1
            self.state = LineState.SUPPRESSED
        else:
            self.state = LineState.IN_LINE

    # ========================================================================
    # Indentation Handling
    # ========================================================================

    def measure(self, tok: Tok) -> Iterator[Tok]:
        """
        Compare the line's indentation with the stack top.
        Emit INDENT/DEDENT tokens as needed, or an ERROR token when the
        line dedents to a width that was never pushed.
        """
        if self.pending is not None:
            width = len(self.pending.value)
            span = self.pending.span
        else:
            width = 0
            span = Span(tok.span.start, tok.span.start)

        top = self.indent_stack[-1] if self.indent_stack else 0

        if width > top:
            self.indent_stack.append(width)
            logger.debug("indent to %d at %r, stack %s", width, span, self.indent_stack)
            yield Tok(TT.INDENT, None, span)

        elif width < top:
            popped = 0
            while self.indent_stack and self.indent_stack[-1] > width:
                self.indent_stack.pop()
                popped += 1

            level = self.indent_stack[-1] if self.indent_stack else 0
            if level != width:
                logger.debug("invalid dedent to %d at %r, stack %s", width, span, self.indent_stack)
                yield Tok(TT.ERROR, INVALID_INDENTATION, span)
                return

            logger.debug("dedent %d level(s) to %d at %r", popped, width, span)
            for _ in range(popped):
                yield Tok(TT.DEDENT, None, span)


def normalize(tokens: Iterable[Tok], close_blocks_at_eof: bool = False) -> List[Tok]:
    """Convenience function to normalize a raw token stream"""
    return list(Normalizer(close_blocks_at_eof=close_blocks_at_eof).process(tokens))
