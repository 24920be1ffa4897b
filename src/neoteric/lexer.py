"""
Scanner for neoteric source text

Splits source text into the raw token stream consumed by the indentation
normalizer.

Features:
- Single-pass tokenization driven by a lark terminal grammar
- Every character is covered: unscannable input becomes ERROR tokens
- Whitespace and comments are kept; the normalizer decides what they mean
- Spans are UTF-8 byte offsets into the scanned source
"""

import logging
from functools import lru_cache
from typing import List

from lark import Lark, Token

from .token_types import Span, TT, Tok
from .utils import byte_len

logger = logging.getLogger(__name__)

# ============================================================================
# Terminal Grammar
# ============================================================================

# Priorities order the alternation: NEWLINE must win over SPACES for trailing
# whitespace, ERROR only matches what nothing else accepts.
GRAMMAR = r"""
start: _tok*

_tok: IDENTIFIER | STRING | COMMENT
    | PAREN_OPEN | PAREN_CLOSE
    | CURLY_OPEN | CURLY_CLOSE
    | BRACKET_OPEN | BRACKET_CLOSE
    | NEWLINE | SPACES | ERROR

NEWLINE.3: /[ \t\f]*\r?\n/
IDENTIFIER.2: /[^\s(){}\[\]";]+/
STRING.2: /"([^"\\]|\\.)*"/s
COMMENT.2: /;[^\n]*/
SPACES.2: /[ \t\f]+/

PAREN_OPEN.2: "("
PAREN_CLOSE.2: ")"
CURLY_OPEN.2: "{"
CURLY_CLOSE.2: "}"
BRACKET_OPEN.2: "["
BRACKET_CLOSE.2: "]"

ERROR.1: /./s
"""

INVALID_TOKEN = "Invalid token"


@lru_cache(maxsize=None)
def build_scanner() -> Lark:
    """Compile the terminal grammar once per process"""
    return Lark(GRAMMAR, parser="lalr", lexer="basic")


# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Raw neoteric scanner.

    Produces (kind, span) tokens covering the source contiguously:
    - IDENTIFIER: any run without whitespace, brackets, quotes or ';'
    - STRING: double quoted, value is the text between the quotes
    - COMMENT: ';' to end of line
    - NEWLINE: line break including trailing blanks before it
    - SPACES: run of blanks, value is the raw text (its length is the width)
    - ERROR: a character no other terminal accepts
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Tok] = []
        self.offset = 0  # byte offset of the next token

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        for raw in build_scanner().lex(self.source):
            self.emit(raw)

        logger.debug("scanned %d tokens from %d bytes", len(self.tokens), self.offset)
        return self.tokens

    def emit(self, raw: Token):
        """Convert a lark token and append it"""
        token_type = TT[raw.type]
        text = str(raw)

        if token_type == TT.STRING:
            value = text[1:-1]
        elif token_type == TT.ERROR:
            value = INVALID_TOKEN
        elif token_type in (TT.IDENTIFIER, TT.SPACES, TT.NEWLINE, TT.COMMENT):
            value = text
        else:
            value = None

        # tokens are contiguous, so byte spans accumulate from the encoded widths
        start = self.offset
        self.offset += byte_len(text)
        self.tokens.append(Tok(token_type, value, Span(start, self.offset)))


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()

