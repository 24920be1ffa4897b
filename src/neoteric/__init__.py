"""neoteric: indentation-aware reader for s-expressions with neoteric call sugar."""

from .atoms import (
    Atom,
    Group,
    GroupType,
    Identifier,
    Neoteric,
    String,
    atom_span,
    pretty,
    to_sexpr,
    to_tree,
    walk,
)
from .indenter import LineState, Normalizer, normalize
from .lexer import Lexer, tokenize
from .parser import (
    ExpectedEndOfInputFoundToken,
    ExpectedTokenFoundEndOfInput,
    InvalidInput,
    MismatchedToken,
    NestingTooDeep,
    ParseError,
    Parser,
    parse_source,
    parse_tokens,
)
from .token_types import TT, Span, Tok
from .utils import byte_len, format_diagnostic, line_col, source_bytes, span_text

__version__ = "0.1.0"
