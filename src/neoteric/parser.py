"""
Recursive Descent Parser for neoteric

Structure:
- Lexer: raw token stream from source (lexer.py)
- Normalizer: INDENT/DEDENT synthesis, whitespace elision (indenter.py)
- Parser: recursive descent over the logical stream, one token of lookahead
  plus one more for neoteric adjacency
- AST: atom tree (atoms.py)

Grammar:
    toplevel      := Indent? group-body Dedent? EOF
    group-body    := line-group*
    line-group    := atom+ ( Newline ( Indent line-group+ Dedent? )? )?
    atom          := bracket-group | neoteric | Identifier | String
    bracket-group := '(' atom* ')' | '{' atom* '}' | '[' atom* ']'
    neoteric      := Identifier bracket-group   -- no gap between them
"""

import logging
from typing import Iterable, List, Optional

from .atoms import Atom, Group, GroupType, Identifier, Neoteric, String, atom_span
from .indenter import normalize
from .lexer import tokenize
from .token_types import MATCHING_CLOSER, OPENERS, Span, TT, Tok
from .utils import line_col

logger = logging.getLogger(__name__)

GROUP_TYPES = {
    TT.PAREN_OPEN: GroupType.PARENTHESIS,
    TT.CURLY_OPEN: GroupType.CURLY,
    TT.BRACKET_OPEN: GroupType.BRACKET,
}

ATOM_START = OPENERS | {TT.IDENTIFIER, TT.STRING}

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with span info"""

    def __init__(self, message: str, span: Span):
        self.message = message
        self.span = span
        self.line: Optional[int] = None
        self.column: Optional[int] = None
        super().__init__(message)

    def attach_source(self, source: str) -> None:
        """Resolve the span start to a 1-based line and column"""
        self.line, self.column = line_col(source, self.span.start)

    def __str__(self):
        if self.line is not None:
            return f"{self.message} at line {self.line}, col {self.column}"
        return f"{self.message} at {self.span!r}"


class MismatchedToken(ParseError):
    def __init__(self, expected: TT, found: Tok):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected.name}, got {found.type.name}", found.span)


class ExpectedTokenFoundEndOfInput(ParseError):
    def __init__(self, expected: TT, position: int):
        self.expected = expected
        self.position = position
        super().__init__(f"Expected {expected.name}, got end of input", Span(position, position))


class ExpectedEndOfInputFoundToken(ParseError):
    def __init__(self, found: Tok):
        self.found = found
        super().__init__(f"Expected end of input, got {found.type.name}", found.span)


class InvalidInput(ParseError):
    """An ERROR token from scanning or indentation reached the parser"""

    def __init__(self, token: Tok):
        self.reason = token.value
        super().__init__(str(token.value), token.span)


class NestingTooDeep(ParseError):
    """Groups or blocks nested deeper than the interpreter stack allows"""

    def __init__(self, span: Span):
        super().__init__("Nesting too deep", span)


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser over logical tokens.

    Every ERROR token is a hard failure at the point lookahead first reaches
    it; no backtracking, no recovery.
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Optional[Tok]:
        """Look ahead at token, None past the end"""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return None

        tok = self.tokens[idx]
        if tok.type == TT.ERROR:
            raise InvalidInput(tok)
        return tok

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        tok = self.peek()
        assert tok is not None, "advance() past end of input"
        self.pos += 1
        return tok

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        tok = self.peek()
        return tok is not None and tok.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT) -> Tok:
        """Consume token of expected type or raise error"""
        tok = self.peek()
        if tok is None:
            raise ExpectedTokenFoundEndOfInput(token_type, self.last_end())
        if tok.type != token_type:
            raise MismatchedToken(token_type, tok)
        return self.advance()

    def last_end(self) -> int:
        """End offset of the last consumed token, 0 before the first"""
        if self.pos == 0:
            return 0
        return self.tokens[self.pos - 1].span.end

    def current_span(self) -> Span:
        """Span of the token under the cursor, zero-width at the end"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos].span
        end = self.last_end()
        return Span(end, end)

    def atom_start(self) -> bool:
        return self.check(*ATOM_START)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Atom]:
        """Parse the whole stream into top-level atoms"""
        # the whole source might be indented
        is_indented = self.match(TT.INDENT)

        children: List[Atom] = []
        while self.atom_start():
            children.append(self.parse_line_group())

        if is_indented:
            self.match(TT.DEDENT)

        tok = self.peek()
        if tok is not None:
            raise ExpectedEndOfInputFoundToken(tok)

        return children

    def parse_line_group(self) -> Atom:
        """
        Parse one line and the indented block hanging off it.

        The block's line groups become one trailing child: the lone atom for
        a one-line block, an INDENTATION group otherwise. A single collected
        atom is returned as is; anything else becomes an INDENTATION group.
        """
        children: List[Atom] = []

        while self.atom_start():
            children.append(self.parse_atom())

        if self.match(TT.NEWLINE) and self.match(TT.INDENT):
            block: List[Atom] = []
            while self.atom_start():
                block.append(self.parse_line_group())
            self.match(TT.DEDENT)

            if len(block) == 1:
                children.append(block[0])
            elif block:
                children.append(self.indentation_group(block))

        if len(children) == 1:
            return children[0]

        return self.indentation_group(children)

    def indentation_group(self, children: List[Atom]) -> Group:
        if children:
            start = atom_span(children[0]).start
            end = atom_span(children[-1]).end
        else:
            tok = self.tokens[self.pos] if self.pos < len(self.tokens) else None
            start = end = tok.span.start if tok is not None else self.last_end()

        return Group(GroupType.INDENTATION, children, Span(start, start), Span(end, end))

    # ========================================================================
    # Atoms
    # ========================================================================

    def parse_atom(self) -> Atom:
        tok = self.peek()
        if tok is None:
            raise ExpectedTokenFoundEndOfInput(TT.IDENTIFIER, self.last_end())

        if tok.type in OPENERS:
            return self.parse_explicit_group()

        if tok.type == TT.IDENTIFIER:
            self.advance()
            ident = Identifier(tok.value, tok.span)

            nxt = self.peek()
            if nxt is not None and nxt.type in OPENERS and nxt.span.start == tok.span.end:
                return Neoteric(ident, self.parse_explicit_group())
            return ident

        if tok.type == TT.STRING:
            self.advance()
            return String(tok.value, tok.span)

        raise MismatchedToken(TT.IDENTIFIER, tok)

    def parse_explicit_group(self) -> Group:
        """Parse (...), {...} or [...]; line breaks inside were already dropped"""
        opener = self.peek()
        if opener is None:
            raise ExpectedTokenFoundEndOfInput(TT.PAREN_OPEN, self.last_end())
        if opener.type not in OPENERS:
            raise MismatchedToken(TT.PAREN_OPEN, opener)
        self.advance()

        children: List[Atom] = []
        while self.atom_start():
            children.append(self.parse_atom())

        closer = self.expect(MATCHING_CLOSER[opener.type])
        return Group(GROUP_TYPES[opener.type], children, opener.span, closer.span)


# ============================================================================
# Entry Points
# ============================================================================

def parse_tokens(tokens: Iterable[Tok], close_blocks_at_eof: bool = False) -> List[Atom]:
    """Normalize a raw token stream and parse it"""
    parser = Parser(normalize(tokens, close_blocks_at_eof=close_blocks_at_eof))
    try:
        try:
            return parser.parse()
        except RecursionError as exc:
            raise NestingTooDeep(parser.current_span()) from exc
    except ParseError as err:
        logger.debug("parse failed at %r: %s", err.span, err.message)
        raise


def parse_source(source: str, close_blocks_at_eof: bool = False) -> List[Atom]:
    """
    Parse neoteric source text to top-level atoms.

    Errors raised from here carry line/column info for source.
    """
    try:
        return parse_tokens(tokenize(source), close_blocks_at_eof=close_blocks_at_eof)
    except ParseError as err:
        err.attach_source(source)
        raise
