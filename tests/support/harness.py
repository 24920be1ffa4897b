from __future__ import annotations

from textwrap import dedent
from typing import List, Tuple

from neoteric.atoms import Atom, Group, GroupType, Identifier, Neoteric, String
from neoteric.indenter import normalize
from neoteric.lexer import tokenize
from neoteric.parser import ParseError, parse_source
from neoteric.token_types import TT, Tok

__all__ = [
    "MIXED_SOURCE",
    "ParseError",
    "SAMPLE_SOURCES",
    "block",
    "bracket",
    "curly",
    "ident",
    "logical_tokens",
    "logical_types",
    "neo",
    "paren",
    "parse",
    "raw_pairs",
    "string",
]


# ============================================================================
# Pipelines
# ============================================================================

def parse(source: str, close_blocks_at_eof: bool = False) -> List[Atom]:
    return parse_source(source, close_blocks_at_eof=close_blocks_at_eof)


def raw_pairs(source: str) -> List[Tuple[TT, object]]:
    return [(tok.type, tok.value) for tok in tokenize(source)]


def logical_tokens(source: str, close_blocks_at_eof: bool = False) -> List[Tok]:
    return normalize(tokenize(source), close_blocks_at_eof=close_blocks_at_eof)


def logical_types(source: str, close_blocks_at_eof: bool = False) -> List[TT]:
    return [tok.type for tok in logical_tokens(source, close_blocks_at_eof)]


# ============================================================================
# Expected-tree builders (spans do not take part in equality)
# ============================================================================

def ident(text: str) -> Identifier:
    return Identifier(text)


def string(text: str) -> String:
    return String(text)


def paren(*children: Atom) -> Group:
    return Group(GroupType.PARENTHESIS, list(children))


def curly(*children: Atom) -> Group:
    return Group(GroupType.CURLY, list(children))


def bracket(*children: Atom) -> Group:
    return Group(GroupType.BRACKET, list(children))


def block(*children: Atom) -> Group:
    return Group(GroupType.INDENTATION, list(children))


def neo(name: str, rhs: Group) -> Neoteric:
    return Neoteric(Identifier(name), rhs)


MIXED_SOURCE = dedent(
    """
    define test (a b)
        (print "hello")
        (another-thing 1 2)

    test{1 + 3}

    (test {1 + 3})"""
)

# Well-formed inputs shared by the invariant sweeps
SAMPLE_SOURCES: List[str] = [
    "",
    "a",
    "(a b)",
    "f(x)",
    "f (x)",
    "test{1 + 3}",
    "xs[0] ys [1]",
    '"hello world" (print "x")',
    "()",
    "(a\n    b)",
    "(a (b\n c)\n      d) e\nf",
    "a\n  b\nc",
    "a\n  b\n    c\n  d\ne",
    "  a\n  b",
    "a ; trailing comment\n\n  ; comment-only line\n  b\n",
    dedent(
        """\
        define test (a b)
            (print "hello")
            (another-thing 1 2)
        """
    ),
    MIXED_SOURCE,
    dedent(
        """\
        let (x 1
             y 2)
          when {x < y}
            print(x
                  y)
          done
        """
    ),
    "hello-world 13 (a b) (({a + 12.f}))[1] \"hello \\\"world\\\"\"\n   hello\n   äußerst entzückend",
]
