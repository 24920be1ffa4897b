"""Atom tree produced by the parser, plus helpers for walking and printing it.

Spans are carried on every node for diagnostics but never take part in
equality, so trees built from different source layouts compare equal when
their shape and text agree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, List, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, assert_never

from .token_types import Span

NO_SPAN = Span(0, 0)


class GroupType(Enum):
    INDENTATION = auto()  # synthesized from an indented block
    PARENTHESIS = auto()
    CURLY = auto()
    BRACKET = auto()


DELIMITERS = {
    GroupType.INDENTATION: ("(", ")"),
    GroupType.PARENTHESIS: ("(", ")"),
    GroupType.CURLY: ("{", "}"),
    GroupType.BRACKET: ("[", "]"),
}


@dataclass
class Identifier:
    """Any run of characters that is not a string, bracket or whitespace"""

    text: str
    span: Span = field(default=NO_SPAN, compare=False, repr=False)


@dataclass
class String:
    """Text between two double quotes, escapes left as written"""

    text: str
    span: Span = field(default=NO_SPAN, compare=False, repr=False)


@dataclass
class Group:
    group_type: GroupType
    children: List[Atom] = field(default_factory=list)
    start_span: Span = field(default=NO_SPAN, compare=False, repr=False)
    end_span: Span = field(default=NO_SPAN, compare=False, repr=False)

    @property
    def span(self) -> Span:
        return Span(self.start_span.start, self.end_span.end)


@dataclass
class Neoteric:
    """Call sugar: an atom directly followed by an explicit group, as in f(x)"""

    lhs: Atom
    rhs: Group


Atom: TypeAlias = Union[Identifier, String, Group, Neoteric]


def atom_span(atom: Atom) -> Span:
    match atom:
        case Identifier(span=span) | String(span=span):
            return span
        case Group():
            return atom.span
        case Neoteric(lhs=lhs, rhs=rhs):
            return Span(atom_span(lhs).start, rhs.span.end)
        case _:
            assert_never(atom)


def walk(atoms: Iterable[Atom]) -> Iterator[Atom]:
    """Yield every atom in tree order (pre-order, left to right)."""
    for atom in atoms:
        yield atom
        match atom:
            case Identifier() | String():
                pass
            case Group(children=children):
                yield from walk(children)
            case Neoteric(lhs=lhs, rhs=rhs):
                yield from walk((lhs, rhs))
            case _:
                assert_never(atom)


# ============================================================================
# Printing
# ============================================================================

def to_tree(atoms: Iterable[Atom]) -> Tree:
    """Convert top-level atoms into a lark Tree rooted at 'toplevel'."""
    return Tree("toplevel", [_atom_to_node(atom) for atom in atoms])


def _atom_to_node(atom: Atom) -> Union[Tree, Token]:
    match atom:
        case Identifier(text=text, span=span):
            return Token("IDENTIFIER", text, start_pos=span.start, end_pos=span.end)
        case String(text=text, span=span):
            return Token("STRING", text, start_pos=span.start, end_pos=span.end)
        case Group(group_type=group_type, children=children):
            return Tree(group_type.name.lower(), [_atom_to_node(ch) for ch in children])
        case Neoteric(lhs=lhs, rhs=rhs):
            return Tree("neoteric", [_atom_to_node(lhs), _atom_to_node(rhs)])
        case _:
            assert_never(atom)


def pretty(atoms: Iterable[Atom], indent: str = "  ") -> str:
    return to_tree(atoms).pretty(indent)


def to_sexpr(atoms: Union[Atom, Iterable[Atom]]) -> str:
    """
    Render atoms as canonical single-line source.

    Indentation groups come out as parentheses, neoteric sugar stays abutting
    and strings are re-quoted, so the result parses back to the same shape.
    """
    if isinstance(atoms, (Identifier, String, Group, Neoteric)):
        return _render(atoms)
    return " ".join(_render(atom) for atom in atoms)


def _render(atom: Atom) -> str:
    match atom:
        case Identifier(text=text):
            return text
        case String(text=text):
            return f'"{text}"'
        case Group(group_type=group_type, children=children):
            opener, closer = DELIMITERS[group_type]
            return opener + " ".join(_render(ch) for ch in children) + closer
        case Neoteric(lhs=lhs, rhs=rhs):
            return _render(lhs) + _render(rhs)
        case _:
            assert_never(atom)
