"""AST node types produced by the parser, and their evaluation.

Every argument node evaluates to a list of strings against a
:class:`VariableLookup`; a command's flattened argument list is the
concatenation of those lists.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Union

from bzlgen.cmake.domain import VarDomain
from bzlgen.cmake.tokens import Position

_ESCAPES = {
    "\\t": "\t",
    "\\r": "\r",
    "\\n": "\n",
    "\\;": "\\;",
}

# Escapes left encoded in unquoted text until the list has been split.
_LIST_ESCAPES = frozenset({"\\;", "\\\\"})

# One list item: escaped characters (including `\;`) or anything but `;`.
_LIST_ITEM = re.compile(r"(?:\\.|[^;\\]|\\\Z)+", re.DOTALL)
_LIST_ESCAPE = re.compile(r"\\([;\\])")


class VariableLookup(Protocol):
    """Source of variable values used during evaluation."""

    def get(self, key: str) -> str: ...

    def get_cache(self, key: str) -> str: ...

    def get_env(self, key: str) -> str: ...


def decode_escape(sequence: str, unquoted: bool = False) -> str:
    """Decode a single two character escape sequence such as ``\\n``.

    With ``unquoted``, ``\\;`` and ``\\\\`` stay encoded so that
    :func:`split_list` can still tell an escaped backslash from an escaped
    semicolon.
    """
    if unquoted and sequence in _LIST_ESCAPES:
        return sequence
    return _ESCAPES.get(sequence, sequence[1:])


def split_list(value: str) -> List[str]:
    """Split ``value`` on unescaped semicolons, dropping empty items.

    ``\\;`` and ``\\\\`` are decoded in each item after splitting.

    >>> split_list("a;b\\\\;c;;d")
    ['a', 'b;c', 'd']
    """
    return [_LIST_ESCAPE.sub(r"\1", item) for item in _LIST_ITEM.findall(value)]


@dataclass
class VariableElement:
    """Literal text optionally followed by a nested reference."""

    text: str = ""
    ref: Optional["VariableReference"] = None

    def eval(self, lookup: VariableLookup) -> str:
        if self.ref is None:
            return self.text
        return self.text + self.ref.eval(lookup)


@dataclass
class VariableReference:
    """``${name}`` style reference; the name may itself contain references."""

    elements: List[VariableElement]
    domain_name: str = ""
    position: Position = field(default_factory=Position, compare=False)

    @property
    def domain(self) -> VarDomain:
        return VarDomain.capture(self.domain_name)

    def name(self, lookup: VariableLookup) -> str:
        return "".join(element.eval(lookup) for element in self.elements)

    def eval(self, lookup: VariableLookup) -> str:
        domain = self.domain
        name = self.name(lookup)
        if domain is VarDomain.CACHE:
            return lookup.get_cache(name)
        if domain is VarDomain.ENV:
            return lookup.get_env(name)
        return lookup.get(name)


@dataclass
class QuotedElement:
    text: str = ""
    ref: Optional[VariableReference] = None

    def eval(self, lookup: VariableLookup) -> str:
        if self.ref is not None:
            return self.ref.eval(lookup)
        return self.text


@dataclass
class UnquotedElement:
    text: str = ""
    ref: Optional[VariableReference] = None

    def eval(self, lookup: VariableLookup) -> str:
        if self.ref is not None:
            return self.ref.eval(lookup)
        return self.text


@dataclass
class QuotedArgument:
    """``"..."``: always a single value, even when empty."""

    elements: List[QuotedElement] = field(default_factory=list)

    def eval(self, lookup: VariableLookup) -> List[str]:
        return ["".join(element.eval(lookup) for element in self.elements)]


@dataclass
class UnquotedArgument:
    """Bare text, split into a list on unescaped semicolons after substitution."""

    elements: List[UnquotedElement] = field(default_factory=list)

    def eval(self, lookup: VariableLookup) -> List[str]:
        return split_list("".join(element.eval(lookup) for element in self.elements))


@dataclass
class BracketArgument:
    """``[=[...]=]``: raw text, no substitution."""

    text: str = ""

    def eval(self, lookup: VariableLookup) -> List[str]:
        return [self.text]


@dataclass
class ArgumentList:
    """Arguments of a command, or a parenthesized group nested inside them."""

    values: List["Argument"] = field(default_factory=list)

    def flatten(self, lookup: VariableLookup) -> List[str]:
        result: List[str] = []
        for value in self.values:
            result.extend(value.eval(lookup))
        return result

    def eval(self, lookup: VariableLookup) -> List[str]:
        return ["(", *self.flatten(lookup), ")"]


Argument = Union[ArgumentList, QuotedArgument, UnquotedArgument, BracketArgument]


@dataclass
class CommandInvocation:
    name: str
    arguments: ArgumentList = field(default_factory=ArgumentList)
    position: Position = field(default_factory=Position, compare=False)

    def eval_arguments(self, lookup: VariableLookup) -> List[str]:
        return self.arguments.flatten(lookup)


@dataclass
class CMakeFile:
    commands: List[CommandInvocation] = field(default_factory=list)


__all__ = [
    "VariableLookup",
    "decode_escape",
    "split_list",
    "VariableElement",
    "VariableReference",
    "QuotedElement",
    "UnquotedElement",
    "QuotedArgument",
    "UnquotedArgument",
    "BracketArgument",
    "ArgumentList",
    "Argument",
    "CommandInvocation",
    "CMakeFile",
]
