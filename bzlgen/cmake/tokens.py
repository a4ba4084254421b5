"""Token model for the CMakeLists.txt lexer.

Tokens are produced by the table-driven lexer (see ``lexer.py``) and refined
by the filter layer (see ``filter.py``) before reaching the parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    """Token categories produced by the lexer."""

    EOF = "EOF"
    SPACE = "Space"
    NEWLINE = "Newline"
    ESCAPE_SEQUENCE = "EscapeSequence"
    QUOTE = "Quote"
    QUOTED = "Quoted"
    BRACKET_CONTENT = "BracketContent"
    VAR_OPEN = "VarOpen"
    VAR_CLOSE = "VarClose"
    IDENTIFIER = "Identifier"
    UNQUOTED = "Unquoted"
    PUNCT = "Punct"
    COMMENT = "Comment"


@dataclass(frozen=True)
class Position:
    """Location of a token in its source text.

    Attributes:
        offset: Character offset from the start of the input.
        line: 1-based line number.
        column: 1-based column number.
        filename: Name of the source, empty for in-memory strings.
    """

    offset: int = 0
    line: int = 1
    column: int = 1
    filename: str = ""

    def advance(self, text: str) -> "Position":
        """Return the position immediately following ``text``."""
        lines = text.count("\n")
        if lines == 0:
            column = self.column + len(text)
        else:
            column = len(text) - text.rindex("\n")
        return Position(self.offset + len(text), self.line + lines, column, self.filename)

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass
class Token:
    """A single lexical token.

    Tokens are mutable while a rule action is building them; once handed out
    by a lexer they are treated as values.
    """

    kind: TokenKind
    text: str = ""
    position: Position = field(default_factory=Position)

    def set(self, kind: TokenKind, text: str) -> None:
        self.kind = kind
        self.text = text

    def append(self, text: str) -> None:
        self.text += text

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, {self.position})"


def eof_token(position: Position) -> Token:
    return Token(TokenKind.EOF, "", position)


__all__ = ["TokenKind", "Position", "Token", "eof_token"]
