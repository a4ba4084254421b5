"""Table driven lexer for the CMakeLists.txt language.

See https://cmake.org/cmake/help/v3.0/manual/cmake-language.7.html

Two rule tables are defined here:

* ``FILE_RULES`` splits a whole file into spaces, newlines, parentheses,
  identifiers, unquoted arguments, quoted strings, bracket arguments and
  comments. Bracket arguments and quoted strings span several primitive
  matches which accumulate into a single pending token.
* ``ARGUMENT_RULES`` re-lexes the text of a single quoted or unquoted token,
  splitting out variable reference markers and escape sequences. The filter
  layer drives it (see ``filter.py``).
"""

from __future__ import annotations

import re
from collections import deque
from enum import IntEnum
from typing import Deque, Iterator, Optional

from bzlgen.cmake.rules import EOF_PATTERN, INITIAL_CONDITION, RuleTable, Scanner, when
from bzlgen.cmake.tokens import Position, Token, TokenKind, eof_token
from bzlgen.errors import LexError


class Mode(IntEnum):
    """Start conditions of the file lexer."""

    INITIAL = INITIAL_CONDITION
    COMMENT = 1
    BRACKET = 2
    BRACKET_END = 3
    STRING = 4


_MAKE_VAR = r"\$\([A-Za-z0-9_]*\)"
_UNQUOTED = r'(?:[^ \t\r\n()#"\\\[=]|\\[^\n])'
_LEGACY = rf'(?:{_MAKE_VAR}|{_UNQUOTED}|"(?:{_MAKE_VAR}|{_UNQUOTED}|[ \t\[=])*")'

# An unquoted argument may not start with something that opens a bracket argument.
UNQUOTED_PATTERN = rf"(?:{_UNQUOTED}|=|\[=*{_UNQUOTED})(?:{_UNQUOTED}|[\[=])*"
# Legacy unquoted arguments may embed make-style variables and quoted runs: -Da="b c".
LEGACY_PATTERN = rf"(?:{_MAKE_VAR}|{_UNQUOTED}|=|\[=*{_LEGACY})(?:{_LEGACY}|[\[=])*"
IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"


class TableLexer:
    """Iterator producing tokens by driving a :class:`Scanner` over a rule table.

    The sequence is finite and always ends with exactly one EOF token. Each
    call to :meth:`__next__` runs rule actions until one reports the pending
    token complete; actions may queue additional tokens (the quotes around a
    string) or keep accumulating text into the pending one.
    """

    def __init__(
        self,
        rules: RuleTable,
        text: str,
        position: Optional[Position] = None,
        base: Optional[Token] = None,
    ):
        self._scanner = Scanner(rules, text, position)
        self._buffer: Deque[Token] = deque()
        self._start = self._scanner.position
        self._finished = False
        self.base = base
        # Length of the `]=*` run which closes the current bracket argument.
        self.bracket = -1

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        while not self._buffer:
            if self._finished:
                raise StopIteration
            self._advance()
        token = self._buffer.popleft()
        if token.kind is TokenKind.EOF:
            self._finished = True
            self._buffer.clear()
        return token

    def _advance(self) -> None:
        self._buffer = deque([eof_token(self._scanner.position)])
        while True:
            self._start = self._scanner.position
            action = self._scanner.scan()
            if action(self):
                return

    # ScanState interface used by rule actions.

    def begin(self, condition: int) -> None:
        self._scanner.begin(condition)

    @property
    def matched(self) -> str:
        return self._scanner.matched

    @property
    def token(self) -> Token:
        return self._buffer[-1]

    @property
    def first(self) -> Token:
        """First token produced by the current step."""
        return self._buffer[0]

    @property
    def start(self) -> Position:
        """Position at which the current match began."""
        return self._start

    @property
    def position(self) -> Position:
        """Position following the current match."""
        return self._scanner.position

    def emit(self, kind: TokenKind, text: str, position: Position) -> Token:
        """Queue a new token, which becomes the one under construction."""
        token = Token(kind, text, position)
        self._buffer.append(token)
        return token

    def discard(self) -> None:
        """Drop the token under construction."""
        self._buffer.pop()


# -----------------------------------------------------------------------------
# File rule actions
# -----------------------------------------------------------------------------


def _lex_newline(d: TableLexer) -> bool:
    d.token.set(TokenKind.NEWLINE, d.matched)
    return True


def _lex_comment_start(d: TableLexer) -> bool:
    d.token.set(TokenKind.COMMENT, "")
    d.begin(Mode.COMMENT)
    return False


def _lex_comment(d: TableLexer) -> bool:
    d.token.append(d.matched)
    return False


def _lex_comment_end(d: TableLexer) -> bool:
    # Comments do not contain the terminating newline.
    d.emit(TokenKind.NEWLINE, d.matched, d.start)
    d.begin(Mode.INITIAL)
    return True


def _lex_comment_eof(d: TableLexer) -> bool:
    d.begin(Mode.INITIAL)
    return True


def _lex_paren(d: TableLexer) -> bool:
    d.token.set(TokenKind.PUNCT, d.matched)
    return True


def _lex_identifier(d: TableLexer) -> bool:
    d.token.set(TokenKind.IDENTIFIER, d.matched)
    return True


def _lex_bracket_open(d: TableLexer) -> bool:
    text = d.matched
    kind = TokenKind.COMMENT if text.startswith("#") else TokenKind.BRACKET_CONTENT
    d.token.set(kind, "")
    d.bracket = text.rindex("[") - text.index("[")
    d.begin(Mode.BRACKET)
    return False


def _lex_bracket_tail(d: TableLexer) -> bool:
    d.token.append(d.matched)
    if len(d.matched) == d.bracket:
        d.begin(Mode.BRACKET_END)
    return False


def _lex_bracket_close(d: TableLexer) -> bool:
    token = d.token
    token.text = token.text[: len(token.text) - d.bracket]
    d.bracket = -1
    d.begin(Mode.INITIAL)
    return True


def _lex_bracket_content(d: TableLexer) -> bool:
    d.token.append(d.matched)
    return False


def _lex_bracket_reset(d: TableLexer) -> bool:
    d.begin(Mode.BRACKET)
    return _lex_bracket_content(d)


def _lex_bracket_eof(d: TableLexer) -> bool:
    d.begin(Mode.INITIAL)
    token = d.token
    raise LexError(f"unterminated bracket with text: {token.text!r}", token.position)


def _lex_unquoted(d: TableLexer) -> bool:
    d.token.set(TokenKind.UNQUOTED, d.matched)
    return True


def _lex_open_quote(d: TableLexer) -> bool:
    d.token.set(TokenKind.QUOTE, '"')
    d.emit(TokenKind.QUOTED, "", d.position)
    d.begin(Mode.STRING)
    return False


def _lex_quoted(d: TableLexer) -> bool:
    d.token.append(d.matched)
    return False


def _lex_continuation(d: TableLexer) -> bool:
    return False


def _lex_end_quote(d: TableLexer) -> bool:
    if d.token.kind is TokenKind.QUOTED and not d.token.text:
        d.discard()
    d.emit(TokenKind.QUOTE, '"', d.start)
    d.begin(Mode.INITIAL)
    return True


def _lex_quoted_eof(d: TableLexer) -> bool:
    d.begin(Mode.INITIAL)
    raise LexError(f"unterminated string with value: {d.token.text!r}", d.first.position)


def _lex_space(d: TableLexer) -> bool:
    d.token.set(TokenKind.SPACE, d.matched)
    return True


def _lex_unexpected(d: TableLexer) -> bool:
    raise LexError(f"invalid token {d.matched!r}", d.start)


def _lex_eof(d: TableLexer) -> bool:
    return True


# -----------------------------------------------------------------------------
# Argument rule actions
# -----------------------------------------------------------------------------


def _lex_var_open(d: TableLexer) -> bool:
    d.token.set(TokenKind.VAR_OPEN, d.matched)
    return True


def _lex_var_close(d: TableLexer) -> bool:
    d.token.set(TokenKind.VAR_CLOSE, d.matched)
    return True


def _lex_escape_sequence(d: TableLexer) -> bool:
    d.token.set(TokenKind.ESCAPE_SEQUENCE, d.matched)
    return True


def _lex_argument(d: TableLexer) -> bool:
    if d.base is None:
        raise LexError("argument rules used without a base token", d.start)
    d.token.set(d.base.kind, d.matched)
    return True


FILE_RULES = RuleTable(
    exclusive=(Mode.COMMENT, Mode.BRACKET, Mode.BRACKET_END, Mode.STRING),
    rules=[
        when(Mode.INITIAL).match(r"\n", _lex_newline),
        when(Mode.COMMENT).match(r"\n", _lex_comment_end),
        when().match(r"#?\[=*\[\n?", _lex_bracket_open),
        when().match(r"#", _lex_comment_start),
        when(Mode.COMMENT).match(r"[^\n]+", _lex_comment),
        when(Mode.COMMENT).match(EOF_PATTERN, _lex_comment_eof),
        when().match(r"[()]", _lex_paren),
        when().match(IDENTIFIER_PATTERN, _lex_identifier),
        when(Mode.BRACKET).match(r"\]=*", _lex_bracket_tail),
        when(Mode.BRACKET_END).match(r"\]", _lex_bracket_close),
        when(Mode.BRACKET).match(r"[^\]\n]+", _lex_bracket_content),
        when(Mode.BRACKET, Mode.BRACKET_END).match(r"\n", _lex_bracket_reset),
        when(Mode.BRACKET, Mode.BRACKET_END).match(r"[^\n]", _lex_bracket_reset),
        when(Mode.BRACKET, Mode.BRACKET_END).match(EOF_PATTERN, _lex_bracket_eof),
        when().match(UNQUOTED_PATTERN, _lex_unquoted),
        when().match(LEGACY_PATTERN, _lex_unquoted),
        when().match(r"\[", _lex_unquoted),
        when().match(r'"', _lex_open_quote),
        when(Mode.STRING).match(r'(?:[^\\\n"]|\\.)+', _lex_quoted),
        when(Mode.STRING).match(r"\\\n", _lex_continuation),
        when(Mode.STRING).match(r"\n", _lex_quoted),
        when(Mode.STRING).match(r'"', _lex_end_quote),
        when(Mode.STRING).match(r".", _lex_quoted),
        when(Mode.STRING).match(EOF_PATTERN, _lex_quoted_eof),
        when().match(r"[ \t\r]+", _lex_space),
        when().match(r".", _lex_unexpected),
        when().match(EOF_PATTERN, _lex_eof),
    ],
)

ARGUMENT_RULES = RuleTable(
    rules=[
        when().match(r"\$[A-Za-z0-9_.+-]*\{", _lex_var_open),
        when().match(r"\}", _lex_var_close),
        when().match(r"\\.", _lex_escape_sequence, re.DOTALL),
        when().match(r"[^$\\}]+", _lex_argument),
        when().match(r".", _lex_argument, re.DOTALL),
        when().match(EOF_PATTERN, _lex_eof),
    ],
)


def file_lexer(text: str, filename: str = "") -> TableLexer:
    """Return the raw (unfiltered) token stream for a whole file."""
    return TableLexer(FILE_RULES, text, Position(filename=filename))


def argument_lexer(base: Token) -> TableLexer:
    """Return a lexer splitting variable references out of ``base.text``."""
    return TableLexer(ARGUMENT_RULES, base.text, base.position, base)


__all__ = [
    "Mode",
    "TableLexer",
    "FILE_RULES",
    "ARGUMENT_RULES",
    "file_lexer",
    "argument_lexer",
]
