"""Filter layer between the raw file lexer and the parser.

Comments are dropped, and quoted or unquoted argument text is re-lexed with
the argument rule table so that variable reference markers and escape
sequences reach the parser as separate tokens.
"""

from __future__ import annotations

from typing import Iterator, Optional

from bzlgen.cmake.lexer import TableLexer, argument_lexer, file_lexer
from bzlgen.cmake.tokens import Token, TokenKind

_SPLITTABLE = (TokenKind.QUOTED, TokenKind.UNQUOTED)


class TokenFilter:
    """Iterator wrapping a raw token stream.

    When a splittable token is seen, an argument lexer is created over its
    text and held as the pending sub-iterator; its tokens are handed out
    until it is exhausted before the outer stream resumes.
    """

    def __init__(self, source: Iterator[Token]):
        self._source = source
        self._pending: Optional[TableLexer] = None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        while True:
            if self._pending is not None:
                token = next(self._pending)
                if token.kind is not TokenKind.EOF:
                    return token
                self._pending = None

            token = next(self._source)
            if token.kind is TokenKind.COMMENT:
                continue
            if token.kind not in _SPLITTABLE:
                return token

            sub = argument_lexer(token)
            first = next(sub)
            if first.kind is TokenKind.EOF:
                return token
            if first.kind is token.kind and first.text == token.text:
                # Nothing to split out.
                return token
            self._pending = sub
            return first


def tokenize(text: str, filename: str = "") -> TokenFilter:
    """Return the filtered token stream consumed by the parser."""
    return TokenFilter(file_lexer(text, filename))


__all__ = ["TokenFilter", "tokenize"]
