"""Recursive descent parser for CMakeLists.txt files.

Grammar, over the filtered token stream::

    file          := (Space|Newline)* (command (Space|Newline)*)*
    command       := Identifier Space* "(" arguments
    arguments     := (Space|Newline | argument)* ")"
    argument      := "(" arguments | quoted | bracket | unquoted
    quoted        := Quote (reference | text)* Quote
    unquoted      := (reference | text)+
    reference     := VarOpen (text? reference?)+ VarClose

Consecutive text tokens are merged into a single element, with escape
sequences decoded as they are merged.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, List, Optional, Tuple, Union

from bzlgen.cmake.ast import (
    ArgumentList,
    BracketArgument,
    CMakeFile,
    CommandInvocation,
    QuotedArgument,
    QuotedElement,
    UnquotedArgument,
    UnquotedElement,
    VariableElement,
    VariableReference,
    decode_escape,
)
from bzlgen.cmake.filter import tokenize
from bzlgen.cmake.tokens import Token, TokenKind
from bzlgen.errors import ParseError

logger = logging.getLogger("bzlgen.cmake.parser")

_SEPARATORS = (TokenKind.SPACE, TokenKind.NEWLINE)
_QUOTED_TEXT = (TokenKind.QUOTED, TokenKind.ESCAPE_SEQUENCE, TokenKind.VAR_CLOSE)
_UNQUOTED_TEXT = (
    TokenKind.IDENTIFIER,
    TokenKind.UNQUOTED,
    TokenKind.ESCAPE_SEQUENCE,
    TokenKind.VAR_CLOSE,
)
_VARIABLE_TEXT = (
    TokenKind.IDENTIFIER,
    TokenKind.UNQUOTED,
    TokenKind.QUOTED,
    TokenKind.ESCAPE_SEQUENCE,
)


class Parser:
    """Parser over a token iterator with a single token of lookahead."""

    def __init__(self, tokens: Iterator[Token]):
        self._tokens = tokens
        self._peeked: Optional[Token] = None

    @classmethod
    def from_text(cls, text: str, filename: str = "") -> "Parser":
        return cls(tokenize(text.replace("\r\n", "\n"), filename))

    # -- token helpers -------------------------------------------------------

    def _peek(self) -> Token:
        if self._peeked is None:
            self._peeked = next(self._tokens)
        return self._peeked

    def _next(self) -> Token:
        token = self._peek()
        if token.kind is not TokenKind.EOF:
            self._peeked = None
        return token

    def _is(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        token = self._peek()
        return token.kind is kind and (text is None or token.text == text)

    def _expect(self, kind: TokenKind, text: Optional[str] = None) -> Token:
        if not self._is(kind, text):
            wanted = repr(text) if text is not None else kind.value
            raise self._unexpected(f"expected {wanted}")
        return self._next()

    def _unexpected(self, context: str) -> ParseError:
        token = self._peek()
        if token.kind is TokenKind.EOF:
            return ParseError(f"{context}, got end of input", token.position)
        return ParseError(f"{context}, got {token.kind.value} {token.text!r}", token.position)

    def _skip(self, kinds: Tuple[TokenKind, ...]) -> None:
        while self._peek().kind in kinds:
            self._next()

    def _text_run(self, kinds: Tuple[TokenKind, ...], unquoted: bool = False) -> str:
        parts: List[str] = []
        while self._peek().kind in kinds:
            token = self._next()
            if token.kind is TokenKind.ESCAPE_SEQUENCE:
                parts.append(decode_escape(token.text, unquoted))
            else:
                parts.append(token.text)
        return "".join(parts)

    def finish(self) -> None:
        """Require that all input has been consumed."""
        self._expect(TokenKind.EOF)

    # -- productions ---------------------------------------------------------

    def file(self) -> CMakeFile:
        commands: List[CommandInvocation] = []
        self._skip(_SEPARATORS)
        while not self._is(TokenKind.EOF):
            commands.append(self.command_invocation())
            self._skip(_SEPARATORS)
        return CMakeFile(commands)

    def command_invocation(self) -> CommandInvocation:
        name = self._expect(TokenKind.IDENTIFIER)
        self._skip((TokenKind.SPACE,))
        self._expect(TokenKind.PUNCT, "(")
        return CommandInvocation(name.text, self._arguments(), name.position)

    def argument_list(self) -> ArgumentList:
        self._expect(TokenKind.PUNCT, "(")
        return self._arguments()

    def _arguments(self) -> ArgumentList:
        values = []
        while True:
            token = self._peek()
            if token.kind in _SEPARATORS:
                self._next()
            elif token.kind is TokenKind.PUNCT and token.text == ")":
                self._next()
                return ArgumentList(values)
            elif token.kind is TokenKind.EOF:
                raise self._unexpected("unterminated argument list")
            else:
                values.append(self.argument())

    def argument(self) -> Union[ArgumentList, QuotedArgument, UnquotedArgument, BracketArgument]:
        token = self._peek()
        if token.kind is TokenKind.PUNCT and token.text == "(":
            return self.argument_list()
        if token.kind is TokenKind.QUOTE:
            return self.quoted_argument()
        if token.kind is TokenKind.BRACKET_CONTENT:
            self._next()
            return BracketArgument(token.text)
        if token.kind in _UNQUOTED_TEXT or token.kind is TokenKind.VAR_OPEN:
            return self.unquoted_argument()
        raise self._unexpected("expected argument")

    def quoted_argument(self) -> QuotedArgument:
        self._expect(TokenKind.QUOTE)
        elements: List[QuotedElement] = []
        while not self._is(TokenKind.QUOTE):
            if self._is(TokenKind.VAR_OPEN):
                elements.append(QuotedElement(ref=self.variable_reference()))
            elif self._peek().kind in _QUOTED_TEXT:
                elements.append(QuotedElement(text=self._text_run(_QUOTED_TEXT)))
            else:
                raise self._unexpected("expected quoted argument text")
        self._next()
        return QuotedArgument(elements)

    def unquoted_argument(self) -> UnquotedArgument:
        elements: List[UnquotedElement] = []
        while True:
            if self._is(TokenKind.VAR_OPEN):
                elements.append(UnquotedElement(ref=self.variable_reference()))
            elif self._peek().kind in _UNQUOTED_TEXT:
                elements.append(UnquotedElement(text=self._text_run(_UNQUOTED_TEXT, unquoted=True)))
            else:
                break
        if not elements:
            raise self._unexpected("expected unquoted argument")
        return UnquotedArgument(elements)

    def variable_reference(self) -> VariableReference:
        opening = self._expect(TokenKind.VAR_OPEN)
        elements: List[VariableElement] = []
        while not self._is(TokenKind.VAR_CLOSE):
            text = self._text_run(_VARIABLE_TEXT)
            ref = self.variable_reference() if self._is(TokenKind.VAR_OPEN) else None
            if not text and ref is None:
                raise self._unexpected("expected variable name")
            elements.append(VariableElement(text, ref))
        if not elements:
            raise self._unexpected("expected variable name")
        self._next()
        # `$ENV{` -> "ENV"
        return VariableReference(elements, opening.text[1:-1], opening.position)


def parse(text: str, filename: str = "") -> CMakeFile:
    """Parse the text of a whole CMakeLists.txt file.

    Raises:
        LexError: On invalid or unterminated input.
        ParseError: On a grammar mismatch.
    """
    parser = Parser.from_text(text, filename)
    result = parser.file()
    parser.finish()
    return result


def parse_file(path: Union[str, "os.PathLike[str]"]) -> CMakeFile:
    """Read and parse a file; I/O errors propagate to the caller."""
    filename = os.fspath(path)
    logger.debug("Parsing %s", filename)
    with open(filename, "r", encoding="utf-8") as handle:
        text = handle.read()
    return parse(text, filename)


def parse_argument_list(text: str) -> ArgumentList:
    """Parse ``(...)`` on its own, mainly for tests."""
    parser = Parser.from_text(text)
    result = parser.argument_list()
    parser.finish()
    return result


def parse_argument(text: str) -> Union[ArgumentList, QuotedArgument, UnquotedArgument, BracketArgument]:
    parser = Parser.from_text(text)
    result = parser.argument()
    parser.finish()
    return result


def parse_variable_reference(text: str) -> VariableReference:
    parser = Parser.from_text(text)
    result = parser.variable_reference()
    parser.finish()
    return result


__all__ = [
    "Parser",
    "parse",
    "parse_file",
    "parse_argument_list",
    "parse_argument",
    "parse_variable_reference",
]
