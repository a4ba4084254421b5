"""Writer emitting a translation as a single Starlark macro.

Output has the form::

    def generated_cmake_targets(ctx):
        ctx = ctx.push_directory(ctx, "llvm/lib")
        ctx.add_llvm_library(ctx, "LLVMSupport", "APInt.cpp")
        ctx = ctx.pop_directory(ctx)

Directory entries are buffered until a command is written so that
directories which produced no commands leave no trace in the output. A
macro which ends up with no statements gets a `pass` body.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, TextIO

from bzlgen.errors import StructuralError, WriterError
from bzlgen.writer.marshal import marshal

logger = logging.getLogger("bzlgen.writer.starlark")

INDENT = "    "

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

RESERVED_WORDS = frozenset(
    {
        "and", "as", "assert", "async", "await", "break", "class", "continue",
        "def", "del", "elif", "else", "except", "finally", "for", "from",
        "global", "if", "import", "in", "is", "lambda", "load", "nonlocal",
        "not", "or", "pass", "raise", "return", "try", "while", "with", "yield",
    }
)


def starlark_identifier(name: str) -> str:
    """Validate ``name`` as an identifier, renaming reserved words.

    Raises:
        WriterError: If ``name`` is not a valid identifier.
    """
    if not _IDENTIFIER.match(name):
        raise WriterError(f"invalid Starlark identifier: {name!r}")
    if name in RESERVED_WORDS:
        return name + "_"
    return name


class StarlarkWriter:
    """:class:`~bzlgen.writer.protocols.CommandSink` writing Starlark text."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._buffer: List[str] = []
        self._macro: Optional[str] = None
        self._directories: List[str] = []
        self._has_body = False

    @property
    def current_macro(self) -> Optional[str]:
        return self._macro

    def begin_macro(self, name: str) -> None:
        if self._macro is not None:
            raise WriterError("nested macros are not allowed")
        identifier = starlark_identifier(name)
        self._buffer.append(f"def {identifier}(ctx):\n")
        self._macro = identifier
        self._has_body = False

    def end_macro(self) -> None:
        self._require_macro()
        self._write_buffered()
        if not self._has_body:
            self._write(f"{INDENT}pass\n")
        self._macro = None
        self._stream.flush()

    def push_directory(self, path: str) -> None:
        self._require_macro()
        self._directories.append(path)
        self._buffer.append(self._enter_line(path))

    def pop_directory(self) -> str:
        self._require_macro()
        if not self._directories:
            raise StructuralError("no current directory")
        path = self._directories.pop()
        # Drop enter/exit pairs with nothing in between.
        if self._buffer and self._buffer[-1] == self._enter_line(path):
            self._buffer.pop()
            return path
        self._write_buffered()
        self._write(f"{INDENT}ctx = ctx.pop_directory(ctx)\n")
        return path

    def write_command(self, name: str, *args: Any) -> None:
        self._require_macro()
        identifier = starlark_identifier(name)
        encoded = "".join(f", {marshal(arg)}" for arg in args)
        self._write_buffered()
        self._write(f"{INDENT}ctx.{identifier}(ctx{encoded})\n")

    def _require_macro(self) -> None:
        if self._macro is None:
            raise WriterError("no current macro")

    def _enter_line(self, path: str) -> str:
        return f"{INDENT}ctx = ctx.push_directory(ctx, {marshal(path)})\n"

    def _write(self, line: str) -> None:
        self._stream.write(line)
        if not line.startswith("def "):
            self._has_body = True

    def _write_buffered(self) -> None:
        for line in self._buffer:
            self._write(line)
        self._buffer.clear()


__all__ = ["StarlarkWriter", "starlark_identifier", "RESERVED_WORDS", "INDENT"]
