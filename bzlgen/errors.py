"""Exception hierarchy shared by the lexer, parser, evaluator and writers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from bzlgen.cmake.tokens import Position


# =============================================================================
# Custom Exception Hierarchy
# =============================================================================

class BzlgenError(Exception):
    """Base class for all errors raised by bzlgen.

    Every subclass is fatal to the current translation; the CLI reports it
    and exits with a non-zero status.
    """
    pass


class LexError(BzlgenError):
    """Invalid input or an unterminated bracket/quoted construct."""

    def __init__(self, message: str, position: "Position"):
        super().__init__(f"{position}: {message}")
        self.message = message
        self.position = position


class ParseError(BzlgenError):
    """Grammar mismatch (unexpected token) in a CMake or LLVMBuild file."""

    def __init__(self, message: str, position: Optional["Position"] = None):
        super().__init__(f"{position}: {message}" if position is not None else message)
        self.message = message
        self.position = position


class EvalError(BzlgenError):
    """Evaluation failure: bad arity for a directory command or unknown variable domain."""
    pass


class StructuralError(BzlgenError):
    """Directory or scope stack discipline was violated.

    Always indicates an internal invariant violation rather than bad input.
    """
    pass


class WriterError(BzlgenError):
    """The output sink was used incorrectly or given an unencodable value."""
    pass


__all__ = [
    "BzlgenError",
    "LexError",
    "ParseError",
    "EvalError",
    "StructuralError",
    "WriterError",
]
