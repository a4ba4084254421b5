"""Protocol describing the event sink driven by the translators.

The evaluator and the LLVMBuild translator only depend on this interface;
:class:`bzlgen.writer.starlark.StarlarkWriter` is the production
implementation and tests substitute recording fakes.
"""

from __future__ import annotations

from typing import Any, Protocol


class CommandSink(Protocol):
    """Receives the translation of a source tree as a stream of events."""

    def begin_macro(self, name: str) -> None:
        """Open the single macro wrapping the whole translation."""
        ...

    def end_macro(self) -> None:
        """Close the current macro and flush pending output."""
        ...

    def push_directory(self, path: str) -> None:
        """Announce entry into the directory ``path``."""
        ...

    def pop_directory(self) -> str:
        """Announce exit from the innermost directory and return its path."""
        ...

    def write_command(self, name: str, *args: Any) -> None:
        """Emit one fully evaluated command invocation."""
        ...


__all__ = ["CommandSink"]
