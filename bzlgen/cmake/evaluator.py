"""Directory-walking evaluator for CMakeLists.txt trees.

The evaluator parses the list file of every directory it enters, tracks
``set``/``unset`` in a :class:`~bzlgen.cmake.bindings.Bindings` scope stack,
skips control-flow blocks it does not model, forwards selected commands to a
:class:`~bzlgen.writer.protocols.CommandSink` and recurses into the
directories named by selected commands.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from typing import TYPE_CHECKING, Callable, List, Mapping, Optional, Sequence

from bzlgen.cmake.ast import CommandInvocation
from bzlgen.cmake.bindings import Bindings
from bzlgen.cmake.parser import parse_file
from bzlgen.errors import EvalError, StructuralError
from bzlgen.utils.path_utils import split_common_root
from bzlgen.writer.protocols import CommandSink

if TYPE_CHECKING:
    from bzlgen.config.schema import CMakeConfig

logger = logging.getLogger("bzlgen.cmake.evaluator")

Predicate = Callable[[str], bool]

# Blocks whose bodies are skipped without evaluation.
BLOCK_COMMANDS = frozenset({"if", "function", "foreach", "macro"})


def matching(pattern: str) -> Predicate:
    """Return a predicate testing whether ``pattern`` matches anywhere in a string."""
    return re.compile(pattern).search


def any_of(names: Sequence[str]) -> Predicate:
    """Return a predicate matching exactly one of ``names``."""
    return matching("^(" + "|".join(re.escape(name) for name in names) + ")$")


class BlockCounter:
    """Tracks nesting of one block kind, e.g. ``if``/``endif``.

    Only the opener and closer of the same kind are counted.
    """

    def __init__(self, begin: str):
        self.begin = begin
        self.end = "end" + begin
        self.depth = 0

    def count(self, name: str) -> bool:
        """Account for command ``name``; return True while inside the block."""
        if name == self.begin:
            self.depth += 1
        elif name == self.end:
            self.depth -= 1
        return self.depth > 0


class CommandCursor:
    """Position within the command list of one file."""

    def __init__(self, commands: Sequence[CommandInvocation]):
        self._commands = commands
        self._index = 0

    @property
    def done(self) -> bool:
        return self._index >= len(self._commands)

    @property
    def head(self) -> CommandInvocation:
        return self._commands[self._index]

    def advance(self) -> None:
        self._index += 1


class Evaluator:
    """Translate a tree of CMakeLists.txt files into sink events.

    Args:
        sink: Receiver of macro, directory and command events.
        macro_name: Name of the macro wrapping the output.
        should_print: Selects commands forwarded to the sink.
        should_add: Selects commands whose single argument names a subdirectory.
        exclude_path: Selects subdirectories which are not entered.
        variables: Variables predefined in the root scope.
        list_file: Name of the file parsed in each directory.
    """

    def __init__(
        self,
        sink: CommandSink,
        *,
        macro_name: str = "generated_cmake_targets",
        should_print: Optional[Predicate] = None,
        should_add: Optional[Predicate] = lambda name: name == "add_subdirectory",
        exclude_path: Optional[Predicate] = None,
        variables: Optional[Mapping[str, str]] = None,
        list_file: str = "CMakeLists.txt",
    ):
        self.sink = sink
        self.macro_name = macro_name
        self.should_print = should_print
        self.should_add = should_add
        self.exclude_path = exclude_path
        self.list_file = list_file
        self.bindings = Bindings(variables)
        self.path: List[str] = []

    @classmethod
    def from_config(cls, sink: CommandSink, config: "CMakeConfig") -> "Evaluator":
        return cls(
            sink,
            macro_name=config.macro_name,
            should_print=any_of(config.print_commands) if config.print_commands else None,
            should_add=matching(config.recurse_commands),
            exclude_path=matching(config.exclude_paths) if config.exclude_paths else None,
            variables=config.variables,
            list_file=config.list_file,
        )

    def walk(self, paths: Sequence[str]) -> None:
        """Translate the trees rooted at ``paths`` into a single macro."""
        self.sink.begin_macro(self.macro_name)
        root, relative = split_common_root(paths)
        logger.debug("Walking %d path(s) below %r", len(relative), root)
        self.path.append(root)
        for dirpath in relative:
            self.add_subdirectory(dirpath)
        self.path.pop()
        self.sink.end_macro()

    @property
    def current_directory(self) -> str:
        """Project-rooted absolute path of the directory being evaluated."""
        return "/" + self._relative_directory()

    def _relative_directory(self) -> str:
        # Directory arguments are often project-rooted (`${CMAKE_CURRENT_SOURCE_DIR}/x`),
        # so every segment is resolved below the walk root, never the filesystem root.
        return posixpath.normpath("/" + "/".join(self.path[1:])).lstrip("/")

    def add_subdirectory(self, dirpath: str) -> None:
        self._enter_directory(dirpath)
        cmake_file = parse_file(os.path.join(self.path[0], self._relative_directory(), self.list_file))
        cursor = CommandCursor(cmake_file.commands)
        while not cursor.done:
            self._dispatch(cursor)
        self._exit_directory(dirpath)

    def print_command(self, command: CommandInvocation) -> None:
        self.sink.write_command(command.name, *command.eval_arguments(self.bindings))

    def _enter_directory(self, dirpath: str) -> None:
        self.sink.push_directory(dirpath)
        self.bindings.push()
        self.path.append(dirpath)
        logger.debug("Entering directory %s", self.current_directory)
        self.bindings.set("CMAKE_CURRENT_SOURCE_DIR", self.current_directory)
        self.bindings.set("CMAKE_CURRENT_BINARY_DIR", self.current_directory)

    def _exit_directory(self, dirpath: str) -> None:
        logger.debug("Leaving directory %s", self.current_directory)
        self.bindings.pop()
        self.path.pop()
        tail = self.sink.pop_directory()
        if tail != dirpath:
            raise StructuralError(f"unexpected directory state {tail!r} != {dirpath!r}")

    def _dispatch(self, cursor: CommandCursor) -> None:
        command = cursor.head
        name = command.name
        if self.should_print is not None and self.should_print(name):
            self.print_command(command)

        lowered = name.lower()
        if lowered in BLOCK_COMMANDS:
            self._skip_block(cursor)
            return
        if lowered == "set":
            self._set(command)
        elif lowered == "unset":
            self._unset(command)

        if self.should_add is not None and self.should_add(name):
            args = command.eval_arguments(self.bindings)
            if len(args) != 1:
                raise EvalError(
                    f"{command.position}: invalid number of arguments to directory command {name}"
                )
            if self.exclude_path is not None and self.exclude_path(args[0]):
                logger.debug("Excluding directory %s", args[0])
            else:
                self.add_subdirectory(args[0])
        cursor.advance()

    def _skip_block(self, cursor: CommandCursor) -> None:
        opener = cursor.head
        counter = BlockCounter(opener.name.lower())
        while not cursor.done:
            inside = counter.count(cursor.head.name.lower())
            cursor.advance()
            if not inside:
                logger.debug("Skipped %s block at %s", opener.name, opener.position)
                return
        logger.warning("Unterminated %s block at %s", opener.name, opener.position)

    def _set(self, command: CommandInvocation) -> None:
        args = command.eval_arguments(self.bindings)
        if not args:
            logger.warning("%s: set called without a variable name", command.position)
            return
        name, rest = args[0], args[1:]
        if rest and rest[-1] == "PARENT_SCOPE":
            self.bindings.set_parent(name, ";".join(rest[:-1]))
        elif len(rest) >= 3 and rest[-3] == "CACHE":
            self.bindings.set_cache(name, ";".join(rest[:-3]))
        elif len(rest) >= 4 and rest[-4] == "CACHE" and rest[-1] == "FORCE":
            self.bindings.set_cache(name, ";".join(rest[:-4]))
        else:
            self.bindings.set(name, ";".join(rest))

    def _unset(self, command: CommandInvocation) -> None:
        args = command.eval_arguments(self.bindings)
        if not args:
            logger.warning("%s: unset called without a variable name", command.position)
        elif len(args) == 1:
            self.bindings.set(args[0], "")
        elif len(args) == 2 and args[1] == "PARENT_SCOPE":
            self.bindings.set_parent(args[0], "")
        elif len(args) == 2 and args[1] == "CACHE":
            self.bindings.set_cache(args[0], "")
        else:
            logger.warning("%s: ignoring unset with arguments %s", command.position, args)


__all__ = [
    "Evaluator",
    "BlockCounter",
    "CommandCursor",
    "Predicate",
    "matching",
    "any_of",
]
