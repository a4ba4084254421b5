"""Reader for LLVMBuild.txt files.

The format is a small INI dialect::

    ; comment
    [common]
    subdirectories = IR Support

    [component_0]
    type = Library
    name = Support
    required_libraries = Demangle

Values are whitespace separated lists. Files are parsed with a Lark LALR
grammar and transformed into :class:`LLVMBuildFile` objects.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, UnexpectedInput

from bzlgen.cmake.tokens import Position
from bzlgen.errors import ParseError
from bzlgen.writer.marshal import Properties

logger = logging.getLogger("bzlgen.llvmbuild.reader")

GRAMMAR = r"""
start: _NL? section*
section: "[" SECTION_NAME "]" _NL pair*
pair: KEY "=" VALUE? _NL

SECTION_NAME: /[^\]\n]+/
KEY: /[A-Za-z_][A-Za-z0-9_.\-]*/
VALUE: /[^\s;#][^\n;#]*/
_NL.2: /([ \t]*([;#][^\n]*)?\r?\n)+/

%ignore /[ \t]+/
"""

_PARSER = Lark(GRAMMAR, parser="lalr", lexer="contextual")

_CAMEL = re.compile(r"(.)([A-Z][a-z]+)")

STRING_PROPERTIES = frozenset({"name", "parent", "library_name"})
LIST_PROPERTIES = frozenset({"dependencies", "required_libraries", "add_to_library_groups"})


@v_args(inline=True)
class _BuildFileTransformer(Transformer):
    def start(self, *sections: Tuple[str, List[Tuple[str, List[str]]]]):
        return list(sections)

    def section(self, name, *pairs: Tuple[str, List[str]]):
        return str(name).strip(), list(pairs)

    def pair(self, key, value=None):
        return str(key), str(value).split() if value is not None else []


@dataclass
class Component:
    """One ``[component_N]`` section."""

    section: str
    keys: Dict[str, List[str]] = field(default_factory=dict)

    def key(self, name: str) -> List[str]:
        return self.keys.get(name, [])

    def rule_kind(self) -> str:
        """Return the snake_case form of the single ``type`` value, or ``""``."""
        kind = self.key("type")
        if len(kind) != 1:
            return ""
        return _CAMEL.sub(r"\1_\2", kind[0]).lower()

    def properties(self) -> Properties:
        """Keyword arguments passed to the generated rule, in file order."""
        result = Properties()
        for name, values in self.keys.items():
            if name in LIST_PROPERTIES:
                result[name] = list(values)
            elif name in STRING_PROPERTIES:
                result[name] = values[0] if values else ""
        return result


@dataclass
class LLVMBuildFile:
    sections: Dict[str, Component] = field(default_factory=dict)
    filename: str = ""

    def section(self, name: str) -> Optional[Component]:
        return self.sections.get(name)

    def subdirectories(self) -> List[str]:
        common = self.section("common")
        return common.key("subdirectories") if common is not None else []

    def components(self) -> List[Component]:
        return [s for name, s in self.sections.items() if name.startswith("component_")]


def parse_build_file(text: str, filename: str = "") -> LLVMBuildFile:
    """Parse the text of an LLVMBuild.txt file.

    Raises:
        ParseError: If the text is not valid LLVMBuild syntax.
    """
    try:
        tree = _PARSER.parse(text + "\n")
    except UnexpectedInput as exc:
        position = Position(
            max(exc.pos_in_stream or 0, 0),
            getattr(exc, "line", 0),
            getattr(exc, "column", 0),
            filename,
        )
        raise ParseError(f"invalid LLVMBuild syntax: {exc}", position) from exc
    except LarkError as exc:
        raise ParseError(f"{filename}: invalid LLVMBuild syntax: {exc}") from exc

    result = LLVMBuildFile(filename=filename)
    for name, pairs in _BuildFileTransformer().transform(tree):
        if name in result.sections:
            logger.warning("%s: duplicate section [%s] replaces earlier one", filename, name)
        component = Component(name)
        for key, values in pairs:
            component.keys.setdefault(key, []).extend(values)
        result.sections[name] = component
    return result


def read_build_file(path: Union[str, "os.PathLike[str]"]) -> LLVMBuildFile:
    filename = os.fspath(path)
    logger.debug("Reading %s", filename)
    with open(filename, "r", encoding="utf-8") as handle:
        return parse_build_file(handle.read(), filename)


__all__ = [
    "Component",
    "LLVMBuildFile",
    "parse_build_file",
    "read_build_file",
    "STRING_PROPERTIES",
    "LIST_PROPERTIES",
]
