"""Walks a tree of LLVMBuild.txt files and emits one command per component."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from bzlgen.llvmbuild.reader import read_build_file
from bzlgen.utils.path_utils import walk_path
from bzlgen.writer.protocols import CommandSink

if TYPE_CHECKING:
    from bzlgen.config.schema import LLVMBuildConfig

logger = logging.getLogger("bzlgen.llvmbuild.translator")


class LLVMBuildTranslator:
    """Translate LLVMBuild.txt components into sink commands.

    Each component becomes ``write_command(rule_kind, properties)``; the
    ``subdirectories`` listed in ``[common]`` are visited depth first.
    """

    def __init__(
        self,
        sink: CommandSink,
        build_file: str = "LLVMBuild.txt",
        macro_name: str = "generated_llvm_build_targets",
    ):
        self.sink = sink
        self.build_file = build_file
        self.macro_name = macro_name

    @classmethod
    def from_config(cls, sink: CommandSink, config: "LLVMBuildConfig") -> "LLVMBuildTranslator":
        return cls(sink, build_file=config.build_file, macro_name=config.macro_name)

    def translate(self, root: str) -> None:
        self.sink.begin_macro(self.macro_name)
        walk_path(root, self.visit)
        self.sink.end_macro()

    def visit(self, directory: str) -> Tuple[List[str], Optional[Callable[[], None]]]:
        build_file = read_build_file(os.path.join(directory, self.build_file))
        for component in build_file.components():
            kind = component.rule_kind()
            if not kind:
                logger.warning(
                    "%s: skipping [%s] without a single type", build_file.filename, component.section
                )
                continue
            self.sink.write_command(kind, component.properties())
        return build_file.subdirectories(), None


__all__ = ["LLVMBuildTranslator"]
