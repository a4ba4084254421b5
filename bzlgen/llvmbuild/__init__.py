"""Translator for LLVM's INI-style LLVMBuild.txt component descriptions."""

from bzlgen.llvmbuild.reader import Component, LLVMBuildFile, parse_build_file, read_build_file
from bzlgen.llvmbuild.translator import LLVMBuildTranslator

__all__ = [
    "Component",
    "LLVMBuildFile",
    "LLVMBuildTranslator",
    "parse_build_file",
    "read_build_file",
]
