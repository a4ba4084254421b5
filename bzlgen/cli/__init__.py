"""Command implementations for the bzlgen CLI."""

from bzlgen.cli.cmake import cmake_command
from bzlgen.cli.llvmbuild import llvmbuild_command

__all__ = ["cmake_command", "llvmbuild_command"]
