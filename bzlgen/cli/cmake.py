"""CMake command implementation."""

import logging
from typing import Dict, Iterable, Optional

from bzlgen.cli.common import RECOVERABLE_ERRORS, open_output
from bzlgen.cmake.evaluator import Evaluator
from bzlgen.config.schema import CMakeConfig
from bzlgen.runtime.config_loader import load_tool_config
from bzlgen.writer.starlark import StarlarkWriter

logger = logging.getLogger("bzlgen.cli.cmake")


def parse_definitions(definitions: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse ``NAME=VALUE`` strings given with ``-D``.

    Raises:
        ValueError: If a definition has no ``=`` or an empty name.
    """
    result: Dict[str, str] = {}
    for definition in definitions or ():
        name, sep, value = definition.partition("=")
        if not sep or not name:
            raise ValueError(f"invalid definition {definition!r}, expected NAME=VALUE")
        result[name] = value
    return result


def resolve_cmake_config(args) -> CMakeConfig:
    """Load the configured CMake settings and apply command-line overrides."""
    config = load_tool_config(getattr(args, "config", None)).cmake
    data = config.model_dump()
    if getattr(args, "macro_name", None):
        data["macro_name"] = args.macro_name
    if getattr(args, "print_command", None):
        data["print_commands"] = list(args.print_command)
    if getattr(args, "recurse_commands", None):
        data["recurse_commands"] = args.recurse_commands
    if getattr(args, "exclude_paths", None) is not None:
        # An empty pattern disables exclusion.
        data["exclude_paths"] = args.exclude_paths or None
    data["variables"].update(parse_definitions(getattr(args, "define", None)))
    return CMakeConfig.model_validate(data)


def cmake_command(args) -> int:
    """Execute cmake command.

    Args:
        args: Parsed command-line arguments containing:
            - paths: Source directories holding CMakeLists.txt files
            - output: Output file path (stdout when omitted)
            - config, macro_name, define, print_command, recurse_commands,
              exclude_paths: Configuration overrides

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = resolve_cmake_config(args)
        logger.info("Translating %s", ", ".join(args.paths))
        with open_output(getattr(args, "output", None)) as stream:
            Evaluator.from_config(StarlarkWriter(stream), config).walk(args.paths)
    except RECOVERABLE_ERRORS as e:
        logger.error("CMake translation failed: %s", e)
        return 1
    return 0
