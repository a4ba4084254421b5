"""Main CLI entry point for bzlgen.

Provides commands: cmake, llvmbuild
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from bzlgen import __version__
from bzlgen.cli.cmake import cmake_command
from bzlgen.cli.llvmbuild import llvmbuild_command

logger = logging.getLogger("bzlgen.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance (optional). Defaults to stderr so that
            generated output on stdout is not interleaved with log records.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bzlgen",
        description="bzlgen - Translate CMake and LLVMBuild trees into Starlark macros",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file "
            "or an inline TOML/JSON string. When omitted, built-in defaults are used."
        ),
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    cmake_parser = subparsers.add_parser(
        "cmake",
        help="Translate a tree of CMakeLists.txt files",
    )
    cmake_parser.add_argument(
        "paths",
        nargs="+",
        help="Source directories; their common root is the project root",
    )
    cmake_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    cmake_parser.add_argument(
        "--macro-name",
        help="Name of the generated macro",
    )
    cmake_parser.add_argument(
        "-D",
        "--define",
        action="append",
        metavar="NAME=VALUE",
        help="Predefine a variable in the root scope (repeatable)",
    )
    cmake_parser.add_argument(
        "--print-command",
        action="append",
        metavar="NAME",
        help="Command forwarded to the output (repeatable, replaces the defaults)",
    )
    cmake_parser.add_argument(
        "--recurse-commands",
        metavar="REGEX",
        help="Regex selecting commands which name a subdirectory to enter",
    )
    cmake_parser.add_argument(
        "--exclude-paths",
        metavar="REGEX",
        help="Regex selecting subdirectories which are skipped (empty disables)",
    )

    llvmbuild_parser = subparsers.add_parser(
        "llvmbuild",
        help="Translate a tree of LLVMBuild.txt files",
    )
    llvmbuild_parser.add_argument(
        "root",
        help="Directory holding the top-level LLVMBuild.txt",
    )
    llvmbuild_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    llvmbuild_parser.add_argument(
        "--macro-name",
        help="Name of the generated macro",
    )
    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)
    logger.debug("bzlgen %s, command=%s", __version__, args.command)

    if args.command == "cmake":
        return cmake_command(args)
    elif args.command == "llvmbuild":
        return llvmbuild_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
