"""LLVMBuild command implementation."""

import logging

from bzlgen.cli.common import RECOVERABLE_ERRORS, open_output
from bzlgen.config.schema import LLVMBuildConfig
from bzlgen.llvmbuild.translator import LLVMBuildTranslator
from bzlgen.runtime.config_loader import load_tool_config
from bzlgen.writer.starlark import StarlarkWriter

logger = logging.getLogger("bzlgen.cli.llvmbuild")


def llvmbuild_command(args) -> int:
    """Execute llvmbuild command.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_tool_config(getattr(args, "config", None)).llvmbuild
        if getattr(args, "macro_name", None):
            config = LLVMBuildConfig.model_validate(
                {**config.model_dump(), "macro_name": args.macro_name}
            )
        logger.info("Translating LLVMBuild tree at %s", args.root)
        with open_output(getattr(args, "output", None)) as stream:
            LLVMBuildTranslator.from_config(StarlarkWriter(stream), config).translate(args.root)
    except RECOVERABLE_ERRORS as e:
        logger.error("LLVMBuild translation failed: %s", e)
        return 1
    return 0
