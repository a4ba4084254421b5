"""Configuration models for bzlgen."""

from bzlgen.config.schema import CMakeConfig, LLVMBuildConfig, ToolConfig

__all__ = ["CMakeConfig", "LLVMBuildConfig", "ToolConfig"]
