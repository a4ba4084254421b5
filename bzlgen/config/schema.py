"""Configuration schema definitions using Pydantic for validation.

The defaults reproduce the settings used to translate the LLVM source tree.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

DEFAULT_PRINT_COMMANDS = [
    "configure_file",
    "set",
    "add_llvm_library",
    "add_clang_library",
    "add_llvm_target",
    "add_tablegen",
    "tablegen",
    "clang_diag_gen",
    "clang_tablegen",
    "add_public_tablegen_target",
]

DEFAULT_VARIABLES = {
    "LLVM_MAIN_INCLUDE_DIR": "/include",
    "LLVM_INCLUDE_DIR": "/include",
    "CLANG_SOURCE_DIR": "/tools/clang",
    "CLANG_BINARY_DIR": "/tools/clang",
}


def _check_macro_name(v: str) -> str:
    if not _IDENTIFIER.match(v):
        raise ValueError(f"macro_name must be an identifier, got {v!r}")
    return v


def _check_regex(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        re.compile(v)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {v!r}: {exc}") from exc
    return v


class CMakeConfig(BaseModel):
    """Configuration for the CMakeLists.txt translator.

    Attributes:
        macro_name: Name of the generated Starlark macro.
        print_commands: Command names forwarded to the output.
        recurse_commands: Regex selecting commands which name a subdirectory.
        exclude_paths: Regex selecting subdirectories which are not entered.
        variables: Variables predefined in the root scope.
        list_file: File name read in every directory.
    """

    macro_name: str = "generated_cmake_targets"
    print_commands: List[str] = Field(default_factory=lambda: list(DEFAULT_PRINT_COMMANDS))
    recurse_commands: str = r"add(_\w+)?_subdirectory"
    exclude_paths: Optional[str] = r"(^|/)(unittests|examples|cmake)($|/)"
    variables: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VARIABLES))
    list_file: str = Field(default="CMakeLists.txt", min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("macro_name")
    @classmethod
    def validate_macro_name(cls, v: str) -> str:
        """Validate that the macro name is a Starlark identifier."""
        return _check_macro_name(v)

    @field_validator("recurse_commands", "exclude_paths")
    @classmethod
    def validate_regex(cls, v: Optional[str]) -> Optional[str]:
        """Validate that patterns compile."""
        return _check_regex(v)


class LLVMBuildConfig(BaseModel):
    """Configuration for the LLVMBuild.txt translator.

    Attributes:
        macro_name: Name of the generated Starlark macro.
        build_file: File name read in every directory.
    """

    macro_name: str = "generated_llvm_build_targets"
    build_file: str = Field(default="LLVMBuild.txt", min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("macro_name")
    @classmethod
    def validate_macro_name(cls, v: str) -> str:
        return _check_macro_name(v)


class ToolConfig(BaseModel):
    """Top-level configuration aggregating both translators."""

    cmake: CMakeConfig = Field(default_factory=CMakeConfig)
    llvmbuild: LLVMBuildConfig = Field(default_factory=LLVMBuildConfig)

    model_config = {"extra": "forbid"}

    @classmethod
    def default(cls) -> "ToolConfig":
        """Create default configuration.

        Returns:
            ToolConfig with default values.
        """
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
