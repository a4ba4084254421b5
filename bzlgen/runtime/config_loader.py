"""Helpers for loading tool configuration from TOML/JSON sources.

This module provides a single entry point `load_tool_config` that accepts
various configuration sources:

* None -> default ToolConfig
* dict -> ToolConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

from bzlgen.config.schema import ToolConfig

logger = logging.getLogger("bzlgen.runtime.config_loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _detect_format(text: str) -> str:
    return "json" if text.lstrip().startswith(("{", "[")) else "toml"


def load_tool_config(source: ConfigSource) -> ToolConfig:
    """Load ToolConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns ToolConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        ToolConfig instance.

    Raises:
        ValueError: If the text cannot be decoded or does not validate.
        TypeError: If ``source`` has an unsupported type.
    """
    if source is None:
        logger.debug("No config source provided; using default ToolConfig")
        return ToolConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading ToolConfig from provided dict")
        return ToolConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if os.path.isfile(path):
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        # JSONDecodeError and TOMLDecodeError are both ValueErrors.
        if fmt == "json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)

        if not isinstance(data, dict):
            raise ValueError("Top-level configuration must be a mapping/dict")

        return ToolConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["load_tool_config", "ConfigSource"]
