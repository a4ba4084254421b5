"""Scope stack of CMake variable bindings plus the flat cache namespace."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from bzlgen.errors import StructuralError

logger = logging.getLogger("bzlgen.cmake.bindings")


class Bindings:
    """Variable scopes, one frame per directory level.

    Setting a variable to the empty string stores a tombstone: lookups stop
    at it (so ancestors are masked) and :meth:`values` treats it as a delete.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self._frames: List[Dict[str, str]] = [dict(variables or {})]
        self._cache: Dict[str, str] = {}

    @property
    def depth(self) -> int:
        """Number of frames above the root."""
        return len(self._frames) - 1

    def push(self) -> None:
        self._frames.append({})

    def pop(self) -> None:
        if len(self._frames) == 1:
            raise StructuralError("cannot pop the root variable scope")
        self._frames.pop()

    def set(self, key: str, value: str) -> None:
        self._frames[-1][key] = value

    def set_parent(self, key: str, value: str) -> None:
        if len(self._frames) == 1:
            logger.warning("Ignoring PARENT_SCOPE assignment of %s at the root scope", key)
            return
        self._frames[-2][key] = value

    def set_cache(self, key: str, value: str) -> None:
        self._cache[key] = value

    def get(self, key: str) -> str:
        for frame in reversed(self._frames):
            if key in frame:
                return frame[key]
        return self._cache.get(key, "")

    def get_cache(self, key: str) -> str:
        return self._cache.get(key, "")

    def get_env(self, key: str) -> str:
        # Environment variables are deliberately not exposed.
        return ""

    def values(self) -> Dict[str, str]:
        """Flatten all live frames bottom-up, applying tombstones as deletes."""
        result: Dict[str, str] = {}
        for frame in self._frames:
            for key, value in frame.items():
                if value:
                    result[key] = value
                else:
                    result.pop(key, None)
        return result

    def cache_values(self) -> Dict[str, str]:
        return dict(self._cache)


__all__ = ["Bindings"]
