"""Variable reference domains: ``${...}``, ``$ENV{...}`` and ``$CACHE{...}``."""

from __future__ import annotations

from enum import Enum

from bzlgen.errors import EvalError


class VarDomain(Enum):
    """Namespace a variable reference is resolved in."""

    DEFAULT = ""
    ENV = "ENV"
    CACHE = "CACHE"

    @classmethod
    def capture(cls, name: str) -> "VarDomain":
        """Map the name between ``$`` and ``{`` of an opening marker to a domain.

        Raises:
            EvalError: If the name is not a supported domain.
        """
        try:
            return cls(name)
        except ValueError:
            raise EvalError(f"unsupported variable domain {name!r}") from None

    def __str__(self) -> str:
        return f"${self.value}{{"


__all__ = ["VarDomain"]
