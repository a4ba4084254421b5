"""Encoding of Python values as Starlark literals."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Iterator, Tuple

from bzlgen.errors import WriterError


def marshal(value: Any) -> str:
    """Return the Starlark encoding of ``value``.

    Supported values are None, booleans, numbers, strings, lists and tuples
    (encoded as lists, recursively) and objects providing a
    ``marshal_starlark()`` method returning their own encoding.

    Raises:
        WriterError: If the value (or a nested value) cannot be encoded.
    """
    encoder = getattr(value, "marshal_starlark", None)
    if encoder is not None:
        return encoder()
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=True)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(marshal(item) for item in value) + "]"
    raise WriterError(f"unsupported encoding type for value: {value!r}")


class Properties:
    """Ordered keyword arguments, encoded as ``key = value, ...``."""

    def __init__(self, items: Iterable[Tuple[str, Any]] = ()):
        self._items: Dict[str, Any] = dict(items)

    def __setitem__(self, key: str, value: Any) -> None:
        self._items[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Properties):
            return NotImplemented
        return list(self._items.items()) == list(other._items.items())

    def __repr__(self) -> str:
        return f"Properties({list(self._items.items())!r})"

    def marshal_starlark(self) -> str:
        return ", ".join(f"{key} = {marshal(value)}" for key, value in self._items.items())


__all__ = ["marshal", "Properties"]
