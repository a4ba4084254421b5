"""Tests for Starlark value encoding."""

from __future__ import annotations

import pytest

from bzlgen.errors import WriterError
from bzlgen.writer.marshal import Properties, marshal


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "None"),
        (True, "True"),
        (False, "False"),
        (42, "42"),
        (-1, "-1"),
        (1.5, "1.5"),
        ("text", '"text"'),
        ("tab\there", '"tab\\there"'),
        ([], "[]"),
        (["a", 1, None], '["a", 1, None]'),
        (("x", ["y"]), '["x", ["y"]]'),
    ],
)
def test_marshal_values(value, expected: str) -> None:
    assert marshal(value) == expected


def test_marshal_uses_custom_encoder() -> None:
    class Label:
        def marshal_starlark(self) -> str:
            return 'Label("//foo")'

    assert marshal([Label()]) == '[Label("//foo")]'


def test_marshal_rejects_unsupported_types() -> None:
    with pytest.raises(WriterError, match="unsupported"):
        marshal({"a": 1})


def test_properties_keep_insertion_order() -> None:
    props = Properties()
    props["name"] = "Support"
    props["parent"] = "Libraries"
    props["required_libraries"] = ["Demangle"]

    assert list(props) == ["name", "parent", "required_libraries"]
    assert "name" in props
    assert len(props) == 3
    assert props.marshal_starlark() == (
        'name = "Support", parent = "Libraries", required_libraries = ["Demangle"]'
    )


def test_properties_equality() -> None:
    assert Properties([("a", "1")]) == Properties([("a", "1")])
    assert Properties([("a", "1"), ("b", "2")]) != Properties([("b", "2"), ("a", "1")])
