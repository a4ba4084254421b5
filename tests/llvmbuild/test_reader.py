"""Tests for the LLVMBuild.txt reader."""

from __future__ import annotations

from pathlib import Path

import pytest

from bzlgen.errors import ParseError
from bzlgen.llvmbuild.reader import Component, parse_build_file, read_build_file
from bzlgen.writer.marshal import Properties

SAMPLE = """\
;===- ./lib/Support/LLVMBuild.txt ------------------------------*- Conf -*--===;
;
; This is an LLVMBuild description file for the components in this subdirectory.
;

[common]
subdirectories = IR   Support

[component_0]
type = Library
name = Support
parent = Libraries
required_libraries = Demangle BinaryFormat ; trailing comment
"""


def test_parse_sections_and_values() -> None:
    build_file = parse_build_file(SAMPLE, "LLVMBuild.txt")

    assert build_file.subdirectories() == ["IR", "Support"]
    components = build_file.components()
    assert [c.section for c in components] == ["component_0"]
    assert components[0].key("required_libraries") == ["Demangle", "BinaryFormat"]
    assert components[0].key("missing") == []


def test_components_keep_file_order() -> None:
    text = "[component_1]\ntype = Group\n[common]\n[component_0]\ntype = Tool\n"

    build_file = parse_build_file(text)

    assert [c.section for c in build_file.components()] == ["component_1", "component_0"]
    assert build_file.subdirectories() == []


def test_file_without_common_section() -> None:
    assert parse_build_file("[component_0]\ntype = Library").subdirectories() == []


def test_empty_file() -> None:
    assert parse_build_file("").sections == {}


def test_empty_value_and_repeated_key() -> None:
    build_file = parse_build_file("[common]\nsubdirectories =\nsubdirectories = A\nsubdirectories = B C\n")

    assert build_file.subdirectories() == ["A", "B", "C"]


def test_hash_comments_and_blank_lines() -> None:
    text = "# header\n\n[component_0]\n\n# note\ntype = TargetGroup\n\n"

    assert parse_build_file(text).components()[0].rule_kind() == "target_group"


@pytest.mark.parametrize(
    "kind, expected",
    [
        ("Library", "library"),
        ("TargetGroup", "target_group"),
        ("OptionalLibrary", "optional_library"),
        ("LibraryGroup", "library_group"),
    ],
)
def test_rule_kind(kind: str, expected: str) -> None:
    assert Component("component_0", {"type": [kind]}).rule_kind() == expected


def test_rule_kind_requires_single_type() -> None:
    assert Component("component_0", {}).rule_kind() == ""
    assert Component("component_0", {"type": ["A", "B"]}).rule_kind() == ""


def test_properties_select_known_keys() -> None:
    component = Component(
        "component_0",
        {
            "type": ["Library"],
            "name": ["Support"],
            "dependencies": ["A", "B"],
            "installed": ["1"],
            "library_name": ["LLVMSupport"],
        },
    )

    assert component.properties() == Properties(
        [("name", "Support"), ("dependencies", ["A", "B"]), ("library_name", "LLVMSupport")]
    )


def test_syntax_error_raises_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_build_file("[common]\n= missing key\n", "bad/LLVMBuild.txt")

    assert excinfo.value.position is not None
    assert excinfo.value.position.filename == "bad/LLVMBuild.txt"
    assert excinfo.value.position.line == 2


def test_key_outside_section_is_an_error() -> None:
    with pytest.raises(ParseError):
        parse_build_file("type = Library\n")


def test_read_build_file(tmp_path: Path) -> None:
    path = tmp_path / "LLVMBuild.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    assert read_build_file(path).filename == str(path)
