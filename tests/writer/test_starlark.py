"""Tests for the Starlark macro writer."""

from __future__ import annotations

import io

import pytest

from bzlgen.errors import StructuralError, WriterError
from bzlgen.writer.marshal import Properties
from bzlgen.writer.starlark import StarlarkWriter, starlark_identifier


def test_writes_macro_with_commands() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)

    writer.begin_macro("generated")
    writer.push_directory("lib")
    writer.write_command("add_llvm_library", "LLVMSupport", "APInt.cpp")
    assert writer.pop_directory() == "lib"
    writer.end_macro()

    assert out.getvalue() == (
        "def generated(ctx):\n"
        '    ctx = ctx.push_directory(ctx, "lib")\n'
        '    ctx.add_llvm_library(ctx, "LLVMSupport", "APInt.cpp")\n'
        "    ctx = ctx.pop_directory(ctx)\n"
    )


def test_empty_directories_are_suppressed() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)

    writer.begin_macro("m")
    writer.push_directory("")
    writer.push_directory("empty")
    writer.pop_directory()
    writer.push_directory("full")
    writer.write_command("cmd")
    writer.pop_directory()
    writer.pop_directory()
    writer.end_macro()

    assert out.getvalue() == (
        "def m(ctx):\n"
        '    ctx = ctx.push_directory(ctx, "")\n'
        '    ctx = ctx.push_directory(ctx, "full")\n'
        "    ctx.cmd(ctx)\n"
        "    ctx = ctx.pop_directory(ctx)\n"
        "    ctx = ctx.pop_directory(ctx)\n"
    )


def test_macro_without_commands() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)

    writer.begin_macro("m")
    writer.end_macro()

    assert out.getvalue() == "def m(ctx):\n    pass\n"


def test_macro_with_only_empty_directories_gets_pass() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)

    writer.begin_macro("m")
    writer.push_directory("")
    writer.push_directory("lib")
    writer.pop_directory()
    writer.pop_directory()
    writer.end_macro()
    writer.begin_macro("n")
    writer.write_command("cmd")
    writer.end_macro()

    assert out.getvalue() == "def m(ctx):\n    pass\ndef n(ctx):\n    ctx.cmd(ctx)\n"


def test_nothing_is_written_before_first_command() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)

    writer.begin_macro("m")
    writer.push_directory("a")

    assert out.getvalue() == ""


def test_strings_are_ascii_quoted() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)
    writer.begin_macro("m")

    writer.write_command("cmd", 'say "hi"\n', "café")

    assert '    ctx.cmd(ctx, "say \\"hi\\"\\n", "caf\\u00e9")\n' in out.getvalue()


def test_properties_argument() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)
    writer.begin_macro("m")

    writer.write_command("library", Properties([("name", "Support"), ("dependencies", ["a", "b"])]))

    assert '    ctx.library(ctx, name = "Support", dependencies = ["a", "b"])\n' in out.getvalue()


def test_nested_macros_are_rejected() -> None:
    writer = StarlarkWriter(io.StringIO())
    writer.begin_macro("m")

    with pytest.raises(WriterError, match="nested"):
        writer.begin_macro("n")


def test_operations_require_macro() -> None:
    writer = StarlarkWriter(io.StringIO())

    with pytest.raises(WriterError, match="no current macro"):
        writer.write_command("cmd")
    with pytest.raises(WriterError):
        writer.end_macro()
    with pytest.raises(WriterError):
        writer.push_directory("a")


def test_pop_without_directory() -> None:
    writer = StarlarkWriter(io.StringIO())
    writer.begin_macro("m")

    with pytest.raises(StructuralError):
        writer.pop_directory()


def test_macro_can_be_reopened_after_end() -> None:
    out = io.StringIO()
    writer = StarlarkWriter(out)
    writer.begin_macro("a")
    writer.end_macro()
    writer.begin_macro("b")
    writer.end_macro()

    assert out.getvalue().count("def ") == 2


def test_identifiers() -> None:
    assert starlark_identifier("add_library") == "add_library"
    assert starlark_identifier("if") == "if_"
    with pytest.raises(WriterError):
        starlark_identifier("not-valid")
    with pytest.raises(WriterError):
        starlark_identifier("")
