"""Tests for argument evaluation against variable bindings."""

from __future__ import annotations

from typing import List

import pytest

from bzlgen.cmake.ast import decode_escape, split_list
from bzlgen.cmake.bindings import Bindings
from bzlgen.cmake.domain import VarDomain
from bzlgen.cmake.parser import parse, parse_variable_reference
from bzlgen.errors import EvalError


def _eval(source: str, bindings: Bindings) -> List[str]:
    return parse(source).commands[0].eval_arguments(bindings)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("A;B;C", ["A", "B", "C"]),
        ("a\\;b", ["a;b"]),
        (";;a;", ["a"]),
        ("", []),
    ],
)
def test_split_list(value: str, expected: List[str]) -> None:
    assert split_list(value) == expected


def test_decode_escape() -> None:
    assert decode_escape("\\n") == "\n"
    assert decode_escape("\\t") == "\t"
    assert decode_escape("\\;") == "\\;"
    assert decode_escape("\\(") == "("


def test_nested_reference_builds_variable_name() -> None:
    """``${pre_${VAR}_post}`` looks up ``pre_X_post`` when VAR is X."""
    bindings = Bindings({"VAR": "X", "pre_X_post": "found"})
    ref = parse_variable_reference("${pre_${VAR}_post}")

    assert ref.name(bindings) == "pre_X_post"
    assert ref.eval(bindings) == "found"


def test_unquoted_argument_splits_lists() -> None:
    assert _eval("f(A;B;C)", Bindings()) == ["A", "B", "C"]


def test_quoting_suppresses_list_split() -> None:
    assert _eval('f("A;B;C")', Bindings()) == ["A;B;C"]


def test_unquoted_reference_splits_list_value() -> None:
    bindings = Bindings({"L": "A;B;C"})

    assert _eval("f(${L})", bindings) == ["A", "B", "C"]
    assert _eval('f("${L}")', bindings) == ["A;B;C"]


def test_empty_values() -> None:
    """Unquoted empties vanish, quoted empties remain."""
    assert _eval('f(${UNSET} "" "${UNSET}")', Bindings()) == ["", ""]


def test_bracket_argument_is_not_substituted() -> None:
    assert _eval("f([[${X};y]])", Bindings({"X": "1"})) == ["${X};y"]


def test_nested_argument_lists_keep_parentheses() -> None:
    assert _eval("f(a (b c) d)", Bindings()) == ["a", "(", "b", "c", ")", "d"]


def test_cache_and_env_domains() -> None:
    bindings = Bindings({"X": "scoped"})
    bindings.set_cache("X", "cached")

    assert _eval("f(${X} $CACHE{X} $ENV{X})", bindings) == ["scoped", "cached"]
    assert _eval('f("$ENV{HOME}")', bindings) == [""]


def test_unknown_domain_fails_at_evaluation() -> None:
    ref = parse_variable_reference("$FOO{X}")

    with pytest.raises(EvalError, match="unsupported variable domain"):
        ref.eval(Bindings())


def test_var_domain_capture() -> None:
    assert VarDomain.capture("") is VarDomain.DEFAULT
    assert VarDomain.capture("ENV") is VarDomain.ENV
    assert str(VarDomain.CACHE) == "$CACHE{"


def test_escaped_backslash_before_semicolon_still_splits() -> None:
    assert _eval(r"f(a\\;b c\;d)", Bindings()) == ["a\\", "b", "c;d"]
    assert _eval(r'f("a\\;b")', Bindings()) == [r"a\;b"]


def test_unquoted_escapes_stay_encoded_for_splitting() -> None:
    assert decode_escape(r"\\") == "\\"
    assert decode_escape(r"\\", unquoted=True) == r"\\"
    assert decode_escape(r"\;", unquoted=True) == r"\;"
    assert decode_escape(r"\n", unquoted=True) == "\n"
    assert split_list(r"a\\;b") == ["a\\", "b"]


def test_punctuated_domain_fails_at_evaluation() -> None:
    ref = parse_variable_reference("$my.domain{X}")

    assert ref.domain_name == "my.domain"
    with pytest.raises(EvalError, match="unsupported variable domain"):
        _eval("f($my.domain{X})", Bindings())
