"""Tests for the flex-like rule table and scanner."""

from __future__ import annotations

import pytest

from bzlgen.cmake.rules import EOF_PATTERN, RuleTable, Scanner, when
from bzlgen.cmake.tokens import Position
from bzlgen.errors import LexError

EXCLUSIVE = 1


def _short(state) -> bool:
    return True


def _long(state) -> bool:
    return True


def _eof(state) -> bool:
    return True


def test_longest_match_wins_regardless_of_declaration_order() -> None:
    """A later rule with a longer match is preferred."""
    table = RuleTable([when().match("a", _short), when().match("ab", _long)])

    scanner = Scanner(table, "ab")
    action = scanner.scan()

    assert action is _long
    assert scanner.matched == "ab"


def test_equal_length_matches_prefer_first_declared_rule() -> None:
    """Ties are resolved in favour of the earlier rule."""
    table = RuleTable([when().match("[a-z]+", _short), when().match("abc", _long)])

    scanner = Scanner(table, "abc")

    assert scanner.scan() is _short


def test_exclusive_condition_ignores_unconditional_rules() -> None:
    """Rules without conditions do not apply in exclusive start conditions."""
    table = RuleTable(
        [when().match("x+", _short), when(EXCLUSIVE).match("x", _long)],
        exclusive=[EXCLUSIVE],
    )

    scanner = Scanner(table, "xxx")
    scanner.begin(EXCLUSIVE)

    assert table.is_exclusive(EXCLUSIVE)
    assert scanner.scan() is _long
    assert scanner.matched == "x"


def test_eof_rule_only_matches_at_end_of_input() -> None:
    """The EOF rule is selected once all input is consumed."""
    table = RuleTable([when().match("a", _short), when().match(EOF_PATTERN, _eof)])

    scanner = Scanner(table, "a")

    assert scanner.scan() is _short
    assert scanner.at_eof()
    assert scanner.scan() is _eof


def test_scan_advances_position() -> None:
    """Positions track offsets, lines and columns across newlines."""
    table = RuleTable([when().match(r"[a-z]+\n?", _short)])

    scanner = Scanner(table, "ab\ncd")
    scanner.scan()
    assert scanner.position == Position(3, 2, 1)
    scanner.scan()
    assert scanner.position == Position(5, 2, 3)


def test_unmatched_input_raises_lex_error() -> None:
    """Input no rule accepts is reported with its position."""
    table = RuleTable([when().match("a", _short)])

    scanner = Scanner(table, "ab")
    scanner.scan()
    with pytest.raises(LexError) as excinfo:
        scanner.scan()

    assert excinfo.value.position == Position(1, 1, 2)
    assert "invalid token 'b'" in str(excinfo.value)


def test_missing_eof_rule_raises_lex_error() -> None:
    """Reaching end of input without an EOF rule is an error, not an IndexError."""
    scanner = Scanner(RuleTable([when().match("a", _short)]), "")

    with pytest.raises(LexError, match="unexpected end of input"):
        scanner.scan()
