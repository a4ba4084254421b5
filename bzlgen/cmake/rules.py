"""Flex-like rule tables for a table driven lexer.

A :class:`RuleTable` is an ordered list of rules. Each rule pairs a set of
start conditions with a compiled pattern and an action. At every step the
:class:`Scanner` considers the rules applicable to its current start
condition and picks the one with the longest match at the current offset;
ties go to the rule declared first.

Start conditions are inclusive by default: a rule declared without any
conditions applies to every inclusive condition. Exclusive conditions only
consider rules which name them explicitly.

Patterns are evaluated with Python's backtracking ``re`` engine, which
returns the leftmost-first rather than the leftmost-longest match of a
single pattern. Table patterns are therefore written with greedy
repetitions of disjoint alternatives.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from bzlgen.cmake.tokens import Position, Token
from bzlgen.errors import LexError

INITIAL_CONDITION = 0

# A rule using this pattern matches at, and only at, end of input.
EOF_PATTERN = ""


class ScanState(Protocol):
    """Minimal interface handed to rule actions."""

    def begin(self, condition: int) -> None:
        """Transition to the given start condition."""
        ...

    @property
    def matched(self) -> str:
        """Text matched by the selected rule."""
        ...

    @property
    def token(self) -> Token:
        """Token currently being constructed."""
        ...


# Actions return True when the pending token is complete and should be emitted.
Action = Callable[[ScanState], bool]


@dataclass(frozen=True)
class Rule:
    """A single table entry.

    Attributes:
        conditions: Start conditions in which the rule is considered. Empty
            means every inclusive condition.
        pattern: Compiled pattern, or None for the end-of-input rule.
        action: Callback invoked when the rule is selected.
    """

    conditions: Tuple[int, ...]
    pattern: Optional["re.Pattern[str]"]
    action: Action


class _RuleBuilder:
    def __init__(self, conditions: Tuple[int, ...]):
        self._conditions = conditions

    def match(self, pattern: Union[str, "re.Pattern[str]"], action: Action, flags: int = 0) -> Rule:
        if isinstance(pattern, str):
            compiled = None if pattern == EOF_PATTERN else re.compile(pattern, flags)
        else:
            compiled = pattern
        return Rule(self._conditions, compiled, action)


def when(*conditions: int) -> _RuleBuilder:
    """Start a rule declaration applying to the given start conditions.

    Example:
        >>> when(STRING).match(r'"', lex_end_quote)
    """
    return _RuleBuilder(tuple(conditions))


class RuleTable:
    """Ordered collection of rules plus the set of exclusive conditions."""

    def __init__(self, rules: Iterable[Rule] = (), exclusive: Iterable[int] = ()):
        self._rules: List[Rule] = list(rules)
        self._exclusive = frozenset(exclusive)

    def add(self, rule: Rule) -> None:
        self._rules.append(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def is_exclusive(self, condition: int) -> bool:
        return condition in self._exclusive

    def _applies(self, condition: int, conditions: Sequence[int]) -> bool:
        if not conditions:
            return condition not in self._exclusive
        return condition in conditions

    def match(self, condition: int, text: str, pos: int = 0) -> Tuple[Optional[Action], str]:
        """Select the action for the input at ``text[pos:]``.

        Args:
            condition: Current start condition.
            text: Complete input text.
            pos: Offset at which to match.

        Returns:
            Tuple of (action, matched text). The action is None when no rule
            applies, in which case the input is invalid.
        """
        at_eof = pos >= len(text)
        best_action: Optional[Action] = None
        best_end = pos
        for rule in self._rules:
            if not self._applies(condition, rule.conditions):
                continue
            if rule.pattern is None:
                # End of input is matched by the first applicable EOF rule only.
                if at_eof:
                    return rule.action, ""
                continue
            if at_eof:
                continue
            m = rule.pattern.match(text, pos)
            if m is not None and m.end() > best_end:
                best_action = rule.action
                best_end = m.end()
        return best_action, text[pos:best_end]


class Scanner:
    """Applies a :class:`RuleTable` to an input string.

    The scanner owns the current start condition and position; only rule
    actions change the condition (through :meth:`begin`).
    """

    def __init__(self, rules: RuleTable, text: str, position: Optional[Position] = None):
        self._rules = rules
        self._text = text
        self._position = position or Position()
        self._offset = 0
        self._condition = INITIAL_CONDITION
        self._matched = ""

    @property
    def position(self) -> Position:
        """Position of the first character not yet consumed."""
        return self._position

    @property
    def condition(self) -> int:
        return self._condition

    @property
    def matched(self) -> str:
        return self._matched

    def set_position(self, position: Position) -> None:
        self._position = position

    def begin(self, condition: int) -> None:
        self._condition = condition

    def at_eof(self) -> bool:
        return self._offset >= len(self._text)

    def scan(self) -> Action:
        """Consume the next match and return its action.

        Raises:
            LexError: If no applicable rule matches the remaining input.
        """
        action, matched = self._rules.match(self._condition, self._text, self._offset)
        if action is None:
            if self.at_eof():
                raise LexError("unexpected end of input", self._position)
            raise LexError(f"invalid token {self._text[self._offset]!r}", self._position)
        self._matched = matched
        self._offset += len(matched)
        self._position = self._position.advance(matched)
        return action


__all__ = [
    "INITIAL_CONDITION",
    "EOF_PATTERN",
    "Action",
    "Rule",
    "RuleTable",
    "ScanState",
    "Scanner",
    "when",
]
