"""
Condition evaluation for ::when blocks.

A condition set maps an operator to [field_name, expected_value]:

    {"eql": ["isAdmin", True], "gt": ["age", 17]}

It passes only if every entry holds for the already-resolved output of the
node's other children.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from .errors import ConditionError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equal(value: Any, expected: Any) -> bool:
    # 1 == True and 1 == "1"-style coercions do not count as equal
    if _is_number(value) and _is_number(expected):
        return value == expected
    return type(value) is type(expected) and value == expected


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    # Incomparable operands (None vs 3, "a" vs 1) fail the condition
    def check(value: Any, expected: Any) -> bool:
        try:
            return bool(compare(value, expected))
        except TypeError:
            return False
    return check


def _match(value: Any, expected: Any) -> bool:
    if not isinstance(value, str):
        return False
    pattern = expected if isinstance(expected, re.Pattern) else re.compile(expected)
    return pattern.search(value) is not None


def _contains(value: Any, expected: Any) -> bool:
    if value is None:
        return False
    try:
        return expected in value
    except TypeError:
        return False


COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "eql": _strict_equal,
    "nql": lambda value, expected: not _strict_equal(value, expected),
    "lt": _ordered(lambda value, expected: value < expected),
    "gt": _ordered(lambda value, expected: value > expected),
    "lte": _ordered(lambda value, expected: value <= expected),
    "gte": _ordered(lambda value, expected: value >= expected),
    "truthy": lambda value, expected: bool(value),
    "falsy": lambda value, expected: not value,
    "match": _match,
    "contains": _contains,
}

UNARY_OPERATORS = frozenset({"truthy", "falsy"})


def validate_conditions(conditions: Any) -> None:
    """
    Check the shape of a condition set.

    Raises:
        ConditionError: On unknown operators or malformed entries
    """
    if not isinstance(conditions, Mapping):
        raise ConditionError("Conditions must be provided as an object.")

    for operator, entry in conditions.items():
        if operator not in COMPARISONS:
            raise ConditionError(f'Unknown condition operator "{operator}".')
        if not isinstance(entry, (list, tuple)) or not entry or not isinstance(entry[0], str):
            raise ConditionError(
                f'Condition "{operator}" must be a [fieldName, expectedValue] array.'
            )
        if operator not in UNARY_OPERATORS and len(entry) != 2:
            raise ConditionError(
                f'Condition "{operator}" must be a [fieldName, expectedValue] array.'
            )
        if operator == "match":
            try:
                if not isinstance(entry[1], re.Pattern):
                    re.compile(entry[1])
            except (re.error, TypeError) as e:
                raise ConditionError(f'Condition "match" has an invalid pattern: {e}') from e


def conditions_pass(conditions: Mapping[str, Any], output: Mapping[str, Any]) -> bool:
    """
    Evaluate a condition set against resolved sibling output.

    Example:
        conditions_pass({"eql": ["isAdmin", True]}, {"isAdmin": True})  # True
    """
    validate_conditions(conditions)

    for operator, entry in conditions.items():
        field_name = entry[0]
        expected = entry[1] if len(entry) > 1 else None
        if not COMPARISONS[operator](output.get(field_name), expected):
            return False
    return True
