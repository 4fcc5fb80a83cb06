"""
Script values - the literal types conditions and actions work with.

Literals parsed from data files and values read from game state are
both represented as one of three tagged variants: BoolValue,
NumberValue or StringValue. All comparison and coercion rules live
here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

SIGNED_DECIMAL = re.compile(r'^-?\d+(\.\d+)?$')
SIGNED_INTEGER = re.compile(r'^[+-]?\d+$')
QUOTES = '"\''


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class NumberValue:
    value: int | float


@dataclass(frozen=True)
class StringValue:
    value: str


Value = Union[BoolValue, NumberValue, StringValue]


class Operator(Enum):
    """Comparison operators, longest symbols first for matching."""
    GE = '>='
    LE = '<='
    EQ = '=='
    NE = '!='
    GT = '>'
    LT = '<'

    @classmethod
    def from_symbol(cls, symbol: str) -> Operator:
        return cls(symbol)


# Regex alternation matching any operator symbol
OPERATOR_PATTERN = '|'.join(re.escape(op.value) for op in Operator)


def looks_numeric(text: str) -> bool:
    return bool(SIGNED_DECIMAL.match(text.strip()))


def parse_number(text: str) -> int | float:
    """Parse a signed decimal, keeping integers as int."""
    text = text.strip()
    if SIGNED_INTEGER.match(text):
        return int(text)
    return float(text)


def strip_quotes(text: str) -> str:
    """Strip one leading and one trailing quote character."""
    if text[:1] in QUOTES and text:
        text = text[1:]
    if text[-1:] in QUOTES and text:
        text = text[:-1]
    return text


def parse_literal(token: str) -> Value:
    """
    Parse a literal token from a condition.

    - `true` / `false` (any case) -> BoolValue
    - signed decimal (`-3`, `2.5`) -> NumberValue
    - anything else -> StringValue with surrounding quotes stripped
    """
    token = token.strip()
    lowered = token.lower()
    if lowered == 'true':
        return BoolValue(True)
    if lowered == 'false':
        return BoolValue(False)
    if SIGNED_DECIMAL.match(token):
        return NumberValue(parse_number(token))
    return StringValue(strip_quotes(token))


def parse_scalar(text: str) -> int | float | str:
    """Parse an action argument: numeric-looking text becomes a number."""
    if looks_numeric(text):
        return parse_number(text)
    return text


def from_native(value: Any) -> Optional[Value]:
    """Wrap a value read from game state (None for unsupported types)."""
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, (int, float)):
        return NumberValue(value)
    if isinstance(value, str):
        return StringValue(value)
    return None


def coerce(left: Value, right: Value) -> tuple[Value, Value]:
    """
    Apply the single coercion rule.

    When one side is a number and the other a numeric-looking string,
    the string becomes a number. Every other pair is returned as-is.
    """
    if isinstance(left, NumberValue) and isinstance(right, StringValue) and looks_numeric(right.value):
        return left, NumberValue(parse_number(right.value))
    if isinstance(left, StringValue) and isinstance(right, NumberValue) and looks_numeric(left.value):
        return NumberValue(parse_number(left.value)), right
    return left, right


def compare(left: Value, operator: Operator, right: Value) -> bool:
    """
    Compare two values after coercion.

    `==` / `!=` compare variant and value, so `true` never equals `1`.
    Ordering operators only order values of the same variant; ordering
    across variants is False.
    """
    left, right = coerce(left, right)

    if operator is Operator.EQ:
        return left == right
    if operator is Operator.NE:
        return left != right

    if type(left) is not type(right):
        return False

    a, b = left.value, right.value
    if operator is Operator.GE:
        return a >= b
    if operator is Operator.LE:
        return a <= b
    if operator is Operator.GT:
        return a > b
    if operator is Operator.LT:
        return a < b
    raise ValueError(f"Unsupported operator: {operator}")
