"""
UIBro runtime values - tagged values, object handles and coercion rules
"""

import math
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict


class ValueKind(Enum):
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    OBJECT = auto()


class ObjectKind(Enum):
    WINDOW = auto()
    BUTTON = auto()
    LABEL = auto()
    INPUT = auto()
    CHECKBOX = auto()
    GROUPBOX = auto()
    COMBOBOX = auto()
    PROGRESSBAR = auto()
    NOTIFICATION = auto()


@dataclass(frozen=True)
class Handle:
    """Stable index of an object in an interpreter's registry."""
    index: int
    kind: ObjectKind


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    data: Any

    @staticmethod
    def string(text: str) -> 'Value':
        return Value(ValueKind.STRING, text)

    @staticmethod
    def number(n: float) -> 'Value':
        return Value(ValueKind.NUMBER, float(n))

    @staticmethod
    def boolean(flag: bool) -> 'Value':
        return Value(ValueKind.BOOLEAN, bool(flag))

    @staticmethod
    def object(handle: Handle) -> 'Value':
        return Value(ValueKind.OBJECT, handle)

    @property
    def is_object(self) -> bool:
        return self.kind == ValueKind.OBJECT

    def __str__(self) -> str:
        return to_string(self)


NUMBER_RE = re.compile(r'\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*')


def parse_number(text: str) -> float:
    """Parse numeric text, falling back to 0 for anything malformed."""
    if not NUMBER_RE.fullmatch(text):
        return 0.0
    return float(text)


def format_number(n: float) -> str:
    if math.isfinite(n) and n == int(n):
        return str(int(n))
    return repr(n)


def to_number(value: Value) -> float:
    if value.kind == ValueKind.NUMBER:
        return value.data
    if value.kind == ValueKind.BOOLEAN:
        return 1.0 if value.data else 0.0
    if value.kind == ValueKind.STRING:
        return parse_number(value.data)
    return 0.0


def to_int(value: Value) -> int:
    n = to_number(value)
    if not math.isfinite(n):
        return 0
    return int(n)


def to_bool(value: Value) -> bool:
    if value.kind == ValueKind.BOOLEAN:
        return value.data
    if value.kind == ValueKind.NUMBER:
        return value.data != 0
    if value.kind == ValueKind.STRING:
        return value.data != ''
    return True


def to_string(value: Value) -> str:
    if value.kind == ValueKind.STRING:
        return value.data
    if value.kind == ValueKind.NUMBER:
        return format_number(value.data)
    if value.kind == ValueKind.BOOLEAN:
        return 'true' if value.data else 'false'
    handle = value.data
    return f"<{handle.kind.name.lower()} #{handle.index}>"


def divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def values_equal(left: Value, right: Value) -> bool:
    if ValueKind.STRING in (left.kind, right.kind):
        return to_string(left) == to_string(right)
    if left.kind == right.kind:
        return left.data == right.data
    if ValueKind.OBJECT in (left.kind, right.kind):
        return False
    return to_number(left) == to_number(right)


ARITHMETIC: Dict[str, Callable[[float, float], float]] = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': divide,
}

COMPARISON: Dict[str, Callable[[float, float], bool]] = {
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
}

LOGICAL: Dict[str, Callable[[bool, bool], bool]] = {
    '&&': lambda a, b: a and b,
    '||': lambda a, b: a or b,
}


def apply_binary(op: str, left: Value, right: Value) -> Value:
    """Apply a binary operator to two already-evaluated operands."""
    if op in ARITHMETIC:
        return Value.number(ARITHMETIC[op](to_number(left), to_number(right)))
    if op in COMPARISON:
        return Value.boolean(COMPARISON[op](to_number(left), to_number(right)))
    if op in LOGICAL:
        return Value.boolean(LOGICAL[op](to_bool(left), to_bool(right)))
    if op == '==':
        return Value.boolean(values_equal(left, right))
    if op == '!=':
        return Value.boolean(not values_equal(left, right))
    raise ValueError(f"Unknown operator: {op}")


def apply_unary(op: str, operand: Value) -> Value:
    if op == '!':
        return Value.boolean(not to_bool(operand))
    raise ValueError(f"Unknown operator: {op}")
