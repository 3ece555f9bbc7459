import math

import pytest

from uibro.values import (
    Handle, ObjectKind, Value, ValueKind, apply_binary, apply_unary,
    parse_number, to_bool, to_int, to_string
)


@pytest.mark.parametrize("text, expected", [
    ("3", 3.0),
    ("-2", -2.0),
    (" 4.5 ", 4.5),
    ("1e3", 1000.0),
    (".5", 0.5),
    ("7.", 7.0),
    ("1.2.3", 0.0),
    ("abc", 0.0),
    ("3abc", 0.0),
    ("", 0.0),
])
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_arithmetic_coerces_strings():
    result = apply_binary('+', Value.string("3"), Value.string("4"))
    assert result == Value.number(7)
    assert apply_binary('+', Value.string("abc"), Value.number(1)) == Value.number(1)
    assert apply_binary('*', Value.boolean(True), Value.number(5)) == Value.number(5)


def test_division_by_zero_follows_ieee():
    assert apply_binary('/', Value.number(1), Value.number(0)).data == math.inf
    assert apply_binary('/', Value.number(-1), Value.number(0)).data == -math.inf
    assert math.isnan(apply_binary('/', Value.number(0), Value.number(0)).data)


def test_equality_with_strings_compares_string_forms():
    assert apply_binary('==', Value.number(5), Value.string("5")).data is True
    assert apply_binary('==', Value.number(5), Value.string("5.0")).data is False
    assert apply_binary('!=', Value.number(5), Value.string("5.0")).data is True
    assert apply_binary('==', Value.boolean(True), Value.string("true")).data is True


def test_equality_between_same_kinds():
    assert apply_binary('==', Value.number(2), Value.number(2.0)).data is True
    assert apply_binary('==', Value.boolean(False), Value.boolean(False)).data is True
    handle = Handle(0, ObjectKind.BUTTON)
    assert apply_binary('==', Value.object(handle), Value.object(handle)).data is True
    other = Handle(1, ObjectKind.BUTTON)
    assert apply_binary('==', Value.object(handle), Value.object(other)).data is False


def test_equality_mixed_non_string_kinds():
    assert apply_binary('==', Value.boolean(True), Value.number(1)).data is True
    assert apply_binary('==', Value.object(Handle(0, ObjectKind.WINDOW)), Value.number(0)).data is False


def test_comparison_is_numeric():
    assert apply_binary('>', Value.string("10"), Value.string("9")).data is True
    assert apply_binary('<=', Value.string("x"), Value.number(0)).data is True


def test_logical_operators_coerce_to_boolean():
    assert apply_binary('&&', Value.string("a"), Value.number(2)) == Value.boolean(True)
    assert apply_binary('||', Value.string(""), Value.number(0)) == Value.boolean(False)
    assert apply_unary('!', Value.string("")) == Value.boolean(True)


def test_to_bool():
    assert to_bool(Value.number(0)) is False
    assert to_bool(Value.number(-1)) is True
    assert to_bool(Value.string("false")) is True
    assert to_bool(Value.object(Handle(0, ObjectKind.LABEL))) is True


def test_to_string_formats_numbers():
    assert to_string(Value.number(5)) == "5"
    assert to_string(Value.number(2.5)) == "2.5"
    assert to_string(Value.number(math.inf)) == "inf"
    assert to_string(Value.boolean(False)) == "false"
    assert to_string(Value.object(Handle(3, ObjectKind.LABEL))) == "<label #3>"


def test_to_int_truncates_and_guards_non_finite():
    assert to_int(Value.number(9.9)) == 9
    assert to_int(Value.number(-9.9)) == -9
    assert to_int(Value.number(math.nan)) == 0
    assert to_int(Value.string("12")) == 12


def test_value_kinds():
    assert Value.string("a").kind == ValueKind.STRING
    assert Value.number(1).data == 1.0
    assert not Value.boolean(True).is_object
