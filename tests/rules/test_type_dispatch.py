from __future__ import annotations
import numpy as np
import pytest

from purifier.errors import RuleError
from purifier.rules.types import (
    ARRAY, BOOLEAN, FLOATING, INTEGER, NUMERIC, STRING, TYPES,
    first_valid, is_member, normalize_types, truth_token, type_spec,
)


def test_aliases_share_a_spec():
    assert TYPES["int"] is TYPES["integer"] is INTEGER
    assert TYPES["float"] is TYPES["floating"] is FLOATING
    assert TYPES["number"] is TYPES["numeric"] is NUMERIC
    assert TYPES["bool"] is TYPES["boolean"] is BOOLEAN

def test_type_spec_lookup_is_case_insensitive_and_closed():
    assert type_spec(" Int ") is INTEGER
    with pytest.raises(RuleError):
        type_spec("uuid")

def test_string_accepts_anything_but_checks_strictly():
    assert STRING.admits(5) and STRING.admits(None) and STRING.admits([1])
    assert STRING.check("x") is True
    assert STRING.check(5) is False

@pytest.mark.parametrize(
    "value, expected",
    [(None, ""), (True, "true"), (False, "false"), (3, "3"), (2.0, "2"), (2.5, "2.5"), ({"a": 1}, '{"a":1}')],
)
def test_string_coercion_is_canonical(value, expected):
    assert STRING.coerce(value) == expected

def test_integer_dispatch():
    assert INTEGER.admits("12") and INTEGER.admits(np.int64(3))
    assert not INTEGER.admits(True)
    assert not INTEGER.admits("1.5")
    assert INTEGER.coerce("12") == 12
    assert INTEGER.coerce(7.0) == 7

def test_numeric_decides_int_vs_float_from_the_string_form():
    assert NUMERIC.coerce("3") == 3 and isinstance(NUMERIC.coerce("3"), int)
    assert NUMERIC.coerce("1.5") == 1.5
    assert NUMERIC.coerce("1e3") == 1000.0 and isinstance(NUMERIC.coerce("1e3"), float)
    assert FLOATING.coerce("4") == 4.0 and isinstance(FLOATING.coerce("4"), float)

def test_boolean_is_strict_to_validate_and_lenient_to_coerce():
    assert BOOLEAN.check(True) is True
    assert BOOLEAN.check("true") is False
    assert BOOLEAN.check(1) is False
    assert BOOLEAN.coerce("off") is False
    assert BOOLEAN.coerce("yes") is True

def test_array_dispatch():
    assert ARRAY.admits({"a": 1}) and ARRAY.admits([1]) and ARRAY.admits((1, 2))
    assert not ARRAY.admits("x")
    assert ARRAY.coerce((1, 2)) == [1, 2]

def test_truth_token_is_strict():
    assert truth_token("Yes") is True
    assert truth_token("0") is False
    assert truth_token(False) is False
    assert truth_token("maybe") is None

def test_normalize_types():
    assert normalize_types("int|float") == ("int", "float")
    assert normalize_types(None) == ("string",)
    assert normalize_types(None, "int") == ("int",)
    assert normalize_types(["INT", "int"]) == ("int",)
    with pytest.raises(RuleError):
        normalize_types("int|uuid")
    with pytest.raises(RuleError):
        normalize_types(5)

def test_first_valid_respects_declaration_order():
    assert first_valid("12", ("int", "string")) is INTEGER
    assert first_valid("12", ("string", "int")) is STRING
    assert first_valid("abc", ("int", "string")) is STRING
    assert first_valid(5, ("string",)) is None
    assert first_valid(5, ("string",), strict=False) is STRING

def test_membership_is_type_strict():
    assert is_member(1, (1, 2))
    assert not is_member(1, (1.0, "1", True))
    assert not is_member(True, (1,))
    assert is_member("red", ["red", "blue"])
