from __future__ import annotations
import pytest

from purifier.errors import RuleError
from purifier.rules.ruleset import RuleSet, normalize_rule
from purifier.rules.schema import Rule, build_rule


def test_fields_keep_declaration_order_and_are_cached():
    rs = RuleSet({"b": "int", "a": {"type": "string", "filters": ["trim"]}})
    assert list(rs) == ["b", "a"]
    assert len(rs) == 2 and "a" in rs
    assert rs.rule("b").types == ("int",)
    assert rs.rule("a").filters == ("trim",)
    assert rs.rule("a") is rs.rule("a")
    assert [k for k, _ in rs.items()] == ["b", "a"]

def test_positional_rule_set():
    rs = RuleSet(["int;min:1"])
    assert rs.positional and not rs.is_map_of_rules
    assert rs.first().types == ("int",)
    assert RuleSet([]).first() is None

def test_rule_set_shape_is_checked():
    with pytest.raises(RuleError):
        RuleSet("int")

def test_bad_rule_raises_on_first_use():
    rs = RuleSet({"a": 5})
    with pytest.raises(RuleError):
        rs.rule("a")

def test_missing_field_is_a_key_error():
    with pytest.raises(KeyError):
        RuleSet({}).rule("nope")

def test_default_type_comes_from_the_rule_set():
    rs = RuleSet({"a": {}, "b": "required"}, default_type="int")
    assert rs.rule("a").types == ("int",)
    assert rs.rule("b").types == ("int",)

def test_normalize_is_idempotent():
    r = normalize_rule("int;min:1")
    assert normalize_rule(r) is r
    assert RuleSet({"x": r}).rule("x") is r

def test_rule_set_can_wrap_another():
    inner = RuleSet(["int"])
    assert RuleSet(inner).positional

def test_build_rule_accepts_camel_and_snake_keys():
    r = build_rule({"type": "array", "childRules": {"x": "int"}, "recursiveChildRules": "yes"})
    assert r.child_rules == {"x": "int"}
    assert r.recursive_child_rules is True
    assert build_rule({"child_rules": ["int"]}).child_rules == ["int"]

def test_build_rule_normalizes_values_and_filters():
    r = build_rule({"values": 3, "filters": "trim|escape"})
    assert r.values == (3,)
    assert r.filters == ("trim", "escape")
    assert build_rule({"default": 0}).has_default
    assert not build_rule({}).has_default

def test_build_rule_keeps_extra_keys_as_options():
    r = build_rule({"type": "string", "hexColor": True, "minLength": 3})
    assert dict(r.options) == {"hex_color": True, "min_length": 3}

@pytest.mark.parametrize(
    "mapping",
    [{"required": "maybe"}, {"before": 5}, {"validate": "nope"}, {"data": "x"}, {"filters": 3}],
)
def test_build_rule_rejects_bad_values(mapping):
    with pytest.raises(RuleError):
        build_rule(mapping)

def test_rule_is_immutable():
    r = Rule()
    with pytest.raises(AttributeError):
        r.required = True
