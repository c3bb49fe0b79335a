from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Iterable
import re

from ..errors import RuleError
from ..utils import arr, scrub, valid

# ---- Defaults (exact-token matches) -----------------------------------------

_FALSE_TOKENS = {"", "false", "f", "0", "0.0", "no", "n", "off", "null", "none"}
_TRUE_TOKENS = {"true", "t", "1", "yes", "y", "on"}

def _to_bool(x: Any) -> bool:
    """Lenient truth-cast: bools pass through, strings go by token, rest by truthiness."""
    if valid.boolean(x):
        return bool(x)
    if isinstance(x, str):
        return x.strip().lower() not in _FALSE_TOKENS
    if arr.is_array(x):
        return len(x) > 0
    return bool(x)

def truth_token(x: Any) -> bool | None:
    """Strict token parse used by the rule grammar; None when unrecognized."""
    if valid.boolean(x):
        return bool(x)
    s = scrub.stringify(x).strip().lower()
    if s in _TRUE_TOKENS:
        return True
    if s in _FALSE_TOKENS:
        return False
    return None

def _to_int(x: Any) -> int:
    n = scrub.to_numeric(x)
    return int(n)

def _to_float(x: Any) -> float:
    return float(scrub.to_numeric(x))

def _always(_: Any) -> bool:
    return True

# ---- Dispatch table -----------------------------------------------------------

@dataclass(frozen=True)
class TypeSpec:
    """
    One entry of the type dispatch table.

    check   strict predicate (validation)
    admits  gate applied before coercion (sanitization)
    coerce  value -> typed value
    """
    name: str
    check: Callable[[Any], bool]
    admits: Callable[[Any], bool]
    coerce: Callable[[Any], Any]
    numeric: bool = False

STRING = TypeSpec("string", lambda v: isinstance(v, str), _always, scrub.stringify)
ARRAY = TypeSpec("array", arr.is_array, arr.is_array, arr.to_container)
INTEGER = TypeSpec("integer", valid.integer, valid.integer, _to_int, numeric=True)
FLOATING = TypeSpec("floating", valid.floating, valid.floating, _to_float, numeric=True)
NUMERIC = TypeSpec("numeric", valid.numeric, valid.numeric, scrub.to_numeric, numeric=True)
BOOLEAN = TypeSpec("boolean", valid.boolean, valid.boolean, _to_bool)

TYPES: dict[str, TypeSpec] = {
    "string": STRING,
    "array": ARRAY,
    "int": INTEGER,
    "integer": INTEGER,
    "float": FLOATING,
    "floating": FLOATING,
    "number": NUMERIC,
    "numeric": NUMERIC,
    "bool": BOOLEAN,
    "boolean": BOOLEAN,
}

# Types for which min/max are meaningful
BOUNDED_TYPES = frozenset({"number", "numeric", "int", "integer", "float", "floating", "string"})

_TYPE_SPLIT_RE = re.compile(r"\s*\|\s*")

def is_type_name(name: Any) -> bool:
    return isinstance(name, str) and name.strip().lower() in TYPES

def type_spec(name: str) -> TypeSpec:
    try:
        return TYPES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise RuleError(f"Unknown type {name!r}; expected one of {sorted(TYPES)}") from None

def normalize_types(raw: Any, default: str = "string") -> tuple[str, ...]:
    """
    Accept 'int', 'int|float', ['int', 'float'] or None and return a tuple of
    lower-cased, known type tags (declaration order kept).
    """
    if raw is None or raw == "":
        names: Iterable[Any] = [default]
    elif isinstance(raw, str):
        names = [p for p in _TYPE_SPLIT_RE.split(raw.strip()) if p]
    elif isinstance(raw, (list, tuple)):
        names = raw
    else:
        raise RuleError(f"Rule type must be a string or a list of strings, got {raw!r}")

    out: list[str] = []
    for n in names:
        type_spec(n)  # raises on unknown tags
        tag = n.strip().lower()
        if tag not in out:
            out.append(tag)
    if not out:
        out.append(default)
    return tuple(out)

def first_valid(value: Any, types: Iterable[str], *, strict: bool = True) -> TypeSpec | None:
    """First declared type the value satisfies (``check`` when strict, else ``admits``)."""
    for t in types:
        spec = TYPES[t]
        if (spec.check if strict else spec.admits)(value):
            return spec
    return None

def is_member(value: Any, allowed: Iterable[Any]) -> bool:
    """Whitelist membership: same type and equal value (1 matches neither "1", True nor 1.0)."""
    return any(type(v) is type(value) and v == value for v in allowed)
