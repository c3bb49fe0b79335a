from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence
import re

from ..errors import RuleError
from .types import normalize_types, truth_token

# A hook receives the value and the engine running it.
Hook = Callable[[Any, Any], Any]

# Raw rule as written by callers: a DSL string, a dict, or an already built Rule.
RawRule = Any

_CAMEL_RE = re.compile(r"(?<=\w)([A-Z])")

def canonical_key(name: str) -> str:
    """'hexColor' -> 'hex_color', 'childRules' -> 'child_rules'."""
    return _CAMEL_RE.sub(r"_\1", str(name).strip()).lower()

# Keys with a dedicated Rule attribute; everything else lands in Rule.options.
CORE_KEYS = frozenset({
    "type", "filters", "values", "default", "min", "max", "required",
    "data", "child_rules", "recursive_child_rules", "assoc",
    "before", "after", "validate",
})
FLAG_KEYS = frozenset({"required", "assoc", "recursive_child_rules"})
BOUND_KEYS = frozenset({"min", "max", "min_length", "max_length"})


@dataclass(frozen=True)
class Rule:
    """
    Normalized constraints for a single field.

    ``types`` is always a non-empty tuple; ``type`` gives back the single tag for
    single-type rules. ``options`` holds utility-check flags, filter arguments
    and any unknown key, keyed in snake_case.
    """
    types: tuple[str, ...] = ("string",)
    filters: tuple[str, ...] = ()
    values: tuple[Any, ...] | None = None
    default: Any = None
    min: Any = None
    max: Any = None
    required: bool = False
    data: Mapping[Any, RawRule] | Sequence[RawRule] | None = None
    child_rules: Mapping[Any, RawRule] | Sequence[RawRule] | None = None
    recursive_child_rules: bool = False
    assoc: bool | None = None
    before: Hook | None = None
    after: Hook | None = None
    validate: Hook | None = None
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def type(self) -> str | tuple[str, ...]:
        return self.types[0] if len(self.types) == 1 else self.types

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def is_array(self) -> bool:
        return "array" in self.types

    def option(self, name: str, default: Any = None) -> Any:
        return self.options.get(canonical_key(name), default)

    def has_option(self, name: str) -> bool:
        return canonical_key(name) in self.options


# ---- builder ------------------------------------------------------------------

def _tuple_of_names(raw: Any, what: str) -> tuple[str, ...]:
    if raw is None or raw is True:
        return ()
    if isinstance(raw, str):
        return tuple(p.strip() for p in raw.split("|") if p.strip())
    if isinstance(raw, (list, tuple)):
        return tuple(str(p).strip() for p in raw if str(p).strip())
    raise RuleError(f"{what} must be a string or a list, got {raw!r}")

def _flag(raw: Any, key: str) -> bool:
    if raw is None:
        return False
    tok = truth_token(raw)
    if tok is None:
        raise RuleError(f"{key!r} expects a boolean, got {raw!r}")
    return tok

def _schema(raw: Any, key: str) -> Any:
    if raw is None or isinstance(raw, (Mapping, list, tuple)):
        return raw
    raise RuleError(f"{key!r} must be a mapping of rules or a list holding one rule, got {raw!r}")

def _hook(raw: Any, key: str) -> Hook | None:
    if raw is None:
        return None
    if not callable(raw):
        raise RuleError(f"{key!r} must be callable, got {raw!r}")
    return raw

def build_rule(mapping: Mapping[str, Any], *, default_type: str = "string") -> Rule:
    """Turn a structured rule (camelCase or snake_case keys) into a Rule."""
    params = {canonical_key(k): v for k, v in mapping.items()}

    values = params.pop("values", None)
    if values is not None and not isinstance(values, (list, tuple)):
        values = (values,)
    assoc = params.pop("assoc", None)

    return Rule(
        types=normalize_types(params.pop("type", None), default_type),
        filters=_tuple_of_names(params.pop("filters", None), "filters"),
        values=tuple(values) if values is not None else None,
        default=params.pop("default", None),
        min=params.pop("min", None),
        max=params.pop("max", None),
        required=_flag(params.pop("required", None), "required"),
        data=_schema(params.pop("data", None), "data"),
        child_rules=_schema(params.pop("child_rules", None), "child_rules"),
        recursive_child_rules=_flag(params.pop("recursive_child_rules", None), "recursive_child_rules"),
        assoc=None if assoc is None else _flag(assoc, "assoc"),
        before=_hook(params.pop("before", None), "before"),
        after=_hook(params.pop("after", None), "after"),
        validate=_hook(params.pop("validate", None), "validate"),
        options=MappingProxyType(params),
    )
