from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..config_model.model import PurifierCfg, default_config
from ..errors import TypeMismatch
from ..rules.ruleset import RuleSet
from ..rules.schema import Rule
from ..rules.types import ARRAY, STRING, first_valid, is_member
from ..utils import arr, scrub
from ..utils.log import logger_for
from .filters import active_filters, apply_filters, resolve

# Marker for "no value produced": the field is left out of the output.
_DROP = object()

_BLANK_RULE = Rule()


# ---- Data classes ----

@dataclass(frozen=True)
class SanitizedResult:
    """Output of one ``Sanitizer.sanitize`` call."""
    data: Any

    def get_all(self) -> Any:
        return self.data

    def get(self, path: str | int | None, default: Any = None) -> Any:
        """Dotted lookup into the cleaned tree: ``result.get("posts.0.title")``."""
        return arr.get(path, self.data, default)

    def __bool__(self) -> bool:
        return bool(self.data)


# ---- helpers ----

def _prune(tree: dict) -> dict:
    return {k: v for k, v in tree.items() if not arr.is_empty(v)}


# ---- engine ----

class Sanitizer:
    """
    Rule-driven cleaner. Holds the rule set and configuration only; every
    ``sanitize`` call builds a fresh output tree.

    strict=True drops keys without a rule; strict=False keeps unknown scalars
    (passed through the configured unknown-key filter) and drops unknown arrays.
    """

    def __init__(
        self,
        rules: Mapping[Any, Any] | Sequence[Any] | RuleSet,
        *,
        strict: bool | None = None,
        cfg: PurifierCfg | None = None,
    ) -> None:
        self.cfg = cfg or default_config()
        scfg = self.cfg.sanitizer
        self.strict = scfg.strict if strict is None else bool(strict)
        self.rules = rules if isinstance(rules, RuleSet) else RuleSet(rules, default_type=scfg.default_type)
        self.log = logger_for("purifier.sanitizer", self.cfg)
        self._unknown_filter = resolve(scfg.unknown_key_filter) if scfg.unknown_key_filter else None

    def __repr__(self) -> str:
        return f"Sanitizer({self.rules!r}, strict={self.strict})"

    def get_rules(self) -> RuleSet:
        return self.rules

    def sanitize(self, data: Any) -> SanitizedResult:
        if self.rules.positional:
            pairs = self._positional(arr.items(data) if arr.is_list(data) else (), self)
            tree = [v for _, v in pairs]
        else:
            tree = self._sanitize_map(data)
        return SanitizedResult(tree)

    # ---- per-field pipeline ----

    def _child(self, rules: Any) -> "Sanitizer":
        # nested schemas get their own disposable engine
        return Sanitizer(rules, strict=self.strict, cfg=self.cfg)

    def _sanitize_map(self, data: Any) -> dict:
        out: dict = {}
        for key, rule in self.rules.items():
            if not arr.has(data, key):
                if rule.has_default:
                    out[key] = self._default(rule)
                    self.log.debug("default applied", extra={"field": key, "reason": "absent"})
                continue
            value = self._field(arr.fetch(data, key), rule, key)
            if value is not _DROP:
                out[key] = value

        if not self.strict:
            for key, value in arr.items(data):
                if key in self.rules or str(key) in self.rules:
                    continue
                if arr.is_array(value):
                    self.log.debug("field dropped", extra={"field": key, "reason": "unknown_array"})
                    continue
                out[key] = self._unknown_scalar(value)
        return out

    def _field(self, value: Any, rule: Rule, key: Any) -> Any:
        """
        One declared field: before -> whitelist -> type/filters -> after.
        Type faults (including TypeMismatch raised by a hook) resolve to the
        default, or drop the field when there is none.
        """
        try:
            if rule.before is not None:
                value = rule.before(value, self)

            if rule.values is not None and not is_member(value, rule.values):
                if not rule.has_default:
                    self.log.debug("field dropped", extra={"field": key, "reason": "value_not_allowed"})
                    return _DROP
                # the default replaces the value and continues through type/filters/after
                self.log.debug("default applied", extra={"field": key, "reason": "value_not_allowed"})
                value = rule.default

            out = self._process(value, rule)
            if rule.after is not None:
                out = rule.after(out, self)
            return out
        except TypeMismatch:
            if rule.has_default:
                self.log.debug("default applied", extra={"field": key, "reason": "type_mismatch"})
                return self._default(rule)
            self.log.debug("field dropped", extra={"field": key, "reason": "type_mismatch"})
            return _DROP

    def _default(self, rule: Rule) -> Any:
        # defaults go through the type pipeline; a default it rejects is kept as written
        try:
            return self._process(rule.default, rule)
        except TypeMismatch:
            return rule.default

    def _process(self, value: Any, rule: Rule) -> Any:
        spec = first_valid(value, rule.types, strict=False)
        if spec is None:
            if rule.is_array:
                return []
            raise TypeMismatch(value, rule.types)
        if spec is ARRAY:
            return self._process_array(value, rule)
        out = spec.coerce(value)
        if spec is STRING:
            out = apply_filters(out, rule)
        return out

    def _unknown_scalar(self, value: Any) -> str:
        s = scrub.stringify(value)
        return self._unknown_filter(s, _BLANK_RULE) if self._unknown_filter else s

    # ---- arrays ----

    def _process_array(self, value: Any, rule: Rule) -> Any:
        value = arr.to_container(value)
        is_assoc = rule.assoc if rule.assoc is not None else not arr.is_list(value)

        if rule.child_rules is not None:
            child = self._child(rule.child_rules)
            if rule.recursive_child_rules:
                value = self._walk_children(value, child)
            else:
                value = self._first_level_children(value, rule, child)

        if rule.data is not None:
            sub = self._child(rule.data)
            if sub.rules.positional:
                pairs = self._positional(arr.items(value), sub)
                processed: Any = dict(pairs) if is_assoc else [v for _, v in pairs]
            elif is_assoc:
                processed = sub._sanitize_map(value)
            else:
                items = list(value.values()) if arr.is_assoc(value) else value
                processed = self._records(items, sub)
            return processed if processed else []

        if active_filters(rule):
            for key, item in list(arr.items(value)):
                if isinstance(item, str):
                    value[key] = apply_filters(item, rule)

        return value if value else []

    def _first_level_children(self, value: Any, rule: Rule, child: "Sanitizer") -> Any:
        data = rule.data if arr.is_assoc(rule.data) else {}
        for key, item in list(arr.items(value)):
            if not arr.is_array(item):
                continue
            # children named in ``data`` are handled there, unless declared as a bare array
            if key in data and data[key] != "array":
                continue
            if arr.is_assoc(item):
                value[key] = child._sanitize_map(item)
            else:
                value[key] = [child._sanitize_map(el) if arr.is_assoc(el) else el for el in item]
        return value

    def _walk_children(self, value: Any, child: "Sanitizer") -> Any:
        for key, item in list(arr.items(value)):
            if arr.is_array(item):
                value[key] = self._walk(item, child)
        return value

    def _walk(self, node: Any, child: "Sanitizer") -> Any:
        """Sanitize every map inside ``node`` against ``child``, at any depth."""
        if arr.is_assoc(node):
            return self._walk_record(node, child)
        if not any(arr.is_array(el) for el in node):
            # a list of scalars is a leaf; the child schema decides what to do with it
            return list(node)
        out = []
        for el in node:
            # scalars mixed into lists of records are dropped
            if not arr.is_array(el):
                continue
            done = self._walk(el, child)
            if done:
                out.append(done)
        return out

    def _walk_record(self, node: Mapping[Any, Any], child: "Sanitizer") -> dict:
        inner: dict = {}
        for key, v in node.items():
            if arr.is_array(v):
                walked = self._walk(v, child)
                if walked:
                    inner[key] = walked
            else:
                inner[key] = v

        out = child._sanitize_map(inner)
        # keep nested arrays the child schema does not declare, so deeper levels stay reachable
        for key, v in inner.items():
            if arr.is_array(v) and key not in child.rules and key not in out:
                out[key] = v
        return _prune(out)

    def _positional(self, pairs: Any, sub: "Sanitizer") -> list[tuple[Any, Any]]:
        """Run every element through the single positional rule; failures are dropped."""
        rule = sub.rules.first()
        out: list[tuple[Any, Any]] = []
        for key, el in pairs:
            if rule is None:
                out.append((key, el))
                continue
            if arr.is_array(el) and not rule.is_array:
                continue
            value = sub._field(el, rule, key)
            if value is not _DROP:
                out.append((key, value))
        return out

    def _records(self, items: Sequence[Any], sub: "Sanitizer") -> list:
        # list of records: maps are sanitized (empty ones dropped), scalars kept as-is
        out: list = []
        for el in items:
            if arr.is_assoc(el):
                record = sub._sanitize_map(el)
                if record:
                    out.append(record)
            elif not arr.is_array(el):
                out.append(el)
        return out
