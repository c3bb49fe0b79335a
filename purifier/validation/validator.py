from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..config_model.model import PurifierCfg, default_config
from ..rules.ruleset import RuleSet
from ..rules.schema import Rule
from ..rules.types import ARRAY, STRING, TypeSpec, first_valid, is_member
from ..utils import arr, scrub, valid
from ..utils.arr import join_path
from ..utils.log import logger_for
from .checks import active_checks
from .errors import (
    DEFAULT_MESSAGES,
    FIELD_REQUIRED,
    TOO_HIGH,
    TOO_SMALL,
    TYPE_MISMATCH,
    VALIDATION_FAILED,
    VALUE_NOT_ALLOWED,
    ErrorCollection,
)


class Validator:
    """
    Rule-driven checker. ``validate`` never changes the data; every failure becomes
    an entry in a path-addressed ErrorCollection that is rebuilt on each call.

    Hooks run synchronously and their exceptions propagate to the caller.
    """

    def __init__(
        self,
        rules: Mapping[Any, Any] | Sequence[Any] | RuleSet,
        *,
        cfg: PurifierCfg | None = None,
    ) -> None:
        self.cfg = cfg or default_config()
        vcfg = self.cfg.validator
        self.rules = rules if isinstance(rules, RuleSet) else RuleSet(rules, default_type=vcfg.default_type)
        self.log = logger_for("purifier.validator", self.cfg)
        self._messages: Dict[str, str] = {**DEFAULT_MESSAGES, **vcfg.messages}
        self._errors = ErrorCollection()
        self._data: Any = None

    def __repr__(self) -> str:
        return f"Validator({self.rules!r})"

    # ---- public API ----

    @property
    def errors(self) -> ErrorCollection:
        return self._errors

    @property
    def data(self) -> Any:
        """Input of the last ``validate`` call (hooks use it to compare fields)."""
        return self._data

    def get_rules(self) -> RuleSet:
        return self.rules

    def validate(self, data: Any) -> bool:
        self._errors = ErrorCollection()
        self._data = data

        if self.rules.positional:
            rule = self.rules.first()
            if rule is not None and arr.is_list(data):
                for i, el in arr.items(data):
                    self._validate_value(str(i), el, rule)
        else:
            self._validate_map(data)

        self.log.debug(
            "validation finished",
            extra={"fields": len(self.rules), "error_paths": len(self._errors)},
        )
        return not self._errors

    def get_errors(self) -> Dict[str, List[Dict[str, str]]]:
        return self._errors.to_dict()

    def get_first_error(self, path: str | int | None = None) -> Optional[str]:
        """Message of the first error at ``path`` (or overall), None when clean."""
        entry = self._errors.first(path)
        return entry.message if entry else None

    def has_error(self, path: str | int | None = None) -> bool:
        return self._errors.has(path)

    # ---- fields ----

    def _child(self, rules: Any) -> "Validator":
        # nested schemas get their own disposable engine
        return Validator(rules, cfg=self.cfg)

    def _message(self, code: str, fallback: str | None = None) -> str:
        return self._messages.get(code) or fallback or self._messages[VALIDATION_FAILED]

    def _add(self, path: str, code: str, message: str | None = None) -> None:
        self._errors.add(path, message or self._message(code), code)

    def _type_error(self, path: str, types: Sequence[str]) -> None:
        self._add(path, TYPE_MISMATCH, self._message(TYPE_MISMATCH).replace("{types}", ", ".join(types)))

    def _validate_map(self, data: Any) -> None:
        for key, rule in self.rules.items():
            path = str(key)
            if not arr.has(data, key):
                if rule.required:
                    self._add(path, FIELD_REQUIRED)
                continue

            value = arr.fetch(data, key)
            if rule.before is not None:
                value = rule.before(value, self)
            self._validate_value(path, value, rule)

    def _validate_value(self, path: str, value: Any, rule: Rule) -> None:
        # null values bypass every check, required ones included
        if value is None:
            return

        spec = first_valid(value, rule.types, strict=True)
        if spec is None:
            self._type_error(path, rule.types)

        if rule.values is not None and not is_member(value, rule.values):
            self._add(path, VALUE_NOT_ALLOWED)

        self._check_bounds(path, value, rule, spec)

        for check, arg in active_checks(rule):
            if not check(value, arg):
                self._add(path, check.code, self._message(check.code, check.message))

        if rule.validate is not None:
            self._run_hook(path, value, rule)

        if spec is ARRAY:
            self._validate_array(path, value, rule)

    def _check_bounds(self, path: str, value: Any, rule: Rule, spec: TypeSpec | None) -> None:
        if spec is None or (rule.min is None and rule.max is None):
            return
        if spec.numeric:
            measure = scrub.to_numeric(value)
        elif spec is STRING:
            measure = len(value)
        else:
            return

        if rule.min is not None and valid.numeric(rule.min) and measure < scrub.to_numeric(rule.min):
            self._add(path, TOO_SMALL)
        if rule.max is not None and valid.numeric(rule.max) and measure > scrub.to_numeric(rule.max):
            self._add(path, TOO_HIGH)

    def _run_hook(self, path: str, value: Any, rule: Rule) -> None:
        """
        Custom predicate. ``True`` passes; a string is the error message; a
        ``(message, code)`` pair overrides the code as well; anything else fails
        with the default message.
        """
        result = rule.validate(value, self)
        if result is True:
            return
        if isinstance(result, tuple) and len(result) == 2:
            message, code = result
            self._add(path, str(code or VALIDATION_FAILED), str(message) if message else None)
        elif isinstance(result, str) and result:
            self._add(path, VALIDATION_FAILED, result)
        else:
            self._add(path, VALIDATION_FAILED)

    # ---- arrays ----

    def _merge(self, path: str, sub: "Validator", node: Any) -> None:
        if not sub.validate(node):
            self._errors.merge(path, sub.errors)

    def _validate_array(self, path: str, value: Any, rule: Rule) -> None:
        # an empty list counts as an empty map
        is_assoc = rule.assoc if rule.assoc is not None else (arr.is_assoc(value) or len(value) == 0)

        if rule.data is not None:
            sub = self._child(rule.data)
            if sub.rules.positional:
                item_rule = sub.rules.first()
                if item_rule is not None:
                    for key, el in arr.items(value):
                        self._validate_value(join_path(path, key), el, item_rule)
            elif is_assoc:
                self._merge(path, sub, value)
            else:
                for i, el in arr.items(value):
                    p = join_path(path, i)
                    if arr.is_assoc(el):
                        self._merge(p, sub, el)
                    else:
                        self._type_error(p, (ARRAY.name,))

        if rule.child_rules is not None:
            child = self._child(rule.child_rules)
            for key, item in arr.items(value):
                if arr.is_array(item):
                    self._apply_child(join_path(path, key), item, child, rule.recursive_child_rules)

    def _apply_child(self, path: str, node: Any, child: "Validator", recursive: bool) -> None:
        if arr.is_assoc(node):
            self._merge(path, child, node)
            if recursive:
                self._descend(path, node, child)
        elif recursive:
            self._descend(path, node, child)
        else:
            for i, el in arr.items(node):
                if arr.is_assoc(el):
                    self._merge(join_path(path, i), child, el)

    def _descend(self, path: str, node: Any, child: "Validator") -> None:
        for key, v in arr.items(node):
            if arr.is_array(v):
                self._apply_child(join_path(path, key), v, child, True)
