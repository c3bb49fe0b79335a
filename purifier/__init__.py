from __future__ import annotations
from typing import Any, Mapping, Sequence

from .errors import PurifierError, RuleError, TypeMismatch
from .rules import Rule, RuleSet, parse
from .cleaning import Sanitizer, SanitizedResult
from .validation import Validator, ErrorEntry, ErrorCollection
from .config_model.model import PurifierCfg, load_config

__version__ = "0.1.0"

RawRules = Mapping[Any, Any] | Sequence[Any] | RuleSet


def sanitize(rules: RawRules, data: Any, *, strict: bool | None = None, cfg: PurifierCfg | None = None) -> Any:
    """One-shot cleaning: returns the sanitized tree."""
    return Sanitizer(rules, strict=strict, cfg=cfg).sanitize(data).get_all()


def validate(rules: RawRules, data: Any, *, cfg: PurifierCfg | None = None) -> tuple[bool, ErrorCollection]:
    """One-shot validation: returns ``(ok, errors)``."""
    v = Validator(rules, cfg=cfg)
    ok = v.validate(data)
    return ok, v.errors


__all__ = [
    "PurifierError", "RuleError", "TypeMismatch",
    "Rule", "RuleSet", "parse",
    "Sanitizer", "SanitizedResult",
    "Validator", "ErrorEntry", "ErrorCollection",
    "PurifierCfg", "load_config",
    "sanitize", "validate",
]
