from __future__ import annotations

# Public API re-exports (keep small & stable)
from .schema import Rule, build_rule, canonical_key
from .grammar import parse, parse_params
from .types import TYPES, TypeSpec, type_spec
from .ruleset import RuleSet, normalize_rule
