from __future__ import annotations
from functools import lru_cache
from typing import Any, Dict, List

from ..utils import scrub, valid
from .schema import BOUND_KEYS, FLAG_KEYS, Rule, build_rule, canonical_key
from .types import TYPES, BOOLEAN, ARRAY, is_type_name, normalize_types, truth_token

# =============================================================================
# Rule string grammar
#
#   rule     := segment (';' segment)*
#   segment  := type_seg | key ':' values | flag
#   type_seg := type ('|' type)* [':' filter ('|' filter)*]     (first segment only)
#   values   := value ('|' value)*
#
#   "string:trim|escape;max:120;default:anonymous"
#   "numeric;values:10|77.3|99"
#   "type:int|float;required;min:0"
# =============================================================================

SEGMENT_SEP = ";"
PARAM_SEP = ":"
LIST_SEP = "|"

# schemas and hooks cannot be written in a rule string
_STRUCTURED_KEYS = frozenset({"data", "child_rules", "before", "after", "validate"})

def _split_list(s: str) -> List[str]:
    return [p.strip() for p in s.split(LIST_SEP) if p.strip()]

def _is_type_segment(segment: str) -> bool:
    head = segment.split(PARAM_SEP, 1)[0]
    names = head.split(LIST_SEP)
    return bool(names) and all(is_type_name(n) for n in names)

def _literal(key: str, raw: str, types: tuple[str, ...]) -> Any:
    """Coerce one literal through the type parsed so far; unparseable input stays verbatim."""
    if key in FLAG_KEYS:
        tok = truth_token(raw)
        return raw if tok is None else tok
    if key in BOUND_KEYS:
        for t in types:
            spec = TYPES[t]
            if spec.numeric and spec.admits(raw):
                return spec.coerce(raw)
        return scrub.to_numeric(raw) if valid.numeric(raw) else raw

    for t in types:
        spec = TYPES[t]
        if spec is BOOLEAN:
            tok = truth_token(raw)
            if tok is not None:
                return tok
        elif spec is ARRAY:
            continue
        elif spec.admits(raw):
            return spec.coerce(raw)
    return raw

def _param(key: str, value: str, params: Dict[str, Any], default_type: str) -> Any:
    types = normalize_types(params.get("type"), default_type)
    parts = _split_list(value) if LIST_SEP in value else None

    # defaults are scalar unless the field itself is an array
    if key == "default" and parts is not None and "array" not in types:
        value, parts = (parts[0] if parts else ""), None

    if parts is None:
        return _literal(key, value, types)
    return [_literal(key, p, types) for p in parts]

def parse_params(rule: str, default_type: str = "string") -> Dict[str, Any]:
    """
    Split a rule string into a plain dict of parameters (snake_case keys).
    Malformed segments are skipped; unknown keys are kept verbatim.
    """
    segments = [s.strip() for s in rule.split(SEGMENT_SEP)]
    segments = [s for s in segments if s]
    params: Dict[str, Any] = {}

    if segments and _is_type_segment(segments[0]):
        head, _, tail = segments.pop(0).partition(PARAM_SEP)
        params["type"] = head.strip()
        filters = _split_list(tail)
        if filters:
            params["filters"] = filters

    for seg in segments:
        if PARAM_SEP not in seg:
            key = canonical_key(seg)
            if key and key not in _STRUCTURED_KEYS:
                params[key] = True
            continue

        raw_key, value = seg.split(PARAM_SEP, 1)
        key = canonical_key(raw_key)
        value = value.strip()
        if not key or key in _STRUCTURED_KEYS:
            continue
        if key in FLAG_KEYS and truth_token(value) is None:
            continue
        if key == "type":
            params["type"] = value
        elif key == "filters":
            params["filters"] = _split_list(value)
        else:
            params[key] = _param(key, value, params, default_type)
    return params

@lru_cache(maxsize=1024)
def parse(rule: str, default_type: str = "string") -> Rule:
    """Parse a rule string into an immutable Rule."""
    return build_rule(parse_params(rule, default_type), default_type=default_type)
