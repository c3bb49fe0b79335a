from __future__ import annotations
from typing import Any, Callable, Dict

from ..rules.schema import Rule, canonical_key
from ..rules.types import truth_token
from ..utils import fp, scrub

# Each filter gets (string, rule) and returns a new string.
FilterFn = Callable[[str, Rule], str]


# -------- registry --------

def compile_filter_registry() -> dict[str, FilterFn]:
    """
    Map filter names -> callables.
    Filters that take an argument read it from the rule option of the same name,
    e.g. ``string:truncate;truncate:20`` or ``string:slug;slug:_``.
    """

    def _wrap(fn: Callable[[str], str]) -> FilterFn:
        def inner(s: str, rule: Rule) -> str:
            return fn(s)
        return inner

    def _slug(s: str, rule: Rule) -> str:
        sep = rule.option("slug")
        return scrub.slug(s, separator=sep if isinstance(sep, str) and sep else "-")

    def _truncate(s: str, rule: Rule) -> str:
        characters = rule.option("truncate")
        if characters is True or characters is None:
            characters = 15
        return scrub.truncate(
            s,
            characters,
            after=scrub.stringify(rule.option("truncate_after", "")),
            before=scrub.stringify(rule.option("truncate_before", "")),
            reverse=bool(rule.option("truncate_reverse", False)),
        )

    registry: dict[str, FilterFn] = {
        # Escaping / whitespace / case
        "esc":    _wrap(scrub.escape),
        "escape": _wrap(scrub.escape),
        "trim":   _wrap(scrub.trim),
        "lower":  _wrap(scrub.lower),
        "upper":  _wrap(scrub.upper),

        # Markup
        "text":       _wrap(scrub.text),
        "strip_tags": _wrap(scrub.strip_tags),

        # Named extensions
        "slug":          _slug,
        "transliterate": _wrap(scrub.transliterate),
        "translit":      _wrap(scrub.transliterate),
        "truncate":      _truncate,
    }
    return registry


_REGISTRY: Dict[str, FilterFn] = compile_filter_registry()


def filter_names() -> list[str]:
    return sorted(_REGISTRY)


def resolve(name: str) -> FilterFn | None:
    """Registry lookup; camelCase and snake_case spellings are equivalent."""
    return _REGISTRY.get(name) or _REGISTRY.get(canonical_key(name))


def active_filters(rule: Rule) -> list[FilterFn]:
    """
    Filters a rule asks for, in order: the declared ``filters`` first, then
    filter-named option flags (``string;slug``, ``string;truncate:20``) that are
    not disabled and not already declared.
    """
    declared = [canonical_key(n) for n in rule.filters]
    names = list(rule.filters)
    for key, arg in rule.options.items():
        if arg is None or truth_token(arg) is False or key in declared:
            continue
        if key in _REGISTRY:
            names.append(key)
    return [fn for fn in map(resolve, names) if fn is not None]


def apply_filters(value: Any, rule: Rule) -> Any:
    """
    Run the rule's filters left-to-right over a string value.
    Unknown names are skipped; non-string values pass through untouched.
    """
    if not isinstance(value, str):
        return value
    steps = [lambda s, fn=fn: fn(s, rule) for fn in active_filters(rule)]
    return fp.pipe(value, *steps)
