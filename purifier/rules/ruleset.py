from __future__ import annotations
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Sequence, Tuple

from ..errors import RuleError
from .grammar import parse
from .schema import RawRule, Rule, build_rule


def normalize_rule(raw: RawRule, default_type: str = "string") -> Rule:
    """
    DSL string -> parsed Rule, mapping -> built Rule, Rule -> itself.
    Normalization is pure, so a Rule passed twice comes back unchanged.
    """
    if isinstance(raw, Rule):
        return raw
    if isinstance(raw, str):
        return parse(raw, default_type)
    if isinstance(raw, Mapping):
        return build_rule(raw, default_type=default_type)
    raise RuleError(f"A rule must be a string, a mapping or a Rule, got {raw!r}")


class RuleSet:
    """
    Field name -> raw rule. Rules are normalized on first use and cached.

    A list/tuple instead of a mapping declares a *positional* rule set: its first
    entry is the rule applied to every element of a list.
    """

    def __init__(self, rules: Mapping[Any, RawRule] | Sequence[RawRule], *, default_type: str = "string") -> None:
        if isinstance(rules, RuleSet):
            rules = rules.positional_source if rules.positional else rules.raw
        if isinstance(rules, Mapping):
            self.positional = False
            self._raw: Dict[Any, RawRule] = dict(rules)
        elif isinstance(rules, (list, tuple)):
            self.positional = True
            self._raw = dict(enumerate(rules))
        else:
            raise RuleError(f"Rules must be a mapping or a list, got {type(rules).__name__}")
        self.default_type = default_type
        self._cache: Dict[Any, Rule] = {}

    def __repr__(self) -> str:
        kind = "positional" if self.positional else "fields"
        return f"RuleSet({kind}={list(self._raw)!r})"

    def __len__(self) -> int:
        return len(self._raw)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._raw)

    def __contains__(self, key: Any) -> bool:
        return key in self._raw

    @property
    def raw(self) -> Mapping[Any, RawRule]:
        return MappingProxyType(self._raw)

    @property
    def positional_source(self) -> list[RawRule]:
        return list(self._raw.values())

    @property
    def is_map_of_rules(self) -> bool:
        return not self.positional

    def normalize(self, raw: RawRule) -> Rule:
        return normalize_rule(raw, self.default_type)

    def rule(self, key: Any) -> Rule:
        if key not in self._cache:
            try:
                raw = self._raw[key]
            except KeyError:
                raise KeyError(f"No rule for field {key!r}") from None
            self._cache[key] = self.normalize(raw)
        return self._cache[key]

    def raw_rule(self, key: Any, default: Any = None) -> RawRule:
        return self._raw.get(key, default)

    def items(self) -> Iterator[Tuple[Any, Rule]]:
        for key in self._raw:
            yield key, self.rule(key)

    def first(self) -> Rule | None:
        """The positional rule (first entry), or None for an empty set."""
        for key in self._raw:
            return self.rule(key)
        return None
