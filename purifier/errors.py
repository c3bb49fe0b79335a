from __future__ import annotations


class PurifierError(Exception):
    """Base class for every error raised by purifier."""


class RuleError(PurifierError, ValueError):
    """A rule or rule set cannot be understood (unknown type, wrong shape)."""


class TypeMismatch(PurifierError, ValueError):
    """A value does not satisfy the declared type of its rule."""

    def __init__(self, value: object, types: tuple[str, ...]) -> None:
        self.value = value
        self.types = tuple(types)
        super().__init__(f"Value does not match type {', '.join(self.types)}")
