from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..utils.arr import join_path

# ---- Error codes ----

FIELD_REQUIRED = "field_required"
TYPE_MISMATCH = "type_mismatch"
VALUE_NOT_ALLOWED = "value_not_allowed"
TOO_SMALL = "too_small"
TOO_HIGH = "too_high"
VALIDATION_FAILED = "validation_failed"

DEFAULT_MESSAGES: Dict[str, str] = {
    FIELD_REQUIRED: "Field is required",
    TYPE_MISMATCH: "Value must be of type: {types}",
    VALUE_NOT_ALLOWED: "Value is not allowed",
    TOO_SMALL: "The value is too small",
    TOO_HIGH: "The value is too high",
    VALIDATION_FAILED: "Validation failed",
}


@dataclass(frozen=True)
class ErrorEntry:
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class ErrorCollection:
    """
    Path -> ordered list of ErrorEntry. Paths are dotted: ``posts.0.tags.0.name``.
    Insertion order of paths and of entries per path is preserved.
    """

    def __init__(self) -> None:
        self._errors: Dict[str, List[ErrorEntry]] = {}

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __iter__(self) -> Iterator[Tuple[str, List[ErrorEntry]]]:
        return iter((p, list(es)) for p, es in self._errors.items())

    def __contains__(self, path: object) -> bool:
        return str(path) in self._errors

    def __getitem__(self, path: str | int) -> List[ErrorEntry]:
        return list(self._errors[str(path)])

    def __repr__(self) -> str:
        return f"ErrorCollection({self.to_dict()!r})"

    def add(self, path: str | int, message: str, code: str) -> None:
        self._errors.setdefault(str(path), []).append(ErrorEntry(code, message))

    def merge(self, prefix: str | int | None, other: "ErrorCollection") -> None:
        """Re-anchor every path of ``other`` under ``prefix`` and append it here."""
        for path, entries in other._errors.items():
            self._errors.setdefault(join_path(prefix, path), []).extend(entries)

    def has(self, path: str | int | None = None) -> bool:
        if path is None:
            return bool(self._errors)
        return str(path) in self._errors

    def first(self, path: str | int | None = None) -> Optional[ErrorEntry]:
        """First entry at ``path``; with no path, the first entry recorded overall."""
        if path is None:
            for entries in self._errors.values():
                return entries[0]
            return None
        entries = self._errors.get(str(path))
        return entries[0] if entries else None

    def paths(self) -> List[str]:
        return list(self._errors)

    def codes(self, path: str | int) -> List[str]:
        return [e.code for e in self._errors.get(str(path), [])]

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {p: [e.to_dict() for e in es] for p, es in self._errors.items()}

