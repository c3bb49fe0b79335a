from __future__ import annotations
from functools import wraps
from typing import Any, Callable, TypeVar

from toolz import pipe as _pipe

A = TypeVar("A")
B = TypeVar("B")

def pipe(x: A, *fns: Callable[[Any], Any]) -> Any:
    # Keep signature but delegate to toolz.pipe
    return _pipe(x, *fns) if fns else x

def try_or(default: B, *errors: type[BaseException]) -> Callable[[Callable[..., B]], Callable[..., B]]:
    """Wrap ``fn`` so the listed exceptions (``Exception`` when none) return ``default``."""
    caught = errors or (Exception,)
    def _wrap(fn: Callable[..., B]) -> Callable[..., B]:
        @wraps(fn)
        def _inner(*args: Any, **kwargs: Any) -> B:
            try:
                return fn(*args, **kwargs)
            except caught:
                return default
        return _inner
    return _wrap
