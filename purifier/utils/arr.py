from __future__ import annotations
from copy import deepcopy
from typing import Any, Iterator, Mapping, Sequence, Tuple

# Trees are decoded JSON: dicts for maps, lists for sequences.

_MISSING = object()

def is_array(x: Any) -> bool:
    return isinstance(x, (Mapping, list, tuple))

def is_list(x: Any) -> bool:
    return isinstance(x, (list, tuple))

def is_assoc(x: Any) -> bool:
    return isinstance(x, Mapping)

def items(x: Any) -> Iterator[Tuple[Any, Any]]:
    """(key, value) pairs for maps, (index, value) pairs for lists."""
    if isinstance(x, Mapping):
        return iter(x.items())
    if is_list(x):
        return iter(enumerate(x))
    return iter(())

def _index(seq: Sequence[Any], key: Any) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        i = key
    elif isinstance(key, str) and key.lstrip("-").isdigit():
        i = int(key)
    else:
        return None
    return i if 0 <= i < len(seq) else None

def has(container: Any, key: Any) -> bool:
    if isinstance(container, Mapping):
        return key in container
    if is_list(container):
        return _index(container, key) is not None
    return False

def fetch(container: Any, key: Any, default: Any = None) -> Any:
    if isinstance(container, Mapping):
        return container.get(key, default)
    if is_list(container):
        i = _index(container, key)
        return default if i is None else container[i]
    return default

def get(path: str | int | None, container: Any, default: Any = None) -> Any:
    """
    Resolve a dotted path against a nested tree.
      get("posts.0.title", tree) -> tree["posts"][0]["title"]
    A key that exists verbatim (dots included) wins over path splitting.
    """
    if path is None:
        return container
    if has(container, path):
        return fetch(container, path)
    cur = container
    for part in str(path).split("."):
        if not has(cur, part):
            return default
        cur = fetch(cur, part)
    return cur

def join_path(prefix: str | int | None, key: str | int) -> str:
    if prefix is None or prefix == "":
        return str(key)
    key = str(key)
    return f"{prefix}{key}" if key.startswith(".") else f"{prefix}.{key}"

def to_container(x: Any) -> dict | list:
    """Private copy as a plain dict / list; nested containers are copied too."""
    if isinstance(x, Mapping):
        return {k: deepcopy(v) for k, v in x.items()}
    if is_list(x):
        return [deepcopy(v) for v in x]
    return []

def is_empty(x: Any) -> bool:
    return x is None or (is_array(x) and len(x) == 0)
