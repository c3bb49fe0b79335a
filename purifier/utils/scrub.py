from __future__ import annotations
from typing import Any, Mapping, Sequence
import html
import json
import math
import numbers
import re

import bleach
from slugify import slugify as _slugify
from text_unidecode import unidecode as _unidecode

from .valid import numeric

# ---- Patterns -----------------------------------------------------------------

_EMOJI_RE = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # smileys & emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map symbols
    "\u2600-\u26FF"  # misc symbols
    "\u2700-\u27BF"  # dingbats
    "]"
)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")
_NON_TEXT_RE = re.compile(r"[^\w\s.,!?;:()'\"\-–—/]|_")
_WHITESPACE_RE = re.compile(r"\s+")
_TRIM_CHARS = " \t\n\r\0\x0B"
_BARE_AMP_RE = re.compile(r"&(?!(?:[A-Za-z][A-Za-z0-9]*|#\d+|#[xX][0-9A-Fa-f]+);)")
_ESCAPE_TABLE = str.maketrans({"<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#x27;"})

# ---- Basic string filters -------------------------------------------------------

def escape(s: str) -> str:
    """
    HTML-escape ``& < > " '``. Existing entities are left alone, so escaping
    an already escaped string is a no-op.
    """
    s = _BARE_AMP_RE.sub("&amp;", s)
    return s.translate(_ESCAPE_TABLE)

def trim(s: str) -> str:
    return s.strip(_TRIM_CHARS)

def lower(s: str) -> str:
    return s.lower()

def upper(s: str) -> str:
    return s.upper()

def strip_tags(s: str) -> str:
    cleaned = bleach.clean(s, tags=set(), attributes={}, strip=True, strip_comments=True)
    return html.unescape(cleaned)

def text(s: str) -> str:
    """
    Reduce markup-laden input to plain text:
      - drop emoji and pictographs
      - strip HTML tags, then decode entities
      - keep letters (any script), digits, whitespace and basic punctuation
      - collapse whitespace runs to one space and trim
    """
    s = _EMOJI_RE.sub("", s)
    s = _CONTROL_RE.sub("", s)
    s = strip_tags(s)
    s = _NON_TEXT_RE.sub("", s)
    s = _WHITESPACE_RE.sub(" ", s)
    return s.strip()

def slug(s: str, separator: str = "-") -> str:
    return _slugify(s, lowercase=True, separator=separator)

def transliterate(s: str) -> str:
    return _unidecode(s)

def truncate(
    s: str,
    characters: int | Sequence[int] = 15,
    after: str = "",
    before: str = "",
    reverse: bool = False,
) -> str:
    """
    Cut plain text down to ``characters`` code points.
    ``characters`` may be an ``[offset, length]`` pair. The affixes are only added
    when the text was actually shortened; ``reverse`` keeps the tail instead.
    """
    s = text(s)
    length = len(s)
    if isinstance(characters, (list, tuple)):
        offset = int(characters[0]) if len(characters) > 0 else 0
        characters = int(characters[1]) if len(characters) > 1 else 15
    else:
        offset = 0
        characters = int(characters)

    if length <= characters:
        return s.strip()

    if reverse and offset:
        cut = s[:-offset][-characters:]
    elif reverse:
        cut = s[-characters:]
    else:
        cut = s[offset:offset + characters]
    return before + cut.strip() + after

# ---- Canonical conversions --------------------------------------------------------

def stringify(x: Any) -> str:
    """
    Canonical string form of any decoded-JSON value:
      None -> "", bools -> "true"/"false", integral floats without ".0",
      maps/lists -> compact JSON.
    """
    if x is None:
        return ""
    if isinstance(x, str):
        return x
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, numbers.Integral):
        return str(int(x))
    if isinstance(x, numbers.Real):
        f = float(x)
        if math.isfinite(f) and f.is_integer():
            return str(int(f))
        return repr(f)
    if isinstance(x, (Mapping, list, tuple)):
        return json.dumps(x, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(x)

def to_numeric(x: Any) -> int | float:
    """
    Normalize a number or numeric-looking string to int or float.
    Strings with a decimal point or exponent marker become floats; anything
    that is not numeric becomes 0.
    """
    if not numeric(x):
        return 0
    if isinstance(x, numbers.Integral):
        return int(x)
    if isinstance(x, numbers.Real):
        return float(x)
    s = str(x).strip()
    if "." in s or "e" in s.lower():
        return float(s)
    return int(s)
