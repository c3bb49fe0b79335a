from __future__ import annotations
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Iterable
from urllib.parse import urlsplit
import ipaddress
import json as _json
import math
import re

import numpy as np
from dateutil import parser as date_parser
from email_validator import EmailNotValidError, validate_email

# =============================================================================
# Numeric / type-format checks (used by the type dispatch table)
# =============================================================================

_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")

def _is_bool(x: Any) -> bool:
    return isinstance(x, (bool, np.bool_))

def numeric(x: Any) -> bool:
    """True numbers (never bools) and numeric-looking strings such as " 12", "-3.5e2"."""
    if _is_bool(x):
        return False
    if isinstance(x, (int, np.integer)):
        return True
    if isinstance(x, (float, np.floating)):
        return math.isfinite(float(x))
    if isinstance(x, str):
        return bool(_NUMERIC_RE.match(x))
    return False

def integer(x: Any) -> bool:
    if _is_bool(x):
        return False
    if isinstance(x, (int, np.integer)):
        return True
    if isinstance(x, (float, np.floating)):
        return math.isfinite(float(x)) and float(x).is_integer()
    if isinstance(x, str):
        return bool(_INTEGER_RE.match(x))
    return False

def floating(x: Any) -> bool:
    return numeric(x)

def boolean(x: Any) -> bool:
    return _is_bool(x)

def _as_number(x: Any) -> float:
    if not numeric(x):
        raise ValueError(f"not a number: {x!r}")
    return float(x)

def _as_int(x: Any) -> int:
    if not integer(x):
        raise ValueError(f"not an integer: {x!r}")
    return int(float(x)) if not isinstance(x, str) else int(x.strip())

def _strings_only(fn: Callable[..., bool]) -> Callable[..., bool]:
    @wraps(fn)
    def inner(value: Any, *args: Any) -> bool:
        if not isinstance(value, str):
            return False
        return fn(value, *args)
    return inner

def _as_list(x: Any) -> list[str]:
    if isinstance(x, str):
        return [x]
    if isinstance(x, Iterable):
        return [str(v) for v in x]
    return [str(x)]

def _truthy(x: Any) -> bool:
    if isinstance(x, str):
        return x.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(x)

# =============================================================================
# Network / identity formats
# =============================================================================

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_DOMAIN_RE = re.compile(
    r"^(?!-)([a-z0-9-]{1,63})(\.[a-z0-9-]{1,63})*(?<!-)\.([a-z]{2,}|xn--[a-z0-9-]+)$",
    re.I,
)
_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})$")
_BITCOIN_RE = re.compile(r"^[13][a-km-zA-HJ-NP-Z1-9]{25,34}$")

@_strings_only
def email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True

@_strings_only
def url(value: str) -> bool:
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and _SCHEME_RE.match(parts.scheme) and parts.netloc and parts.hostname)

@_strings_only
def allowed_protocol(value: str, protocols: Any = ("http", "https", "ftp")) -> bool:
    if protocols is True:
        protocols = ("http", "https", "ftp")
    scheme = urlsplit(value).scheme
    if not scheme:
        return False
    return scheme.lower() in {p.lower() for p in _as_list(protocols)}

@_strings_only
def allowed_host(value: str, hosts: Any) -> bool:
    host = urlsplit(value).hostname
    if not host:
        return False
    host = host.lower()
    for allowed in (h.lower() for h in _as_list(hosts)):
        if host == allowed or host.endswith("." + allowed):
            return True
    return False

@_strings_only
def domain(value: str) -> bool:
    if len(value) > 253:
        return False
    try:
        ascii_name = value.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    return bool(_DOMAIN_RE.match(ascii_name))

@_strings_only
def ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True

_PHONE_PATTERNS = [
    # +CCC XXX XXX-XXXX
    re.compile(r"^\+\d{1,3}(?:[ \-]?\d{2,5}){2,4}$"),
    # Russian (+7|8)
    re.compile(r"^\+7[\s\-]?\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{2}[\s\-]?\d{2}$"),
    re.compile(r"^8[\s\-]?\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{2}[\s\-]?\d{2}$"),
    re.compile(r"^7\d{10}$"),
    # 7-11 digits
    re.compile(r"^\d{3}[\s\-]?\d{2}[\s\-]?\d{2}$"),
    re.compile(r"^\(?\d{3,5}\)?[\s\-]?\d{2,4}[\s\-]?\d{2,4}$"),
    re.compile(r"^\d{7,11}$"),
]

@_strings_only
def phone(value: str) -> bool:
    """
    International or national phone number with optional '+', spaces, hyphens
    and parentheses. Rejects runs of 7+ identical digits and 0/1-only numbers.
    """
    digits = re.sub(r"[^0-9]", "", value)
    n = len(digits)
    has_plus = value.startswith("+")
    if n < 7 or (has_plus and n > 15) or (not has_plus and n > 11):
        return False
    if re.fullmatch(r"[01]+", digits):
        return False
    if re.search(r"(\d)\1{6,}", digits):
        return False
    if re.match(r"^(\+7|7|8)", value) and n != 11:
        return False
    return any(p.match(value) for p in _PHONE_PATTERNS)

@_strings_only
def mac_address(value: str) -> bool:
    return bool(_MAC_RE.match(value))

@_strings_only
def bitcoin_address(value: str) -> bool:
    return bool(_BITCOIN_RE.match(value))

# =============================================================================
# Dates
# =============================================================================

# single-letter date tokens -> strftime, so "Y-m-d" and "%Y-%m-%d" both work
_LETTER_DATE_TOKENS = {
    "d": "%d", "j": "%d", "m": "%m", "n": "%m", "Y": "%Y", "y": "%y",
    "H": "%H", "G": "%H", "i": "%M", "s": "%S", "D": "%a", "l": "%A",
    "M": "%b", "F": "%B", "A": "%p",
}

def _strftime_format(fmt: str) -> str:
    if "%" in fmt:
        return fmt
    return "".join(_LETTER_DATE_TOKENS.get(ch, ch) for ch in fmt)

@_strings_only
def date_format(value: str, fmt: Any = "%Y-%m-%d") -> bool:
    if fmt is True:
        fmt = "%Y-%m-%d"
    pattern = _strftime_format(str(fmt))
    try:
        parsed = datetime.strptime(value, pattern)
    except ValueError:
        return False
    return parsed.strftime(pattern) == value

def _parse_date(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"not a date string: {value!r}")
    return date_parser.parse(value)

def _now_like(dt: datetime) -> datetime:
    return datetime.now(dt.tzinfo) if dt.tzinfo else datetime.now()

def future_date(value: Any) -> bool:
    dt = _parse_date(value)
    return dt > _now_like(dt)

def past_date(value: Any) -> bool:
    dt = _parse_date(value)
    return dt < _now_like(dt)

def today(value: Any) -> bool:
    dt = _parse_date(value)
    return dt.date() == _now_like(dt).date()

def leap_year(value: Any) -> bool:
    year = _as_int(value)
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0

# =============================================================================
# Colors
# =============================================================================

_BYTE = r"(25[0-5]|2[0-4]\d|1\d{2}|\d{1,2}|100%|\d{1,2}%)"
_ALPHA = r"(0|1|0?\.\d+|1\.0|100%|\d{1,2}%)"
_HUE = r"(360|3[0-5]\d|[12]?\d{1,2})(deg|grad|rad|turn)?"
_PCT = r"(100|\d{1,2})%"

_HEX_RE = re.compile(r"^#([a-f0-9]{3,4}|[a-f0-9]{6}|[a-f0-9]{8})$", re.I)
_RGB_RES = (
    re.compile(rf"^rgb\(\s*{_BYTE}\s*,\s*{_BYTE}\s*,\s*{_BYTE}\s*\)$", re.I),
    re.compile(rf"^rgb\(\s*{_BYTE}\s+{_BYTE}\s+{_BYTE}\s*\)$", re.I),
)
_RGBA_RES = (
    re.compile(rf"^rgba\(\s*{_BYTE}\s*,\s*{_BYTE}\s*,\s*{_BYTE}\s*,\s*{_ALPHA}\s*\)$", re.I),
    re.compile(rf"^rgba\(\s*{_BYTE}\s+{_BYTE}\s+{_BYTE}\s*/\s*{_ALPHA}\s*\)$", re.I),
)
_HSL_RES = (
    re.compile(rf"^hsl\(\s*{_HUE}\s*,\s*{_PCT}\s*,\s*{_PCT}\s*\)$", re.I),
    re.compile(rf"^hsl\(\s*{_HUE}\s+{_PCT}\s+{_PCT}\s*\)$", re.I),
)
_HSLA_RES = (
    re.compile(rf"^hsla\(\s*{_HUE}\s*,\s*{_PCT}\s*,\s*{_PCT}\s*,\s*{_ALPHA}\s*\)$", re.I),
    re.compile(rf"^hsla\(\s*{_HUE}\s+{_PCT}\s+{_PCT}\s*/\s*{_ALPHA}\s*\)$", re.I),
)

@_strings_only
def hex_color(value: str) -> bool:
    return bool(_HEX_RE.match(value))

@_strings_only
def rgb_color(value: str) -> bool:
    return any(rx.match(value) for rx in _RGB_RES)

@_strings_only
def rgba_color(value: str) -> bool:
    return any(rx.match(value) for rx in _RGBA_RES)

@_strings_only
def hsl_color(value: str) -> bool:
    return any(rx.match(value) for rx in _HSL_RES)

@_strings_only
def hsla_color(value: str) -> bool:
    return any(rx.match(value) for rx in _HSLA_RES)

def css_color(value: Any) -> bool:
    return (
        hex_color(value)
        or rgb_color(value)
        or rgba_color(value)
        or hsl_color(value)
        or hsla_color(value)
    )

# =============================================================================
# Text
# =============================================================================

_LATIN_RE = re.compile(r"^[a-zA-Z]+$")
_ROMAN_RE = re.compile(r"^M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})$")
_EMOJI_RE = re.compile("[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF]")

def not_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (dict, list, tuple)):
        return len(value) > 0
    return str(value).strip() != ""

@_strings_only
def latin(value: str) -> bool:
    return bool(_LATIN_RE.match(value))

@_strings_only
def palindrome(value: str) -> bool:
    cleaned = re.sub(r"[^a-z0-9]", "", value, flags=re.I).lower()
    return cleaned == cleaned[::-1]

@_strings_only
def roman_numeral(value: str) -> bool:
    return bool(_ROMAN_RE.match(value))

@_strings_only
def json(value: str) -> bool:
    try:
        _json.loads(value)
    except ValueError:
        return False
    return True

@_strings_only
def contains_emoji(value: str) -> bool:
    return bool(_EMOJI_RE.search(value))

@_strings_only
def strong_password(value: str, allow_cyrillic: Any = True) -> bool:
    """
    At least 8 characters with one letter, one digit and one special character.
    Cyrillic letters count as letters unless ``allow_cyrillic`` is false, in which
    case any non-ASCII character fails the check.
    """
    allow_cyrillic = _truthy(allow_cyrillic)
    if len(value.encode("utf-8")) < 8:
        return False
    if not allow_cyrillic and re.search(r"[^\x20-\x7F]", value):
        return False
    letters = r"[A-Za-zА-Яа-я]" if allow_cyrillic else r"[A-Za-z]"
    if not re.search(letters, value):
        return False
    if not re.search(r"[0-9]", value):
        return False
    return bool(re.search(r"[\W_]", value))

def _length_of(value: Any) -> int:
    if isinstance(value, str):
        return len(value)
    if numeric(value):
        f = float(value)
        return len(str(int(f)) if f.is_integer() else repr(f))
    raise ValueError(f"length is undefined for {value!r}")

def max_length(value: Any, length: Any) -> bool:
    return _length_of(value) <= int(_as_number(length))

def min_length(value: Any, length: Any) -> bool:
    return _length_of(value) >= int(_as_number(length))

# =============================================================================
# Numbers
# =============================================================================

def positive_number(value: Any) -> bool:
    return _as_number(value) > 0

def negative_number(value: Any) -> bool:
    return _as_number(value) < 0

def even(value: Any) -> bool:
    return _as_int(value) % 2 == 0

def odd(value: Any) -> bool:
    return not even(value)
