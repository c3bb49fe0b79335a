from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Tuple

from ..rules.schema import Rule
from ..utils import fp, valid

# A predicate gets the value plus at most one argument taken from the rule flag.
Predicate = Callable[..., bool]


@dataclass(frozen=True)
class Check:
    name: str
    predicate: Predicate
    message: str

    @property
    def code(self) -> str:
        return f"invalid_{self.name}"

    def __call__(self, value: Any, arg: Any = True) -> bool:
        # a bare flag means "no argument"
        args = () if arg is True else (arg,)
        return bool(self.predicate(value, *args))


# -------- registry --------

def compile_check_registry() -> dict[str, Check]:
    """
    Map check names -> Check, in the order checks run.
    A predicate that cannot interpret its input (TypeError / ValueError)
    counts as a failed check.
    """
    safe = fp.try_or(False, TypeError, ValueError)

    catalogue: list[tuple[str, Predicate, str]] = [
        ("email",            valid.email,            "The email address has an invalid format"),
        ("url",              valid.url,              "The URL has an invalid format"),
        ("allowed_protocol", valid.allowed_protocol, "The protocol is not allowed"),
        ("allowed_host",     valid.allowed_host,     "The host is not allowed"),
        ("domain",           valid.domain,           "The domain has an invalid format"),
        ("ip",               valid.ip,               "The IP address has an invalid format"),
        ("phone",            valid.phone,            "The phone number has an invalid format"),
        ("date_format",      valid.date_format,      "The date has an invalid format"),
        ("not_empty",        valid.not_empty,        "The value is empty"),
        ("hex_color",        valid.hex_color,        "The hex color is in the wrong format"),
        ("rgba_color",       valid.rgba_color,       "The rgba color is in the wrong format"),
        ("rgb_color",        valid.rgb_color,        "The rgb color is in the wrong format"),
        ("hsl_color",        valid.hsl_color,        "The hsl color is in the wrong format"),
        ("hsla_color",       valid.hsla_color,       "The hsla color is in the wrong format"),
        ("css_color",        valid.css_color,        "The css color is in the wrong format"),
        ("latin",            valid.latin,            "This value does not consist of Latin letters"),
        ("positive_number",  valid.positive_number,  "The value is not a positive number"),
        ("negative_number",  valid.negative_number,  "The value is not a negative number"),
        ("even",             valid.even,             "The value is not an even number"),
        ("odd",              valid.odd,              "This value is not an odd number"),
        ("leap_year",        valid.leap_year,        "This year is not a leap year"),
        ("future_date",      valid.future_date,      "The specified date is not in the future"),
        ("past_date",        valid.past_date,        "The specified date is not in the past"),
        ("today",            valid.today,            "This date is not the current one"),
        ("strong_password",  valid.strong_password,  "This password does not meet the security requirements"),
        ("palindrome",       valid.palindrome,       "This value is not a palindrome"),
        ("roman_numeral",    valid.roman_numeral,    "This value is not a Roman numeral"),
        ("mac_address",      valid.mac_address,      "The MAC address has an incorrect format"),
        ("json",             valid.json,             "The value does not match the JSON format"),
        ("contains_emoji",   valid.contains_emoji,   "The value does not contain emojis"),
        ("bitcoin_address",  valid.bitcoin_address,  "The Bitcoin address does not match the required format"),
        ("max_length",       valid.max_length,       "The value is too long"),
        ("min_length",       valid.min_length,       "The value is too short"),
    ]
    return {name: Check(name, safe(fn), msg) for name, fn, msg in catalogue}


CHECKS: Dict[str, Check] = compile_check_registry()


def check_names() -> list[str]:
    return list(CHECKS)


def active_checks(rule: Rule) -> Iterator[Tuple[Check, Any]]:
    """(check, argument) for every check flag set on ``rule``, in catalogue order."""
    for name, check in CHECKS.items():
        if not rule.has_option(name):
            continue
        arg = rule.option(name)
        if arg is False or arg is None:
            continue
        yield check, arg
