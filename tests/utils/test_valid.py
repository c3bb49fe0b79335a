from __future__ import annotations
from datetime import datetime
import numpy as np
import pytest

from purifier.utils import valid


@pytest.mark.parametrize(
    "value, is_numeric, is_integer",
    [
        (3, True, True),
        (2.0, True, True),
        (2.5, True, False),
        (" 12 ", True, True),
        ("-3.5e2", True, False),
        ("1.0", True, False),
        ("abc", False, False),
        (True, False, False),
        (float("nan"), False, False),
        (np.int32(4), True, True),
        (np.float32(1.5), True, False),
        (None, False, False),
    ],
)
def test_numeric_and_integer(value, is_numeric, is_integer):
    assert valid.numeric(value) is is_numeric
    assert valid.integer(value) is is_integer

def test_boolean_only_for_real_bools():
    assert valid.boolean(True) and valid.boolean(np.bool_(False))
    assert not valid.boolean(1) and not valid.boolean("true")

def test_network_formats():
    assert valid.email("jane.doe@gmail.com")
    assert not valid.email("jane@")
    assert not valid.email(5)
    assert valid.url("https://example.com/path?q=1")
    assert not valid.url("not a url")
    assert valid.ip("192.168.0.1") and valid.ip("::1")
    assert not valid.ip("999.1.1.1")
    assert valid.domain("example.com")
    assert not valid.domain("-bad-.com")
    assert not valid.domain("localhost")
    assert valid.allowed_protocol("ftp://x.org")
    assert not valid.allowed_protocol("ssh://x.org", True)

def test_phone():
    assert valid.phone("+1 555 123-4567")
    assert valid.phone("+7 999 123-45-67")
    assert not valid.phone("1234")
    assert not valid.phone("+7 999 123")
    assert not valid.phone("1111111111")

def test_identifiers():
    assert valid.mac_address("00:1A:2B:3C:4D:5E")
    assert not valid.mac_address("00:1A:2B:3C:4D")
    assert valid.bitcoin_address("1BoatSLRHtKNngkdXEeobR76b53LETtpyT")
    assert not valid.bitcoin_address("0BoatSLRHtKNngkdXEeobR76b53LETtpyT")

def test_dates():
    assert valid.date_format("2024-02-28")
    assert not valid.date_format("2024-02-30")
    assert valid.date_format("28/02/2024", "d/m/Y")
    assert valid.date_format("28.02.2024", "%d.%m.%Y")
    assert valid.future_date("2999-01-01")
    assert valid.past_date("2000-01-01")
    assert valid.today(datetime.now().strftime("%Y-%m-%d"))
    assert not valid.today("2000-01-01")
    assert valid.leap_year(2024) and valid.leap_year("2000")
    assert not valid.leap_year(1900) and not valid.leap_year("2023")

def test_colors():
    assert valid.hex_color("#fff") and valid.hex_color("#A0B1C2")
    assert not valid.hex_color("#ggg")
    assert valid.rgb_color("rgb(255, 0, 0)")
    assert not valid.rgb_color("rgb(256, 0, 0)")
    assert valid.rgba_color("rgba(0,0,0,0.5)")
    assert valid.hsl_color("hsl(120, 100%, 50%)")
    assert valid.hsla_color("hsla(120, 100%, 50%, 0.3)")
    assert valid.css_color("#000") and valid.css_color("rgb(1,2,3)")
    assert not valid.css_color("red-ish")

def test_text_checks():
    assert valid.latin("Hello") and not valid.latin("Héllo")
    assert valid.palindrome("A man, a plan, a canal: Panama")
    assert valid.roman_numeral("XIV") and not valid.roman_numeral("IIII")
    assert valid.json('{"a": 1}') and not valid.json("{a:1}")
    assert valid.contains_emoji("hi 😀") and not valid.contains_emoji("hi")
    assert valid.not_empty(0) and not valid.not_empty("  ") and not valid.not_empty([])

def test_strong_password():
    assert valid.strong_password("Passw0rd!")
    assert not valid.strong_password("password")
    assert not valid.strong_password("Pa0!")
    assert valid.strong_password("Пароль12!")
    assert not valid.strong_password("Пароль12!", False)

def test_lengths_and_numbers():
    assert valid.max_length("abc", 3) and not valid.max_length("abcd", 3)
    assert valid.min_length("ab", 2)
    assert not valid.max_length(12345, 4)
    assert valid.positive_number("3") and not valid.positive_number(0)
    assert valid.negative_number(-1)
    assert valid.even(4) and valid.odd("3")
    with pytest.raises(ValueError):
        valid.even("x")

def test_the_present_moment_is_neither_past_nor_future(monkeypatch):
    assert not valid.past_date("2999-01-01")
    assert not valid.future_date("2000-01-01")
    monkeypatch.setattr(valid, "_now_like", lambda dt: dt)
    assert not valid.past_date("2024-05-01T12:00:00")
    assert not valid.future_date("2024-05-01T12:00:00")
