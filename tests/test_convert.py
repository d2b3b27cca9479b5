import math

import pytest

from scatter.convert import (
    MAX_SAFE_INTEGER,
    f64_to_char,
    f64_to_usize,
    hex_char_to_u8,
    usize_to_f64,
)


@pytest.mark.parametrize("value", [0, 1, 3, 1000, MAX_SAFE_INTEGER])
def test_usize_round_trip(value):
    assert f64_to_usize(usize_to_f64(value)) == value


def test_negative_zero_is_zero():
    assert f64_to_usize(-0.0) == 0


@pytest.mark.parametrize(
    "value", [math.nan, math.inf, -math.inf, -1.0, 1.5, float(MAX_SAFE_INTEGER + 1)]
)
def test_f64_to_usize_rejects(value):
    assert f64_to_usize(value) is None


@pytest.mark.parametrize("value", [MAX_SAFE_INTEGER + 1, -1])
def test_usize_to_f64_rejects(value):
    assert usize_to_f64(value) is None


@pytest.mark.parametrize("char", ["A", "z", "\u00e9", "\U0001f600", "\x00"])
def test_char_round_trip(char):
    assert f64_to_char(float(ord(char))) == char


@pytest.mark.parametrize("value", [0xD800, 0xDFFF, 0x110000, 2.0**32, 65.5, -65.0])
def test_f64_to_char_rejects(value):
    assert f64_to_char(float(value)) is None


def test_hex_digits_lower_and_upper():
    for position, (lower, upper) in enumerate(zip("0123456789abcdef", "0123456789ABCDEF")):
        assert hex_char_to_u8(lower) == position
        assert hex_char_to_u8(upper) == position


@pytest.mark.parametrize("char", ["g", "G", " ", "\u0663", "", "ab"])
def test_hex_char_rejects(char):
    assert hex_char_to_u8(char) is None