from __future__ import annotations

import math

import pytest

from sigdemo.bigint import (
    byte_length,
    bytes_to_int,
    gcd,
    int_to_bytes,
    mod_inverse,
    mod_pow,
    random_between,
)
from sigdemo.errors import NoInverseError


@pytest.mark.parametrize(
    "base,exponent,modulus",
    [(4, 13, 497), (2, 0, 7), (0, 5, 11), (-3, 7, 10), (123456789, 987654321, 2**61 - 1)],
)
def test_mod_pow_matches_builtin(base, exponent, modulus):
    assert mod_pow(base, exponent, modulus) == pow(base, exponent, modulus)


def test_mod_pow_modulus_one_and_zero_exponent():
    assert mod_pow(12345, 678, 1) == 0
    assert mod_pow(5, 0, 13) == 1
    assert mod_pow(5, 0, 1) == 0


def test_mod_pow_rejects_bad_modulus():
    with pytest.raises(ValueError):
        mod_pow(2, 3, 0)
    with pytest.raises(ValueError):
        mod_pow(2, 3, -5)


@pytest.mark.parametrize("a,m", [(3, 11), (65537, 3120), (17, 2**127 - 1), (-7, 40)])
def test_mod_inverse_property(a, m):
    x = mod_inverse(a, m)
    assert 0 <= x < m
    assert (a * x) % m == 1


def test_mod_inverse_without_inverse_raises():
    with pytest.raises(NoInverseError):
        mod_inverse(6, 9)
    # NoInverseError is still an ArithmeticError for generic callers
    with pytest.raises(ArithmeticError):
        mod_inverse(0, 7)


def test_gcd_cases():
    assert gcd(0, 0) == 0
    assert gcd(0, 9) == 9
    assert gcd(-12, 18) == 6
    assert gcd(2**64, 2**40 * 3) == math.gcd(2**64, 2**40 * 3)


def test_byte_conversions_are_big_endian():
    assert bytes_to_int(b"\x01\x00") == 256
    assert int_to_bytes(256) == b"\x01\x00"
    assert int_to_bytes(1, 4) == b"\x00\x00\x00\x01"
    assert int_to_bytes(0) == b"\x00"
    assert byte_length(2**1023) == 128
    assert byte_length(2**1024 - 1) == 128
    with pytest.raises(ValueError):
        int_to_bytes(-1)


def test_random_between_stays_in_range():
    values = {random_between(-2, 2) for _ in range(500)}
    assert values <= {-2, -1, 0, 1, 2}
    assert len(values) == 5
