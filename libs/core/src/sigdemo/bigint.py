from __future__ import annotations

"""Arbitrary-precision modular arithmetic helpers.

Plain functions over Python ints. Every modular result is normalised into
``[0, modulus)``. Randomness comes from :mod:`secrets` so concurrent callers
never share generator state.
"""

import secrets

from .errors import NoInverseError


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """Square-and-multiply ``base ** exponent % modulus``."""
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def mod_inverse(a: int, m: int) -> int:
    """Extended Euclid: the unique ``x`` in ``[0, m)`` with ``a * x = 1 (mod m)``."""
    if m <= 0:
        raise ValueError("modulus must be positive")
    old_r, r = a % m, m
    old_s, s = 1, 0
    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s
    if old_r != 1:
        raise NoInverseError(f"{a} has no inverse modulo {m} (gcd={old_r})")
    return old_s % m


def byte_length(value: int) -> int:
    return (value.bit_length() + 7) // 8


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big", signed=False)


def int_to_bytes(value: int, length: int | None = None) -> bytes:
    if value < 0:
        raise ValueError("only non-negative integers can be encoded")
    if length is None:
        length = max(1, byte_length(value))
    return value.to_bytes(length, "big", signed=False)


def random_below(upper: int) -> int:
    """Uniform integer in ``[0, upper)`` from the OS CSPRNG."""
    if upper <= 0:
        raise ValueError("upper bound must be positive")
    return secrets.randbelow(upper)


def random_between(low: int, high: int) -> int:
    """Uniform integer in the closed range ``[low, high]``."""
    if high < low:
        raise ValueError(f"empty range [{low}, {high}]")
    return low + secrets.randbelow(high - low + 1)


def random_bits(bits: int) -> int:
    return secrets.randbits(bits)
