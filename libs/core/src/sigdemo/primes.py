from __future__ import annotations

"""Miller-Rabin primality testing and random prime search."""

import logging

from .bigint import mod_pow, random_between, random_bits
from .errors import PrimeGenerationExhausted

log = logging.getLogger(__name__)

# First 14 odd primes: a cheap sieve before the Miller-Rabin rounds
SMALL_PRIMES = (3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)


def is_probable_prime(n: int, rounds: int = 10) -> bool:
    """Return True when ``n`` survives ``rounds`` Miller-Rabin witnesses.

    A composite passes with probability at most ``4 ** -rounds``. Primes are
    never rejected.
    """
    if n in (2, 3):
        return True
    if n < 2 or n % 2 == 0:
        return False

    # n - 1 = 2^r * d with d odd
    d = n - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for _ in range(rounds):
        a = random_between(2, n - 2)
        x = mod_pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = mod_pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def _has_small_factor(candidate: int) -> bool:
    for p in SMALL_PRIMES:
        if candidate % p == 0 and candidate != p:
            return True
    return False


def generate_prime(bits: int, *, rounds: int = 10, max_attempts: int = 1000) -> int:
    """Draw a random prime of exactly ``bits`` bits.

    Raises :class:`PrimeGenerationExhausted` once ``max_attempts`` candidates
    have been rejected.
    """
    if bits < 2:
        raise ValueError("prime bit length must be at least 2")
    if max_attempts < 1:
        raise ValueError("max_attempts must be positive")
    rounds = max(rounds, 10)
    top = 1 << (bits - 1)

    for attempt in range(1, max_attempts + 1):
        candidate = random_bits(bits) | top | 1
        if _has_small_factor(candidate):
            continue
        if is_probable_prime(candidate, rounds):
            log.debug("found %d-bit prime after %d attempts", bits, attempt)
            return candidate

    raise PrimeGenerationExhausted(
        f"Failed to generate a {bits}-bit prime after {max_attempts} attempts"
    )
