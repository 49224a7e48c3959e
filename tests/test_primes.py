from __future__ import annotations

import pytest

from sigdemo import primes
from sigdemo.errors import PrimeGenerationExhausted
from sigdemo.primes import generate_prime, is_probable_prime


def _sieve(limit: int) -> list[int]:
    flags = [True] * limit
    flags[0] = flags[1] = False
    for i in range(2, int(limit ** 0.5) + 1):
        if flags[i]:
            flags[i * i::i] = [False] * len(flags[i * i::i])
    return [i for i, is_p in enumerate(flags) if is_p]


def test_no_false_negatives_below_10000():
    for p in _sieve(10_000):
        assert is_probable_prime(p, 10), p


def test_known_small_composites_rejected():
    prime_set = set(_sieve(2_000))
    for n in range(-5, 2_000):
        if n not in prime_set:
            assert not is_probable_prime(n, 20), n


@pytest.mark.parametrize("carmichael", [561, 1105, 1729, 2465, 2821, 6601, 8911, 41041, 825265])
def test_carmichael_numbers_rejected(carmichael):
    assert not is_probable_prime(carmichael, 20)


def test_large_known_prime_and_composite():
    mersenne = 2**127 - 1
    assert is_probable_prime(mersenne, 10)
    assert not is_probable_prime(mersenne * (2**61 - 1), 10)


@pytest.mark.parametrize("bits", [8, 16, 64, 256])
def test_generate_prime_exact_bit_length(bits):
    p = generate_prime(bits)
    assert p.bit_length() == bits
    assert p % 2 == 1
    assert is_probable_prime(p, 20)


def test_generate_prime_rejects_tiny_bit_length():
    with pytest.raises(ValueError):
        generate_prime(1)


def test_generate_prime_exhausts_attempt_budget(monkeypatch):
    # Every candidate is 9 * 5 = 45 -> caught by the small-prime sieve
    monkeypatch.setattr(primes, "random_bits", lambda bits: 45)
    with pytest.raises(PrimeGenerationExhausted):
        generate_prime(6, max_attempts=25)


def test_generate_prime_counts_miller_rabin_failures(monkeypatch):
    calls = []

    def _never_prime(n, rounds):
        calls.append(rounds)
        return False

    monkeypatch.setattr(primes, "is_probable_prime", _never_prime)
    with pytest.raises(PrimeGenerationExhausted):
        generate_prime(128, rounds=3, max_attempts=50)
    assert calls, "expected at least one Miller-Rabin call"
    # Rounds below 10 are raised to 10
    assert set(calls) == {10}
