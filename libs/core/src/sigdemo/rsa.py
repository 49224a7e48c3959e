from __future__ import annotations

"""Textbook RSA with PKCS#1 v1.5 signature padding.

Demonstration strength only: the default 512-bit primes give a ~1024-bit
modulus, and the arithmetic is not constant time.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from . import blobs
from .bigint import byte_length, bytes_to_int, gcd, mod_inverse, mod_pow
from .errors import BlobDecodeError, ExponentNotCoprimeError, KeyTooShortError
from .hashing import DEFAULT_HASH, Message, digest, get_hash
from .primes import generate_prime

log = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537
MIN_PADDING_BYTES = 8


@dataclass(frozen=True)
class RSAPublicKey:
    n: int
    e: int

    @property
    def byte_length(self) -> int:
        return byte_length(self.n)

    def to_blob(self) -> str:
        return blobs.encode_ints({"n": self.n, "e": self.e})

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "RSAPublicKey":
        fields = blobs.decode_ints(blob, ("n", "e"))
        if fields["n"] < 2:
            raise BlobDecodeError("RSA modulus must be at least 2")
        return cls(**fields)


@dataclass(frozen=True)
class RSAPrivateKey:
    n: int
    d: int
    # p and q are kept for a CRT speed-up; signing only needs n and d
    p: int
    q: int

    @property
    def byte_length(self) -> int:
        return byte_length(self.n)

    def to_blob(self) -> str:
        return blobs.encode_ints({"n": self.n, "d": self.d, "p": self.p, "q": self.q})

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "RSAPrivateKey":
        fields = blobs.decode_ints(blob, ("n", "d", "p", "q"))
        if fields["n"] < 2:
            raise BlobDecodeError("RSA modulus must be at least 2")
        return cls(**fields)


def encode_signature(signature: int) -> str:
    return blobs.encode_ints({"s": signature})


def decode_signature(blob: str | bytes) -> int:
    return blobs.decode_ints(blob, ("s",))["s"]


def generate_keys(
    prime_bits: int,
    *,
    exponent: int = PUBLIC_EXPONENT,
    rounds: int = 10,
    max_attempts: int = 1000,
) -> Tuple[RSAPublicKey, RSAPrivateKey]:
    log.debug("generating prime p (%d bits)", prime_bits)
    p = generate_prime(prime_bits, rounds=rounds, max_attempts=max_attempts)
    log.debug("generating prime q (%d bits)", prime_bits)
    q = generate_prime(prime_bits, rounds=rounds, max_attempts=max_attempts)
    while q == p:
        q = generate_prime(prime_bits, rounds=rounds, max_attempts=max_attempts)

    n = p * q
    phi = (p - 1) * (q - 1)
    if gcd(exponent, phi) != 1:
        raise ExponentNotCoprimeError(
            f"public exponent {exponent} is not coprime with phi(n); retry with fresh primes"
        )
    log.debug("computing private exponent")
    d = mod_inverse(exponent, phi)
    return RSAPublicKey(n=n, e=exponent), RSAPrivateKey(n=n, d=d, p=p, q=q)


def pkcs1_v15_pad(message_digest: bytes, key_length: int, hash_name: str = DEFAULT_HASH) -> int:
    """EMSA-PKCS1-v1_5: ``00 01 FF..FF 00 || DigestInfo || digest`` as an integer."""
    digest_info = get_hash(hash_name).digest_info
    t = digest_info + message_digest
    ps_len = key_length - len(t) - 3
    if ps_len < MIN_PADDING_BYTES:
        raise KeyTooShortError(
            f"{key_length}-byte modulus is too short for PKCS#1 padding "
            f"({ps_len} padding bytes, need {MIN_PADDING_BYTES})"
        )
    padded = b"\x00\x01" + b"\xff" * ps_len + b"\x00" + t
    return bytes_to_int(padded)


def encoded_message(message: Message, key_length: int, hash_name: str = DEFAULT_HASH) -> int:
    return pkcs1_v15_pad(digest(message, hash_name), key_length, hash_name)


def sign(message: Message, key: RSAPrivateKey, hash_name: str = DEFAULT_HASH) -> int:
    padded = encoded_message(message, key.byte_length, hash_name)
    return mod_pow(padded, key.d, key.n)


def verify(message: Message, signature: int, key: RSAPublicKey, hash_name: str = DEFAULT_HASH) -> bool:
    expected = encoded_message(message, key.byte_length, hash_name)
    return mod_pow(signature, key.e, key.n) == expected
