from __future__ import annotations

"""Error taxonomy shared by the signature engines.

Every failure an engine can surface is a subclass of :class:`SigDemoError`,
so callers can catch the whole family while still matching the builtin
category (``ValueError``, ``ArithmeticError``, ...) it belongs to.
"""


class SigDemoError(Exception):
    """Base class for all engine errors."""


class BlobDecodeError(SigDemoError, ValueError):
    """Raised when a key or signature blob cannot be parsed."""


class NoInverseError(SigDemoError, ArithmeticError):
    """Raised when a modular inverse does not exist (gcd(a, m) != 1)."""


class ExponentNotCoprimeError(SigDemoError, ArithmeticError):
    """Raised when the RSA public exponent shares a factor with phi(n).

    Rare, but possible: the caller is expected to retry key generation.
    """


class PrimeGenerationExhausted(SigDemoError, RuntimeError):
    """Raised when prime search gives up after its attempt budget."""


class KeyTooShortError(SigDemoError, ValueError):
    """Raised when the modulus is too small for PKCS#1 v1.5 padding."""


class UnsupportedAlgorithmError(SigDemoError, LookupError):
    """Raised when an unknown scheme or hash identifier is requested."""
