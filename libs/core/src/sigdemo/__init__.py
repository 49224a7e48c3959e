
from .errors import (
    BlobDecodeError,
    ExponentNotCoprimeError,
    KeyTooShortError,
    NoInverseError,
    PrimeGenerationExhausted,
    SigDemoError,
    UnsupportedAlgorithmError,
)
from .interfaces import SignatureScheme
from .models import KeyPair, Signature, VerificationResult
from .registry import registry
from .hashing import Message
from . import adapters  # noqa: F401  (registers the schemes)


def get_scheme(name: str) -> SignatureScheme:
    """Resolve and instantiate a registered scheme.

    Unknown names raise UnsupportedAlgorithmError before any key material is
    touched.
    """
    return registry.get(name)()


def generate_keypair(name: str) -> KeyPair:
    return get_scheme(name).generate_keypair()


def sign(name: str, message: Message, private_key: str) -> Signature:
    return get_scheme(name).sign(message, private_key)


def verify(name: str, message: Message, signature: str, public_key: str) -> VerificationResult:
    return get_scheme(name).verify(message, signature, public_key)


__all__ = [
    "BlobDecodeError",
    "ExponentNotCoprimeError",
    "KeyTooShortError",
    "NoInverseError",
    "PrimeGenerationExhausted",
    "SigDemoError",
    "UnsupportedAlgorithmError",
    "SignatureScheme",
    "KeyPair",
    "Signature",
    "VerificationResult",
    "registry",
    "get_scheme",
    "generate_keypair",
    "sign",
    "verify",
]
