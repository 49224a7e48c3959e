from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Tuple

from . import ecdsa, lattice, rsa
from .config import Settings
from .errors import SigDemoError
from .hashing import Message, get_hash
from .models import KeyPair, Signature, VerificationResult
from .params import get_params, rsa_mechanism, rsa_security_level
from .registry import registry

log = logging.getLogger(__name__)

CONFIDENCE_VALID = "Signature valid - 100%"
CONFIDENCE_INVALID = "Signature invalid"
CONFIDENCE_ERROR = "Verification error"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _message_text(message: Message) -> str:
    if isinstance(message, str):
        return message
    return bytes(message).decode("utf-8", errors="backslashreplace")


class _SchemeBase(ABC):
    """Shared timing/labelling around the engine-specific hooks.

    Subclasses implement ``_keygen``, ``_sign`` and ``_verify`` on blobs.
    Instances carry configuration only, never keys.
    """
    name = ""
    algorithm = ""
    security_level = ""
    hash_algorithm_name = "sha256"
    hash_label = "SHA-256"
    valid_confidence = CONFIDENCE_VALID

    @abstractmethod
    def _keygen(self) -> Tuple[str, str]:
        ...

    @abstractmethod
    def _sign(self, message: Message, private_key: str) -> str:
        ...

    @abstractmethod
    def _verify(self, message: Message, signature: str, public_key: str) -> bool:
        ...

    def generate_keypair(self) -> KeyPair:
        start = time.perf_counter()
        public_key, private_key = self._keygen()
        elapsed = _elapsed_ms(start)
        log.debug("%s keypair generated in %.1f ms", self.algorithm, elapsed)
        return KeyPair(
            public_key=public_key,
            private_key=private_key,
            algorithm=self.algorithm,
            security_level=self.security_level,
            public_key_size=len(public_key),
            secret_key_size=len(private_key),
            created_at=_now_iso(),
            generation_ms=elapsed,
        )

    def sign(self, message: Message, private_key: str) -> Signature:
        start = time.perf_counter()
        blob = self._sign(message, private_key)
        elapsed = _elapsed_ms(start)
        log.debug("%s signature produced in %.1f ms", self.algorithm, elapsed)
        return Signature(
            signature=blob,
            message=_message_text(message),
            algorithm=self.algorithm,
            signature_size=len(blob),
            signing_ms=elapsed,
        )

    def verify(self, message: Message, signature: str, public_key: str) -> VerificationResult:
        start = time.perf_counter()
        try:
            ok = self._verify(message, signature, public_key)
        except (SigDemoError, ValueError, ArithmeticError) as exc:
            log.warning("%s verification failed with %s: %s", self.algorithm, type(exc).__name__, exc)
            return VerificationResult(
                is_valid=False,
                verification_ms=_elapsed_ms(start),
                confidence=CONFIDENCE_ERROR,
                hash_algorithm=self.hash_label,
                diagnostic=f"{type(exc).__name__}: {exc}",
            )
        return VerificationResult(
            is_valid=ok,
            verification_ms=_elapsed_ms(start),
            confidence=self.valid_confidence if ok else CONFIDENCE_INVALID,
            hash_algorithm=self.hash_label,
        )


@registry.register("rsa")
class RSASignature(_SchemeBase):
    """Textbook RSA with PKCS#1 v1.5 padding (demonstration key sizes)."""
    name = "rsa"

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings.from_env()
        spec = get_hash(self._settings.rsa_hash)
        self._bits = self._settings.rsa_prime_bits
        self.mech = rsa_mechanism(self._bits)
        self.algorithm = self.mech
        self.security_level = rsa_security_level(self._bits)
        self.hash_algorithm_name = spec.name
        self.hash_digest_size = spec.digest_size
        self.hash_label = f"{spec.label} with PKCS#1 v1.5"

    def _keygen(self) -> Tuple[str, str]:
        public, private = rsa.generate_keys(
            self._bits,
            rounds=self._settings.prime_rounds,
            max_attempts=self._settings.prime_max_attempts,
        )
        return public.to_blob(), private.to_blob()

    def _sign(self, message: Message, private_key: str) -> str:
        key = rsa.RSAPrivateKey.from_blob(private_key)
        return rsa.encode_signature(rsa.sign(message, key, self.hash_algorithm_name))

    def _verify(self, message: Message, signature: str, public_key: str) -> bool:
        key = rsa.RSAPublicKey.from_blob(public_key)
        value = rsa.decode_signature(signature)
        return rsa.verify(message, value, key, self.hash_algorithm_name)


@registry.register("ecdsa")
class ECDSASignature(_SchemeBase):
    """ECDSA over P-256 with SHA-256."""
    name = "ecdsa"

    def __init__(self) -> None:
        hint = get_params(self.name)
        self.mech = hint.mechanism
        self.algorithm = self.mech
        self.security_level = hint.security_level
        self.curve = ecdsa.P256

    def _keygen(self) -> Tuple[str, str]:
        public, d = ecdsa.generate_keys(self.curve)
        return ecdsa.encode_public_key(public), ecdsa.encode_private_key(d)

    def _sign(self, message: Message, private_key: str) -> str:
        d = ecdsa.decode_private_key(private_key, self.curve)
        r, s = ecdsa.sign(message, d, self.curve)
        return ecdsa.encode_signature(r, s)

    def _verify(self, message: Message, signature: str, public_key: str) -> bool:
        point = ecdsa.decode_public_key(public_key, self.curve)
        rs = ecdsa.decode_signature(signature)
        return ecdsa.verify(message, rs, point, self.curve)


@registry.register("dilithium")
class LatticeSignature(_SchemeBase):
    """Toy lattice signature. Verification checks the challenge prefix only."""
    name = "dilithium"
    valid_confidence = "Signature valid - post-quantum (toy check)"

    def __init__(self) -> None:
        hint = get_params(self.name)
        self.mech = hint.mechanism
        self.algorithm = self.mech
        self.security_level = hint.security_level

    def _keygen(self) -> Tuple[str, str]:
        public, private = lattice.generate_keys()
        return public.to_blob(), private.to_blob()

    def _sign(self, message: Message, private_key: str) -> str:
        key = lattice.LatticePrivateKey.from_blob(private_key)
        return lattice.sign(message, key).to_blob()

    def _verify(self, message: Message, signature: str, public_key: str) -> bool:
        # The public key is parsed for well-formedness but plays no part in the check
        lattice.LatticePublicKey.from_blob(public_key)
        sig = lattice.LatticeSignature.from_blob(signature)
        return lattice.verify(message, sig)
