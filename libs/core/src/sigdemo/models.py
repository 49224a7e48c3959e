from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

"""Result records returned by the signature schemes.

All records are immutable and owned by the caller; schemes never keep a
reference to keys or signatures they produced.
"""


@dataclass(frozen=True)
class KeyPair:
    public_key: str
    private_key: str
    algorithm: str
    security_level: str
    public_key_size: int
    secret_key_size: int
    created_at: str  # ISO-8601, UTC
    generation_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Signature:
    signature: str
    message: str
    algorithm: str
    signature_size: int
    signing_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VerificationResult:
    is_valid: bool
    verification_ms: float
    confidence: str
    hash_algorithm: str
    # Set only when decoding or arithmetic failed during verification
    diagnostic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
