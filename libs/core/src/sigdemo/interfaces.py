from __future__ import annotations
from typing import Protocol

from .hashing import Message
from .models import KeyPair, Signature, VerificationResult

"""Scheme interface used by the registry.

Adapters implement this Protocol and register themselves into the global
registry. The CLI interacts only with this interface, never with the engine
modules directly.
"""

class SignatureScheme(Protocol):
    """Digital signature contract."""
    name: str
    algorithm: str
    hash_algorithm_name: str
    def generate_keypair(self) -> KeyPair: ...
    def sign(self, message: Message, private_key: str) -> Signature: ...
    def verify(self, message: Message, signature: str, public_key: str) -> VerificationResult: ...
