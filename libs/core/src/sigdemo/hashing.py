"""Message digests for the signature engines.

Digests are computed with ``cryptography``'s hash primitives. Each supported
hash carries the DER ``DigestInfo`` prefix that PKCS#1 v1.5 embeds in front of
the digest (RFC 8017, section 9.2, note 1).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Type, Union

from cryptography.hazmat.primitives import hashes

from .errors import UnsupportedAlgorithmError

Message = Union[str, bytes, bytearray]


@dataclass(frozen=True)
class HashSpec:
    name: str
    label: str
    algorithm: Type[hashes.HashAlgorithm]
    digest_info: bytes

    @property
    def digest_size(self) -> int:
        return self.algorithm.digest_size


_HASHES: Dict[str, HashSpec] = {
    "sha256": HashSpec(
        name="sha256",
        label="SHA-256",
        algorithm=hashes.SHA256,
        digest_info=bytes.fromhex("3031300d060960864801650304020105000420"),
    ),
    "sha384": HashSpec(
        name="sha384",
        label="SHA-384",
        algorithm=hashes.SHA384,
        digest_info=bytes.fromhex("3041300d060960864801650304020205000430"),
    ),
    "sha512": HashSpec(
        name="sha512",
        label="SHA-512",
        algorithm=hashes.SHA512,
        digest_info=bytes.fromhex("3051300d060960864801650304020305000440"),
    ),
}

DEFAULT_HASH = "sha256"


def get_hash(name: str = DEFAULT_HASH) -> HashSpec:
    try:
        return _HASHES[name.lower()]
    except KeyError:
        raise UnsupportedAlgorithmError(
            f"Unsupported hash '{name}'. Expected one of: {', '.join(sorted(_HASHES))}"
        ) from None


def available_hashes() -> list[str]:
    return sorted(_HASHES)


def to_bytes(message: Message) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def digest(message: Message, name: str = DEFAULT_HASH) -> bytes:
    spec = get_hash(name)
    h = hashes.Hash(spec.algorithm())
    h.update(to_bytes(message))
    return h.finalize()
