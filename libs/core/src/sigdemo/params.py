from __future__ import annotations
"""Canonical parameter hints for the registered schemes.

Maps scheme identifiers (and a few common aliases) to lightweight parameter
records used for labelling keys, `list-algos` output and bench metadata.

Note: these are descriptive records, not the parameters the engines run
with; the engines own their constants.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any

from . import ecdsa, lattice, rsa


@dataclass
class ParamHint:
    family: str            # RSA, ECDSA, Lattice
    mechanism: str         # exact mechanism name as emitted by adapters
    security_level: str    # human-readable label shown next to keys
    notes: str = ""
    extras: Dict[str, Any] | None = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return d


_PARAMS: Dict[str, ParamHint] = {}

def _add(alias_list, family: str, mechanism: str, security_level: str, notes: str = "", extras: Dict[str, Any] | None = None):
    for alias in alias_list:
        _PARAMS[alias.lower()] = ParamHint(family=family, mechanism=mechanism, security_level=security_level, notes=notes, extras=extras or {})


# RSA (textbook, PKCS#1 v1.5). The modulus size follows SIGDEMO_RSA_PRIME_BITS;
# rsa_security_level() gives the label for non-default sizes.
_add(["rsa", "rsa-pkcs1"], family="RSA", mechanism="RSA-1024",
     security_level="Level 2 (1024-bit modulus, demonstration only)",
     notes="two 512-bit primes; e=65537; SHA-256 DigestInfo; not RSA-3072",
     extras={"modulus_bits": 1024, "public_exponent": rsa.PUBLIC_EXPONENT, "hash": "sha256"})

# ECDSA over NIST P-256
_add(["ecdsa", "ecdsa-p256"], family="ECDSA", mechanism="ECDSA-P256",
     security_level="Level 1 (128-bit)",
     notes="secp256r1; affine double-and-add; SHA-256",
     extras={"field_bits": ecdsa.P256.p.bit_length(), "order_bits": ecdsa.P256.n.bit_length(), "hash": "sha256"})

# Toy lattice signature
_add(["dilithium", "lattice"], family="Lattice", mechanism="Toy-Dilithium",
     security_level="Level 3 label (toy post-quantum construction, no real security)",
     notes=f"k={lattice.K}, l={lattice.L}; n={lattice.N}; q={lattice.Q}; eta={lattice.ETA}; "
           f"blobs keep {lattice.PREFIX} coefficients per polynomial; verify checks the challenge only",
     extras={
         "k": lattice.K,
         "l": lattice.L,
         "n": lattice.N,
         "q": lattice.Q,
         "eta": lattice.ETA,
         "prefix": lattice.PREFIX,
     })


def get_params(name: str) -> Optional[ParamHint]:
    if not name:
        return None
    return _PARAMS.get(name.lower())


def rsa_mechanism(prime_bits: int) -> str:
    return f"RSA-{2 * prime_bits}"


def rsa_security_level(prime_bits: int) -> str:
    modulus_bits = 2 * prime_bits
    if modulus_bits == 1024:
        return _PARAMS["rsa"].security_level
    if modulus_bits < 2048:
        return f"Demonstration ({modulus_bits}-bit modulus, below production strength)"
    return f"Reduced ({modulus_bits}-bit modulus, textbook RSA without hardening)"
