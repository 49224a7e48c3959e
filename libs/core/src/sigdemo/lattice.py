from __future__ import annotations

"""Toy lattice-style signature modelled loosely on CRYSTALS-Dilithium.

NOT A SECURE SIGNATURE SCHEME. This is a teaching construction:

* polynomial multiplication uses a plain index wrap with a sign flip instead
  of a proper negacyclic NTT reduction;
* keys and signatures keep only the first ``PREFIX`` coefficients of every
  polynomial, so a serialized key cannot rebuild the full polynomials;
* verification only recomputes the hash-derived challenge ``c`` and compares
  its visible prefix. ``z`` is never checked against ``A`` and ``t``, so any
  party that knows the message can forge a "valid" signature.

The behaviour is kept as-is because the point is to show the moving parts
(matrix A, secrets s1/s2, t = A*s1 + s2, z = y + c*s1), not to protect data.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from . import blobs
from .bigint import random_between
from .errors import BlobDecodeError
from .hashing import Message, digest

log = logging.getLogger(__name__)

Q = 8380417  # prime modulus
N = 256      # polynomial degree
K = 4        # rows of A
L = 4        # columns of A / length of s1
ETA = 2      # secret coefficient bound
Y_BOUND = 100
MATRIX_BOUND = Q // 2
PREFIX = 16  # coefficients kept per polynomial in blobs

Polynomial = List[int]


def poly_zero() -> Polynomial:
    return [0] * N


def poly_add(a: Sequence[int], b: Sequence[int]) -> Polynomial:
    return [(a[i] + b[i]) % Q for i in range(N)]


def poly_mul(a: Sequence[int], b: Sequence[int]) -> Polynomial:
    """Schoolbook product; the term for x^(i+j) lands on index (i+j) mod N
    and changes sign once per wrap."""
    result = poly_zero()
    for i in range(N):
        ai = a[i]
        if ai == 0:
            continue
        for j in range(N):
            total = i + j
            idx = total % N
            sign = 1 if (total // N) % 2 == 0 else -1
            result[idx] = (result[idx] + sign * ai * b[j]) % Q
    return result


def poly_random(bound: int) -> Polynomial:
    """Coefficients uniform in ``[-bound, bound]``, stored mod Q."""
    return [random_between(-bound, bound) % Q for _ in range(N)]


def poly_from_prefix(prefix: Sequence[int]) -> Polynomial:
    poly = poly_zero()
    for i, coeff in enumerate(prefix[:N]):
        poly[i] = coeff % Q
    return poly


def truncate(poly: Sequence[int]) -> List[int]:
    return list(poly[:PREFIX])


def mat_vec_mul(matrix: Sequence[Sequence[Polynomial]], vector: Sequence[Polynomial]) -> List[Polynomial]:
    out: List[Polynomial] = []
    for row in matrix:
        acc = poly_zero()
        for entry, v in zip(row, vector):
            acc = poly_add(acc, poly_mul(entry, v))
        out.append(acc)
    return out


def challenge(message: Message) -> Polynomial:
    """Hash bytes copied straight into the leading coefficients."""
    h = digest(message, "sha256")
    c = poly_zero()
    for i in range(min(len(h), N)):
        c[i] = h[i] % Q
    return c


@dataclass(frozen=True)
class LatticePublicKey:
    a: List[List[List[int]]]
    t: List[List[int]]

    def to_blob(self) -> str:
        return blobs.encode({"A": self.a, "t": self.t})

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "LatticePublicKey":
        data = blobs.decode(blob, ("A", "t"))
        rows = data["A"]
        if not isinstance(rows, list) or len(rows) != K:
            raise BlobDecodeError(f"field 'A' must be a {K}x{L} matrix of polynomials")
        matrix = [
            blobs.coeff_rows(f"A[{i}]", row, rows=L, length=PREFIX, modulus=Q)
            for i, row in enumerate(rows)
        ]
        t = blobs.coeff_rows("t", data["t"], rows=K, length=PREFIX, modulus=Q)
        return cls(a=matrix, t=t)


@dataclass(frozen=True)
class LatticePrivateKey:
    s1: List[List[int]]
    s2: List[List[int]]
    t: List[List[int]]

    def to_blob(self) -> str:
        return blobs.encode({"s1": self.s1, "s2": self.s2, "t": self.t})

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "LatticePrivateKey":
        data = blobs.decode(blob, ("s1", "s2", "t"))
        return cls(
            s1=blobs.coeff_rows("s1", data["s1"], rows=L, length=PREFIX, modulus=Q),
            s2=blobs.coeff_rows("s2", data["s2"], rows=K, length=PREFIX, modulus=Q),
            t=blobs.coeff_rows("t", data["t"], rows=K, length=PREFIX, modulus=Q),
        )


@dataclass(frozen=True)
class LatticeSignature:
    c: List[int]
    z: List[List[int]]

    def to_blob(self) -> str:
        return blobs.encode({"c": self.c, "z": self.z})

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "LatticeSignature":
        data = blobs.decode(blob, ("c", "z"))
        # c is compared as-is; a short c simply fails verification
        c = blobs.coeff_list("c", data["c"])
        z = blobs.coeff_rows("z", data["z"], rows=L, length=PREFIX, modulus=Q)
        return cls(c=c, z=z)


def generate_keys() -> Tuple[LatticePublicKey, LatticePrivateKey]:
    a = [[poly_random(MATRIX_BOUND) for _ in range(L)] for _ in range(K)]
    s1 = [poly_random(ETA) for _ in range(L)]
    s2 = [poly_random(ETA) for _ in range(K)]
    t = [poly_add(row, e) for row, e in zip(mat_vec_mul(a, s1), s2)]
    log.debug("lattice keys generated (K=%d, L=%d, N=%d)", K, L, N)

    t_prefix = [truncate(p) for p in t]
    public = LatticePublicKey(a=[[truncate(p) for p in row] for row in a], t=t_prefix)
    private = LatticePrivateKey(
        s1=[truncate(p) for p in s1],
        s2=[truncate(p) for p in s2],
        t=t_prefix,
    )
    return public, private


def sign(message: Message, key: LatticePrivateKey) -> LatticeSignature:
    c = challenge(message)
    s1 = [poly_from_prefix(coeffs) for coeffs in key.s1]
    z = [poly_add(poly_random(Y_BOUND), poly_mul(c, s)) for s in s1]
    return LatticeSignature(c=truncate(c), z=[truncate(p) for p in z])


def verify(message: Message, signature: LatticeSignature) -> bool:
    """Compare the challenge prefix only (see module docstring)."""
    c = challenge(message)
    stored = signature.c
    for i in range(min(PREFIX, len(c))):
        if i >= len(stored) or c[i] != stored[i]:
            return False
    return True
