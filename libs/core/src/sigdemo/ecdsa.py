from __future__ import annotations

"""ECDSA over NIST P-256 (secp256r1) in affine coordinates.

The curve is a single immutable :class:`Curve` value passed to every
arithmetic function; nothing here keeps module-level mutable state.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from . import blobs
from .bigint import bytes_to_int, mod_inverse, random_bits
from .errors import BlobDecodeError
from .hashing import Message, digest

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curve:
    """Short Weierstrass curve y^2 = x^3 + a*x + b over GF(p)."""
    name: str
    p: int
    a: int
    b: int
    gx: int
    gy: int
    n: int

    @property
    def generator(self) -> "ECPoint":
        return ECPoint(self.gx, self.gy)


P256 = Curve(
    name="P-256",
    p=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
    a=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFC,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
    gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
)


@dataclass(frozen=True)
class ECPoint:
    x: Optional[int]
    y: Optional[int]

    @property
    def is_infinity(self) -> bool:
        return self.x is None or self.y is None


INFINITY = ECPoint(None, None)


def is_on_curve(point: ECPoint, curve: Curve = P256) -> bool:
    if point.is_infinity:
        return True
    x, y = point.x, point.y
    if not (0 <= x < curve.p and 0 <= y < curve.p):
        return False
    return (y * y - (x * x * x + curve.a * x + curve.b)) % curve.p == 0


def point_neg(point: ECPoint, curve: Curve = P256) -> ECPoint:
    if point.is_infinity:
        return INFINITY
    return ECPoint(point.x, (-point.y) % curve.p)


def point_double(point: ECPoint, curve: Curve = P256) -> ECPoint:
    if point.is_infinity or point.y == 0:
        # tangent is vertical
        return INFINITY
    p = curve.p
    s = (3 * point.x * point.x + curve.a) * mod_inverse(2 * point.y, p) % p
    x = (s * s - 2 * point.x) % p
    y = (s * (point.x - x) - point.y) % p
    return ECPoint(x, y)


def point_add(first: ECPoint, second: ECPoint, curve: Curve = P256) -> ECPoint:
    if first.is_infinity:
        return second
    if second.is_infinity:
        return first
    p = curve.p
    if first.x == second.x:
        if first.y == second.y:
            return point_double(first, curve)
        return INFINITY
    s = (second.y - first.y) * mod_inverse((second.x - first.x) % p, p) % p
    x = (s * s - first.x - second.x) % p
    y = (s * (first.x - x) - first.y) % p
    return ECPoint(x, y)


def scalar_mult(k: int, point: ECPoint, curve: Curve = P256) -> ECPoint:
    """Double-and-add over the bits of ``k``, least significant first."""
    if k < 0:
        raise ValueError("scalar must be non-negative")
    result = INFINITY
    addend = point
    while k > 0:
        if k & 1:
            result = point_add(result, addend, curve)
        addend = point_add(addend, addend, curve)
        k >>= 1
    return result


def random_scalar(curve: Curve = P256) -> int:
    """256 random bits folded into ``[1, n-1]``."""
    return random_bits(256) % (curve.n - 1) + 1


def hash_to_int(message: Message) -> int:
    return bytes_to_int(digest(message, "sha256"))


def generate_keys(curve: Curve = P256) -> Tuple[ECPoint, int]:
    d = random_scalar(curve)
    return scalar_mult(d, curve.generator, curve), d


def sign(message: Message, d: int, curve: Curve = P256) -> Tuple[int, int]:
    z = hash_to_int(message)
    while True:
        k = random_scalar(curve)
        r = scalar_mult(k, curve.generator, curve).x % curve.n
        s = mod_inverse(k, curve.n) * (z + r * d) % curve.n
        if r != 0 and s != 0:
            return r, s
        log.debug("degenerate ECDSA nonce (r=%d, s=%d); resampling", r, s)


def verify(message: Message, signature: Tuple[int, int], public_key: ECPoint, curve: Curve = P256) -> bool:
    r, s = signature
    z = hash_to_int(message)
    s_inv = mod_inverse(s, curve.n)
    u1 = z * s_inv % curve.n
    u2 = r * s_inv % curve.n
    point = point_add(
        scalar_mult(u1, curve.generator, curve),
        scalar_mult(u2, public_key, curve),
        curve,
    )
    return not point.is_infinity and point.x % curve.n == r


# ---------------- blob encoding ----------------

def encode_public_key(point: ECPoint) -> str:
    return blobs.encode_ints({"x": point.x, "y": point.y})


def decode_public_key(blob: str | bytes, curve: Curve = P256) -> ECPoint:
    fields = blobs.decode_ints(blob, ("x", "y"))
    point = ECPoint(fields["x"], fields["y"])
    if not is_on_curve(point, curve):
        raise BlobDecodeError(f"public key point is not on {curve.name}")
    return point


def encode_private_key(d: int) -> str:
    return blobs.encode_ints({"d": d})


def decode_private_key(blob: str | bytes, curve: Curve = P256) -> int:
    d = blobs.decode_ints(blob, ("d",))["d"]
    if not 1 <= d < curve.n:
        raise BlobDecodeError("private scalar outside [1, n-1]")
    return d


def encode_signature(r: int, s: int) -> str:
    return blobs.encode_ints({"r": r, "s": s})


def decode_signature(blob: str | bytes) -> Tuple[int, int]:
    fields = blobs.decode_ints(blob, ("r", "s"))
    return fields["r"], fields["s"]
