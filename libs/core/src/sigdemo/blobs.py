from __future__ import annotations

"""Text encoding for keys and signatures.

A blob is a compact JSON object of named fields. Integers travel as lowercase
hex strings without prefix, lattice coefficients as plain JSON integer
arrays. Encoding keeps field order, so encode -> decode -> encode reproduces
the same text.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Sequence

from .errors import BlobDecodeError

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def int_to_hex(value: int) -> str:
    if value < 0:
        raise ValueError("negative integers cannot be hex-encoded")
    return format(value, "x")


def hex_to_int(field: str, value: Any) -> int:
    if not isinstance(value, str) or not _HEX_RE.match(value):
        raise BlobDecodeError(f"field '{field}' must be a hexadecimal string")
    return int(value, 16)


def encode(fields: Mapping[str, Any]) -> str:
    return json.dumps(dict(fields), separators=(",", ":"))


def decode(blob: str | bytes, required: Sequence[str]) -> Dict[str, Any]:
    """Parse ``blob`` and check that every ``required`` field is present."""
    if isinstance(blob, (bytes, bytearray)):
        try:
            blob = bytes(blob).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BlobDecodeError("blob is not valid UTF-8") from exc
    if not isinstance(blob, str):
        raise BlobDecodeError(f"blob must be text, got {type(blob).__name__}")
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise BlobDecodeError(f"blob is not valid JSON: {exc.msg}") from exc
    except (RecursionError, ValueError) as exc:
        raise BlobDecodeError(f"blob is not valid JSON: {type(exc).__name__}") from exc
    if not isinstance(data, dict):
        raise BlobDecodeError("blob must be a JSON object of named fields")
    missing = [name for name in required if name not in data]
    if missing:
        raise BlobDecodeError(f"blob is missing field(s): {', '.join(missing)}")
    return data


def encode_ints(fields: Mapping[str, int]) -> str:
    return encode({name: int_to_hex(value) for name, value in fields.items()})


def decode_ints(blob: str | bytes, names: Sequence[str]) -> Dict[str, int]:
    data = decode(blob, names)
    return {name: hex_to_int(name, data[name]) for name in names}


def coeff_list(field: str, value: Any, *, length: int | None = None, modulus: int | None = None) -> List[int]:
    """Validate a flat list of integer coefficients."""
    if not isinstance(value, list):
        raise BlobDecodeError(f"field '{field}' must be a list of coefficients")
    if length is not None and len(value) != length:
        raise BlobDecodeError(f"field '{field}' must hold {length} coefficients, got {len(value)}")
    out: List[int] = []
    for coeff in value:
        # bool is an int subclass; JSON true/false is never a coefficient
        if isinstance(coeff, bool) or not isinstance(coeff, int):
            raise BlobDecodeError(f"field '{field}' contains a non-integer coefficient")
        if modulus is not None and not 0 <= coeff < modulus:
            raise BlobDecodeError(f"field '{field}' coefficient {coeff} outside [0, {modulus})")
        out.append(coeff)
    return out


def coeff_rows(field: str, value: Any, *, rows: int, length: int, modulus: int | None = None) -> List[List[int]]:
    if not isinstance(value, list) or len(value) != rows:
        raise BlobDecodeError(f"field '{field}' must be a list of {rows} polynomials")
    return [coeff_list(f"{field}[{i}]", row, length=length, modulus=modulus) for i, row in enumerate(value)]
