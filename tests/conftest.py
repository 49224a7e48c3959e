from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
CLI_SRC = ROOT / "apps" / "cli" / "src"
CORE_SRC = ROOT / "libs" / "core" / "src"

for candidate in (CLI_SRC, CORE_SRC):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from sigdemo import ecdsa, lattice, rsa  # noqa: E402


@pytest.fixture(scope="session")
def rsa_keys():
    # 512-bit primes keep the modulus large enough for SHA-256 PKCS#1 padding
    return rsa.generate_keys(512)


@pytest.fixture(scope="session")
def ec_keys():
    return ecdsa.generate_keys()


@pytest.fixture(scope="session")
def lattice_keys():
    return lattice.generate_keys()
