from __future__ import annotations

"""Environment-driven settings.

Values are read when a scheme adapter is instantiated, so tests and the CLI
can change them with plain environment variables.
"""

import os
from dataclasses import dataclass

DEFAULT_RSA_PRIME_BITS = 512
DEFAULT_RSA_HASH = "sha256"
DEFAULT_PRIME_ROUNDS = 10
MIN_PRIME_ROUNDS = 10
DEFAULT_PRIME_MAX_ATTEMPTS = 1000
DEFAULT_LOG_LEVEL = "WARNING"


def _env_int(name: str, default: int) -> int:
    override = os.getenv(name)
    if override:
        try:
            return int(override)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer") from exc
    return default


@dataclass(frozen=True)
class Settings:
    rsa_prime_bits: int = DEFAULT_RSA_PRIME_BITS
    rsa_hash: str = DEFAULT_RSA_HASH
    prime_rounds: int = DEFAULT_PRIME_ROUNDS
    prime_max_attempts: int = DEFAULT_PRIME_MAX_ATTEMPTS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        prime_bits = _env_int("SIGDEMO_RSA_PRIME_BITS", DEFAULT_RSA_PRIME_BITS)
        if prime_bits < 16:
            raise ValueError("SIGDEMO_RSA_PRIME_BITS must be at least 16")
        max_attempts = _env_int("SIGDEMO_PRIME_MAX_ATTEMPTS", DEFAULT_PRIME_MAX_ATTEMPTS)
        if max_attempts < 1:
            raise ValueError("SIGDEMO_PRIME_MAX_ATTEMPTS must be positive")
        # Fewer than 10 Miller-Rabin rounds is never honoured
        rounds = max(MIN_PRIME_ROUNDS, _env_int("SIGDEMO_PRIME_ROUNDS", DEFAULT_PRIME_ROUNDS))
        return cls(
            rsa_prime_bits=prime_bits,
            rsa_hash=(os.getenv("SIGDEMO_RSA_HASH") or DEFAULT_RSA_HASH).strip().lower(),
            prime_rounds=rounds,
            prime_max_attempts=max_attempts,
            log_level=(os.getenv("SIGDEMO_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
        )
