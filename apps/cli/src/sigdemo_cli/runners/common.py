from __future__ import annotations
"""Shared benchmarking utilities for CLI runners.

Includes scheme instance caching, wall-clock measurement, JSON export helpers
and the signature micro-benchmark orchestrator. Every run is warm (in-process);
each measured operation gets freshly prepared inputs from its factory so that
setup (keygen, signing) never leaks into the timing.
"""

import json
import logging
import math
import pathlib
import statistics
import time

from dataclasses import dataclass, asdict
from typing import Callable, Dict, Any, List, Tuple, Optional, Sequence
from functools import partial

from sigdemo import registry
from sigdemo.params import get_params

log = logging.getLogger(__name__)

_ADAPTER_INSTANCE_CACHE: Dict[str, Any] = {}

_CI_Z = statistics.NormalDist().inv_cdf(0.975)


def _get_adapter_instance(name: str):
    inst = _ADAPTER_INSTANCE_CACHE.get(name)
    if inst is None:
        inst = registry.get(name)()
        _ADAPTER_INSTANCE_CACHE[name] = inst
    return inst


def reset_adapter_cache(name: Optional[str] = None) -> None:
    if name is None:
        _ADAPTER_INSTANCE_CACHE.clear()
    else:
        _ADAPTER_INSTANCE_CACHE.pop(name, None)


def _compute_ci95(mean: float, samples: Sequence[float]) -> Tuple[float, float]:
    if len(samples) < 2:
        return mean, mean
    try:
        std = statistics.stdev(samples)
    except statistics.StatisticsError:
        return mean, mean
    if std == 0:
        return mean, mean
    margin = _CI_Z * (std / math.sqrt(len(samples)))
    return mean - margin, mean + margin


@dataclass
class OpStats:
    runs: int
    mean_ms: float
    min_ms: float
    max_ms: float
    median_ms: float
    stddev_ms: float
    ci95_low_ms: float
    ci95_high_ms: float
    range_ms: float
    series: List[float]

@dataclass
class AlgoSummary:
    algo: str
    kind: str   # always 'SIG' here
    ops: Dict[str, OpStats]
    meta: Dict[str, Any]


def measure_factory(
    factory: Callable[[], Callable[[], None]],
    runs: int,
    *,
    progress_cb: Optional[Callable[[int, int], None]] = None,
) -> OpStats:
    """Measure only the core operation produced by `factory`.

    The `factory` prepares fresh inputs (keys, message, signature) before the
    clock starts; the returned zero-arg callable is the only thing timed.
    """
    if runs < 1:
        raise ValueError("runs must be at least 1")
    times: List[float] = []
    for i in range(runs):
        op = factory()
        start = time.perf_counter()
        op()
        times.append((time.perf_counter() - start) * 1000.0)
        if progress_cb is not None:
            progress_cb(i + 1, runs)

    mean = sum(times) / len(times)
    min_time = min(times)
    max_time = max(times)
    ci_low, ci_high = _compute_ci95(mean, times)
    return OpStats(
        runs=runs,
        mean_ms=mean,
        min_ms=min_time,
        max_ms=max_time,
        median_ms=statistics.median(times),
        stddev_ms=statistics.pstdev(times) if len(times) > 1 else 0.0,
        ci95_low_ms=ci_low,
        ci95_high_ms=ci_high,
        range_ms=max_time - min_time,
        series=times,
    )


def _sig_keygen_factory(name: str) -> Callable[[], None]:
    adapter = _get_adapter_instance(name)

    def _op() -> None:
        adapter.generate_keypair()

    return _op


def _sig_sign_factory(name: str, message_size: int) -> Callable[[], None]:
    """Prepare fresh key and message, return op that only runs sign."""
    adapter = _get_adapter_instance(name)
    msg = b"x" * int(message_size)
    keys = adapter.generate_keypair()

    def _op() -> None:
        adapter.sign(msg, keys.private_key)

    return _op


def _sig_verify_factory(name: str, message_size: int) -> Callable[[], None]:
    """Prepare fresh keys/message/signature, return op that only runs verify."""
    adapter = _get_adapter_instance(name)
    msg = b"x" * int(message_size)
    keys = adapter.generate_keypair()
    sig = adapter.sign(msg, keys.private_key)

    def _op() -> None:
        result = adapter.verify(msg, sig.signature, keys.public_key)
        if not result.is_valid:
            log.warning("%s: benchmark signature did not verify (%s)", name, result.diagnostic)

    return _op


def run_sig(
    name: str,
    runs: int,
    message_size: int,
    *,
    progress: Optional[Callable[[str, str, int, int], None]] = None,
) -> AlgoSummary:
    """Run a signature micro-benchmark for the registered scheme `name`.

    Measures wall-clock latency for:
    - keygen
    - sign (with fresh keys per run)
    - verify (with fresh keys/signature per run)
    """
    ops: Dict[str, OpStats] = {}
    def _p(stage: str):
        if progress is None:
            return None
        return lambda i, total: progress(stage, name, i, total)

    ops["keygen"] = measure_factory(partial(_sig_keygen_factory, name), runs, progress_cb=_p("keygen"))
    ops["sign"] = measure_factory(partial(_sig_sign_factory, name, message_size), runs, progress_cb=_p("sign"))
    ops["verify"] = measure_factory(partial(_sig_verify_factory, name, message_size), runs, progress_cb=_p("verify"))

    adapter = _get_adapter_instance(name)
    keys = adapter.generate_keypair()
    sig = adapter.sign(b"x" * message_size, keys.private_key)
    _sig_expansion = None
    if message_size and int(message_size) > 0:
        _sig_expansion = float(sig.signature_size) / float(int(message_size))
    meta = {
        "public_key_len": keys.public_key_size,
        "secret_key_len": keys.secret_key_size,
        "signature_len": sig.signature_size,
        "message_size": message_size,
        "signature_expansion_ratio": _sig_expansion,
        "mechanism": getattr(adapter, "mech", None) or getattr(adapter, "algorithm", None),
        "security_level": keys.security_level,
        "run_mode": "warm",
    }
    hash_name = getattr(adapter, "hash_algorithm_name", None)
    if hash_name:
        meta.setdefault("signature_hash", hash_name)
    hint = get_params(name)
    if hint is not None:
        meta["params"] = hint.to_dict()
    return AlgoSummary(algo=name, kind="SIG", ops=ops, meta=meta)


def _build_export_payload(summary: AlgoSummary) -> dict:
    return {
        "algo": summary.algo,
        "kind": summary.kind,
        "ops": {k: asdict(v) for k, v in summary.ops.items()},
        "meta": summary.meta,
    }


def _repo_root() -> pathlib.Path:
    """Best-effort detection of the repository root (directory containing .git).
    Falls back to the current working directory if not found.
    """
    here = pathlib.Path(__file__).resolve()
    for p in (here, *here.parents):
        if (p / ".git").exists():
            return p
    return pathlib.Path.cwd()


def export_json(summary: AlgoSummary, export_path: str | None) -> pathlib.Path | None:
    if not export_path:
        return None
    _export_json_blob(_build_export_payload(summary), export_path)
    return _resolve_export_path(export_path)


def _resolve_export_path(export_path: str) -> pathlib.Path:
    # Normalize Windows-style separators on POSIX if users pass e.g. "results\file.json"
    if "\\" in export_path and ":" not in export_path:
        export_path = export_path.replace("\\", "/")
    path = pathlib.Path(export_path)
    # Resolve relative paths to the repository root so results/ always lands at repo root
    if not path.is_absolute():
        path = _repo_root() / path
    return path


def _export_json_blob(data: dict, export_path: str | None) -> None:
    if not export_path:
        return
    path = _resolve_export_path(export_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
