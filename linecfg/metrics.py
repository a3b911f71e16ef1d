"""Minimal in-memory metrics collector.

Purpose:
    - Counters and simple latency samples for store read/write health.
    - Zero external deps; can be swapped by an exporter later.

Core API:
    inc(name, labels=None, value=1)
    observe(name, value, labels=None)
    snapshot() -> dict (copy for safe reading)

Thread-safety: coarse RLock; overhead negligible for config-sized volume.

Store metric names (documented for discoverability):
    - config_read_total{status}
    - config_write_total{status}
    - config_lines_read_total
    - config_lines_matched_total{kind}
    - config_lines_truncated_total
    - value_clamped_total{kind}
    - invalid_id_total{op,kind}
    - env_override_total{path}
    - config_validation_errors_total{code,path}
    - config_read_latency_ms / config_write_latency_ms (histograms)
"""
from __future__ import annotations

from threading import RLock
from time import time
from typing import Dict, Tuple, Any

_COUNTERS: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
_HIST: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], list] = {}
_LOCK = RLock()


def _norm_labels(labels: dict[str, Any] | None) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _label_str(labels: Tuple[Tuple[str, str], ...]) -> str:
    if not labels:
        return ""
    return "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


def inc(
    name: str,
    labels: dict[str, Any] | None = None,
    value: float = 1.0,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0.0) + value


def observe(
    name: str,
    value: float,
    labels: dict[str, Any] | None = None,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _HIST.setdefault(key, []).append(value)


def snapshot() -> dict[str, Any]:
    with _LOCK:
        counters: dict[str, float] = {}
        for (name, labels), v in _COUNTERS.items():
            counters[name + _label_str(labels)] = v
        hist = {}
        for (name, labels), vals in _HIST.items():
            if not vals:
                continue
            hist[name + _label_str(labels)] = {
                "count": len(vals),
                "min": min(vals),
                "max": max(vals),
                "p50": sorted(vals)[len(vals) // 2],
                "last": vals[-1],
            }
        return {
            "ts": time(),
            "counters": counters,
            "histograms": hist,
        }


def counter(name: str, labels: dict[str, Any] | None = None) -> float:
    """Return a single counter value (0.0 when never incremented)."""
    with _LOCK:
        return _COUNTERS.get((name, _norm_labels(labels)), 0.0)


def reset_for_tests() -> None:  # pragma: no cover
    with _LOCK:
        _COUNTERS.clear()
        _HIST.clear()


__all__ = [
    "inc",
    "observe",
    "snapshot",
    "counter",
    "reset_for_tests",
]


# ------------------- Helper wrappers (store) -------------------

def inc_value_clamped(kind: str) -> None:
    """Increment clamp counter; kind is one of int|double|str."""
    inc("value_clamped_total", {"kind": kind})


def inc_invalid_id(op: str, kind: str) -> None:
    """Increment invalid id access counter (op: get|set)."""
    inc("invalid_id_total", {"op": op, "kind": kind})


__all__ += ["inc_value_clamped", "inc_invalid_id"]
