"""Store event dataclasses + any-subscriber bridge.

Per-event subscriptions go through `linecfg.eventbus`. This module also
exposes `on(handler)` / `subscribe(handler)` where handler(name, payload)
receives every event; the built-in metrics collector is one such handler.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from time import time
from typing import Any, Callable, Dict, List, Protocol

from linecfg import metrics as _metrics
from linecfg.eventbus import emit as _emit_bus

EventHandler = Callable[[str, Dict[str, Any]], None]


class SupportsEvent(Protocol):  # pragma: no cover
    def to_event(self) -> Dict[str, Any]:  # noqa: D401
        ...


@dataclass(slots=True)
class BaseEvent:
    def to_event(self) -> Dict[str, Any]:  # noqa: D401
        data = asdict(self)
        data["ts"] = data.get("ts") or time()
        return data


@dataclass(slots=True)
class ConfigRead(BaseEvent):
    path: str
    lines: int
    matched: int
    truncated: int
    latency_ms: int


@dataclass(slots=True)
class ConfigReadFailed(BaseEvent):
    path: str
    error_type: str
    message: str | None = None


@dataclass(slots=True)
class ConfigWritten(BaseEvent):
    path: str
    lines: int
    latency_ms: int


@dataclass(slots=True)
class ConfigWriteFailed(BaseEvent):
    path: str
    error_type: str
    message: str | None = None


@dataclass(slots=True)
class ValuesReset(BaseEvent):
    """All current values restored to their declared defaults."""
    count: int


@dataclass(slots=True)
class ValueClamped(BaseEvent):
    """A set saturated or truncated the requested value."""
    kind: str  # int|double|str
    id: int
    name: str
    requested: Any
    stored: Any


_ANY_SUBS: List[EventHandler] = []


def _metrics_collector(name: str, payload: Dict[str, Any]) -> None:
    if name == "ConfigRead":
        _metrics.inc("config_read_total", {"status": "ok"})
        _metrics.inc("config_lines_read_total", value=payload.get("lines", 0))
        if payload.get("truncated"):
            _metrics.inc(
                "config_lines_truncated_total", value=payload["truncated"]
            )
        _metrics.observe("config_read_latency_ms", payload.get("latency_ms", 0))
    elif name == "ConfigReadFailed":
        _metrics.inc(
            "config_read_total",
            {"status": "failed", "error_type": payload.get("error_type")},
        )
    elif name == "ConfigWritten":
        _metrics.inc("config_write_total", {"status": "ok"})
        _metrics.observe(
            "config_write_latency_ms", payload.get("latency_ms", 0)
        )
    elif name == "ConfigWriteFailed":
        _metrics.inc(
            "config_write_total",
            {"status": "failed", "error_type": payload.get("error_type")},
        )
    elif name == "ValueClamped":
        _metrics.inc_value_clamped(payload.get("kind", "unknown"))


_ANY_SUBS.append(_metrics_collector)


def emit(ev: BaseEvent | SupportsEvent) -> None:
    name = ev.__class__.__name__
    payload = ev.to_event()
    _emit_bus(name, payload)
    for h in list(_ANY_SUBS):  # copy for isolation
        try:
            h(name, dict(payload))
        except Exception:  # noqa: BLE001
            _metrics.inc("handler_exceptions_total", {"event": name})


def on(handler: EventHandler) -> None:
    _ANY_SUBS.append(handler)


def subscribe(handler: EventHandler):
    on(handler)

    def _unsub() -> None:  # noqa: D401
        try:
            _ANY_SUBS.remove(handler)
        except ValueError:
            pass
    return _unsub


def reset_listeners_for_tests() -> None:  # pragma: no cover
    _ANY_SUBS.clear()
    _ANY_SUBS.append(_metrics_collector)


__all__ = [
    "emit",
    "on",
    "subscribe",
    "ConfigRead",
    "ConfigReadFailed",
    "ConfigWritten",
    "ConfigWriteFailed",
    "ValuesReset",
    "ValueClamped",
    "reset_listeners_for_tests",
]
