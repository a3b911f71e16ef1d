"""Process-wide registry and its module-level entry points.

Most programs need one store: ``install(schema)`` once at startup, then
``read()``/``write()``/``get_int()``... from anywhere. When nothing was
installed the registry is built lazily from ``store.schema_file`` in the
settings (an empty schema when that is unset).
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from linecfg.config import get_config
from linecfg.schema import SchemaBuilder, SchemaTable, ValueKind, load_schema

from .codec import Value
from .registry import INVALID_DOUBLE, INVALID_INT, SCAN_MODES, Registry

logger = logging.getLogger("linecfg.registry")

_lock = threading.Lock()
_registry: Optional[Registry] = None


def install(schema: SchemaTable | Registry, **kwargs) -> Registry:
    """Make ``schema`` (or a ready Registry) the process-wide store."""
    global _registry  # noqa: PLW0603
    reg = schema if isinstance(schema, Registry) else Registry(schema, **kwargs)
    with _lock:
        _registry = reg
    return reg


def get_registry() -> Registry:
    global _registry  # noqa: PLW0603
    with _lock:
        if _registry is None:
            schema_file = get_config().store.schema_file
            if schema_file:
                schema = load_schema(schema_file)
            else:
                logger.warning("no schema installed; using an empty schema")
                schema = SchemaBuilder().build()
            _registry = Registry(schema)
        return _registry


def reset_registry() -> None:
    """Drop the process-wide registry (primarily for tests)."""
    global _registry  # noqa: PLW0603
    with _lock:
        _registry = None


def default() -> None:
    get_registry().default()


def read() -> bool:
    return get_registry().read()


def write() -> bool:
    return get_registry().write()


def sync() -> bool:
    return get_registry().sync()


def get_value(kind: ValueKind | str, id: int) -> Optional[Value]:
    return get_registry().get(kind, id)


def set_value(kind: ValueKind | str, id: int, value: Value) -> bool:
    return get_registry().set(kind, id, value)


def get_int(id: int) -> int:
    return get_registry().get_int(id)


def set_int(id: int, value: int) -> None:
    get_registry().set_int(id, value)


def get_double(id: int) -> float:
    return get_registry().get_double(id)


def set_double(id: int, value: float) -> None:
    get_registry().set_double(id, value)


def get_string(id: int) -> Optional[str]:
    return get_registry().get_string(id)


def set_string(id: int, value: str) -> None:
    get_registry().set_string(id, value)


__all__ = [
    "Registry",
    "SCAN_MODES",
    "INVALID_INT",
    "INVALID_DOUBLE",
    "install",
    "get_registry",
    "reset_registry",
    "default",
    "read",
    "write",
    "sync",
    "get_value",
    "set_value",
    "get_int",
    "set_int",
    "get_double",
    "set_double",
    "get_string",
    "set_string",
]
