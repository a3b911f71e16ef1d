"""linecfg: schema-driven single-file configuration store.

Quick start:
    >>> from linecfg import Registry, SchemaBuilder
    >>> schema = (
    ...     SchemaBuilder()
    ...     .line("#example")
    ...     .integer(0, "number_a", -10, 10, 0)
    ...     .string(0, "string_a", 32, "ABCD")
    ...     .build()
    ... )
    >>> reg = Registry(schema, path="config.txt", max_line=512, scan_mode="first")
    >>> reg.set_int(0, 999)
    >>> reg.get_int(0)
    10
    >>> print(reg.dumps(), end="")
    #example
    number_a 10
    string_a ABCD
"""
from __future__ import annotations

from .errors import ConfigError, SchemaError
from .schema import (
    SchemaBuilder,
    SchemaTable,
    ValueKind,
    load_schema,
    schema_from_data,
)
from .store import Registry

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "SchemaError",
    "SchemaBuilder",
    "SchemaTable",
    "ValueKind",
    "load_schema",
    "schema_from_data",
    "Registry",
]
