"""Schema table: typed value descriptors and the file layout.

Responsibilities:
- Validate each declaration (bounds, default in range, single-line names)
- Provide O(1) lookup by (kind, id) with an explicit ``None`` for gaps
- Keep the ordered layout of literal lines and value references
"""
from .descriptors import (  # noqa: F401
    Descriptor,
    DoubleDescriptor,
    IntDescriptor,
    LayoutEntry,
    LiteralLine,
    StrDescriptor,
    ValueKind,
    ValueRef,
)
from .loader import load_schema, schema_from_data  # noqa: F401
from .table import KINDS, SchemaBuilder, SchemaTable  # noqa: F401

__all__ = [
    "Descriptor",
    "DoubleDescriptor",
    "IntDescriptor",
    "StrDescriptor",
    "LayoutEntry",
    "LiteralLine",
    "ValueRef",
    "ValueKind",
    "KINDS",
    "SchemaBuilder",
    "SchemaTable",
    "load_schema",
    "schema_from_data",
]
