"""Schema loader: builds a SchemaTable from a YAML declaration.

Format (order is the output layout)::

    - line: "#example"
    - int: {id: 0, name: number_a, min: -10, max: 10, default: 0}
    - line: ""
    - str: {id: 0, name: string_a, max_length: 32, default: ABCD}
    - double: {id: 0, name: ratio, min: 0.0, max: 1.0, default: 0.5}

A top-level mapping with an ``entries`` list is accepted as well.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from yaml import YAMLError

from linecfg.errors import SchemaError, validate_error_type

from .descriptors import ValueKind
from .table import SchemaBuilder, SchemaTable

logger = logging.getLogger("linecfg.schema")

_VALUE_KEYS = {k.value: k for k in ValueKind}


def _entries(data: Any) -> Iterable[Any]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise SchemaError("schema must be a list of entries")
    return data


def schema_from_data(data: Any) -> SchemaTable:
    builder = SchemaBuilder()
    for pos, entry in enumerate(_entries(data)):
        if not isinstance(entry, dict) or len(entry) != 1:
            raise SchemaError(
                f"entry {pos}: expected a single-key mapping, got {entry!r}"
            )
        ((key, body),) = entry.items()
        if key == "line":
            builder.line("" if body is None else str(body))
        elif key in _VALUE_KEYS:
            if not isinstance(body, dict):
                raise SchemaError(f"entry {pos}: '{key}' needs a mapping")
            builder.add(_VALUE_KEYS[key], body)
        else:
            raise SchemaError(f"entry {pos}: unknown entry type '{key}'")
    return builder.build()


def load_schema(path: str | Path) -> SchemaTable:
    """Load a schema file.

    Tab characters (a common accidental edit) make YAML reject the file; in
    that case parsing is retried once with tabs replaced by two spaces.
    """
    path = Path(path)
    raw_text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw_text)
    except YAMLError as e:
        if "\t" not in raw_text:
            raise SchemaError(f"Invalid schema {path.name}: {e}") from e
        logger.warning("re-parsing schema tabs->spaces: %s", path.name)
        try:
            data = yaml.safe_load(raw_text.replace("\t", "  "))
        except YAMLError as e2:
            raise SchemaError(f"Invalid schema {path.name}: {e2}") from e2
    try:
        return schema_from_data(data)
    except SchemaError as e:
        logger.warning(
            "schema rejected path=%s error_type=%s: %s",
            path.name,
            validate_error_type(e.error_type),
            e,
        )
        raise


__all__ = ["load_schema", "schema_from_data"]
