"""Schema table: descriptors per kind keyed by id, plus the output layout.

The table is built once (via ``SchemaBuilder`` or the YAML loader) and is
read-only afterwards. Ids are sparse; a missing id is reported as ``None``.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from linecfg.errors import SchemaError

from .descriptors import (
    DESCRIPTOR_TYPES,
    Descriptor,
    DoubleDescriptor,
    IntDescriptor,
    LINE_TERMINATORS,
    LayoutEntry,
    LiteralLine,
    StrDescriptor,
    ValueKind,
    ValueRef,
    is_utf8_text,
)

KINDS: Tuple[ValueKind, ...] = (ValueKind.INT, ValueKind.DOUBLE, ValueKind.STR)


class SchemaTable:
    def __init__(
        self,
        descriptors: Mapping[ValueKind, Mapping[int, Descriptor]],
        layout: Tuple[LayoutEntry, ...],
    ) -> None:
        self._by_kind: Dict[ValueKind, Mapping[int, Descriptor]] = {
            k: MappingProxyType(dict(descriptors.get(k, {}))) for k in KINDS
        }
        self._layout = tuple(layout)

    @property
    def layout(self) -> Tuple[LayoutEntry, ...]:
        return self._layout

    def lookup(self, kind: ValueKind | str, id: Any) -> Optional[Descriptor]:
        if isinstance(id, bool) or not isinstance(id, int):
            return None
        return self._by_kind[ValueKind(kind)].get(id)

    def descriptors(self, kind: ValueKind | str) -> Tuple[Descriptor, ...]:
        """Descriptors of one kind in declaration order."""
        return tuple(self._by_kind[ValueKind(kind)].values())

    def __iter__(self) -> Iterator[Descriptor]:
        for kind in KINDS:
            yield from self._by_kind[kind].values()

    def __len__(self) -> int:
        return sum(len(m) for m in self._by_kind.values())

    def to_dict(self) -> Dict[str, Any]:
        layout: List[Dict[str, Any]] = []
        for entry in self._layout:
            if isinstance(entry, LiteralLine):
                layout.append({"line": entry.text})
            else:
                layout.append({"kind": entry.kind.value, "id": entry.id})
        return {
            "descriptors": {
                k.value: [d.model_dump() for d in self._by_kind[k].values()]
                for k in KINDS
            },
            "layout": layout,
        }


class SchemaBuilder:
    """Ordered declaration of literal lines and typed values.

    Example::

        schema = (
            SchemaBuilder()
            .line("#example")
            .integer(0, "number_a", -10, 10, 0)
            .line()
            .string(0, "string_a", 32, "ABCD")
            .build()
        )
    """

    def __init__(self) -> None:
        self._descriptors: Dict[ValueKind, Dict[int, Descriptor]] = {
            k: {} for k in KINDS
        }
        self._layout: List[LayoutEntry] = []

    def line(self, text: str = "") -> "SchemaBuilder":
        if any(ch in LINE_TERMINATORS for ch in text):
            raise SchemaError(f"literal line contains a line break: {text!r}")
        if not is_utf8_text(text):
            raise SchemaError(f"literal line is not valid UTF-8 text: {text!r}")
        self._layout.append(LiteralLine(text))
        return self

    def integer(
        self, id: int, name: str, min: int, max: int, default: int
    ) -> "SchemaBuilder":
        return self.add(
            ValueKind.INT,
            {"id": id, "name": name, "min": min, "max": max, "default": default},
        )

    def double(
        self, id: int, name: str, min: float, max: float, default: float
    ) -> "SchemaBuilder":
        return self.add(
            ValueKind.DOUBLE,
            {"id": id, "name": name, "min": min, "max": max, "default": default},
        )

    def string(
        self, id: int, name: str, max_length: int, default: str
    ) -> "SchemaBuilder":
        return self.add(
            ValueKind.STR,
            {
                "id": id,
                "name": name,
                "max_length": max_length,
                "default": default,
            },
        )

    def add(
        self, kind: ValueKind | str, fields: Dict[str, Any]
    ) -> "SchemaBuilder":
        kind = ValueKind(kind)
        try:
            desc = DESCRIPTOR_TYPES[kind].model_validate(fields)
        except ValidationError as e:
            raise SchemaError(f"invalid {kind.value} declaration: {e}") from e
        table = self._descriptors[kind]
        if desc.id in table:
            raise SchemaError(f"duplicate {kind.value} id {desc.id}")
        if any(d.name == desc.name for d in table.values()):
            raise SchemaError(f"duplicate {kind.value} name '{desc.name}'")
        table[desc.id] = desc
        self._layout.append(ValueRef(kind, desc.id))
        return self

    def build(self) -> SchemaTable:
        return SchemaTable(self._descriptors, tuple(self._layout))


__all__ = [
    "KINDS",
    "SchemaTable",
    "SchemaBuilder",
    "IntDescriptor",
    "DoubleDescriptor",
    "StrDescriptor",
]
