"""Descriptor records: one immutable record per declared value.

Names are stored without the separator; ``prefix`` carries the
``name + " "`` form used for matching file lines. Bounds are checked at
construction so that the default is always a legal current value.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
    model_validator,
)

LINE_TERMINATORS = "\n\r"


class ValueKind(str, Enum):
    INT = "int"
    DOUBLE = "double"
    STR = "str"


def cut_at_terminator(text: str) -> str:
    for i, ch in enumerate(text):
        if ch in LINE_TERMINATORS:
            return text[:i]
    return text


def truncate_utf8(text: str, max_bytes: int) -> str:
    """Cut ``text`` to at most ``max_bytes`` UTF-8 bytes.

    A multi-byte character straddling the limit is dropped whole, as is any
    code point UTF-8 cannot encode (lone surrogates).
    """
    raw = text.encode("utf-8", errors="ignore")
    return raw[:max_bytes].decode("utf-8", errors="ignore")


def utf8_len(text: str) -> int:
    return len(text.encode("utf-8", errors="ignore"))


def is_utf8_text(text: str) -> bool:
    return utf8_len(text) == len(text.encode("utf-8", errors="surrogatepass"))


class _Descriptor(BaseModel):
    kind: ClassVar[ValueKind]

    id: StrictInt = Field(ge=0)
    name: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("name")
    @classmethod
    def _name_single_line(cls, v: str) -> str:  # noqa: D401
        if any(ch in LINE_TERMINATORS for ch in v):
            raise ValueError("name cannot contain line terminators")
        if not is_utf8_text(v):
            raise ValueError("name is not valid UTF-8 text")
        return v

    @property
    def prefix(self) -> str:
        return self.name + " "


class IntDescriptor(_Descriptor):
    kind: ClassVar[ValueKind] = ValueKind.INT

    min: StrictInt
    max: StrictInt
    default: StrictInt

    @model_validator(mode="after")
    def _bounds(self) -> "IntDescriptor":
        if self.min > self.max:
            raise ValueError(f"{self.name}: min {self.min} > max {self.max}")
        if not self.min <= self.default <= self.max:
            raise ValueError(
                f"{self.name}: default {self.default} outside "
                f"[{self.min}, {self.max}]"
            )
        return self

    def clamp(self, value: int) -> int:
        if isinstance(value, float) and math.isnan(value):
            value = 0
        return int(max(self.min, min(self.max, value)))


class DoubleDescriptor(_Descriptor):
    kind: ClassVar[ValueKind] = ValueKind.DOUBLE

    min: float = Field(allow_inf_nan=False)
    max: float = Field(allow_inf_nan=False)
    default: float = Field(allow_inf_nan=False)

    @model_validator(mode="after")
    def _bounds(self) -> "DoubleDescriptor":
        if self.min > self.max:
            raise ValueError(f"{self.name}: min {self.min} > max {self.max}")
        if not self.min <= self.default <= self.max:
            raise ValueError(
                f"{self.name}: default {self.default} outside "
                f"[{self.min}, {self.max}]"
            )
        return self

    def clamp(self, value: float) -> float:
        if isinstance(value, int):
            value = max(self.min, min(self.max, value))
        value = float(value)
        if math.isnan(value):
            value = 0.0
        return max(self.min, min(self.max, value))


class StrDescriptor(_Descriptor):
    kind: ClassVar[ValueKind] = ValueKind.STR

    max_length: StrictInt = Field(ge=0, description="UTF-8 bytes")
    default: str

    @model_validator(mode="after")
    def _bounds(self) -> "StrDescriptor":
        if cut_at_terminator(self.default) != self.default:
            raise ValueError(f"{self.name}: default contains a line break")
        if not is_utf8_text(self.default):
            raise ValueError(f"{self.name}: default is not valid UTF-8 text")
        if utf8_len(self.default) > self.max_length:
            raise ValueError(
                f"{self.name}: default longer than {self.max_length} bytes"
            )
        return self

    def clamp(self, value: str) -> str:
        return truncate_utf8(cut_at_terminator(str(value)), self.max_length)


Descriptor = Union[IntDescriptor, DoubleDescriptor, StrDescriptor]

DESCRIPTOR_TYPES = {
    ValueKind.INT: IntDescriptor,
    ValueKind.DOUBLE: DoubleDescriptor,
    ValueKind.STR: StrDescriptor,
}


@dataclass(frozen=True)
class LiteralLine:
    text: str = ""


@dataclass(frozen=True)
class ValueRef:
    kind: ValueKind
    id: int


LayoutEntry = Union[LiteralLine, ValueRef]
