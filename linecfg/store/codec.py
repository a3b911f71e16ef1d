"""Line codec: ``<name> <value>`` lines <-> typed values.

Parsing is deliberately forgiving: numerals are read from the start of the
remainder the way ``atoi``/``strtod`` read them, and text that holds no
numeral becomes zero. Clamping is left to the descriptor.
"""
from __future__ import annotations

import re
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from linecfg.schema import Descriptor, ValueKind
from linecfg.schema.descriptors import cut_at_terminator

Value = Union[int, float, str]

# C isspace() set; \d would also accept non-ASCII digits
_WS = "[ \t\n\v\f\r]*"
_INT_RE = re.compile(_WS + r"([+-]?[0-9]+)")
_FLOAT_RE = re.compile(
    _WS + r"([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)

DOUBLE_FORMAT = "%.17g"


def match_remainder(line: str, desc: Descriptor) -> Optional[str]:
    """Return the text after ``desc.prefix`` or None if the line is not ours."""
    prefix = desc.prefix
    if line.startswith(prefix):
        return line[len(prefix):]
    return None


def parse_int(text: str) -> int:
    m = _INT_RE.match(text)
    return int(m.group(1)) if m else 0


def parse_double(text: str) -> float:
    # overflow yields +/-inf, which the descriptor clamps to a bound
    m = _FLOAT_RE.match(text)
    return float(m.group(1)) if m else 0.0


def parse_string(text: str) -> str:
    return cut_at_terminator(text)


_PARSERS = {
    ValueKind.INT: parse_int,
    ValueKind.DOUBLE: parse_double,
    ValueKind.STR: parse_string,
}


def parse_value(desc: Descriptor, remainder: str) -> Value:
    return _PARSERS[desc.kind](remainder)


def format_value(desc: Descriptor, value: Value) -> str:
    if desc.kind is ValueKind.INT:
        return str(int(value))
    if desc.kind is ValueKind.DOUBLE:
        return DOUBLE_FORMAT % float(value)
    return str(value)


def format_line(desc: Descriptor, value: Value) -> str:
    return desc.prefix + format_value(desc, value) + "\n"


def iter_lines(stream: BinaryIO, max_line: int) -> Iterator[Tuple[str, bool]]:
    """Yield ``(line, truncated)`` pairs from a binary stream.

    Each physical line is capped at ``max_line - 1`` bytes (room for the
    terminator in a ``max_line`` buffer); the rest of an over-long line is
    skipped. Invalid UTF-8 bytes are dropped.
    """
    limit = max_line - 1
    while True:
        chunk = stream.readline(limit)
        if not chunk:
            return
        truncated = False
        if not chunk.endswith(b"\n"):
            rest = stream.readline(max_line)
            while rest:
                if rest.strip(b"\r\n"):
                    truncated = True
                if rest.endswith(b"\n"):
                    break
                rest = stream.readline(max_line)
        yield chunk.decode("utf-8", errors="ignore"), truncated


__all__ = [
    "DOUBLE_FORMAT",
    "match_remainder",
    "parse_int",
    "parse_double",
    "parse_string",
    "parse_value",
    "format_value",
    "format_line",
    "iter_lines",
]
