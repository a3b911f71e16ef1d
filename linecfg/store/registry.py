"""Value registry: current values behind a schema, plus file read/write.

Every current value is produced by ``Descriptor.clamp`` so it always lies
within the declared bounds. File I/O never raises: ``read``/``write``
return False on failure and leave current values untouched.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from linecfg import metrics
from linecfg.errors import ConfigError, map_os_error, validate_error_type
from linecfg.events import (
    ConfigRead,
    ConfigReadFailed,
    ConfigWritten,
    ConfigWriteFailed,
    ValueClamped,
    ValuesReset,
    emit,
)
from linecfg.schema import (
    KINDS,
    Descriptor,
    LayoutEntry,
    LiteralLine,
    SchemaTable,
    ValueKind,
)

from . import codec
from .codec import Value

logger = logging.getLogger("linecfg.registry")

SCAN_MODES = ("first", "all")

INVALID_INT = -1
INVALID_DOUBLE = float("nan")


class Registry:
    def __init__(
        self,
        schema: SchemaTable,
        *,
        path: str | Path | None = None,
        max_line: int | None = None,
        scan_mode: str | None = None,
    ) -> None:
        if path is None or max_line is None or scan_mode is None:
            from linecfg.config import get_config

            store_cfg = get_config().store
            path = store_cfg.path if path is None else path
            max_line = store_cfg.max_line if max_line is None else max_line
            scan_mode = store_cfg.scan_mode if scan_mode is None else scan_mode
        if max_line < 2:
            raise ConfigError(f"max_line must be >= 2, got {max_line}")
        if scan_mode not in SCAN_MODES:
            raise ConfigError(f"scan_mode must be one of {SCAN_MODES}")
        self._schema = schema
        self._path = Path(path)
        self._max_line = int(max_line)
        self._scan_mode = scan_mode
        self._values: Dict[ValueKind, Dict[int, Value]] = {
            k: {} for k in KINDS
        }
        for desc in schema:
            self._values[desc.kind][desc.id] = desc.default

    def __repr__(self) -> str:
        return (
            f"Registry(path={str(self._path)!r}, values={len(self._schema)}, "
            f"scan_mode={self._scan_mode!r})"
        )

    @property
    def schema(self) -> SchemaTable:
        return self._schema

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_line(self) -> int:
        return self._max_line

    @property
    def scan_mode(self) -> str:
        return self._scan_mode

    # ------------------------------------------------------------------
    # value access

    def default(self) -> None:
        """Reset every current value to its declared default (no I/O)."""
        for desc in self._schema:
            self._values[desc.kind][desc.id] = desc.default
        emit(ValuesReset(count=len(self._schema)))

    def get(self, kind: ValueKind | str, id: int) -> Optional[Value]:
        kind = ValueKind(kind)
        desc = self._schema.lookup(kind, id)
        if desc is None:
            self._reject("get", kind, id)
            return None
        return self._values[kind][desc.id]

    def set(self, kind: ValueKind | str, id: int, value: Value) -> bool:
        """Store the clamped ``value``; False (no-op) for an unknown id."""
        kind = ValueKind(kind)
        desc = self._schema.lookup(kind, id)
        if desc is None:
            self._reject("set", kind, id)
            return False
        self._store(desc, value)
        return True

    def _reject(self, op: str, kind: ValueKind, id: object) -> None:
        metrics.inc_invalid_id(op, kind.value)
        logger.debug(
            "%s rejected kind=%s id=%r error_type=%s",
            op,
            kind.value,
            id,
            validate_error_type("invalid-id"),
        )

    def _store(self, desc: Descriptor, value: Value) -> Value:
        stored = desc.clamp(value)  # type: ignore[arg-type]
        if stored != value:
            emit(
                ValueClamped(
                    kind=desc.kind.value,
                    id=desc.id,
                    name=desc.name,
                    requested=value,
                    stored=stored,
                )
            )
        self._values[desc.kind][desc.id] = stored
        return stored

    def get_int(self, id: int) -> int:
        v = self.get(ValueKind.INT, id)
        return INVALID_INT if v is None else v  # type: ignore[return-value]

    def set_int(self, id: int, value: int) -> None:
        self.set(ValueKind.INT, id, value)

    def get_double(self, id: int) -> float:
        v = self.get(ValueKind.DOUBLE, id)
        return INVALID_DOUBLE if v is None else v  # type: ignore[return-value]

    def set_double(self, id: int, value: float) -> None:
        self.set(ValueKind.DOUBLE, id, value)

    def get_string(self, id: int) -> Optional[str]:
        return self.get(ValueKind.STR, id)  # type: ignore[return-value]

    def set_string(self, id: int, value: str) -> None:
        self.set(ValueKind.STR, id, value)

    def items(
        self, kind: ValueKind | str
    ) -> Iterator[Tuple[Descriptor, Value]]:
        kind = ValueKind(kind)
        for desc in self._schema.descriptors(kind):
            yield desc, self._values[kind][desc.id]

    def snapshot(self) -> Dict[str, Dict[str, Value]]:
        return {
            kind.value: {d.name: v for d, v in self.items(kind)}
            for kind in KINDS
        }

    # ------------------------------------------------------------------
    # file codec

    def _match(self, line: str) -> List[Tuple[Descriptor, str]]:
        hits: List[Tuple[Descriptor, str]] = []
        for kind in KINDS:
            for desc in self._schema.descriptors(kind):
                rest = codec.match_remainder(line, desc)
                if rest is None:
                    continue
                hits.append((desc, rest))
                if self._scan_mode == "first":
                    return hits
        return hits

    def read(self) -> bool:
        """Partial read: update only the values named in the file.

        Parsed values are staged and applied after the whole file was
        consumed, so an I/O error mid-file changes nothing.
        """
        t0 = time.perf_counter()
        pending: List[Tuple[Descriptor, Value]] = []
        lines = truncated = 0
        try:
            with self._path.open("rb") as f:
                for line, cut in codec.iter_lines(f, self._max_line):
                    lines += 1
                    truncated += cut
                    for desc, rest in self._match(line):
                        pending.append((desc, codec.parse_value(desc, rest)))
        except OSError as e:
            error_type = validate_error_type(map_os_error(e))
            logger.warning(
                "config read failed path=%s error_type=%s: %s",
                self._path,
                error_type,
                e,
            )
            emit(
                ConfigReadFailed(
                    path=str(self._path), error_type=error_type, message=str(e)
                )
            )
            return False
        for desc, value in pending:
            metrics.inc("config_lines_matched_total", {"kind": desc.kind.value})
            self._store(desc, value)
        latency_ms = int((time.perf_counter() - t0) * 1000)
        logger.debug(
            "config read path=%s lines=%d matched=%d truncated=%d",
            self._path,
            lines,
            len(pending),
            truncated,
        )
        emit(
            ConfigRead(
                path=str(self._path),
                lines=lines,
                matched=len(pending),
                truncated=truncated,
                latency_ms=latency_ms,
            )
        )
        return True

    def render(self, entry: LayoutEntry) -> str:
        if isinstance(entry, LiteralLine):
            return entry.text + "\n"
        desc = self._schema.lookup(entry.kind, entry.id)
        return codec.format_line(desc, self._values[entry.kind][entry.id])

    def dumps(self) -> str:
        """Render the whole file as text without touching the disk."""
        return "".join(self.render(e) for e in self._schema.layout)

    def write(self) -> bool:
        """Create/truncate the store file and replay the layout."""
        t0 = time.perf_counter()
        try:
            with self._path.open("w", encoding="utf-8", newline="\n") as f:
                for entry in self._schema.layout:
                    f.write(self.render(entry))
        except OSError as e:
            error_type = validate_error_type(map_os_error(e))
            logger.warning(
                "config write failed path=%s error_type=%s: %s",
                self._path,
                error_type,
                e,
            )
            emit(
                ConfigWriteFailed(
                    path=str(self._path), error_type=error_type, message=str(e)
                )
            )
            return False
        latency_ms = int((time.perf_counter() - t0) * 1000)
        logger.debug(
            "config written path=%s lines=%d",
            self._path,
            len(self._schema.layout),
        )
        emit(
            ConfigWritten(
                path=str(self._path),
                lines=len(self._schema.layout),
                latency_ms=latency_ms,
            )
        )
        return True

    def sync(self) -> bool:
        """Read the file if present, then write back the clamped result."""
        self.read()
        return self.write()


__all__ = ["Registry", "SCAN_MODES", "INVALID_INT", "INVALID_DOUBLE"]
