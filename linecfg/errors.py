"""Central error taxonomy and construction-time exceptions."""
from __future__ import annotations

import errno

_ALLOWED_ERROR_TYPES = {
    # store file i/o
    "file-not-found",
    "permission-denied",
    "is-a-directory",
    "io-error",
    # registry access
    "invalid-id",
    # settings / schema
    "config-out-of-range",
    "config-invalid",
    "schema-invalid",
    # infra
    "event-handler-error",
}


class SchemaError(ValueError):
    """Raised when a schema declaration violates its own invariants."""

    error_type = "schema-invalid"


class ConfigError(Exception):
    pass


def validate_error_type(code: str) -> str:
    assert (
        code in _ALLOWED_ERROR_TYPES
    ), f"Unknown error_type '{code}' (not in taxonomy)"
    return code


def map_os_error(e: OSError) -> str:
    if isinstance(e, FileNotFoundError) or e.errno == errno.ENOENT:
        return "file-not-found"
    if isinstance(e, PermissionError) or e.errno in (errno.EACCES, errno.EPERM):
        return "permission-denied"
    if isinstance(e, IsADirectoryError) or e.errno == errno.EISDIR:
        return "is-a-directory"
    return "io-error"


__all__ = [
    "SchemaError",
    "ConfigError",
    "validate_error_type",
    "map_os_error",
]
