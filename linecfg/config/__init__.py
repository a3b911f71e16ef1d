"""Settings subsystem public API.

Provides:
    get_config() -> AggregatedConfig (schema_version + store + logging)
    as_dict()    -> dict representation
    ConfigError  -> raised on validation / unknown key
"""

from .loader import (  # noqa: F401
    get_config,
    as_dict,
    ConfigError,
    clear_config_cache,
)


__all__ = [
    "get_config",
    "as_dict",
    "ConfigError",
    "clear_config_cache",
]
