"""Settings loading & validation.

Precedence (last wins): base.yaml -> overrides.local.yaml -> ENV (LINECFG__*).

Env values stay strings; pydantic coerces them per field type, so
``LINECFG__STORE__MAX_LINE=1024`` lands as an int. Unknown keys are
rejected in every section.
"""
from __future__ import annotations

import logging
import os
import pathlib
import threading
from functools import lru_cache
from typing import Any, Dict, List, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from linecfg import metrics
from linecfg.errors import ConfigError, validate_error_type

from .schemas.observability import LoggingConfig
from .schemas.store import StoreConfig

logger = logging.getLogger("linecfg.config")


class AggregatedConfig(BaseModel):
    schema_version: int = 1
    store: StoreConfig = StoreConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = ConfigDict(extra="forbid")


DEFAULT_CONFIG_DIR = "configs"
ENV_PREFIX = "LINECFG__"

_OUT_OF_RANGE_TYPES = {
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
}


def _load_yaml_if_exists(path: pathlib.Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name}: top level must be a mapping")
    return data


def _merge_dict(
    base: Dict[str, Any], override: Dict[str, Any]
) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge_dict(base[k], v)
        else:
            base[k] = v
    return base


def _apply_env(cfg: Dict[str, Any]) -> None:
    prefix_len = len(ENV_PREFIX)
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        path_parts = env_key[prefix_len:].lower().split("__")
        target = cfg
        for part in path_parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        target[path_parts[-1]] = value
        dotted_path = ".".join(path_parts)
        metrics.inc("env_override_total", {"path": dotted_path})
        logger.info(
            "[config-env-override] path=%s value=*** source=env", dotted_path
        )


_lock = threading.Lock()


def _resolve_config_dir() -> pathlib.Path:
    """Resolve config directory each call honoring env var changes."""
    return pathlib.Path(os.getenv("LINECFG_CONFIG_DIR", DEFAULT_CONFIG_DIR))


def _migrate_legacy(data: Dict[str, Any]) -> Dict[str, Any]:
    """Legacy files carry no schema_version; assume 1 and say so."""
    if "schema_version" not in data:
        if data:
            logger.info("[config-migration] schema_version missing -> assuming 1")
        data["schema_version"] = 1
    return data


def _classify(e: ValidationError) -> List[Tuple[str, str, str]]:
    out: List[Tuple[str, str, str]] = []
    for err in e.errors():
        path = ".".join(str(p) for p in err.get("loc", ()))
        code = (
            "config-out-of-range"
            if err.get("type") in _OUT_OF_RANGE_TYPES
            else "config-invalid"
        )
        out.append((path, code, err.get("msg", "")))
    return out


@lru_cache(maxsize=1)
def get_config() -> AggregatedConfig:  # noqa: D401
    with _lock:
        cfg_dir = _resolve_config_dir()
        base_cfg = _load_yaml_if_exists(cfg_dir / "base.yaml")
        overrides_cfg = _load_yaml_if_exists(cfg_dir / "overrides.local.yaml")
        merged = _merge_dict(base_cfg, overrides_cfg)
        _apply_env(merged)
        migrated = _migrate_legacy(merged)
        try:
            return AggregatedConfig.model_validate(migrated)
        except ValidationError as e:
            errors = _classify(e)
            for path, code, _ in errors:
                validate_error_type(code)
                metrics.inc(
                    "config_validation_errors_total",
                    {"path": path, "code": code},
                )
            details = ", ".join(f"{p}:{c}:{m}" for p, c, m in errors)
            raise ConfigError(f"config validation failed: {details}") from e


def clear_config_cache() -> None:
    """Clear cached config (primarily for tests)."""
    get_config.cache_clear()


def as_dict() -> Dict[str, Any]:
    return get_config().model_dump()
