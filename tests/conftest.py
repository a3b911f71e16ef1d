"""Pytest configuration ensuring project root is importable.

Adds repository root (and src/) to sys.path explicitly to avoid
interpreter/path quirks, and isolates global state between tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _isolate_store_env(tmp_path, monkeypatch):  # noqa: D401
    """Ensure settings/registry/metrics side effects do not leak.

    - Point LINECFG_CONFIG_DIR at an empty directory (pure defaults)
    - Drop LINECFG__* overrides inherited from the shell
    - Clear settings cache, process-wide registry, metrics and listeners
    """
    from linecfg import metrics
    from linecfg.config import clear_config_cache
    from linecfg.eventbus import reset_for_tests as reset_bus
    from linecfg.events import reset_listeners_for_tests
    from linecfg.store import reset_registry

    for key in list(os.environ):
        if key.startswith("LINECFG__"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("LINECFG_CONFIG_DIR", str(tmp_path / "no-configs"))
    clear_config_cache()
    reset_registry()
    metrics.reset_for_tests()
    try:
        yield
    finally:
        clear_config_cache()
        reset_registry()
        reset_listeners_for_tests()
        reset_bus()


@pytest.fixture
def example_schema():
    from linecfg import SchemaBuilder

    return (
        SchemaBuilder()
        .line("#example")
        .integer(0, "number_a", -10, 10, 0)
        .line()
        .line("#foobar")
        .string(0, "string_a", 32, "ABCD")
        .integer(1, "number_b", 10, 20, 15)
        .string(1, "string_b", 16, "FOO")
        .build()
    )


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "config.txt"


@pytest.fixture
def registry(example_schema, store_path):
    from linecfg import Registry

    return Registry(
        example_schema, path=store_path, max_line=512, scan_mode="first"
    )
