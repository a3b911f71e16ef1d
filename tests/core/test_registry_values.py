import math

import pytest

from linecfg import Registry, SchemaBuilder, ValueKind
from linecfg import metrics
from linecfg.store import INVALID_INT


@pytest.fixture
def reg(tmp_path):
    schema = (
        SchemaBuilder()
        .integer(0, "number_a", -10, 10, 0)
        .integer(4, "number_b", 10, 20, 15)
        .double(1, "ratio", 0.0, 1.0, 0.25)
        .string(0, "string_a", 32, "ABCD")
        .string(2, "tiny", 3, "ab")
        .build()
    )
    return Registry(
        schema, path=tmp_path / "c.txt", max_line=512, scan_mode="first"
    )


def test_initial_values_are_defaults(reg):
    assert reg.get_int(0) == 0
    assert reg.get_int(4) == 15
    assert reg.get_double(1) == 0.25
    assert reg.get_string(0) == "ABCD"


@pytest.mark.parametrize(
    "value,expected",
    [
        (-10, -10),
        (10, 10),
        (3, 3),
        (11, 10),
        (-11, -10),
        (10**30, 10),
        (-(10**30), -10),
        (float("inf"), 10),
        (float("nan"), 0),
    ],
)
def test_int_clamp(reg, value, expected):
    reg.set_int(0, value)
    assert reg.get_int(0) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.0, 0.0),
        (1.0, 1.0),
        (0.5, 0.5),
        (1.5, 1.0),
        (-0.1, 0.0),
        (float("inf"), 1.0),
        (float("-inf"), 0.0),
        (float("nan"), 0.0),
    ],
)
def test_double_clamp(reg, value, expected):
    reg.set_double(1, value)
    assert reg.get_double(1) == expected


def test_string_truncated_to_max_length(reg):
    reg.set_string(0, "x" * 40)
    assert reg.get_string(0) == "x" * 32
    reg.set_string(0, "y" * 32)
    assert reg.get_string(0) == "y" * 32
    reg.set_string(2, "")
    assert reg.get_string(2) == ""


def test_string_cut_at_line_terminator(reg):
    reg.set_string(0, "first\nsecond")
    assert reg.get_string(0) == "first"
    reg.set_string(0, "win\r\n")
    assert reg.get_string(0) == "win"


def test_string_truncation_never_splits_characters(reg):
    reg.set_string(2, "aé")  # 3 bytes, fits
    assert reg.get_string(2) == "aé"
    reg.set_string(2, "aaé")  # 4 bytes, the é does not fit
    assert reg.get_string(2) == "aa"


def test_default_resets_everything(reg):
    reg.set_int(0, 7)
    reg.set_int(4, 11)
    reg.set_double(1, 0.9)
    reg.set_string(0, "changed")
    reg.default()
    for desc in reg.schema:
        assert reg.get(desc.kind, desc.id) == desc.default


def test_invalid_ids_return_sentinels(reg):
    for bad in (1, 2, 3, 5, -1, 99):
        assert reg.get_int(bad) == INVALID_INT
        assert reg.get(ValueKind.INT, bad) is None
    assert math.isnan(reg.get_double(0))
    assert reg.get_string(1) is None
    assert metrics.counter("invalid_id_total", {"op": "get", "kind": "int"})


def test_invalid_set_is_noop(reg):
    before = reg.snapshot()
    assert reg.set(ValueKind.INT, 1, 5) is False
    reg.set_int(-1, 5)
    reg.set_double(7, 0.5)
    reg.set_string(9, "zzz")
    assert reg.snapshot() == before
    assert metrics.counter("invalid_id_total", {"op": "set", "kind": "int"}) == 2


def test_set_returns_true_for_valid_ids(reg):
    assert reg.set("int", 0, 4) is True
    assert reg.get("int", 0) == 4


def test_unknown_kind_raises(reg):
    with pytest.raises(ValueError):
        reg.get("bool", 0)


def test_snapshot_by_kind_and_name(reg):
    assert reg.snapshot() == {
        "int": {"number_a": 0, "number_b": 15},
        "double": {"ratio": 0.25},
        "str": {"string_a": "ABCD", "tiny": "ab"},
    }


def test_registries_are_independent(reg, tmp_path):
    other = Registry(
        reg.schema, path=tmp_path / "o.txt", max_line=512, scan_mode="first"
    )
    other.set_int(0, 9)
    assert reg.get_int(0) == 0
    assert other.get_int(0) == 9


def test_settings_fill_unspecified_arguments(reg, tmp_path, monkeypatch):
    monkeypatch.setenv("LINECFG__STORE__PATH", str(tmp_path / "env.txt"))
    monkeypatch.setenv("LINECFG__STORE__MAX_LINE", "64")
    r = Registry(reg.schema)
    assert r.path == tmp_path / "env.txt"
    assert r.max_line == 64
    assert r.scan_mode == "first"


def test_bad_construction_arguments(reg):
    from linecfg import ConfigError

    with pytest.raises(ConfigError):
        Registry(reg.schema, path="x", max_line=1, scan_mode="first")
    with pytest.raises(ConfigError):
        Registry(reg.schema, path="x", max_line=512, scan_mode="last")


@pytest.mark.parametrize(
    "kind,id,value,expected",
    [
        ("int", 0, 10**400, 10),
        ("int", 0, -(10**400), -10),
        ("double", 1, 10**400, 1.0),
        ("double", 1, -(10**400), 0.0),
        ("double", 1, True, 1.0),
        ("str", 0, "ab\ud800", "ab"),
        ("str", 0, "\udfff" * 100, ""),
        ("str", 0, "é" * 1000, "é" * 16),
    ],
)
def test_set_saturates_extreme_input(reg, kind, id, value, expected):
    assert reg.set(kind, id, value) is True
    assert reg.get(kind, id) == expected


def test_unencodable_string_still_writes(reg):
    reg.set_string(0, "x\ud800y")
    assert reg.get_string(0) == "xy"
    assert reg.write() is True
    assert "string_a xy\n" in reg.path.read_text(encoding="utf-8")


def test_invalid_id_logged_with_error_type(reg, caplog):
    caplog.set_level("DEBUG", logger="linecfg.registry")
    reg.set_int(5, 1)
    assert "error_type=invalid-id" in caplog.text
