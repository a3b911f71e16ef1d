import importlib.util
import json
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
SCHEMA = ROOT / "configs" / "schema.yaml"


def _load(name: str):
    spec = importlib.util.spec_from_file_location(
        name, ROOT / "scripts" / f"{name}.py"
    )
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


@pytest.fixture
def cfgtool():
    return _load("cfgtool")


def _run(cfgtool, tmp_path, *argv):
    store = tmp_path / "store.txt"
    return cfgtool.main(
        ["--schema", str(SCHEMA), "--path", str(store), *argv]
    ), store


def test_cfgtool_defaults_then_show(cfgtool, tmp_path, capsys):
    code, store = _run(cfgtool, tmp_path, "defaults")
    assert code == 0
    assert store.read_text(encoding="utf-8").startswith(
        "#example\nnumber_a 0\n\n#foobar\n"
    )
    capsys.readouterr()
    code, _ = _run(cfgtool, tmp_path, "show")
    assert code == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["int"]["number_b"] == 15
    assert shown["double"]["ratio"] == 0.25


def test_cfgtool_set_clamps_and_writes(cfgtool, tmp_path, capsys):
    code, store = _run(cfgtool, tmp_path, "set", "int", "1", "99")
    assert code == 0
    assert capsys.readouterr().out.strip() == "20"
    assert "number_b 20\n" in store.read_text(encoding="utf-8")
    code, _ = _run(cfgtool, tmp_path, "get", "int", "1")
    assert code == 0
    assert capsys.readouterr().out.strip() == "20"


def test_cfgtool_invalid_id_and_value(cfgtool, tmp_path, capsys):
    code, _ = _run(cfgtool, tmp_path, "get", "str", "7")
    assert code == 1
    code, _ = _run(cfgtool, tmp_path, "set", "int", "0", "abc")
    assert code == 2
    code, _ = _run(cfgtool, tmp_path, "set", "double", "5", "0.1")
    assert code == 1


def test_cfgtool_sync_clamps_existing_file(cfgtool, tmp_path):
    store = tmp_path / "store.txt"
    store.write_text("number_a -50\nratio 7\nstray line\n", encoding="utf-8")
    code, _ = _run(cfgtool, tmp_path, "sync")
    assert code == 0
    text = store.read_text(encoding="utf-8")
    assert "number_a -10\n" in text
    assert "ratio 1\n" in text
    assert "stray" not in text


def test_cfgtool_missing_schema(cfgtool, tmp_path, capsys):
    code = cfgtool.main(["--schema", str(tmp_path / "none.yaml"), "show"])
    assert code == 2
    assert "error" in capsys.readouterr().out


def test_generate_schema_docs(tmp_path):
    mod = _load("generate_schema_docs")
    out = tmp_path / "docs" / "schema.md"
    assert mod.main(["--schema", str(SCHEMA), "--out", str(out)]) == 0
    text = out.read_text(encoding="utf-8")
    assert "| 0 | number_a | [-10, 10] | 0 |" in text
    assert "| 1 | string_b | <= 16 bytes | FOO |" in text
    assert "number_a <int>" in text
    assert "#foobar" in text
