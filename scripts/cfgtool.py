"""Inspect and edit a linecfg store file from the shell.

Usage:
    python scripts/cfgtool.py --schema configs/schema.yaml show
    python scripts/cfgtool.py --schema s.yaml --path my.txt get int 0
    python scripts/cfgtool.py --schema s.yaml set str 0 "hello"
    python scripts/cfgtool.py --schema s.yaml sync
    python scripts/cfgtool.py --schema s.yaml defaults
"""
from __future__ import annotations

import argparse
import json
import os
import sys

# Ensure project root on path when executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from linecfg import Registry, SchemaError, ValueKind, load_schema  # noqa: E402
from linecfg.config import get_config  # noqa: E402
from linecfg.logging_setup import configure_logging  # noqa: E402

_CASTS = {
    ValueKind.INT: int,
    ValueKind.DOUBLE: float,
    ValueKind.STR: str,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--config_dir", default=None)
    ap.add_argument("--schema", default=None, help="schema YAML file")
    ap.add_argument("--path", default=None, help="store file")
    sub = ap.add_subparsers(dest="cmd", required=True)
    sub.add_parser("show", help="read the file and print all values")
    g = sub.add_parser("get", help="print one value")
    g.add_argument("kind", choices=[k.value for k in ValueKind])
    g.add_argument("id", type=int)
    s = sub.add_parser("set", help="set one value and write the file")
    s.add_argument("kind", choices=[k.value for k in ValueKind])
    s.add_argument("id", type=int)
    s.add_argument("value")
    sub.add_parser("sync", help="read then write back (clamps the file)")
    sub.add_parser("defaults", help="write a file holding only defaults")
    return ap


def main(argv: list[str] | None = None) -> int:  # noqa: D401
    args = build_parser().parse_args(argv)
    if args.config_dir:
        os.environ["LINECFG_CONFIG_DIR"] = args.config_dir
    cfg = get_config()
    configure_logging(cfg.logging)
    schema_file = args.schema or cfg.store.schema_file
    if not schema_file:
        print("error: no schema (use --schema or store.schema_file)")
        return 2
    try:
        schema = load_schema(schema_file)
    except (OSError, SchemaError) as e:
        print(f"error: {e}")
        return 2
    reg = Registry(schema, path=args.path)

    if args.cmd == "defaults":
        return 0 if reg.write() else 1

    found = reg.read()
    if args.cmd == "show":
        if not found:
            print(f"# {reg.path} not readable; showing defaults")
        print(json.dumps(reg.snapshot(), indent=2, ensure_ascii=False))
        return 0
    if args.cmd == "sync":
        return 0 if reg.write() else 1

    kind = ValueKind(args.kind)
    if args.cmd == "get":
        value = reg.get(kind, args.id)
        if value is None:
            print(f"error: no {kind.value} value with id {args.id}")
            return 1
        print(value)
        return 0

    try:
        value = _CASTS[kind](args.value)
    except ValueError:
        print(f"error: {args.value!r} is not a valid {kind.value}")
        return 2
    if not reg.set(kind, args.id, value):
        print(f"error: no {kind.value} value with id {args.id}")
        return 1
    print(reg.get(kind, args.id))
    return 0 if reg.write() else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
