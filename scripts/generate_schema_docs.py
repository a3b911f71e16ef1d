"""Autogenerate store documentation from a schema YAML.

Emits a Markdown table per value kind plus the file layout, so the
human-facing description of config.txt stays in sync with the schema.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure root on sys.path before importing project modules
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from linecfg import SchemaTable, load_schema  # noqa: E402
from linecfg.schema import KINDS, LiteralLine, ValueKind  # noqa: E402

DEFAULT_SCHEMA = Path("configs/schema.yaml")
OUTPUT_PATH = Path("docs/Generated-Schema.md")


def _bounds(desc) -> str:
    if desc.kind is ValueKind.STR:
        return f"<= {desc.max_length} bytes"
    return f"[{desc.min}, {desc.max}]"


def generate(schema: SchemaTable) -> str:
    lines = [
        "# Generated Store Schema",
        "",
        "Autogenerated from the schema declaration.",
    ]
    for kind in KINDS:
        descs = schema.descriptors(kind)
        if not descs:
            continue
        lines.append(f"\n## {kind.value}\n")
        lines.append("| Id | Name | Bounds | Default |")
        lines.append("|----|------|--------|---------|")
        for d in descs:
            lines.append(f"| {d.id} | {d.name} | {_bounds(d)} | {d.default} |")
    lines.append("\n## Layout\n")
    lines.append("```")
    for entry in schema.layout:
        if isinstance(entry, LiteralLine):
            lines.append(entry.text)
        else:
            desc = schema.lookup(entry.kind, entry.id)
            lines.append(f"{desc.name} <{entry.kind.value}>")
    lines.append("```")
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--schema", default=str(DEFAULT_SCHEMA))
    ap.add_argument("--out", default=str(OUTPUT_PATH))
    args = ap.parse_args(argv)
    content = generate(load_schema(args.schema))
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(content, encoding="utf-8")
    print(f"[schema-doc] written {out}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
