from __future__ import annotations
import argparse
import json
from pathlib import Path
import sys
from dataclasses import replace

import yaml

from schema_helper.config import load_config
from schema_helper.resolver import resolve
from schema_helper.run_log import make_run_log_dir
from schema_helper.schema_cache import schema_cache
from schema_helper.validator import ValidationResult, validate_document


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
  p = argparse.ArgumentParser(prog="json-schema-helper")
  p.add_argument("--workspace", default=".", help="Root for schemaMappings patterns and mapped schema paths.")
  p.add_argument("--config", help="Config file (default: <workspace>/.json-schema-helper.yaml).")
  p.add_argument("--log-dir", help="Write per-run diagnostics JSON under this directory.")

  sub = p.add_subparsers(dest="cmd", required=True)

  v = sub.add_parser("validate", help="Validate JSON/JSONC documents against their schemas.")
  v.add_argument("paths", nargs="+")
  v.add_argument("--no-unknown-properties", action="store_true", help="Do not report properties missing from the schema.")

  r = sub.add_parser("resolve", help="Print the concrete schema a pointer resolves to.")
  r.add_argument("schema")
  r.add_argument("pointer", nargs="?", default="#")

  return p.parse_args(argv)


def format_result(result: ValidationResult) -> list[str]:
  lines: list[str] = []
  for d in result.diagnostics:
    start, _ = d.to_range(result.text)
    lines.append(f"{result.path}:{start.line + 1}:{start.character + 1}: {d.severity}: {d.message}")
  return lines


def run_validate(args: argparse.Namespace, workspace: Path) -> int:
  try:
    config = load_config(workspace, Path(args.config) if args.config else None)
  except (OSError, ValueError, yaml.YAMLError) as e:
    print(f"[error] invalid config: {e}", file=sys.stderr)
    return 2
  if args.no_unknown_properties:
    config = replace(config, show_unknown_properties=False)

  log = make_run_log_dir(Path(args.log_dir)) if args.log_dir else None
  if log:
    log.write_json("run_meta.json", {"workspace": str(workspace), "paths": args.paths})

  total = 0
  failed = False
  for i, raw in enumerate(args.paths, 1):
    path = Path(raw)
    if not path.is_file():
      print(f"[error] no such file: {path}", file=sys.stderr)
      failed = True
      continue
    try:
      result = validate_document(path, config, workspace, cache=schema_cache)
    except (OSError, UnicodeDecodeError) as e:
      print(f"[error] cannot read {path}: {e}", file=sys.stderr)
      failed = True
      continue
    for line in format_result(result):
      print(line)
    if log:
      log.write_result(i, result)
    total += len(result.diagnostics)

  if failed:
    return 2
  return 1 if total else 0


def run_resolve(args: argparse.Namespace) -> int:
  root = schema_cache.load(Path(args.schema))
  if root is None:
    print(f"[error] cannot load schema {args.schema}", file=sys.stderr)
    return 2
  node = root if args.pointer == "#" else {"$ref": args.pointer}
  resolved = resolve(node, root)
  if resolved is None:
    print(f"[error] {args.pointer} does not resolve in {args.schema}", file=sys.stderr)
    return 1
  print(json.dumps(resolved.node, ensure_ascii=False, indent=2))
  return 0


def main(argv: list[str] | None = None) -> int:
  args = parse_args(argv)
  workspace = Path(args.workspace).expanduser().resolve()

  if not workspace.is_dir():
    print(f"[error] workspace does not exist: {workspace}", file=sys.stderr)
    return 2

  if args.cmd == "validate":
    return run_validate(args, workspace)
  if args.cmd == "resolve":
    return run_resolve(args)
  return 2


if __name__ == "__main__":
  raise SystemExit(main())
