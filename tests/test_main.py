from __future__ import annotations

import json

import pytest

from schema_helper.main import main
from schema_helper.schema_cache import schema_cache


@pytest.fixture(autouse=True)
def fresh_cache():
  schema_cache.clear()
  yield
  schema_cache.clear()


@pytest.fixture
def workspace(tmp_path):
  (tmp_path / "s.json").write_text(json.dumps({
    "definitions": {"port": {"type": "integer"}},
    "type": "object",
    "properties": {"name": {"type": "string"}, "port": {"$ref": "#/definitions/port"}},
    "required": ["name"],
  }), encoding="utf-8")
  return tmp_path


def test_validate_reports_diagnostics(workspace, capsys):
  doc = workspace / "d.json"
  doc.write_text('{\n  "$schema": "s.json",\n  "port": "80"\n}', encoding="utf-8")
  rc = main(["--workspace", str(workspace), "validate", str(doc)])
  out = capsys.readouterr().out.splitlines()
  assert rc == 1
  assert out == [
    f"{doc}:3:11: warning: Type mismatch: expected integer.",
    f'{doc}:1:1: warning: Missing required property "name".',
  ]


def test_validate_clean_document(workspace, capsys):
  doc = workspace / "d.json"
  doc.write_text('{"$schema": "s.json", "name": "svc", "port": 8080}', encoding="utf-8")
  assert main(["--workspace", str(workspace), "validate", str(doc)]) == 0
  assert capsys.readouterr().out == ""


def test_validate_no_unknown_properties_flag(workspace):
  doc = workspace / "d.json"
  doc.write_text('{"$schema": "s.json", "name": "svc", "extra": 1}', encoding="utf-8")
  assert main(["--workspace", str(workspace), "validate", str(doc)]) == 1
  assert main(["--workspace", str(workspace), "validate", "--no-unknown-properties", str(doc)]) == 0


def test_validate_writes_run_log(workspace, tmp_path):
  doc = workspace / "d.json"
  doc.write_text('{"$schema": "s.json"}', encoding="utf-8")
  logs = tmp_path / "logs"
  main(["--workspace", str(workspace), "--log-dir", str(logs), "validate", str(doc)])
  (run,) = list(logs.iterdir())
  meta = json.loads((run / "run_meta.json").read_text(encoding="utf-8"))
  assert meta["paths"] == [str(doc)]
  entry = json.loads((run / "01_diagnostics.json").read_text(encoding="utf-8"))
  assert entry["diagnostics"][0]["message"] == 'Missing required property "name".'
  assert entry["diagnostics"][0]["range"]["start"] == {"line": 0, "character": 0}


def test_usage_errors(workspace, tmp_path, capsys):
  assert main(["--workspace", str(tmp_path / "nope"), "validate", "x.json"]) == 2
  assert main(["--workspace", str(workspace), "validate", str(workspace / "missing.json")]) == 2
  assert main(["--workspace", str(workspace), "--config", str(tmp_path / "no.yaml"), "validate", "x.json"]) == 2
  assert "[error]" in capsys.readouterr().err


def test_resolve_prints_concrete_schema(workspace, capsys):
  assert main(["resolve", str(workspace / "s.json"), "#/properties/port"]) == 0
  assert json.loads(capsys.readouterr().out) == {"type": "integer"}
  assert main(["resolve", str(workspace / "s.json"), "#/properties/missing"]) == 1


def test_unreadable_document_is_reported_and_others_still_checked(workspace, capsys):
  bad = workspace / "bad.json"
  bad.write_bytes(b'{"$schema": "s.json", "a": "\xff"}')
  good = workspace / "good.json"
  good.write_text('{"$schema": "s.json", "port": "x"}', encoding="utf-8")
  rc = main(["--workspace", str(workspace), "validate", str(bad), str(good)])
  captured = capsys.readouterr()
  assert rc == 2
  assert f"[error] cannot read {bad}" in captured.err
  assert f"{good}:1:31: warning: Type mismatch: expected integer." in captured.out.splitlines()


def test_resolve_reports_unloadable_schema(tmp_path, capsys):
  assert main(["resolve", str(tmp_path / "missing.json")]) == 2
  assert f"[error] cannot load schema {tmp_path / 'missing.json'}" in capsys.readouterr().err
