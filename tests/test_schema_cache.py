from __future__ import annotations

import os

from schema_helper.schema_cache import SchemaCache


def test_reuses_entry_while_mtime_unchanged(tmp_path):
  p = tmp_path / "s.json"
  p.write_text('{"type": "string"}', encoding="utf-8")
  cache = SchemaCache()
  first = cache.load(p)
  assert first == {"type": "string"}
  assert cache.load(p) is first
  assert p in cache and len(cache) == 1


def test_reloads_after_change(tmp_path):
  p = tmp_path / "s.json"
  p.write_text('{"type": "string"}', encoding="utf-8")
  cache = SchemaCache()
  cache.load(p)
  p.write_text('{"type": "number"}', encoding="utf-8")
  st = p.stat()
  os.utime(p, (st.st_atime, st.st_mtime + 10))
  assert cache.load(p) == {"type": "number"}


def test_invalidate_and_clear(tmp_path):
  p = tmp_path / "s.json"
  p.write_text("{}", encoding="utf-8")
  cache = SchemaCache()
  assert cache.invalidate(p) is False
  cache.load(p)
  assert cache.invalidate(p) is True
  assert p not in cache
  cache.load(p)
  cache.clear()
  assert len(cache) == 0


def test_load_failures_warn_and_return_none(tmp_path, capsys):
  cache = SchemaCache()
  assert cache.load(tmp_path / "missing.json") is None
  bad = tmp_path / "bad.json"
  bad.write_text("{not json", encoding="utf-8")
  assert cache.load(bad) is None
  err = capsys.readouterr().err
  assert "[warning] Unable to load schema" in err
  assert len(cache) == 0
