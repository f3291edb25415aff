from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import json
import sys


@dataclass(frozen=True)
class CachedSchema:
  mtime: float
  schema: Any


class SchemaCache:
  """Loaded schema documents keyed by path, reused while the file mtime is unchanged."""

  def __init__(self):
    self._entries: dict[str, CachedSchema] = {}

  @staticmethod
  def key_for(path: Path) -> str:
    return str(Path(path).expanduser().resolve())

  def load(self, path: Path) -> Any | None:
    key = self.key_for(path)
    try:
      mtime = Path(key).stat().st_mtime
      cached = self._entries.get(key)
      if cached is not None and cached.mtime == mtime:
        return cached.schema

      schema = json.loads(Path(key).read_text(encoding="utf-8"))
      self._entries[key] = CachedSchema(mtime=mtime, schema=schema)
      return schema
    except (OSError, ValueError) as e:
      print(f"[warning] Unable to load schema {key}: {e}", file=sys.stderr)
      return None

  def invalidate(self, path: Path) -> bool:
    return self._entries.pop(self.key_for(path), None) is not None

  def clear(self) -> None:
    self._entries.clear()

  def __contains__(self, path: Path) -> bool:
    return self.key_for(path) in self._entries

  def __len__(self) -> int:
    return len(self._entries)


# Process-wide cache; invalidated on schema writes and config changes.
schema_cache = SchemaCache()
