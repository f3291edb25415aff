from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from datetime import datetime
import json

from schema_helper.validator import ValidationResult


@dataclass(frozen=True)
class RunLog:
  root: Path  # .../<log-dir>/run_20260101_120000/

  def write_json(self, name: str, obj) -> None:
    p = self.root / name
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")

  def write_result(self, index: int, result: ValidationResult) -> None:
    self.write_json(f"{index:02d}_diagnostics.json", {
      "document": str(result.path),
      "schema": str(result.schema_path) if result.schema_path else None,
      "parse_errors": [
        {"message": e.message, "offset": e.offset, "length": e.length} for e in result.parse_errors
      ],
      "diagnostics": [d.to_dict(result.text) for d in result.diagnostics],
    })


def make_run_log_dir(logs_root: Path) -> RunLog:
  ts = datetime.now().strftime("%Y%m%d_%H%M%S")
  run_root = logs_root / f"run_{ts}"
  run_root.mkdir(parents=True, exist_ok=True)
  return RunLog(root=run_root)
