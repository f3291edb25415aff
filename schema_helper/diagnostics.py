from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable

from schema_helper.document import Node

SEVERITY_WARNING = "warning"


@dataclass(frozen=True)
class Position:
  line: int       # zero-based
  character: int  # zero-based


@dataclass(frozen=True)
class Diagnostic:
  start_offset: int
  end_offset: int
  message: str
  severity: str = SEVERITY_WARNING

  def to_range(self, text: str) -> tuple[Position, Position]:
    return position_at(text, self.start_offset), position_at(text, self.end_offset)

  def to_dict(self, text: str | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {
      "start_offset": self.start_offset,
      "end_offset": self.end_offset,
      "message": self.message,
      "severity": self.severity,
    }
    if text is not None:
      start, end = self.to_range(text)
      out["range"] = {
        "start": {"line": start.line, "character": start.character},
        "end": {"line": end.line, "character": end.character},
      }
    return out


def position_at(text: str, offset: int) -> Position:
  offset = max(0, min(offset, len(text)))
  line = 0
  line_start = 0
  i = 0
  while i < offset:
    ch = text[i]
    if ch == "\r" and i + 1 < len(text) and text[i + 1] == "\n":
      if i + 1 >= offset:
        break
      i += 1
    if ch in ("\r", "\n"):
      line += 1
      line_start = i + 1
    i += 1
  return Position(line=line, character=offset - line_start)


def unknown_property(key_node: Node, key: str) -> Diagnostic:
  return Diagnostic(
    start_offset=key_node.offset,
    end_offset=key_node.offset + key_node.length,
    message=f'Unknown property "{key}" (not in schema).',
  )


def missing_required(object_node: Node, key: str) -> Diagnostic:
  return Diagnostic(
    start_offset=object_node.offset,
    end_offset=object_node.offset + 1,
    message=f'Missing required property "{key}".',
  )


def type_mismatch(node: Node, expected_types: Iterable[str]) -> Diagnostic:
  expected = list(expected_types)
  label = "|".join(expected) if expected else "unknown"
  return Diagnostic(
    start_offset=node.offset,
    end_offset=node.offset + node.length,
    message=f"Type mismatch: expected {label}.",
  )
