from __future__ import annotations
import os
import re
from pathlib import Path
from urllib.parse import unquote, urlparse

from schema_helper.config import Config, SchemaMapping
from schema_helper.document import Node

SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def to_posix_path(path: str) -> str:
  return path.replace("\\", "/")


def normalize_pattern(pattern: str) -> str:
  if "/" in pattern:
    return pattern
  return f"**/{pattern}"


def pattern_to_regex(pattern: str) -> re.Pattern[str]:
  out: list[str] = []
  i = 0
  while i < len(pattern):
    # "**/" also matches zero directories
    if pattern.startswith("**/", i):
      out.append("(?:.*/)?")
      i += 3
      continue
    if pattern.startswith("**", i):
      out.append(".*")
      i += 2
      continue
    ch = pattern[i]
    if ch == "*":
      out.append("[^/]*")
    elif ch == "?":
      out.append(".")
    else:
      out.append(re.escape(ch))
    i += 1
  return re.compile("^" + "".join(out) + "$")


def matches_pattern(target: str, pattern: str) -> bool:
  return pattern_to_regex(pattern).match(target) is not None


def find_schema_mapping(relative_path: str, mappings: list[SchemaMapping]) -> str | None:
  """Return the schema path of the first mapping whose pattern matches."""
  target = to_posix_path(relative_path)
  for mapping in mappings:
    if not mapping.pattern or not mapping.schema_path:
      continue
    if matches_pattern(target, normalize_pattern(mapping.pattern)):
      return mapping.schema_path
  return None


def find_top_level_schema_id(root: Node | None) -> str | None:
  if root is None or root.type != "object" or not root.children:
    return None
  for prop in root.children:
    if prop.type != "property" or not prop.children or len(prop.children) < 2:
      continue
    key_node, value_node = prop.children[0], prop.children[1]
    if key_node.value == "$schema" and value_node.type == "string" and isinstance(value_node.value, str):
      return value_node.value
  return None


def resolve_schema_location(
  document_path: Path,
  schema_id: str,
  base: str,
  workspace: Path | None,
) -> Path | None:
  """Turn a schema id into a local path; remote schemes are not supported."""
  if schema_id.lower().startswith("file://"):
    return Path(unquote(urlparse(schema_id).path))
  if SCHEME_RE.match(schema_id):
    return None
  if os.path.isabs(schema_id):
    return Path(schema_id)
  if base == "document":
    return document_path.parent / schema_id
  if workspace is None:
    return None
  return workspace / schema_id


def relative_to_workspace(document_path: Path, workspace: Path | None) -> str:
  if workspace is not None:
    try:
      return document_path.resolve().relative_to(workspace.resolve()).as_posix()
    except ValueError:
      pass
  return to_posix_path(str(document_path))


def locate_schema(
  document_path: Path,
  root: Node | None,
  config: Config,
  workspace: Path | None,
) -> Path | None:
  """Mapped schema (relative to the workspace) first, then `$schema` (relative to the document)."""
  mapped = find_schema_mapping(relative_to_workspace(document_path, workspace), config.schema_mappings)
  if mapped:
    return resolve_schema_location(document_path, mapped, "workspace", workspace)

  schema_id = find_top_level_schema_id(root)
  if not schema_id:
    return None
  return resolve_schema_location(document_path, schema_id, "document", workspace)
