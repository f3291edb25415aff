from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from schema_helper.config import Config
from schema_helper.diagnostics import Diagnostic
from schema_helper.document import ParseError, parse_tree
from schema_helper.locator import locate_schema
from schema_helper.matcher import MatchOptions, collect_diagnostics
from schema_helper.schema_cache import SchemaCache, schema_cache

JSON_SUFFIXES = (".json", ".jsonc")


@dataclass(frozen=True)
class ValidationResult:
  path: Path
  text: str = ""
  schema_path: Path | None = None
  diagnostics: list[Diagnostic] = field(default_factory=list)
  parse_errors: list[ParseError] = field(default_factory=list)


def is_json_document(path: Path) -> bool:
  return path.suffix.lower() in JSON_SUFFIXES


def validate_document(
  path: Path,
  config: Config,
  workspace: Path | None = None,
  text: str | None = None,
  cache: SchemaCache | None = None,
) -> ValidationResult:
  """Run one validation pass over a document file.

  Any step that cannot proceed (not JSON, diagnostics disabled, nothing parsed,
  no schema located, schema failed to load) yields a result with no diagnostics.
  """
  cache = cache if cache is not None else schema_cache
  if not is_json_document(path) or not config.enable_diagnostics:
    return ValidationResult(path=path)

  if text is None:
    text = path.read_text(encoding="utf-8")
  errors: list[ParseError] = []
  root = parse_tree(text, errors)
  if root is None:
    return ValidationResult(path=path, text=text, parse_errors=errors)

  schema_path = locate_schema(path, root, config, workspace)
  if schema_path is None:
    return ValidationResult(path=path, text=text, parse_errors=errors)

  schema = cache.load(schema_path)
  if not isinstance(schema, Mapping):
    return ValidationResult(path=path, text=text, schema_path=schema_path, parse_errors=errors)

  options = MatchOptions(show_unknown_properties=config.show_unknown_properties)
  return ValidationResult(
    path=path,
    text=text,
    schema_path=schema_path,
    diagnostics=collect_diagnostics(root, schema, options),
    parse_errors=errors,
  )


def on_document_saved(path: Path, cache: SchemaCache | None = None) -> bool:
  """Drop a saved schema file from the cache; True means every document needs revalidation."""
  cache = cache if cache is not None else schema_cache
  return cache.invalidate(path)
