from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()

CONFIG_FILE_NAME = ".json-schema-helper.yaml"
ENV_SHOW_UNKNOWN = "JSON_SCHEMA_HELPER_SHOW_UNKNOWN_PROPERTIES"
ENV_ENABLE_DIAGNOSTICS = "JSON_SCHEMA_HELPER_ENABLE_DIAGNOSTICS"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class SchemaMapping:
  pattern: str
  schema_path: str


@dataclass(frozen=True)
class Config:
  schema_mappings: list[SchemaMapping] = field(default_factory=list)
  show_unknown_properties: bool = True
  enable_diagnostics: bool = True


def _as_bool(value: object, name: str) -> bool:
  if isinstance(value, bool):
    return value
  text = str(value).strip().lower()
  if text in _TRUE:
    return True
  if text in _FALSE:
    return False
  raise ValueError(f"{name} must be a boolean, got {value!r}")


def parse_config(data: dict) -> Config:
  mappings_raw = data.get("schemaMappings", []) or []
  if not isinstance(mappings_raw, list):
    raise ValueError("schemaMappings must be a list")
  mappings: list[SchemaMapping] = []
  for i, item in enumerate(mappings_raw):
    if not isinstance(item, dict):
      raise ValueError(f"schemaMappings[{i}] must be a dict")
    mappings.append(SchemaMapping(
      pattern=str(item.get("pattern", "") or "").strip(),
      schema_path=str(item.get("schemaPath", "") or "").strip(),
    ))
  return Config(
    schema_mappings=mappings,
    show_unknown_properties=_as_bool(data.get("showUnknownProperties", True), "showUnknownProperties"),
    enable_diagnostics=_as_bool(data.get("enableDiagnostics", True), "enableDiagnostics"),
  )


def apply_env_overrides(cfg: Config, env: dict[str, str] | None = None) -> Config:
  env = os.environ if env is None else env
  if env.get(ENV_SHOW_UNKNOWN):
    cfg = replace(cfg, show_unknown_properties=_as_bool(env[ENV_SHOW_UNKNOWN], ENV_SHOW_UNKNOWN))
  if env.get(ENV_ENABLE_DIAGNOSTICS):
    cfg = replace(cfg, enable_diagnostics=_as_bool(env[ENV_ENABLE_DIAGNOSTICS], ENV_ENABLE_DIAGNOSTICS))
  return cfg


def load_config(workspace: Path, path: Path | None = None) -> Config:
  """Read the workspace config file (optional unless `path` is given) and apply env overrides."""
  p = path if path is not None else workspace / CONFIG_FILE_NAME
  if not p.exists():
    if path is not None:
      raise FileNotFoundError(f"Missing config: {p}")
    return apply_env_overrides(Config())
  data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
  if not isinstance(data, dict):
    raise ValueError(f"{p} must contain a mapping")
  return apply_env_overrides(parse_config(data))
