from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

from schema_helper.diagnostics import Diagnostic, missing_required, type_mismatch, unknown_property
from schema_helper.document import Node
from schema_helper.resolver import ConcreteSchema, SchemaNode, resolve

SCHEMA_KEY = "$schema"


@dataclass(frozen=True)
class MatchOptions:
  show_unknown_properties: bool = True


@dataclass(frozen=True)
class PropertySchemaInfo:
  schema: Any
  is_known: bool


def property_schema_info(schema: ConcreteSchema, key: str) -> PropertySchemaInfo:
  props = schema.properties
  declared = props.get(key)
  # false, null, 0 and "" count as not declared
  if isinstance(declared, (Mapping, list)) or declared:
    return PropertySchemaInfo(schema=declared, is_known=True)

  additional = schema.additional_properties
  if additional is None or additional is True:
    return PropertySchemaInfo(schema=None, is_known=False)
  if isinstance(additional, Mapping):
    return PropertySchemaInfo(schema=additional, is_known=True)
  # additionalProperties: false
  return PropertySchemaInfo(schema=None, is_known=False)


def item_schema_at(items: Any, index: int) -> Any:
  if isinstance(items, list):
    if not items:
      return None
    return items[index] if index < len(items) else items[-1]
  return items


def is_node_type_compatible(node: Node, schema: ConcreteSchema) -> bool:
  expected = schema.expected_types
  if not expected:
    return True

  kind = node.type
  if kind == "number":
    if "number" in expected:
      return True
    if "integer" in expected:
      return _is_integral(node.value)
    return False
  if kind in ("string", "boolean", "null", "object", "array"):
    return kind in expected
  return True


def _is_integral(value: Any) -> bool:
  if isinstance(value, bool):
    return False
  if isinstance(value, int):
    return True
  return isinstance(value, float) and value.is_integer()


def _property_parts(prop: Node) -> tuple[Node, Node, str] | None:
  if prop.type != "property" or not prop.children or len(prop.children) < 2:
    return None
  key_node, value_node = prop.children[0], prop.children[1]
  key = key_node.value
  if not isinstance(key, str) or not key:
    return None
  return key_node, value_node, key


def match(
  node: Node,
  schema: Any,
  root_schema: SchemaNode,
  options: MatchOptions,
  sink: list[Diagnostic],
) -> list[Diagnostic]:
  """Match one document node against a schema fragment, appending to sink."""
  if schema is None:
    return sink
  resolved = resolve(schema, root_schema)
  if resolved is None:
    return sink

  if not is_node_type_compatible(node, resolved):
    sink.append(type_mismatch(node, resolved.expected_types))
    return sink

  if node.type == "object":
    if resolved.is_object_schema:
      _match_object(node, resolved, root_schema, options, sink)
  elif node.type == "array":
    if resolved.is_array_schema:
      _match_array(node, resolved, root_schema, options, sink)
  return sink


def _match_object(
  node: Node,
  schema: ConcreteSchema,
  root_schema: SchemaNode,
  options: MatchOptions,
  sink: list[Diagnostic],
) -> None:
  present: set[str] = set()
  for prop in node.children or []:
    parts = _property_parts(prop)
    if parts is None:
      continue
    key_node, value_node, key = parts
    if key == SCHEMA_KEY:
      continue
    present.add(key)

    info = property_schema_info(schema, key)
    if info.schema is not None:
      match(value_node, info.schema, root_schema, options, sink)
    elif options.show_unknown_properties and not info.is_known:
      sink.append(unknown_property(key_node, key))

  for name in schema.required:
    if name == SCHEMA_KEY:
      continue
    if name not in present:
      sink.append(missing_required(node, name))


def _match_array(
  node: Node,
  schema: ConcreteSchema,
  root_schema: SchemaNode,
  options: MatchOptions,
  sink: list[Diagnostic],
) -> None:
  items = schema.items
  for index, element in enumerate(node.children or []):
    item_schema = item_schema_at(items, index)
    if item_schema is not None:
      match(element, item_schema, root_schema, options, sink)


def collect_diagnostics(
  root: Node,
  root_schema: SchemaNode,
  options: MatchOptions | None = None,
) -> list[Diagnostic]:
  """Validate a whole document tree against its root schema."""
  diagnostics: list[Diagnostic] = []
  resolved_root = resolve(root_schema, root_schema)
  if resolved_root is None:
    return diagnostics
  return match(root, resolved_root.node, root_schema, options or MatchOptions(), diagnostics)
