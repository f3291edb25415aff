from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

SchemaNode = Mapping[str, Any]

# $ref and allOf steps allowed in one chain before giving up.
MAX_REF_CHAIN = 64


@dataclass(frozen=True)
class ConcreteSchema:
  """A schema node with no composition left to process.

  `node` is either a node from the loaded schema document or a mapping
  synthesized by an allOf merge. Never use it as a cache key.
  """
  node: SchemaNode

  @property
  def types(self) -> tuple[str, ...]:
    return to_type_tuple(self.node.get("type"))

  @property
  def expected_types(self) -> tuple[str, ...]:
    types = self.types
    if types:
      return types
    if self.node.get("properties") is not None or self.node.get("required") is not None:
      return ("object",)
    if self.node.get("items") is not None:
      return ("array",)
    return ()

  @property
  def properties(self) -> Mapping[str, Any]:
    props = self.node.get("properties")
    return props if isinstance(props, Mapping) else {}

  @property
  def required(self) -> list[str]:
    req = self.node.get("required")
    if not isinstance(req, list):
      return []
    names: list[str] = []
    for item in req:
      name = str(item)
      if name not in names:
        names.append(name)
    return names

  @property
  def items(self) -> Any:
    return self.node.get("items")

  @property
  def additional_properties(self) -> Any:
    return self.node.get("additionalProperties")

  @property
  def is_object_schema(self) -> bool:
    return "object" in self.types or self.node.get("properties") is not None

  @property
  def is_array_schema(self) -> bool:
    return "array" in self.types or self.node.get("items") is not None


def to_type_tuple(value: Any) -> tuple[str, ...]:
  if isinstance(value, str):
    return (value,) if value else ()
  if isinstance(value, list):
    return tuple(str(v) for v in value)
  return ()


def resolve(
  node: Any,
  root_schema: SchemaNode,
  seen: set[int] | None = None,
  hops: int = 0,
) -> ConcreteSchema | None:
  """Resolve $ref/allOf/oneOf/anyOf until a concrete node remains.

  `seen` holds ids of $ref targets already entered in the current chain;
  `hops` counts $ref and allOf steps taken so far along it.
  Returns None when there is nothing to match against.
  """
  if seen is None:
    seen = set()
  while True:
    if not isinstance(node, Mapping):
      return None

    ref = node.get("$ref")
    if isinstance(ref, str):
      if not ref.startswith("#"):
        return None
      target = resolve_pointer(root_schema, ref)
      if not isinstance(target, Mapping):
        return None
      if id(target) in seen:
        return ConcreteSchema(target)
      hops += 1
      if hops > MAX_REF_CHAIN:
        return None
      seen.add(id(target))
      node = target
      continue

    all_of = node.get("allOf")
    if isinstance(all_of, list) and all_of:
      hops += 1
      if hops > MAX_REF_CHAIN:
        return None
      branches = [resolve(entry, root_schema, set(seen), hops) for entry in all_of]
      merged = merge_schemas([b.node for b in branches if b is not None])
      return ConcreteSchema(merged) if merged is not None else None

    one_of = node.get("oneOf")
    if isinstance(one_of, list) and one_of:
      node = one_of[0]
      continue

    any_of = node.get("anyOf")
    if isinstance(any_of, list) and any_of:
      node = any_of[0]
      continue

    return ConcreteSchema(node)


def unescape_pointer_segment(segment: str) -> str:
  return segment.replace("~1", "/").replace("~0", "~")


def resolve_pointer(root_schema: SchemaNode, ref: str) -> Any:
  """Walk a fragment-local pointer (`#/a/b`) through the root schema."""
  if ref == "#":
    return root_schema
  if not ref.startswith("#/"):
    return None

  current: Any = root_schema
  for part in (unescape_pointer_segment(p) for p in ref[2:].split("/")):
    if isinstance(current, Mapping):
      if part not in current:
        return None
      current = current[part]
    elif isinstance(current, list) and part.isdigit():
      index = int(part)
      if index >= len(current):
        return None
      current = current[index]
    else:
      return None
  return current


def merge_schemas(schemas: list[SchemaNode]) -> dict[str, Any] | None:
  """Fold allOf branches left to right; later branches win on scalar fields."""
  if not schemas:
    return None

  merged: dict[str, Any] = {}
  for schema in schemas:
    if schema.get("type") is not None:
      merged["type"] = schema["type"]

    props = schema.get("properties")
    if isinstance(props, Mapping):
      merged["properties"] = {**merged.get("properties", {}), **props}

    req = schema.get("required")
    if isinstance(req, list):
      names = list(merged.get("required", []))
      for name in req:
        if name not in names:
          names.append(name)
      merged["required"] = names

    if schema.get("items") is not None:
      merged["items"] = schema["items"]

    if schema.get("additionalProperties") is not None:
      merged["additionalProperties"] = schema["additionalProperties"]

  return merged
