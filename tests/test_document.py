"""JSONC parsing into positioned nodes."""
from __future__ import annotations

from schema_helper.document import find_node_at_location, parse_tree


def span(text, node):
  return text[node.offset:node.end]


def test_scalars():
  assert parse_tree('"a\\nb"').value == "a\nb"
  assert parse_tree("12").value == 12
  assert isinstance(parse_tree("12").value, int)
  assert parse_tree("-1.5e1").value == -15.0
  assert parse_tree("true").type == "boolean"
  assert parse_tree("null").type == "null"


def test_object_children_are_property_pairs():
  text = '{"a": 1, "b": [true, null]}'
  root = parse_tree(text)
  assert root.type == "object"
  assert (root.offset, root.length) == (0, len(text))
  first, second = root.children
  assert first.type == "property"
  key, value = first.children
  assert key.value == "a" and span(text, key) == '"a"'
  assert value.value == 1 and span(text, value) == "1"
  assert span(text, second) == '"b": [true, null]'
  assert [c.type for c in second.children[1].children] == ["boolean", "null"]
  assert value.parent is first and first.parent is root


def test_comments_and_trailing_commas():
  text = """{
  // line comment
  "a": 1, /* block */
  "b": [1, 2,],
}"""
  errors = []
  root = parse_tree(text, errors)
  assert errors == []
  assert find_node_at_location(root, ["a"]).value == 1
  assert len(find_node_at_location(root, ["b"]).children) == 2


def test_offsets_slice_back_to_tokens():
  text = '  {"name" : "Ada",\n "tags": ["x"]}  '
  root = parse_tree(text)
  assert span(text, root) == '{"name" : "Ada",\n "tags": ["x"]}'
  assert span(text, find_node_at_location(root, ["tags", 0])) == '"x"'


def test_missing_value_keeps_key_only():
  errors = []
  root = parse_tree('{"a": , "b": 2}', errors)
  a, b = root.children
  assert len(a.children) == 1
  assert b.children[1].value == 2
  assert errors


def test_missing_colon_and_unclosed_object():
  errors = []
  root = parse_tree('{"a" 1', errors)
  assert root.type == "object"
  assert len(root.children[0].children) == 1
  assert any(e.message == "Colon expected" for e in errors)


def test_unclosed_array_keeps_elements():
  errors = []
  root = parse_tree("[1, 2", errors)
  assert [c.value for c in root.children] == [1, 2]
  assert any(e.message == "Closing bracket expected" for e in errors)


def test_empty_input():
  assert parse_tree("") is None
  assert parse_tree("  // nothing\n") is None


def test_garbage_input():
  errors = []
  assert parse_tree("@", errors) is None
  assert errors


def test_find_node_at_location_misses():
  root = parse_tree('{"a": [1]}')
  assert find_node_at_location(root, ["b"]) is None
  assert find_node_at_location(root, ["a", 3]) is None
  assert find_node_at_location(root, [0]) is None
