from __future__ import annotations
from dataclasses import dataclass, field
import json
import re
from typing import Any

NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
WORD_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
LITERALS = {"true": ("boolean", True), "false": ("boolean", False), "null": ("null", None)}


@dataclass(eq=False)
class Node:
  type: str     # object, array, property, string, number, boolean, null
  offset: int
  length: int
  value: Any = None
  children: list[Node] | None = None
  parent: Node | None = field(default=None, repr=False)

  @property
  def end(self) -> int:
    return self.offset + self.length


@dataclass(frozen=True)
class ParseError:
  message: str
  offset: int
  length: int


@dataclass(frozen=True)
class Token:
  kind: str   # { } [ ] : , string number word eof invalid
  offset: int
  text: str


class _Scanner:
  def __init__(self, text: str, errors: list[ParseError]):
    self.text = text
    self.pos = 0
    self.errors = errors

  def _skip_trivia(self) -> None:
    text = self.text
    while self.pos < len(text):
      ch = text[self.pos]
      if ch in " \t\r\n\ufeff":
        self.pos += 1
      elif text.startswith("//", self.pos):
        nl = text.find("\n", self.pos)
        self.pos = len(text) if nl < 0 else nl + 1
      elif text.startswith("/*", self.pos):
        close = text.find("*/", self.pos + 2)
        if close < 0:
          self.errors.append(ParseError("Unterminated comment", self.pos, len(text) - self.pos))
          self.pos = len(text)
        else:
          self.pos = close + 2
      else:
        return

  def next(self) -> Token:
    self._skip_trivia()
    text = self.text
    start = self.pos
    if start >= len(text):
      return Token("eof", start, "")

    ch = text[start]
    if ch in "{}[]:,":
      self.pos += 1
      return Token(ch, start, ch)

    if ch == '"':
      i = start + 1
      while i < len(text):
        if text[i] == "\\":
          i += 2
          continue
        if text[i] == '"' or text[i] == "\n":
          break
        i += 1
      if i < len(text) and text[i] == '"':
        self.pos = i + 1
        return Token("string", start, text[start:self.pos])
      self.errors.append(ParseError("Unterminated string", start, i - start))
      self.pos = i
      return Token("invalid", start, text[start:i])

    m = NUMBER_RE.match(text, start)
    if m and m.end() > start:
      self.pos = m.end()
      return Token("number", start, m.group(0))

    m = WORD_RE.match(text, start)
    if m:
      self.pos = m.end()
      return Token("word", start, m.group(0))

    self.pos += 1
    return Token("invalid", start, ch)


class _Parser:
  def __init__(self, text: str, errors: list[ParseError]):
    self.scanner = _Scanner(text, errors)
    self.errors = errors
    self.tok = self.scanner.next()

  def _advance(self) -> Token:
    tok = self.tok
    self.tok = self.scanner.next()
    return tok

  def _error(self, message: str, tok: Token | None = None) -> None:
    tok = tok or self.tok
    self.errors.append(ParseError(message, tok.offset, max(len(tok.text), 1)))

  def parse_value(self, parent: Node | None) -> Node | None:
    tok = self.tok
    if tok.kind == "{":
      return self.parse_object(parent)
    if tok.kind == "[":
      return self.parse_array(parent)
    if tok.kind == "string":
      self._advance()
      return Node("string", tok.offset, len(tok.text), _decode_string(tok.text), parent=parent)
    if tok.kind == "number":
      self._advance()
      return Node("number", tok.offset, len(tok.text), _decode_number(tok.text), parent=parent)
    if tok.kind == "word" and tok.text in LITERALS:
      self._advance()
      kind, value = LITERALS[tok.text]
      return Node(kind, tok.offset, len(tok.text), value, parent=parent)
    self._error("Value expected")
    return None

  def _skip_to(self, stops: str) -> None:
    while self.tok.kind != "eof" and self.tok.kind not in stops:
      self._advance()

  def parse_object(self, parent: Node | None) -> Node:
    open_tok = self._advance()
    node = Node("object", open_tok.offset, 1, children=[], parent=parent)
    end = open_tok.offset + 1
    while True:
      tok = self.tok
      if tok.kind == "}":
        end = self._advance().offset + 1
        break
      if tok.kind == "eof":
        self._error("Closing brace expected")
        break
      if tok.kind != "string":
        self._error("Property name expected")
        self._skip_to(",}")
        if self.tok.kind == ",":
          end = self._advance().offset + 1
        continue

      self._advance()
      prop = Node("property", tok.offset, len(tok.text), children=[], parent=node)
      key = Node("string", tok.offset, len(tok.text), _decode_string(tok.text), parent=prop)
      prop.children.append(key)
      node.children.append(prop)
      end = key.end

      if self.tok.kind == ":":
        end = self._advance().offset + 1
        value = self.parse_value(prop)
        if value is not None:
          prop.children.append(value)
          end = value.end
        else:
          self._skip_to(",}")
      else:
        self._error("Colon expected")
        self._skip_to(",}")
      prop.length = end - prop.offset

      if self.tok.kind == ",":
        end = self._advance().offset + 1
      elif self.tok.kind not in ("}", "eof"):
        self._error("Comma expected")
    node.length = end - node.offset
    return node

  def parse_array(self, parent: Node | None) -> Node:
    open_tok = self._advance()
    node = Node("array", open_tok.offset, 1, children=[], parent=parent)
    end = open_tok.offset + 1
    while True:
      tok = self.tok
      if tok.kind == "]":
        end = self._advance().offset + 1
        break
      if tok.kind == "eof":
        self._error("Closing bracket expected")
        break
      value = self.parse_value(node)
      if value is None:
        self._skip_to(",]")
      else:
        node.children.append(value)
        end = value.end
      if self.tok.kind == ",":
        end = self._advance().offset + 1
      elif self.tok.kind not in ("]", "eof"):
        self._error("Comma expected")
        self._skip_to(",]")
    node.length = end - node.offset
    return node


def _decode_string(raw: str) -> str | None:
  try:
    return json.loads(raw)
  except ValueError:
    return None


def _decode_number(raw: str) -> int | float:
  if any(c in raw for c in ".eE"):
    return float(raw)
  return int(raw)


def parse_tree(text: str, errors: list[ParseError] | None = None) -> Node | None:
  """Parse JSON with comments and trailing commas into a positioned tree.

  Syntax problems are appended to `errors` instead of raised; the returned
  tree holds whatever could be recovered. Returns None when the text holds
  no value at all.
  """
  if errors is None:
    errors = []
  parser = _Parser(text, errors)
  if parser.tok.kind == "eof":
    return None
  root = parser.parse_value(None)
  if root is not None and parser.tok.kind != "eof":
    parser._error("End of file expected")
  return root


def find_node_at_location(root: Node | None, path: list[str | int]) -> Node | None:
  node = root
  for segment in path:
    if node is None or not node.children:
      return None
    if node.type == "object" and isinstance(segment, str):
      found = None
      for prop in node.children:
        if len(prop.children or []) == 2 and prop.children[0].value == segment:
          found = prop.children[1]
      node = found
    elif node.type == "array" and isinstance(segment, int):
      node = node.children[segment] if 0 <= segment < len(node.children) else None
    else:
      return None
  return node
