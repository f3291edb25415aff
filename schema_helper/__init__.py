from schema_helper.diagnostics import Diagnostic
from schema_helper.document import Node, parse_tree
from schema_helper.matcher import MatchOptions, collect_diagnostics, match
from schema_helper.resolver import ConcreteSchema, resolve

__all__ = [
  "ConcreteSchema",
  "Diagnostic",
  "MatchOptions",
  "Node",
  "collect_diagnostics",
  "match",
  "parse_tree",
  "resolve",
]
