from __future__ import annotations

import pytest

from schema_helper.document import parse_tree
from schema_helper.matcher import MatchOptions, collect_diagnostics


@pytest.fixture
def check():
  """Parse `text` and return the diagnostics it produces against `schema`."""
  def _check(schema, text, show_unknown_properties=True):
    root = parse_tree(text)
    assert root is not None
    return collect_diagnostics(root, schema, MatchOptions(show_unknown_properties=show_unknown_properties))
  return _check
