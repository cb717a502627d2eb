"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Global rule registry isolation so tests registering their own rules do not leak.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'decorator_lowering' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from decorator_lowering.core import registry  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_rule_registry():
  """Snapshot the registry (built-ins loaded) and restore it after each test."""
  registry.load_rules()
  saved = dict(registry._RULES)
  yield
  registry._RULES.clear()
  registry._RULES.update(saved)
  registry._BUILTINS_LOADED = True
