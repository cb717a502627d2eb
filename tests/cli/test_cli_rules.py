"""
Tests for the `rules` CLI command.
"""

import io

from rich.console import Console

from decorator_lowering.cli.__main__ import main
from decorator_lowering.core.registry import register_rule
from decorator_lowering.core.rewriter.interface import Unchanged
from decorator_lowering.utils.console import reset_console, set_console


def _run_rules() -> str:
  buffer = io.StringIO()
  set_console(Console(file=buffer, width=200, force_terminal=False))
  try:
    assert main(["rules"]) == 0
  finally:
    reset_console()
  return buffer.getvalue()


def test_lists_builtin_and_reserved_rules():
  output = _run_rules()

  assert "Lowering Rules" in output
  assert "custom_element" in output
  assert "Polymer.decorators.customElement" in output
  assert "active" in output
  assert "query_all" in output
  assert "reserved" in output


def test_lists_registered_extension():
  register_rule("observe", match_kinds=["observe"], applies_to=lambda n: True)(lambda d, n, c: Unchanged())

  output = _run_rules()
  observe_line = next(line for line in output.splitlines() if "observe" in line)

  assert "active" in observe_line
