"""
Rules Command Handler.

Lists every registered rule with the decorator spellings it claims, and the
reserved rule kinds that have no implementation yet.
"""

from rich.table import Table

from decorator_lowering.core.registry import available_rules
from decorator_lowering.enums import RuleKind
from decorator_lowering.utils.console import console


def handle_rules() -> int:
  """
  Renders the rule registry as a table.

  Returns:
      int: Exit code (always 0).
  """
  rules = available_rules()
  registered = {rule.kind for rule in rules}

  table = Table(title="Lowering Rules")
  table.add_column("Rule", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Decorators", style="magenta")

  for rule in rules:
    table.add_row(rule.kind, "active", ", ".join(sorted(rule.match_kinds)))

  for kind in RuleKind:
    if kind.value not in registered:
      table.add_row(kind.value, "reserved", "-")

  console.print(table)
  return 0
