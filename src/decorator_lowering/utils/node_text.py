"""
Source Text of Detached Nodes.

Renders arbitrary LibCST nodes back to source "in vacuum". Rules rely on this
to take the literal text of an expression (a decorator callee, a tag name)
without serializing the whole module.
"""

from typing import Optional

import libcst as cst

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into its Python source code string.

  Works for nodes taken from a parsed tree as well as freshly constructed ones.

  Args:
      node: The CST node to serialise.

  Returns:
      str: The source text, stripped of surrounding whitespace.
  """
  return _RENDER_CTX.code_for_node(node).strip()


def dotted_name(node: cst.BaseExpression) -> Optional[str]:
  """
  Flattens a `Name` / `Attribute` chain to a dotted string.

  Args:
      node: The expression to flatten.

  Returns:
      The dotted string (e.g. ``Polymer.decorators.customElement``), or None
      if the expression is not a pure attribute chain.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = dotted_name(node.value)
    if base:
      return f"{base}.{node.attr.value}"
  return None
