"""
Decorator Identification and Removal.

Name resolution is purely syntactic:

1.  `@foo` and `@a.b.foo` resolve to the text of the expression.
2.  `@foo(...)` and `@a.b.foo(...)` resolve to the text of the callee; the
    call arguments become the decorator arguments.

Imports and aliases are not followed, so `@customElement` and
`@Polymer.decorators.customElement` are distinct names that a rule must list
side by side.
"""

from typing import Collection, List, Optional, Sequence, Tuple

import libcst as cst

from decorator_lowering.utils.node_text import dotted_name, node_source


def decorator_name(decorator: cst.Decorator) -> str:
  """
  Resolves the identifying name of a decorator.

  Args:
      decorator: The decorator node.

  Returns:
      str: Dotted name for attribute chains, raw source text for anything else.
  """
  expr = decorator.decorator
  if isinstance(expr, cst.Call):
    expr = expr.func
  return dotted_name(expr) or node_source(expr)


def decorator_arguments(decorator: cst.Decorator) -> List[cst.Arg]:
  """
  Returns the call arguments of a decorator, or an empty list for the plain form.
  """
  expr = decorator.decorator
  if isinstance(expr, cst.Call):
    return list(expr.args)
  return []


def find_decorator(decorators: Sequence[cst.Decorator], names: Collection[str]) -> Optional[cst.Decorator]:
  """
  Selects the first decorator (in list order) whose name is in `names`.
  """
  for decorator in decorators:
    if decorator_name(decorator) in names:
      return decorator
  return None


def strip_decorators(
  decorators: Sequence[cst.Decorator], names: Collection[str]
) -> Sequence[cst.Decorator]:
  """
  Removes every decorator whose name is in `names`, in one step.

  Args:
      decorators: The current decorator list of a node.
      names: Decorator spellings to remove.

  Returns:
      The same object when nothing matched, an empty tuple (the "no
      decorators" default of LibCST nodes) when nothing is left, and a new
      tuple of the survivors otherwise.
  """
  kept: Tuple[cst.Decorator, ...] = tuple(d for d in decorators if decorator_name(d) not in names)

  if len(kept) == len(decorators):
    return decorators

  return kept
