"""
Decorator Dispatch Engine.

This module provides the single traversal that applies an ordered set of
`Rule` values to a LibCST tree.

At every node, in pre-order:

1.  Each rule, in registration order, is offered the node. A rule fires when
    its predicate accepts the node and one of the node's decorators has a
    claimed name. Only the first claimed decorator is handed to the rule.
2.  All decorators claimed by the rule are filtered out in one step before the
    rule runs.
3.  The rule result decides the node for the next rule: `Replaced` installs
    the returned node, `Unchanged` keeps the filtered node, `Failed` reports
    an error and, under the default `keep` policy, restores the decorators.
4.  The engine then descends into the children of whatever node came out of
    step 3, with every rule. A node produced by a rule is not offered to the
    rules a second time in the same pass.

Nodes are never mutated. A parent is rebuilt only when something below it
changed; untouched subtrees keep their object identity.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

import libcst as cst
from libcst.metadata import CodeRange

from decorator_lowering.core.diagnostics import DiagnosticCollector, DiagnosticsSink, NodeLocation
from decorator_lowering.core.rewriter.decorators import decorator_name, find_decorator, strip_decorators
from decorator_lowering.core.rewriter.interface import Failed, Replaced, Rule, RuleContext
from decorator_lowering.enums import FailurePolicy, Severity

logger = logging.getLogger(__name__)

PositionMap = Mapping[cst.CSTNode, CodeRange]


def node_location(node: cst.CSTNode, positions: Optional[PositionMap] = None) -> NodeLocation:
  """
  Builds the diagnostic location of a node.

  Args:
      node: The node being reported on.
      positions: Resolved `PositionProvider` metadata, if available.

  Returns:
      NodeLocation: Type, declared name and (when known) start position.
  """
  name_node = getattr(node, "name", None)
  name = name_node.value if isinstance(name_node, cst.Name) else None
  code_range = positions.get(node) if positions is not None else None

  if code_range is None:
    return NodeLocation(node_type=type(node).__name__, name=name)

  return NodeLocation(
    node_type=type(node).__name__,
    name=name,
    line=code_range.start.line,
    column=code_range.start.column,
  )


def apply_rules(
  node: cst.CSTNode,
  rules: Sequence[Rule],
  ctx: RuleContext,
  diagnostics: DiagnosticsSink,
  positions: Optional[PositionMap] = None,
) -> cst.CSTNode:
  """
  Offers one node to every rule, in order.

  Args:
      node: The node as found in the tree.
      rules: Ordered rules.
      ctx: Context handed to the rewrite functions.
      diagnostics: Sink receiving notes and failures.
      positions: Position metadata used for diagnostic locations.

  Returns:
      The node itself when no rule fired, otherwise the rewritten node.
  """
  current = node

  for rule in rules:
    if not rule.applies_to(current):
      continue

    decorators = getattr(current, "decorators", ())
    selected = find_decorator(decorators, rule.match_kinds)
    if selected is None:
      continue

    name = decorator_name(selected)
    stripped = current.with_changes(decorators=strip_decorators(decorators, rule.match_kinds))
    result = rule.rewrite(selected, stripped, ctx)
    location = node_location(node, positions)

    if isinstance(result, Failed):
      diagnostics.report(
        location,
        result.detail,
        severity=Severity.ERROR,
        kind=result.kind,
        rule=rule.kind,
        decorator=name,
      )
      if ctx.config.failure_policy == FailurePolicy.STRIP:
        current = stripped
      logger.debug("Rule '%s' failed on %s: %s", rule.kind, location, result.detail)
      continue

    current = result.node if isinstance(result, Replaced) else stripped
    logger.debug("Rule '%s' lowered @%s on %s", rule.kind, name, location)

    for note in result.notes:
      diagnostics.report(
        location,
        note.message,
        severity=note.severity,
        kind=note.kind,
        rule=rule.kind,
        decorator=name,
        value=note.value,
      )

  return current


class DispatchTransformer(cst.CSTTransformer):
  """
  LibCST Transformer running the composed rule traversal.

  Rules are applied on the way down (`on_visit`), so they always see the
  node exactly as it appears in the input tree. When a node is rewritten,
  the replacement is traversed immediately and stashed until `on_leave`
  installs it at the original position.
  """

  def __init__(
    self,
    rules: Sequence[Rule],
    ctx: RuleContext,
    diagnostics: DiagnosticsSink,
    positions: Optional[PositionMap] = None,
  ) -> None:
    super().__init__()
    self.rules = list(rules)
    self.ctx = ctx
    self.diagnostics = diagnostics
    self.positions = positions

    # One flag per open node: did anything below it change?
    self._changed: List[bool] = []
    # Replacement node whose own rules already ran; only its children are pending.
    self._settled: Optional[cst.CSTNode] = None
    self._replacements: Dict[int, Union[cst.CSTNode, cst.RemovalSentinel, cst.FlattenSentinel]] = {}

  def on_visit(self, node: cst.CSTNode) -> bool:
    self._changed.append(False)

    if node is self._settled:
      self._settled = None
      return True

    rewritten = apply_rules(node, self.rules, self.ctx, self.diagnostics, self.positions)
    if rewritten is node:
      return True

    self._settled = rewritten
    self._replacements[id(node)] = rewritten.visit(self)
    self._changed[-1] = True
    return False

  def on_leave(
    self, original_node: cst.CSTNode, updated_node: cst.CSTNode
  ) -> Union[cst.CSTNode, cst.RemovalSentinel, cst.FlattenSentinel]:
    changed = self._changed.pop()
    result = self._replacements.pop(id(original_node), None)

    if result is None:
      result = updated_node if changed else original_node

    if result is not original_node and self._changed:
      self._changed[-1] = True

    return result


def process(
  node: cst.CSTNode,
  rules: Sequence[Rule],
  ctx: Optional[RuleContext] = None,
  diagnostics: Optional[DiagnosticsSink] = None,
  positions: Optional[PositionMap] = None,
) -> Union[cst.CSTNode, cst.RemovalSentinel, cst.FlattenSentinel]:
  """
  Applies `rules` to `node` and its whole subtree in a single traversal.

  Args:
      node: Root of the (sub)tree to lower.
      rules: Ordered rules to try at every node.
      ctx: Rule context. A default-configured one is used if omitted.
      diagnostics: Sink for notes and failures. Discarded if omitted.
      positions: Position metadata for diagnostic locations.

  Returns:
      The rewritten tree; `node` itself when no rule fired anywhere.
  """
  transformer = DispatchTransformer(
    rules,
    ctx or RuleContext(),
    diagnostics if diagnostics is not None else DiagnosticCollector(),
    positions,
  )
  return node.visit(transformer)
