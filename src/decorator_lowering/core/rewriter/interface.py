"""
Interface definition for Lowering Rules.

A rule is a plain value: the decorator spellings it claims, a node-kind
predicate and a rewrite function. The dispatch engine owns traversal,
decorator matching and decorator removal; a rule only decides what the
matched node becomes.

Rewrite functions must be pure. They read the node they are given and
return a `RewriteResult`; anything meant for a human travels back as a
`Note` which the engine forwards to the diagnostics sink.
"""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Tuple, Union

import libcst as cst

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.enums import ErrorKind, Severity


@dataclass(frozen=True)
class Note:
  """
  Message a rule wants reported for the node it handled.
  """

  message: str
  severity: Severity = Severity.INFO
  kind: Optional[ErrorKind] = None
  value: Optional[str] = None


@dataclass(frozen=True)
class Replaced:
  """The rule produced a new node for this position."""

  node: cst.CSTNode
  notes: Tuple[Note, ...] = ()


@dataclass(frozen=True)
class Unchanged:
  """The rule accepted the node as-is (beyond the decorator removal)."""

  notes: Tuple[Note, ...] = ()


@dataclass(frozen=True)
class Failed:
  """The rule could not lower the node."""

  kind: ErrorKind
  detail: str


RewriteResult = Union[Replaced, Unchanged, Failed]


@dataclass(frozen=True)
class RuleContext:
  """
  Read-only state handed to every rewrite function.
  """

  config: RuntimeConfig = field(default_factory=RuntimeConfig)

  @property
  def tag_member(self) -> str:
    """Name of the class member carrying a custom element tag name."""
    return self.config.tag_member


RewriteFunction = Callable[[cst.Decorator, cst.CSTNode, RuleContext], RewriteResult]
NodePredicate = Callable[[cst.CSTNode], bool]


@dataclass(frozen=True)
class Rule:
  """
  Matching-plus-rewrite logic for one family of decorators.

  Attributes:
      kind: Identifier of the rule (usually a `RuleKind` value).
      match_kinds: Every textual spelling of the decorator the rule claims.
          Name resolution is syntactic, so aliases must be listed explicitly.
      applies_to: Predicate on the node kind.
      rewrite: Function lowering a matched node.
  """

  kind: str
  match_kinds: FrozenSet[str]
  applies_to: NodePredicate
  rewrite: RewriteFunction

  def claims(self, name: str) -> bool:
    """Returns True if `name` is one of the spellings this rule handles."""
    return name in self.match_kinds
