"""
Enumerations for decorator-lowering.

This module defines the standard enumerations shared by the rewriter,
the rule registry and the diagnostics layer.
"""

from enum import Enum


class RuleKind(str, Enum):
  """
  Identifiers of the decorator families a rule can lower.

  Only `CUSTOM_ELEMENT` ships with an implementation. The remaining members
  are reserved names for rules that follow the same contract and can be
  registered by extensions.
  """

  CUSTOM_ELEMENT = "custom_element"
  PROPERTY = "property"
  OBSERVE = "observe"
  COMPUTED = "computed"
  LISTEN = "listen"
  QUERY = "query"
  QUERY_ALL = "query_all"


class ErrorKind(str, Enum):
  """
  Node-scoped failure categories reported by rules.
  """

  MISSING_ARGUMENT = "MissingArgumentError"
  UNRESOLVED_TAG_NAME = "UnresolvedTagNameError"
  AMBIGUOUS_SOURCE = "AmbiguousSourceError"


class Severity(str, Enum):
  """Severity attached to a reported diagnostic."""

  INFO = "info"
  WARNING = "warning"
  ERROR = "error"


class FailurePolicy(str, Enum):
  """
  What the dispatch engine does with claimed decorators when a rule fails.
  """

  KEEP = "keep"  # restore decorators, removal only committed on success
  STRIP = "strip"  # drop them anyway and only report
