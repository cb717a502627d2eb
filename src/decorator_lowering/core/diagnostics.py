"""
Diagnostics Sink.

Rules never print. Everything they want a human to see (a resolved tag name,
a missing decorator argument) is reported to a sink as a `Diagnostic`
anchored to the node it concerns. The `DiagnosticCollector` accumulates the
records during a traversal so they can be inspected, returned in a
`ConversionResult`, or logged once the traversal has completed.
"""

import logging
from typing import List, Optional, Protocol

from pydantic import BaseModel, Field

from decorator_lowering.enums import ErrorKind, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
  Severity.INFO: logging.INFO,
  Severity.WARNING: logging.WARNING,
  Severity.ERROR: logging.ERROR,
}


class NodeLocation(BaseModel):
  """
  Position of a node in the input source.

  `line` is 1-based and `column` 0-based. Both are None for nodes that were
  synthesized during the rewrite and have no source position.
  """

  node_type: str = Field(..., description="LibCST node class name (e.g. 'ClassDef').")
  name: Optional[str] = Field(None, description="Declared name of the node, if it has one.")
  line: Optional[int] = Field(None, description="1-based start line.")
  column: Optional[int] = Field(None, description="0-based start column.")

  def __str__(self) -> str:
    label = f"{self.node_type} '{self.name}'" if self.name else self.node_type
    if self.line is None:
      return label
    return f"{label} at {self.line}:{self.column}"


class Diagnostic(BaseModel):
  """
  A single node-scoped message produced during a traversal.
  """

  location: NodeLocation
  message: str
  severity: Severity = Severity.INFO
  kind: Optional[ErrorKind] = Field(None, description="Error category for warnings and errors.")
  rule: Optional[str] = Field(None, description="Kind of the rule that produced the message.")
  decorator: Optional[str] = Field(None, description="Resolved name of the decorator involved.")
  value: Optional[str] = Field(None, description="Payload, e.g. the source text of a resolved tag name.")

  def render(self) -> str:
    """Formats the diagnostic as a single human-readable line."""
    prefix = f"{self.kind.value}: " if self.kind else ""
    origin = f" (@{self.decorator})" if self.decorator else ""
    return f"{self.location}{origin}: {prefix}{self.message}"


class DiagnosticsSink(Protocol):
  """
  Consumer interface the dispatch engine reports into.
  """

  def report(self, location: NodeLocation, message: str, **fields) -> None: ...


class DiagnosticCollector:
  """
  Sink that keeps every reported diagnostic in arrival order.
  """

  def __init__(self) -> None:
    self.records: List[Diagnostic] = []

  def report(self, location: NodeLocation, message: str, **fields) -> None:
    """
    Records a diagnostic.

    Args:
        location: Where the diagnostic applies.
        message: Human readable text.
        **fields: Remaining `Diagnostic` fields (severity, kind, rule, decorator, value).
    """
    self.records.append(Diagnostic(location=location, message=message, **fields))

  @property
  def errors(self) -> List[Diagnostic]:
    """Diagnostics with ERROR severity."""
    return [d for d in self.records if d.severity == Severity.ERROR]

  @property
  def warnings(self) -> List[Diagnostic]:
    """Diagnostics with WARNING severity."""
    return [d for d in self.records if d.severity == Severity.WARNING]

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0

  def emit(self, target: Optional[logging.Logger] = None) -> None:
    """
    Logs every accumulated diagnostic, at a level matching its severity.

    Args:
        target: Logger to write to. Defaults to this module's logger.
    """
    out = target or logger
    for diagnostic in self.records:
      out.log(_LOG_LEVELS[diagnostic.severity], diagnostic.render(), extra={"markup": False})
