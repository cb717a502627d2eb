"""
Orchestration of the lowering rules.

This module provides the ``RewriterPipeline``, which holds an ordered set of
rules and applies all of them to a module in one traversal.
"""

import logging
from typing import List, Optional, Sequence

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.core.diagnostics import DiagnosticCollector
from decorator_lowering.core.registry import load_rules, resolve_rules
from decorator_lowering.core.rewriter.dispatch import process
from decorator_lowering.core.rewriter.interface import Rule, RuleContext

logger = logging.getLogger(__name__)


class RewriterPipeline:
  """
  Applies a registry of rules to LibCST modules.

  The pipeline keeps no state between `transform` calls: the same input and
  rules always produce the same output.
  """

  def __init__(self, rules: Optional[Sequence[Rule]] = None, config: Optional[RuntimeConfig] = None) -> None:
    """
    Initializes the pipeline.

    Args:
        rules: Ordered rules. Resolved from `config.rules` through the
            registry when omitted.
        config: Runtime configuration handed to every rule.
    """
    self.config = config or RuntimeConfig()
    if rules is None:
      load_rules(self.config.rule_paths)
      rules = resolve_rules(self.config.rules)
    self.rules: List[Rule] = list(rules)

  def transform(self, module: cst.Module, diagnostics: Optional[DiagnosticCollector] = None) -> cst.Module:
    """
    Lowers every claimed decorator in `module`.

    Args:
        module: The parsed source.
        diagnostics: Sink for notes and failures. When omitted, the
            diagnostics are logged once the traversal has finished.

    Returns:
        The rewritten module (the same object if nothing was lowered).
    """
    sink = diagnostics if diagnostics is not None else DiagnosticCollector()

    wrapper = MetadataWrapper(module, unsafe_skip_copy=True)
    positions = wrapper.resolve(PositionProvider)

    ctx = RuleContext(config=self.config)
    result = process(wrapper.module, self.rules, ctx, sink, positions)

    if diagnostics is None:
      sink.emit(logger)

    return result
