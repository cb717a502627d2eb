"""
Lowering Engine.

Wires the external collaborators around the rewriter: LibCST parses the
source, the `RewriterPipeline` lowers the decorators, and the module is
printed back. Parse failures are returned as an unsuccessful
`ConversionResult`; rule failures are node-scoped and leave a best-effort
result with the errors listed.
"""

import logging
from typing import Optional

import libcst as cst

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.core.conversion_result import ConversionResult
from decorator_lowering.core.diagnostics import DiagnosticCollector
from decorator_lowering.core.rewriter.pipeline import RewriterPipeline

logger = logging.getLogger(__name__)


class LoweringEngine:
  """
  Runs the full parse -> lower -> print cycle on source strings.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, pipeline: Optional[RewriterPipeline] = None) -> None:
    """
    Args:
        config: Runtime configuration. Defaults are used if omitted.
        pipeline: Pre-built pipeline; built from `config` if omitted.
    """
    self.config = config or RuntimeConfig()
    self.pipeline = pipeline or RewriterPipeline(config=self.config)

  def parse(self, code: str) -> cst.Module:
    """
    Parses source string into a LibCST Module.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(code)

  def to_source(self, tree: cst.Module) -> str:
    """Converts CST back to source string."""
    return tree.code

  def run(self, code: str) -> ConversionResult:
    """
    Executes the lowering pipeline on a source string.

    Args:
        code (str): The input source string.

    Returns:
        ConversionResult: Transformed code, errors and diagnostics.
    """
    try:
      tree = self.parse(code)
    except cst.ParserSyntaxError as e:
      return ConversionResult(code=code, errors=[f"Parse Error: {e}"], success=False)

    diagnostics = DiagnosticCollector()
    tree = self.pipeline.transform(tree, diagnostics)
    logger.debug("Lowered module with %d diagnostics", len(diagnostics.records))

    return ConversionResult(
      code=self.to_source(tree),
      errors=[d.render() for d in diagnostics.errors],
      diagnostics=diagnostics.records,
      success=True,
    )
