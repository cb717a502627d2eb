"""
Data structures representing the output of the lowering engine.
"""

from typing import List

from pydantic import BaseModel, Field

from decorator_lowering.core.diagnostics import Diagnostic


class ConversionResult(BaseModel):
  """
  Container for the results of a single lowering job.
  """

  code: str = Field(default="", description="The generated source code.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Every node-scoped diagnostic, in order.")
  success: bool = Field(
    default=True,
    description="False only when the input could not be processed at all (e.g. a syntax error).",
  )

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0
