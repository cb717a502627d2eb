"""
decorator-lowering Package.

Rewrites decorator-driven declarations into plain code. Classes marked with
``@customElement('x-foo')`` (or one of its aliases) lose the decorator and
gain an explicit tag-name member.

Usage
-----

.. code-block:: python

    import decorator_lowering as dl
    print(dl.lower("@customElement('x-foo')\\nclass XFoo(HTMLElement):\\n    pass\\n"))

Advanced Usage
^^^^^^^^^^^^^^

.. code-block:: python

    from decorator_lowering import LoweringEngine, RuntimeConfig

    engine = LoweringEngine(config=RuntimeConfig(tag_member="tag_name"))
    res = engine.run(source)
    for diagnostic in res.diagnostics:
        print(diagnostic.render())
"""

from typing import Optional

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.core.conversion_result import ConversionResult
from decorator_lowering.core.engine import LoweringEngine

__version__ = "0.1.0"


def lower(code: str, tag_member: Optional[str] = None, failure_policy: Optional[str] = None) -> str:
  """
  Lowers the decorators of a string of Python code.

  Args:
      code: Input source.
      tag_member: Override for the tag member name (default ``is_``).
      failure_policy: ``keep`` or ``strip`` (see `RuntimeConfig`).

  Returns:
      The rewritten source.

  Raises:
      ValueError: If the input cannot be parsed or the overrides are invalid.
  """
  overrides = {}
  if tag_member is not None:
    overrides["tag_member"] = tag_member
  if failure_policy is not None:
    overrides["failure_policy"] = failure_policy

  engine = LoweringEngine(config=RuntimeConfig.model_validate(overrides))
  result = engine.run(code)
  if not result.success:
    raise ValueError(f"Lowering failed: {'; '.join(result.errors)}")
  return result.code


__all__ = ["ConversionResult", "LoweringEngine", "RuntimeConfig", "lower", "__version__"]
