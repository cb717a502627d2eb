"""
Tests for the LoweringEngine (parse -> lower -> print).
"""

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.core.engine import LoweringEngine
from decorator_lowering.enums import Severity


def test_run_success():
  engine = LoweringEngine()
  res = engine.run("@customElement('x-foo')\nclass XFoo(HTMLElement):\n    pass\n")

  assert res.success
  assert not res.has_errors
  assert "return 'x-foo'" in res.code
  assert [d.value for d in res.diagnostics if d.severity == Severity.INFO] == ["'x-foo'"]


def test_rule_errors_keep_best_effort_output():
  engine = LoweringEngine()
  res = engine.run("@customElement('x-a')\nclass A:\n    pass\n\n@customElement()\nclass B:\n    pass\n")

  assert res.success
  assert res.has_errors
  assert len(res.errors) == 1
  assert "MissingArgumentError" in res.errors[0]
  assert "return 'x-a'" in res.code
  assert "@customElement()\nclass B:" in res.code


def test_parse_error_returns_input():
  source = "class (:\n"
  res = LoweringEngine().run(source)

  assert not res.success
  assert res.code == source
  assert res.errors[0].startswith("Parse Error:")


def test_config_is_forwarded():
  engine = LoweringEngine(config=RuntimeConfig(tag_member="tag"))
  res = engine.run("@customElement('x-a')\nclass A:\n    pass\n")

  assert "def tag():" in res.code
