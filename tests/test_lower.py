"""
Tests for the top-level `lower` helper.
"""

import pytest

import decorator_lowering as dl


def test_lower_string():
  out = dl.lower("@customElement('x-foo')\nclass XFoo:\n    pass\n")
  assert "def is_():" in out
  assert "@customElement" not in out


def test_lower_overrides():
  out = dl.lower("@customElement()\nclass XFoo:\n    pass\n", failure_policy="strip")
  assert out == "class XFoo:\n    pass\n"


def test_lower_rejects_invalid_source():
  with pytest.raises(ValueError, match="Parse Error"):
    dl.lower("def (:\n")


def test_lower_rejects_invalid_tag_member():
  with pytest.raises(ValueError):
    dl.lower("x = 1\n", tag_member="is")
