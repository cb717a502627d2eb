"""
Tests for the `convert` CLI command.

Verifies:
1. Single files are printed to stdout or written to --out.
2. Directories are mirrored into the --out directory.
3. Overrides (--tag-member, --on-failure) reach the engine.
4. Exit codes for missing input, parse errors and --check.
"""

import io
from textwrap import dedent

import pytest
from rich.console import Console

from decorator_lowering.cli.__main__ import main
from decorator_lowering.utils.console import reset_console, set_console

ELEMENT_SRC = dedent(
  """\
  @customElement('x-foo')
  class XFoo:
      pass
  """
)

BROKEN_SRC = dedent(
  """\
  @customElement()
  class XBar:
      pass
  """
)


@pytest.fixture
def log_buffer():
  """Routes rich/logging output into a buffer, away from stdout."""
  buffer = io.StringIO()
  set_console(Console(file=buffer, width=200, force_terminal=False))
  yield buffer
  reset_console()


def test_single_file_to_stdout(tmp_path, capsys, log_buffer):
  src = tmp_path / "element.py"
  src.write_text(ELEMENT_SRC, encoding="utf-8")

  exit_code = main(["convert", str(src)])

  out = capsys.readouterr().out
  assert exit_code == 0
  assert "@customElement" not in out
  assert "def is_():" in out
  assert "return 'x-foo'" in out
  assert "Batch Complete" in log_buffer.getvalue()


def test_single_file_to_out(tmp_path, log_buffer):
  src = tmp_path / "element.py"
  src.write_text(ELEMENT_SRC, encoding="utf-8")
  dest = tmp_path / "build" / "element.py"

  exit_code = main(["convert", str(src), "--out", str(dest), "--tag-member", "tag"])

  assert exit_code == 0
  lowered = dest.read_text(encoding="utf-8")
  assert "def tag():" in lowered
  assert "Lowered:" in log_buffer.getvalue()


def test_directory_is_mirrored(tmp_path, log_buffer):
  src_dir = tmp_path / "src"
  (src_dir / "pkg").mkdir(parents=True)
  (src_dir / "a.py").write_text(ELEMENT_SRC, encoding="utf-8")
  (src_dir / "pkg" / "b.py").write_text("x = 1\n", encoding="utf-8")
  out_dir = tmp_path / "out"

  exit_code = main(["convert", str(src_dir), "--out", str(out_dir)])

  assert exit_code == 0
  assert "return 'x-foo'" in (out_dir / "a.py").read_text(encoding="utf-8")
  assert (out_dir / "pkg" / "b.py").read_text(encoding="utf-8") == "x = 1\n"


def test_directory_requires_out(tmp_path, log_buffer):
  (tmp_path / "a.py").write_text(ELEMENT_SRC, encoding="utf-8")

  assert main(["convert", str(tmp_path)]) == 1
  assert "requires --out" in log_buffer.getvalue()


def test_missing_input(tmp_path, log_buffer):
  assert main(["convert", str(tmp_path / "nope.py")]) == 1
  assert "Input not found" in log_buffer.getvalue()


def test_parse_error_fails(tmp_path, capsys, log_buffer):
  src = tmp_path / "bad.py"
  src.write_text("class (:\n", encoding="utf-8")

  assert main(["convert", str(src)]) == 1
  assert capsys.readouterr().out == ""
  assert "Lowering Report" in log_buffer.getvalue()


def test_rule_errors_are_reported(tmp_path, capsys, log_buffer):
  src = tmp_path / "broken.py"
  src.write_text(BROKEN_SRC, encoding="utf-8")

  exit_code = main(["convert", str(src)])

  assert exit_code == 0
  assert capsys.readouterr().out == BROKEN_SRC
  report = log_buffer.getvalue()
  assert "Lowering Report" in report
  assert "MissingArgumentError" in report


def test_check_turns_rule_errors_into_failure(tmp_path, log_buffer):
  src = tmp_path / "broken.py"
  src.write_text(BROKEN_SRC, encoding="utf-8")

  assert main(["convert", str(src), "--check"]) == 1


def test_strip_policy(tmp_path, capsys, log_buffer):
  src = tmp_path / "broken.py"
  src.write_text(BROKEN_SRC, encoding="utf-8")

  main(["convert", str(src), "--on-failure", "strip"])

  assert capsys.readouterr().out == "class XBar:\n    pass\n"


def test_invalid_tag_member_from_cli(tmp_path, log_buffer):
  src = tmp_path / "element.py"
  src.write_text(ELEMENT_SRC, encoding="utf-8")

  assert main(["convert", str(src), "--tag-member", "is"]) == 1
  assert "Configuration validation failed" in log_buffer.getvalue()


def test_toml_settings_apply(tmp_path, capsys, log_buffer):
  (tmp_path / "pyproject.toml").write_text('[tool.decorator_lowering]\ntag_member = "name"\n', encoding="utf-8")
  src = tmp_path / "element.py"
  src.write_text(ELEMENT_SRC, encoding="utf-8")

  assert main(["convert", str(src)]) == 0
  assert "def name():" in capsys.readouterr().out
