"""
Convert Command Handler.

This module implements the logic for the `decorator-lowering convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides, external rule dirs).
2. Lowering of a single file or every ``*.py`` file of a directory.
3. Output writing and the diagnostics report.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from decorator_lowering.config import RuntimeConfig
from decorator_lowering.core.conversion_result import ConversionResult
from decorator_lowering.core.engine import LoweringEngine
from decorator_lowering.enums import Severity
from decorator_lowering.utils.console import console, log_error, log_info, log_success, log_warning


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  tag_member: Optional[str] = None,
  failure_policy: Optional[str] = None,
  rules: Optional[List[str]] = None,
  check: bool = False,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Path to the source file or directory.
      output_path: Where the generated code is written. Required for directories;
          a single file is printed to stdout when omitted.
      tag_member: Override for the tag member name.
      failure_policy: Override for the failure policy ('keep' / 'strip').
      rules: Override for the ordered rule kinds.
      check: If True, rule errors make the command fail.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = RuntimeConfig.load(
      tag_member=tag_member,
      failure_policy=failure_policy,
      rules=rules,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValueError as e:
    log_error(escape(str(e)))
    return 1

  engine = LoweringEngine(config=config)
  batch_results: Dict[str, ConversionResult] = {}

  if input_path.is_file():
    result = _convert_single_file(input_path, output_path, engine)
    batch_results[input_path.name] = result

  else:
    if not output_path:
      log_error("Directory conversion requires --out destination directory.")
      return 1

    py_files = sorted(input_path.rglob("*.py"))
    if not py_files:
      log_warning(f"No .py files found in {input_path}")
      return 0

    log_info(f"Processing {len(py_files)} files from {input_path}...")

    for src_file in py_files:
      rel_path = src_file.relative_to(input_path)
      batch_results[str(rel_path)] = _convert_single_file(src_file, output_path / rel_path, engine)

  _print_report(batch_results)

  if any(not r.success for r in batch_results.values()):
    return 1
  if check and any(r.has_errors for r in batch_results.values()):
    return 1
  return 0


def _convert_single_file(input_path: Path, output_path: Optional[Path], engine: LoweringEngine) -> ConversionResult:
  """
  Lowers one file and writes (or prints) the result.

  Args:
      input_path: Source file path.
      output_path: Destination file path, or None for stdout.
      engine: The configured engine.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(escape(f"Failed to read {input_path}: {e}"))
    return ConversionResult(success=False, errors=[str(e)])

  result = engine.run(code)
  if not result.success:
    return result

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.code, encoding="utf-8")
    log_success(f"Lowered: [path]{input_path}[/path] -> [path]{output_path}[/path]")
  else:
    print(result.code, end="")

  return result


def _print_report(results: Dict[str, ConversionResult]) -> None:
  """
  Renders warnings and errors of a batch as a table.

  Args:
      results: Dictionary mapping filenames to conversion results.
  """
  table = Table(title="Lowering Report")
  table.add_column("File", style="cyan")
  table.add_column("Location")
  table.add_column("Severity", justify="center")
  table.add_column("Message", style="red")

  rows = 0
  for filename, res in results.items():
    if not res.success:
      table.add_row(filename, "-", "failed", escape("; ".join(res.errors)))
      rows += 1
      continue
    for diagnostic in res.diagnostics:
      if diagnostic.severity == Severity.INFO:
        continue
      kind = f"{diagnostic.kind.value}: " if diagnostic.kind else ""
      table.add_row(filename, str(diagnostic.location), diagnostic.severity.value, escape(f"{kind}{diagnostic.message}"))
      rows += 1

  if rows == 0:
    log_success(f"Batch Complete: {len(results)} file(s) lowered without issues.")
    return

  console.print(table)
