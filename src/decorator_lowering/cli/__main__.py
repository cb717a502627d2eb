"""
Main Entry Point for the decorator-lowering CLI.

Parses arguments and dispatches to the handlers in
``decorator_lowering.cli.handlers``.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from decorator_lowering import __version__
from decorator_lowering.cli import handlers
from decorator_lowering.enums import FailurePolicy


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="decorator-lowering: rewrite marker decorators into plain code")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Lower decorators in a Python file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  cmd_conv.add_argument("--out", type=Path, help="Output destination (file or dir). Prints to stdout if omitted.")
  cmd_conv.add_argument("--tag-member", default=None, help="Name of the tag name member (default: from toml, 'is_')")
  cmd_conv.add_argument(
    "--on-failure",
    choices=[p.value for p in FailurePolicy],
    default=None,
    help="Keep or strip a decorator whose rule failed (default: from toml, 'keep')",
  )
  cmd_conv.add_argument(
    "--rules",
    nargs="+",
    default=None,
    help="Ordered rule kinds to apply (default: from toml, 'custom_element')",
  )
  cmd_conv.add_argument(
    "--check",
    action="store_true",
    help="Exit with status 1 if any rule reported an error",
  )

  # --- Command: RULES ---
  subparsers.add_parser("rules", help="List registered rules and the decorators they claim")

  args = parser.parse_args(argv)

  if args.command == "convert":
    return handlers.handle_convert(
      input_path=args.path,
      output_path=args.out,
      tag_member=args.tag_member,
      failure_policy=args.on_failure,
      rules=args.rules,
      check=args.check,
    )

  elif args.command == "rules":
    return handlers.handle_rules()

  return 1


if __name__ == "__main__":
  raise SystemExit(main())
