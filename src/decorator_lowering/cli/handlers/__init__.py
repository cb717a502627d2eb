"""
Command handlers invoked by the CLI entry point.
"""

from decorator_lowering.cli.handlers.convert import handle_convert
from decorator_lowering.cli.handlers.rules import handle_rules

__all__ = ["handle_convert", "handle_rules"]
