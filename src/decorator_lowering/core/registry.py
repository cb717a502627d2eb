"""
Rule Registry and Dynamic Loader.

Rules register themselves with the `register_rule` decorator when their
module is imported. The built-in rules live in `decorator_lowering.rules`;
projects can add more by pointing `rule_paths` at directories of Python
files that call `register_rule`. No change to the dispatch engine is needed
to support a new decorator family.

Example::

    @register_rule("tracked", match_kinds=["tracked"], applies_to=is_function_def)
    def lower_tracked(decorator, node, ctx):
      return Unchanged()
"""

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from decorator_lowering.core.rewriter.interface import NodePredicate, RewriteFunction, Rule
from decorator_lowering.enums import RuleKind

logger = logging.getLogger(__name__)

# Modules registering the built-in rules, imported on first registry access.
_BUILTIN_MODULES = ("decorator_lowering.rules.custom_element",)

# Insertion ordered: registration order is the default application order.
_RULES: Dict[str, Rule] = {}
_BUILTINS_LOADED = False


def register_rule(
  kind: Union[str, RuleKind],
  match_kinds: Iterable[str],
  applies_to: NodePredicate,
) -> Callable[[RewriteFunction], RewriteFunction]:
  """
  Decorator registering a rewrite function as a lowering rule.

  Args:
      kind: Unique identifier of the rule. Re-registering a kind replaces it.
      match_kinds: Decorator spellings the rule claims.
      applies_to: Node-kind predicate.
  """
  key = kind.value if isinstance(kind, RuleKind) else str(kind)

  def decorator(func: RewriteFunction) -> RewriteFunction:
    names = frozenset(match_kinds)
    if not names:
      raise ValueError(f"Rule '{key}' must claim at least one decorator name.")
    _RULES[key] = Rule(kind=key, match_kinds=names, applies_to=applies_to, rewrite=func)
    return func

  return decorator


def get_rule(kind: Union[str, RuleKind]) -> Optional[Rule]:
  """
  Retrieves a registered rule by kind, loading the built-in rules on first use.
  """
  if not _BUILTINS_LOADED:
    load_rules()
  key = kind.value if isinstance(kind, RuleKind) else str(kind)
  return _RULES.get(key)


def available_rules() -> List[Rule]:
  """Returns every registered rule in registration order."""
  if not _BUILTINS_LOADED:
    load_rules()
  return list(_RULES.values())


def resolve_rules(kinds: Iterable[str]) -> List[Rule]:
  """
  Maps an ordered list of rule kinds to registered rules.

  Reserved kinds without an implementation and unknown kinds are skipped
  with a warning.
  """
  reserved = {k.value for k in RuleKind}
  resolved = []
  for kind in kinds:
    rule = get_rule(kind)
    if rule:
      resolved.append(rule)
    elif kind in reserved:
      logger.warning("Rule '%s' is reserved but has no registered implementation; skipping.", kind)
    else:
      logger.warning("Unknown rule '%s'; skipping.", kind)
  return resolved


def clear_rules() -> None:
  """Resets the internal rule registry. Primarily for testing."""
  global _BUILTINS_LOADED
  _RULES.clear()
  _BUILTINS_LOADED = False


def load_rules(extra_dirs: Optional[Iterable[Path]] = None) -> int:
  """
  Imports the built-in rules and, optionally, rule files from directories.

  Args:
      extra_dirs: Directories whose `*.py` files are imported.

  Returns:
      int: Number of external modules loaded.
  """
  global _BUILTINS_LOADED

  if not _BUILTINS_LOADED:
    for module_name in _BUILTIN_MODULES:
      module = sys.modules.get(module_name)
      if module is None:
        importlib.import_module(module_name)
      else:
        # Re-run the registrations after clear_rules()
        importlib.reload(module)
    _BUILTINS_LOADED = True

  count = 0
  for directory in extra_dirs or []:
    if directory.is_dir():
      count += _import_from_dir(directory)
    else:
      logger.warning("Rule directory not found: %s", directory)
  return count


def _import_from_dir(directory: Path) -> int:
  """Imports every python file of a directory under a unique module name."""
  count = 0
  for item in sorted(directory.glob("*.py")):
    if item.name == "__init__.py":
      continue

    unique_name = f"decorator_lowering_rule_{item.stem}_{item.stat().st_ino}"
    if unique_name in sys.modules:
      continue

    spec = importlib.util.spec_from_file_location(unique_name, item)
    if not spec or not spec.loader:
      continue

    mod = importlib.util.module_from_spec(spec)
    sys.modules[unique_name] = mod
    try:
      spec.loader.exec_module(mod)
    except Exception:
      del sys.modules[unique_name]
      logger.exception("Failed to load rule module %s", item)
      continue
    count += 1
  return count
