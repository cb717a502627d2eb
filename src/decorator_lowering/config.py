"""
Runtime Configuration Store.

Settings are read from the ``[tool.decorator_lowering]`` table of the nearest
``pyproject.toml`` and can be overridden by explicit (CLI) arguments.
"""

import keyword
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from decorator_lowering.enums import FailurePolicy, RuleKind

TOOL_SECTION = "decorator_lowering"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the lowering pipeline.
  """

  tag_member: str = Field("is_", description="Class member holding the custom element tag name.")
  failure_policy: FailurePolicy = Field(
    FailurePolicy.KEEP,
    description="'keep' leaves a decorator in place when its rule fails, 'strip' removes it anyway.",
  )
  rules: List[str] = Field(
    default_factory=lambda: [RuleKind.CUSTOM_ELEMENT.value],
    description="Ordered list of rule kinds applied during a traversal.",
  )
  rule_paths: List[Path] = Field(default_factory=list, description="External directories to scan for rules.")

  @field_validator("tag_member")
  @classmethod
  def validate_tag_member(cls, v: str) -> str:
    """
    Ensures the tag member can be emitted as a Python attribute name.

    Args:
        v (str): The requested member name.

    Returns:
        str: The stripped member name.

    Raises:
        ValueError: If the name is not an identifier or is a reserved keyword.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier() or keyword.iskeyword(v_clean):
      raise ValueError(f"Invalid tag member name: '{v_clean}'. Expected a non-keyword identifier.")
    return v_clean

  @field_validator("rules")
  @classmethod
  def validate_rules(cls, v: List[str]) -> List[str]:
    """Normalizes rule kinds and drops duplicates while keeping order."""
    cleaned = [item.lower().strip() for item in v]
    return list(dict.fromkeys(item for item in cleaned if item))

  @classmethod
  def load(
    cls,
    tag_member: Optional[str] = None,
    failure_policy: Optional[str] = None,
    rules: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        tag_member (Optional[str]): Override for the tag member name.
        failure_policy (Optional[str]): Override for the failure policy.
        rules (Optional[List[str]]): Override for the ordered rule kinds.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        ValueError: If the merged settings fail validation.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    merged: Dict[str, Any] = dict(toml_config)
    if tag_member is not None:
      merged["tag_member"] = tag_member
    if failure_policy is not None:
      merged["failure_policy"] = failure_policy
    if rules is not None:
      merged["rules"] = rules

    raw_paths = merged.pop("rule_paths", [])
    base_dir = toml_dir or Path.cwd()
    merged["rule_paths"] = [(base_dir / Path(p)).resolve() for p in raw_paths]

    try:
      return cls.model_validate(merged)
    except ValidationError as e:
      raise ValueError(f"Configuration validation failed: {e}")


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the start directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        try:
          data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
          raise ValueError(f"Invalid TOML in {toml_path}: {e}")

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
