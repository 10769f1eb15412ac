"""
Generator Configuration Store.

Settings are resolved from the nearest `pyproject.toml` (`[tool.autoimpl]`)
and overridden by explicit arguments (CLI flags or library callers).
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from autoimpl.enums import NamingStrategy

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


class GeneratorConfig(BaseModel):
  """
  Configuration container for a generation round.
  """

  class_marker: str = Field("generate_impl", description="Annotation marking an interface for synthesis.")
  function_marker: str = Field("sum_of", description="Annotation marking a function to implement.")
  naming: NamingStrategy = Field(NamingStrategy.DECLARATION, description="How generated class names are derived.")
  require_numeric_types: bool = Field(
    True,
    description="If True, annotated parameter/return types of marked functions must be numeric.",
  )
  warn_non_interface: bool = Field(False, description="If True, log a warning for marked non-interfaces.")
  extension: str = Field("py", description="File extension of generated artifacts.")
  output_dir: Optional[Path] = Field(None, description="Root directory for generated artifacts.")

  @field_validator("class_marker", "function_marker")
  @classmethod
  def validate_marker(cls, v: str) -> str:
    """
    Normalizes marker names (strips a leading '@' and whitespace).

    Raises:
        ValueError: If the name is empty.
    """
    v_clean = v.strip().lstrip("@")
    if not v_clean:
      raise ValueError("Marker annotation names must not be empty.")
    return v_clean

  @field_validator("extension")
  @classmethod
  def validate_extension(cls, v: str) -> str:
    return v.strip().lstrip(".")

  @classmethod
  def load(
    cls,
    class_marker: Optional[str] = None,
    function_marker: Optional[str] = None,
    naming: Optional[str] = None,
    require_numeric_types: Optional[bool] = None,
    warn_non_interface: Optional[bool] = None,
    output_dir: Optional[Path] = None,
    search_path: Optional[Path] = None,
  ) -> "GeneratorConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        class_marker (Optional[str]): Override for the class-level marker name.
        function_marker (Optional[str]): Override for the function-level marker name.
        naming (Optional[str]): Override for the naming strategy.
        require_numeric_types (Optional[bool]): Override for the numeric type check.
        warn_non_interface (Optional[bool]): Override for non-interface warnings.
        output_dir (Optional[Path]): Override for the output root.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        GeneratorConfig: The fully resolved configuration object.
    """
    toml_config, toml_dir = _load_toml_settings(search_path or Path.cwd())

    values: Dict[str, Any] = {k: v for k, v in toml_config.items() if k in cls.model_fields}

    overrides = {
      "class_marker": class_marker,
      "function_marker": function_marker,
      "naming": naming,
      "require_numeric_types": require_numeric_types,
      "warn_non_interface": warn_non_interface,
      "output_dir": output_dir,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    # Relative output paths in TOML are anchored at the file that declared them
    if output_dir is None and "output_dir" in values and toml_dir:
      values["output_dir"] = (toml_dir / Path(values["output_dir"])).resolve()

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

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
        data = tomllib.load(f)
      return data.get("tool", {}).get("autoimpl", {}), parent

  return {}, None
