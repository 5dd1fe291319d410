"""
Runtime Configuration Store.

Defines the options controlling a hydration transform (``CompileOptions``) and
the outer configuration used by the CLI (``RuntimeConfig``). Values are read
from the ``[tool.hydrant]`` table of the nearest ``pyproject.toml`` and may be
overridden by explicit arguments.
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hydrant.enums import ModuleFormat

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_RUNTIME_MODULE = "hydrate_runtime"
DEFAULT_RUNTIME_HELPERS = ["register_instance", "create_event", "get_element"]

_VERSION_RE = re.compile(r"^\d+\.\d+$")


class CompileOptions(BaseModel):
  """
  Options handed to the Source Compiler Engine for one module.
  """

  model_config = ConfigDict(frozen=True)

  module_format: ModuleFormat = Field(ModuleFormat.NAMED, description="Import style for runtime helpers.")
  target_version: Optional[str] = Field(
    None,
    description="Python grammar version used to parse the module (e.g. '3.8'). None uses the running interpreter.",
  )
  runtime_module: str = Field(DEFAULT_RUNTIME_MODULE, description="Module providing the hydration runtime helpers.")
  runtime_helpers: List[str] = Field(
    default_factory=lambda: list(DEFAULT_RUNTIME_HELPERS),
    description="Helper names imported from the runtime module, in insertion order.",
  )
  client_bases: List[str] = Field(
    default_factory=lambda: ["HTMLElement"],
    description="Base classes that only make sense in a browser and are dropped from hydrated classes.",
  )
  bootstrap_decorators: List[str] = Field(
    default_factory=lambda: ["custom_element", "component"],
    description="Class decorators performing client-side registration, dropped from hydrated classes.",
  )
  file_name: Optional[str] = Field(None, description="Path of the module being transformed.")

  @field_validator("target_version")
  @classmethod
  def validate_target_version(cls, v: Optional[str]) -> Optional[str]:
    """
    Ensures the target version looks like ``MAJOR.MINOR``.

    Raises:
        ValueError: If the version string is malformed.
    """
    if v is None:
      return v
    v_clean = v.strip()
    if not _VERSION_RE.match(v_clean):
      raise ValueError(f"Invalid target version '{v}'. Expected 'MAJOR.MINOR', e.g. '3.8'.")
    return v_clean

  @field_validator("runtime_helpers")
  @classmethod
  def validate_helpers(cls, v: List[str]) -> List[str]:
    """Rejects helper lists that would import the same name twice."""
    if len(set(v)) != len(v):
      raise ValueError(f"Duplicate runtime helpers: {v}")
    return v


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the CLI and batch runs.
  """

  compile_options: CompileOptions = Field(default_factory=CompileOptions)
  manifest: Optional[Path] = Field(None, description="JSON manifest describing the components of the build.")
  max_workers: int = Field(4, ge=1, description="Worker threads used for concurrent module transforms.")

  @classmethod
  def load(
    cls,
    module_format: Optional[str] = None,
    target_version: Optional[str] = None,
    manifest: Optional[Path] = None,
    max_workers: Optional[int] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        module_format: Override for the import style ('named' or 'namespace').
        target_version: Override for the parse grammar version.
        manifest: Override for the component manifest path.
        max_workers: Override for the worker count.
        search_path: Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, toml_dir = _find_tool_table(search_path or Path.cwd())

    compile_settings: Dict[str, Any] = {
      key: toml_config[key] for key in CompileOptions.model_fields if key in toml_config and key != "file_name"
    }
    if module_format is not None:
      compile_settings["module_format"] = module_format
    if target_version is not None:
      compile_settings["target_version"] = target_version

    final_manifest = manifest
    if final_manifest is None and "manifest" in toml_config:
      final_manifest = Path(toml_config["manifest"])
      if toml_dir and not final_manifest.is_absolute():
        final_manifest = (toml_dir / final_manifest).resolve()

    final_workers = max_workers if max_workers is not None else toml_config.get("max_workers", 4)

    return cls(
      compile_options=CompileOptions(**compile_settings),
      manifest=final_manifest,
      max_workers=final_workers,
    )


def _find_tool_table(start_dir: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Returns ``[tool.hydrant]`` from the closest ``pyproject.toml`` at or above ``start_dir``.

  Only the closest file is considered, even if it has no ``hydrant`` table.
  An unreadable or malformed file yields an empty table.

  Returns:
      Tuple[Dict, Optional[Path]]: The table and the directory holding the file
      (None when no file was found).
  """
  here = start_dir.resolve()
  for directory in (here, *here.parents):
    candidate = directory / "pyproject.toml"
    if not candidate.is_file():
      continue
    try:
      data = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
      return {}, None
    return data.get("tool", {}).get("hydrant", {}), directory
  return {}, None
