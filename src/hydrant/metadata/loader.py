"""
Manifest Loader.

Reads the JSON manifest emitted by the component analysis stage and groups the
components by the module that declares them.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from hydrant.metadata.schema import ComponentManifest, ComponentMetadata

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
  """Raised when a manifest file cannot be read or does not match the schema."""


def load_manifest(path: Path) -> ComponentManifest:
  """
  Loads and validates a component manifest.

  Args:
      path: Location of the JSON manifest.

  Returns:
      ComponentManifest: The validated manifest.

  Raises:
      ManifestError: If the file is missing, not JSON, or fails validation.
  """
  try:
    raw = json.loads(path.read_text(encoding="utf-8"))
  except OSError as e:
    raise ManifestError(f"Cannot read manifest {path}: {e}") from e
  except json.JSONDecodeError as e:
    raise ManifestError(f"Manifest {path} is not valid JSON: {e}") from e

  try:
    manifest = ComponentManifest.model_validate(raw)
  except ValidationError as e:
    raise ManifestError(f"Manifest {path} failed validation: {e}") from e

  logger.debug("Loaded %d component(s) from %s", len(manifest.components), path)
  return manifest


def group_by_source(
  components: List[ComponentMetadata], base_dir: Optional[Path] = None
) -> Dict[Path, List[ComponentMetadata]]:
  """
  Groups components by the module file declaring them.

  Relative ``source_path`` values are resolved against ``base_dir``; the
  returned metadata carries the resolved path so it matches the file name the
  module is transformed under.

  Args:
      components: Components to group.
      base_dir: Directory relative paths are anchored to.

  Returns:
      Dict[Path, List[ComponentMetadata]]: Components per module, in manifest order.
  """
  grouped: Dict[Path, List[ComponentMetadata]] = {}
  for cmp in components:
    path = Path(cmp.source_path)
    if base_dir is not None and not path.is_absolute():
      path = (base_dir / path).resolve()
      cmp = cmp.model_copy(update={"source_path": str(path)})
    grouped.setdefault(path, []).append(cmp)
  return grouped
