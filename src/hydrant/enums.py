"""
Enumerations for hydrant.

This module defines the closed value sets shared across the pipeline:
diagnostic severities and categories, import emission styles and
component encapsulation modes.
"""

from enum import Enum


class Severity(str, Enum):
  """
  Severity of a reported build condition.

  Only ``ERROR`` contributes to ``BuildContext.has_error``.
  """

  ERROR = "error"
  WARNING = "warning"


class DiagnosticCategory(str, Enum):
  """
  Tag identifying which stage produced a diagnostic.
  """

  BUILD = "build"  # Exceptions converted at the pipeline boundary
  HYDRATE = "hydrate"  # Hydration rewrite pass
  IMPORTS = "imports"  # Import augmentation


class ModuleFormat(str, Enum):
  """
  Style used when the Import Augmenter emits runtime helper imports.

  NAMED:     ``from hydrate_runtime import register_instance``
  NAMESPACE: ``import hydrate_runtime`` and ``hydrate_runtime.register_instance(...)``
  """

  NAMED = "named"
  NAMESPACE = "namespace"


class Encapsulation(str, Enum):
  """
  Style encapsulation of a component's rendered markup.
  """

  NONE = "none"
  SCOPED = "scoped"
  SHADOW = "shadow"
