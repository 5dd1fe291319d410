"""
Import Augmenter Package.

Provides the ``ImportAugmenter``, which idempotently adds the hydration
runtime imports a rewritten component class depends on.
"""

from hydrant.core.import_fixer.augmenter import (
  ImportAugmenter,
  RuntimeSpecifier,
  runtime_specifiers,
)
from hydrant.core.import_fixer.bindings import ImportBindings, scan_import_bindings

__all__ = [
  "ImportAugmenter",
  "ImportBindings",
  "RuntimeSpecifier",
  "runtime_specifiers",
  "scan_import_bindings",
]
