"""
Import Augmenter.

Ensures a module imports the runtime helpers a hydrated class calls. The
operation is idempotent: a helper that is already bound by a top-level import
(under any alias, or through a namespace import of its module) is reused, and
nothing is added for it.

Missing helpers are inserted at the top of the module, after the docstring and
any ``from __future__`` imports, in the order they were requested.
"""

import logging
from typing import Dict, List, Sequence

import libcst as cst
from pydantic import BaseModel, ConfigDict

from hydrant.core.import_fixer.bindings import ImportBindings, scan_import_bindings
from hydrant.core.import_fixer.utils import create_dotted_name, header_insert_index
from hydrant.enums import ModuleFormat

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "_hydrate_"


class RuntimeSpecifier(BaseModel):
  """
  One required import: ``name`` exported by ``module``.
  """

  model_config = ConfigDict(frozen=True)

  module: str
  name: str

  @property
  def key(self) -> str:
    """Stable identifier, e.g. ``hydrate_runtime:register_instance``."""
    return f"{self.module}:{self.name}"


def runtime_specifiers(module: str, names: Sequence[str]) -> List[RuntimeSpecifier]:
  """Builds specifiers for several names exported by the same module."""
  return [RuntimeSpecifier(module=module, name=name) for name in names]


class ImportAugmenter:
  """
  Adds missing runtime imports to a module and reports how to reference them.

  Attributes:
      references (Dict[str, str]): After ``ensure_imports``, maps each
          specifier key to the source text that refers to it in the module.
      warnings (List[str]): Non-fatal issues found during the last run.
  """

  def __init__(
    self,
    specifiers: Sequence[RuntimeSpecifier],
    module_format: ModuleFormat = ModuleFormat.NAMED,
  ) -> None:
    self.specifiers = list(specifiers)
    self.module_format = module_format
    self.references: Dict[str, str] = {}
    self.warnings: List[str] = []

  def ensure_imports(self, module: cst.Module) -> cst.Module:
    """
    Ensures every specifier is imported at the top level.

    Args:
        module: The module to augment.

    Returns:
        cst.Module: The module, with new imports inserted if any were missing.
    """
    self.references = {}
    self.warnings = []

    bindings = scan_import_bindings(module)
    missing: List[RuntimeSpecifier] = []
    for req in self.specifiers:
      reference = bindings.resolve(req.module, req.name)
      if reference:
        self.references[req.key] = reference
      else:
        missing.append(req)

    if not missing:
      return module

    if self.module_format == ModuleFormat.NAMESPACE:
      injections = self._namespace_imports(missing, bindings)
    else:
      injections = self._named_imports(missing, bindings)

    body = list(module.body)
    insert_idx = header_insert_index(body)
    logger.debug("Injecting %d runtime import statement(s)", len(injections))
    return module.with_changes(body=body[:insert_idx] + injections + body[insert_idx:])

  def _named_imports(self, missing: List[RuntimeSpecifier], bindings: ImportBindings) -> List[cst.SimpleStatementLine]:
    """Builds ``from module import a, b`` statements, one per module, in first-seen order."""
    taken = bindings.local_names
    grouped: Dict[str, List[cst.ImportAlias]] = {}

    for req in missing:
      local = req.name
      asname = None
      if req.name in taken:
        local = f"{ALIAS_PREFIX}{req.name}"
        asname = cst.AsName(name=cst.Name(local))
        self.warnings.append(f"'{req.name}' is already defined in this module; importing {req.key} as '{local}'")
      taken.add(local)
      grouped.setdefault(req.module, []).append(cst.ImportAlias(name=cst.Name(req.name), asname=asname))
      self.references[req.key] = local

    return [
      cst.SimpleStatementLine(body=[cst.ImportFrom(module=create_dotted_name(mod), names=aliases)])
      for mod, aliases in grouped.items()
    ]

  def _namespace_imports(
    self, missing: List[RuntimeSpecifier], bindings: ImportBindings
  ) -> List[cst.SimpleStatementLine]:
    """Builds ``import module`` statements, one per module, in first-seen order."""
    prefixes: Dict[str, str] = {}
    statements: List[cst.SimpleStatementLine] = []

    for req in missing:
      if req.module not in prefixes:
        root = req.module.split(".")[0]
        asname = None
        prefix = req.module
        if root in bindings.local_names and not bindings.binds_module_root(root):
          prefix = ALIAS_PREFIX + req.module.replace(".", "_")
          asname = cst.AsName(name=cst.Name(prefix))
          self.warnings.append(f"'{root}' is already defined in this module; importing {req.module} as '{prefix}'")
        prefixes[req.module] = prefix
        statements.append(
          cst.SimpleStatementLine(
            body=[cst.Import(names=[cst.ImportAlias(name=create_dotted_name(req.module), asname=asname)])]
          )
        )
      self.references[req.key] = f"{prefixes[req.module]}.{req.name}"

    return statements
