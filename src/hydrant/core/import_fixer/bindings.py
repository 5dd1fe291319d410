"""
Top-Level Binding Scanner.

Collects what a module's top-level statements bind, separating import
bindings (which may satisfy a required runtime helper, under any alias) from
names defined by ordinary statements (which an injected import must not
shadow).
"""

from typing import Dict, Optional, Sequence, Set, Tuple

import libcst as cst

from hydrant.core.import_fixer.utils import bound_target_names, get_full_name


class ImportBindings:
  """
  Snapshot of the top-level bindings of one module.

  Attributes:
      from_names: ``(module, name) -> local name`` for ``from module import name [as local]``.
      star_modules: Modules imported with ``from module import *``.
      namespaces: ``module -> reference prefix`` for ``import module [as alias]``.
      imported_names: Every local name bound by an import.
      defined_names: Every local name bound by a non-import statement.
  """

  def __init__(self) -> None:
    self.from_names: Dict[Tuple[str, str], str] = {}
    self.star_modules: Set[str] = set()
    self.namespaces: Dict[str, str] = {}
    self.imported_names: Set[str] = set()
    self.defined_names: Set[str] = set()

  @property
  def local_names(self) -> Set[str]:
    """All names bound at the top level."""
    return self.imported_names | self.defined_names

  def binds_module_root(self, root: str) -> bool:
    """True if ``root`` is bound by ``import root`` or ``import root.sub``."""
    return any(prefix == module and module.split(".")[0] == root for module, prefix in self.namespaces.items())

  def resolve(self, module: str, name: str) -> Optional[str]:
    """
    Finds an existing reference to ``module.name``.

    Args:
        module: Dotted module path.
        name: Exported name.

    Returns:
        Optional[str]: Source text referring to the binding (``name``,
        ``alias`` or ``ns.name``), or None if the module does not import it.
    """
    local = self.from_names.get((module, name))
    if local:
      return local
    prefix = self.namespaces.get(module)
    if prefix:
      return f"{prefix}.{name}"
    if module in self.star_modules:
      return name
    return None

  def _record_import(self, node: cst.Import) -> None:
    for alias in node.names:
      full = get_full_name(alias.name)
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        local = alias.asname.name.value
        self.namespaces.setdefault(full, local)
        self.imported_names.add(local)
      else:
        # `import a.b` binds `a` and makes `a.b.x` reachable
        self.namespaces.setdefault(full, full)
        self.imported_names.add(full.split(".")[0])

  def _record_import_from(self, node: cst.ImportFrom) -> None:
    if node.relative or node.module is None:
      return
    module = get_full_name(node.module)
    if isinstance(node.names, cst.ImportStar):
      self.star_modules.add(module)
      return
    for alias in node.names:
      name = get_full_name(alias.name)
      local = name
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        local = alias.asname.name.value
      self.from_names.setdefault((module, name), local)
      self.imported_names.add(local)

  def record_statement(self, small: cst.BaseSmallStatement) -> None:
    """Records the names bound by one top-level small statement."""
    if isinstance(small, cst.Import):
      self._record_import(small)
    elif isinstance(small, cst.ImportFrom):
      self._record_import_from(small)
    elif isinstance(small, cst.Assign):
      for target in small.targets:
        self.defined_names.update(bound_target_names(target.target))
    elif isinstance(small, (cst.AnnAssign, cst.AugAssign)):
      self.defined_names.update(bound_target_names(small.target))


def _is_type_checking(test: cst.BaseExpression) -> bool:
  return get_full_name(test) in ("TYPE_CHECKING", "typing.TYPE_CHECKING")


def _scan_block(bindings: ImportBindings, statements: Sequence[cst.CSTNode]) -> None:
  for stmt in statements:
    if isinstance(stmt, cst.SimpleStatementLine):
      for small in stmt.body:
        bindings.record_statement(small)
    elif isinstance(stmt, cst.BaseSmallStatement):
      # Members of a one-line suite (`try: import x`)
      bindings.record_statement(stmt)
    elif isinstance(stmt, (cst.FunctionDef, cst.ClassDef)):
      bindings.defined_names.add(stmt.name.value)
    elif isinstance(stmt, cst.If):
      _scan_if(bindings, stmt)
    elif isinstance(stmt, cst.Try):
      _scan_block(bindings, stmt.body.body)
      for handler in stmt.handlers:
        _scan_block(bindings, handler.body.body)
      for clause in (stmt.orelse, stmt.finalbody):
        if clause is not None:
          _scan_block(bindings, clause.body.body)


def _scan_if(bindings: ImportBindings, node: cst.If) -> None:
  # Imports under `if TYPE_CHECKING:` are never bound at runtime
  if not _is_type_checking(node.test):
    _scan_block(bindings, node.body.body)
  if isinstance(node.orelse, cst.If):
    _scan_if(bindings, node.orelse)
  elif node.orelse is not None:
    _scan_block(bindings, node.orelse.body.body)


def scan_import_bindings(module: cst.Module) -> ImportBindings:
  """
  Scans the top-level statements of a module.

  Top-level ``try`` and ``if`` blocks bind module names too and are scanned.
  The body of ``if TYPE_CHECKING:`` is skipped, as are functions and classes.

  Args:
      module: The parsed module.

  Returns:
      ImportBindings: The collected bindings.
  """
  bindings = ImportBindings()
  _scan_block(bindings, module.body)
  return bindings
