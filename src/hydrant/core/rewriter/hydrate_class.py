"""
Hydrated Component Class Builder.

Rewrites one component ``ClassDef`` into its hydration-capable form:

1.  **Client bootstrap removal**: browser-only base classes (``HTMLElement``)
    and client registration decorators (``@custom_element``) are dropped.
2.  **Constructor rewrite**: ``__init__`` receives the runtime host reference
    right after ``self`` and starts with ``register_instance(self, host_ref)``,
    followed by the creation of every declared event emitter. A constructor is
    injected when the class has none.
3.  **Host element access**: the member named by ``element_ref`` becomes a
    property returning ``get_element(self)``. Constructor assignments to it
    are removed.
4.  **Runtime metadata**: a ``cmp_meta()`` static method exposes the
    component's tag, encapsulation and member table to the hydrate runtime.

Every other member is kept as parsed, including its formatting and comments.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Set

import libcst as cst

from hydrant.core.import_fixer.utils import get_full_name, is_docstring_stmt
from hydrant.metadata.schema import ComponentMetadata

HOST_REF_PARAM = "host_ref"
META_METHOD = "cmp_meta"


class HydrateRuntimeRefs(NamedTuple):
  """Source text referring to each runtime helper inside the module."""

  register_instance: str
  create_event: str
  get_element: str


def _matches(name: str, candidates: Sequence[str]) -> bool:
  """True if a dotted name, or its last segment, is listed in ``candidates``."""
  if not name:
    return False
  return name in candidates or name.rsplit(".", 1)[-1] in candidates


def _decorator_name(decorator: cst.Decorator) -> str:
  expr = decorator.decorator
  if isinstance(expr, cst.Call):
    expr = expr.func
  return get_full_name(expr)


def _is_super_init(stmt: cst.BaseStatement) -> bool:
  """Detects a bare ``super().__init__(...)`` statement."""
  if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
    return False
  expr = stmt.body[0]
  if not isinstance(expr, cst.Expr) or not isinstance(expr.value, cst.Call):
    return False
  func = expr.value.func
  return (
    isinstance(func, cst.Attribute)
    and func.attr.value == "__init__"
    and isinstance(func.value, cst.Call)
    and isinstance(func.value.func, cst.Name)
    and func.value.func.value == "super"
  )


def _is_pass_only(stmt: cst.BaseStatement) -> bool:
  return isinstance(stmt, cst.SimpleStatementLine) and all(isinstance(s, cst.Pass) for s in stmt.body)


def _declares(stmt: cst.BaseStatement, names: Set[str]) -> bool:
  """
  True for members replaced by the hydrated class: a bare class-level
  annotation (``el: Element``) or a method/assignment of the same name.
  """
  if isinstance(stmt, cst.FunctionDef):
    return stmt.name.value in names
  if isinstance(stmt, cst.SimpleStatementLine) and len(stmt.body) == 1:
    small = stmt.body[0]
    if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
      return small.target.value in names and small.value is None
  return False


def _is_self_attr(expr: cst.BaseExpression, self_name: str, attr: str) -> bool:
  return (
    isinstance(expr, cst.Attribute)
    and isinstance(expr.value, cst.Name)
    and expr.value.value == self_name
    and expr.attr.value == attr
  )


def _drop_attr_assignment(stmt: cst.BaseStatement, self_name: str, attr: str) -> Optional[cst.BaseStatement]:
  """
  Removes ``self.<attr> = ...`` targets from a constructor statement.

  Returns None when nothing of the statement is left.
  """
  if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
    return stmt
  small = stmt.body[0]
  if isinstance(small, cst.AnnAssign) and _is_self_attr(small.target, self_name, attr):
    return None
  if isinstance(small, cst.Assign):
    kept = [t for t in small.targets if not _is_self_attr(t.target, self_name, attr)]
    if not kept:
      return None
    if len(kept) != len(small.targets):
      return stmt.with_changes(body=[small.with_changes(targets=kept)])
  return stmt


def _as_block(body: cst.BaseSuite) -> cst.IndentedBlock:
  """Expands ``class A: pass`` style suites into an indented block."""
  if isinstance(body, cst.IndentedBlock):
    return body
  return cst.IndentedBlock(body=[cst.SimpleStatementLine(body=list(body.body))])


def _runtime_meta(cmp: ComponentMetadata) -> Dict[str, Any]:
  """Builds the literal returned by ``cmp_meta()``."""
  members: Dict[str, Dict[str, Any]] = {}
  for prop in cmp.properties:
    members[prop.name] = {
      "kind": "prop",
      "mutable": prop.mutable,
      "reflect": prop.reflect,
      "internal": prop.internal,
    }
  for method in cmp.methods:
    members[method.name] = {"kind": "method", "internal": method.internal}
  if cmp.element_ref:
    members[cmp.element_ref] = {"kind": "element", "internal": True}

  return {
    "tag_name": cmp.tag_name,
    "class_name": cmp.component_class_name,
    "encapsulation": cmp.encapsulation.value,
    "members": members,
    "events": [
      {"name": ev.name, "method": ev.attribute, "flags": ev.flags, "internal": ev.internal} for ev in cmp.events
    ],
  }


class _Templates:
  """Renders generated members using the module's own indentation and newlines."""

  def __init__(self, config: cst.PartialParserConfig, refs: HydrateRuntimeRefs) -> None:
    self.config = config
    self.refs = refs
    self.indent = config.default_indent if isinstance(config.default_indent, str) else "    "
    self.newline = config.default_newline if isinstance(config.default_newline, str) else "\n"

  def statement(self, code: str) -> cst.BaseStatement:
    return cst.parse_statement(code, config=self.config)

  def bootstrap_lines(self, self_name: str, cmp: ComponentMetadata) -> List[str]:
    lines = [f"{self.refs.register_instance}({self_name}, {HOST_REF_PARAM})"]
    for event in cmp.events:
      lines.append(
        f'{self_name}.{event.attribute} = {self.refs.create_event}({self_name}, {event.name!r}, {event.flags})'
      )
    return lines

  def bootstrap_statements(self, self_name: str, cmp: ComponentMetadata) -> List[cst.BaseStatement]:
    return [self.statement(line + self.newline) for line in self.bootstrap_lines(self_name, cmp)]

  def constructor(self, cmp: ComponentMetadata) -> cst.BaseStatement:
    body = "".join(f"{self.indent}{line}{self.newline}" for line in self.bootstrap_lines("self", cmp))
    return self.statement(f"def __init__(self, {HOST_REF_PARAM}):{self.newline}{body}")

  def element_property(self, name: str) -> cst.BaseStatement:
    nl = self.newline
    return self.statement(
      f"@property{nl}def {name}(self):{nl}{self.indent}return {self.refs.get_element}(self){nl}"
    )

  def meta_method(self, cmp: ComponentMetadata) -> cst.BaseStatement:
    nl = self.newline
    return self.statement(
      f"@staticmethod{nl}def {META_METHOD}():{nl}{self.indent}return {_runtime_meta(cmp)!r}{nl}"
    )


def _with_leading_blank(stmt: cst.BaseStatement) -> cst.BaseStatement:
  """Separates a member from the previous one unless it already has leading lines."""
  if getattr(stmt, "leading_lines", None):
    return stmt
  if hasattr(stmt, "leading_lines"):
    return stmt.with_changes(leading_lines=[cst.EmptyLine(indent=False)])
  return stmt


def _insert_host_param(params: cst.Parameters) -> cst.Parameters:
  """Adds ``host_ref`` immediately after the receiver parameter."""
  existing = {p.name.value for p in [*params.posonly_params, *params.params, *params.kwonly_params]}
  if HOST_REF_PARAM in existing:
    return params

  host = cst.Param(name=cst.Name(HOST_REF_PARAM))
  positional = list(params.params)
  if params.posonly_params:
    # Receiver is positional-only (`def __init__(self, /, ...)`)
    positional.insert(0, host)
  elif positional:
    positional.insert(1, host)
  else:
    positional = [cst.Param(name=cst.Name("self")), host]
  return params.with_changes(params=positional)


def _receiver_name(params: cst.Parameters) -> str:
  ordered = [*params.posonly_params, *params.params]
  return ordered[0].name.value if ordered else "self"


def _rewrite_constructor(
  func: cst.FunctionDef,
  cmp: ComponentMetadata,
  templates: _Templates,
  strip_super: bool,
) -> cst.FunctionDef:
  """Injects the hydration bootstrap at the top of an existing ``__init__``."""
  self_name = _receiver_name(func.params)
  block = _as_block(func.body)

  statements = [s for s in block.body if not _is_pass_only(s)]
  if strip_super:
    statements = [s for s in statements if not _is_super_init(s)]
  if cmp.element_ref:
    # The element member becomes a read-only property
    kept = [_drop_attr_assignment(s, self_name, cmp.element_ref) for s in statements]
    statements = [s for s in kept if s is not None]

  insert_idx = 1 if statements and is_docstring_stmt(statements[0]) else 0
  bootstrap = templates.bootstrap_statements(self_name, cmp)
  new_body = statements[:insert_idx] + bootstrap + statements[insert_idx:]

  return func.with_changes(
    params=_insert_host_param(func.params),
    body=block.with_changes(body=new_body),
  )


def _strip_bases(node: cst.ClassDef, client_bases: Sequence[str]) -> cst.ClassDef:
  kept = [arg for arg in node.bases if not _matches(get_full_name(arg.value), client_bases)]
  if len(kept) == len(node.bases):
    return node

  if not kept and not node.keywords:
    return node.with_changes(bases=[], lpar=cst.MaybeSentinel.DEFAULT, rpar=cst.MaybeSentinel.DEFAULT)

  if kept and not node.keywords:
    kept[-1] = kept[-1].with_changes(comma=cst.MaybeSentinel.DEFAULT)
  return node.with_changes(bases=kept)


def update_hydrate_component_class(
  node: cst.ClassDef,
  cmp: ComponentMetadata,
  refs: HydrateRuntimeRefs,
  client_bases: Sequence[str],
  bootstrap_decorators: Sequence[str],
  config: Optional[cst.PartialParserConfig] = None,
) -> cst.ClassDef:
  """
  Builds the hydration-capable replacement of a component class.

  Args:
      node: The original class declaration.
      cmp: Metadata of the component the class implements.
      refs: How the runtime helpers are referenced in this module.
      client_bases: Base classes to drop.
      bootstrap_decorators: Class decorators to drop.
      config: Parser config of the enclosing module, used so generated members
          follow its indentation. Defaults to four spaces and ``\\n``.

  Returns:
      cst.ClassDef: The replacement declaration, with the original name.
  """
  templates = _Templates(config or cst.PartialParserConfig(), refs)

  had_bases = bool(node.bases)
  updated = _strip_bases(node, client_bases)
  strip_super = had_bases and not updated.bases

  decorators = [d for d in updated.decorators if not _matches(_decorator_name(d), bootstrap_decorators)]
  updated = updated.with_changes(decorators=decorators)

  replaced: Set[str] = {ev.attribute for ev in cmp.events}
  if cmp.element_ref:
    replaced.add(cmp.element_ref)

  block = _as_block(updated.body)
  members: List[cst.BaseStatement] = []
  has_constructor = False

  for stmt in block.body:
    if isinstance(stmt, cst.FunctionDef) and stmt.name.value == "__init__":
      members.append(_rewrite_constructor(stmt, cmp, templates, strip_super))
      has_constructor = True
      continue
    if _declares(stmt, replaced) or _is_pass_only(stmt):
      continue
    members.append(stmt)

  if not has_constructor:
    insert_idx = 0
    while insert_idx < len(members) and isinstance(members[insert_idx], cst.SimpleStatementLine):
      insert_idx += 1
    constructor = templates.constructor(cmp)
    if insert_idx > 0:
      constructor = _with_leading_blank(constructor)
    members.insert(insert_idx, constructor)
    if insert_idx + 1 < len(members):
      members[insert_idx + 1] = _with_leading_blank(members[insert_idx + 1])

  if cmp.element_ref:
    members.append(_with_leading_blank(templates.element_property(cmp.element_ref)))
  members.append(_with_leading_blank(templates.meta_method(cmp)))

  return updated.with_changes(body=block.with_changes(body=members))
