"""
CST helpers shared by the Import Augmenter and the class rewriter.
"""

from typing import List, Sequence, Union

import libcst as cst


def get_full_name(node: cst.BaseExpression) -> str:
  """
  Reads a ``Name``/``Attribute`` chain as a dotted string.

  Example:
      >>> get_full_name(cst.parse_expression("hydrate_runtime.create_event"))
      'hydrate_runtime.create_event'

  Returns:
      str: The dotted name, or ``""`` for calls, subscripts and other expressions.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    return f"{base}.{node.attr.value}" if base else ""
  return ""


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """Builds the ``Name``/``Attribute`` chain for ``a.b.c``."""
  head, *rest = name_str.split(".")
  node: Union[cst.Name, cst.Attribute] = cst.Name(head)
  for attr in rest:
    node = cst.Attribute(value=node, attr=cst.Name(attr))
  return node


def is_docstring_stmt(stmt: cst.CSTNode) -> bool:
  """
  True for a statement consisting of a lone string literal.

  Whether it actually is a docstring depends on its position, which the
  caller checks (first statement of a module, class or function body).
  """
  if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
    return False
  small = stmt.body[0]
  return isinstance(small, cst.Expr) and isinstance(small.value, (cst.SimpleString, cst.ConcatenatedString))


def is_future_import(stmt: cst.CSTNode) -> bool:
  """True for a ``from __future__ import ...`` line."""
  if not isinstance(stmt, cst.SimpleStatementLine):
    return False
  return any(
    isinstance(small, cst.ImportFrom) and isinstance(small.module, cst.Name) and small.module.value == "__future__"
    for small in stmt.body
  )


def header_insert_index(body: Sequence[cst.BaseStatement]) -> int:
  """
  Index of the first statement new imports may precede.

  The module docstring and ``__future__`` imports must stay first.
  """
  idx = 0
  if body and is_docstring_stmt(body[0]):
    idx = 1
  while idx < len(body) and is_future_import(body[idx]):
    idx += 1
  return idx


def bound_target_names(target: cst.BaseExpression) -> List[str]:
  """
  Names bound by an assignment target (``a``, ``a, b``, ``[a, *b]``).
  """
  if isinstance(target, cst.Name):
    return [target.value]
  if isinstance(target, (cst.Tuple, cst.List)):
    names: List[str] = []
    for element in target.elements:
      # Element and StarredElement both wrap the bound expression in `.value`
      names.extend(bound_target_names(element.value))
    return names
  return []
