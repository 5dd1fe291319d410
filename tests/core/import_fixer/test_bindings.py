"""
Tests for the top-level binding scanner and import utilities.
"""

import libcst as cst

from hydrant.core.import_fixer import scan_import_bindings
from hydrant.core.import_fixer.utils import (
  bound_target_names,
  create_dotted_name,
  get_full_name,
  header_insert_index,
)


def test_scan_collects_import_forms():
  code = (
    "import os\n"
    "import a.b\n"
    "import numpy as np\n"
    "from x.y import z, w as ww\n"
    "from m import *\n"
    "from . import rel\n"
  )
  b = scan_import_bindings(cst.parse_module(code))

  assert b.namespaces == {"os": "os", "a.b": "a.b", "numpy": "np"}
  assert b.from_names == {("x.y", "z"): "z", ("x.y", "w"): "ww"}
  assert b.star_modules == {"m"}
  assert b.imported_names == {"os", "a", "np", "z", "ww"}
  assert b.defined_names == set()


def test_scan_collects_definitions():
  code = "A = 1\nb, [c, *d] = x\ne: int = 2\nf += 1\ndef g():\n    h = 1\nclass K:\n    pass\n"
  b = scan_import_bindings(cst.parse_module(code))
  assert b.defined_names == {"A", "b", "c", "d", "e", "f", "g", "K"}


def test_scan_enters_top_level_try_and_if():
  code = (
    "try:\n"
    "    import fast_json as json\n"
    "except ImportError:\n"
    "    import json\n"
    "if flag:\n"
    "    from a import b\n"
    "elif other:\n"
    "    c = 1\n"
    "else:\n"
    "    d = 2\n"
    "if TYPE_CHECKING:\n"
    "    from t import hidden\n"
    "def f():\n"
    "    from inner import e\n"
  )
  b = scan_import_bindings(cst.parse_module(code))

  assert b.namespaces == {"fast_json": "json", "json": "json"}
  assert b.from_names == {("a", "b"): "b"}
  assert b.defined_names == {"c", "d", "f"}
  assert "hidden" not in b.local_names


def test_binds_module_root():
  b = scan_import_bindings(cst.parse_module("import pkg.sub\nimport other as rt\nfrom v import mod\n"))
  assert b.binds_module_root("pkg")
  assert not b.binds_module_root("other")
  assert not b.binds_module_root("rt")
  assert not b.binds_module_root("mod")


def test_resolve_priority():
  b = scan_import_bindings(cst.parse_module("import rt as R\nfrom rt import f as g\n"))
  assert b.resolve("rt", "f") == "g"
  assert b.resolve("rt", "other") == "R.other"
  assert b.resolve("elsewhere", "f") is None


def test_dotted_name_round_trip():
  node = create_dotted_name("pkg.sub.mod")
  assert isinstance(node, cst.Attribute)
  assert get_full_name(node) == "pkg.sub.mod"
  assert get_full_name(cst.Integer("1")) == ""


def test_header_insert_index():
  body = cst.parse_module('"""d"""\nfrom __future__ import annotations\nx = 1\n').body
  assert header_insert_index(list(body)) == 2

  body = cst.parse_module("x = 1\n'not a docstring'\n").body
  assert header_insert_index(list(body)) == 0


def test_bound_target_names_ignores_attributes():
  target = cst.parse_expression("self.x")
  assert bound_target_names(target) == []
