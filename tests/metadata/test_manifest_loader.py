"""
Tests for manifest loading and grouping.
"""

import json
from pathlib import Path

import pytest

from hydrant.metadata.loader import ManifestError, group_by_source, load_manifest
from hydrant.metadata.schema import ComponentMetadata


def _write(path: Path, data) -> Path:
  path.write_text(json.dumps(data), encoding="utf-8")
  return path


def test_load_valid_manifest(tmp_path):
  path = _write(tmp_path / "m.json", {"components": [{"tag_name": "x-a", "source_path": "a.py"}]})
  manifest = load_manifest(path)
  assert [c.component_class_name for c in manifest.components] == ["XA"]


@pytest.mark.parametrize(
  "content, fragment",
  [
    ("{not json", "not valid JSON"),
    (json.dumps({"components": [{"tag_name": "x-a"}]}), "failed validation"),
  ],
)
def test_load_invalid_manifest(tmp_path, content, fragment):
  path = tmp_path / "m.json"
  path.write_text(content, encoding="utf-8")
  with pytest.raises(ManifestError, match=fragment):
    load_manifest(path)


def test_load_missing_manifest(tmp_path):
  with pytest.raises(ManifestError, match="Cannot read manifest"):
    load_manifest(tmp_path / "absent.json")


def test_group_by_source_resolves_relative_paths(tmp_path):
  a = ComponentMetadata(tag_name="x-a", source_path="pkg/a.py")
  b = ComponentMetadata(tag_name="x-b", source_path="pkg/a.py")
  c = ComponentMetadata(tag_name="x-c", source_path="pkg/c.py")

  grouped = group_by_source([a, b, c], base_dir=tmp_path)

  a_path = (tmp_path / "pkg/a.py").resolve()
  assert list(grouped) == [a_path, (tmp_path / "pkg/c.py").resolve()]
  assert [cmp.tag_name for cmp in grouped[a_path]] == ["x-a", "x-b"]
  assert grouped[a_path][0].source_path == str(a_path)
  assert a.source_path == "pkg/a.py"


def test_group_by_source_without_base_dir():
  a = ComponentMetadata(tag_name="x-a", source_path="a.py")
  grouped = group_by_source([a])
  assert grouped == {Path("a.py"): [a]}
