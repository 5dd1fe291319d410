"""
Integration tests for the 'hydrate' command.
"""

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from hydrant import __version__
from hydrant.cli.__main__ import main
from hydrant.utils.console import set_console


@pytest.fixture
def captured() -> Console:
  capture = Console(record=True, file=io.StringIO(), width=200)
  set_console(capture)
  return capture


@pytest.fixture
def project(tmp_path, button_source) -> Path:
  """
  Layout::

      tmp/components.json
      tmp/src/button.py
      tmp/src/broken.py
      tmp/lib/other.py
  """
  src = tmp_path / "src"
  src.mkdir()
  (src / "button.py").write_text(button_source, encoding="utf-8")
  (src / "broken.py").write_text("class XBroken(:\n", encoding="utf-8")
  lib = tmp_path / "lib"
  lib.mkdir()
  (lib / "other.py").write_text("class XOther:\n    pass\n", encoding="utf-8")

  manifest = {
    "components": [
      {"tag_name": "my-button", "source_path": "src/button.py", "events": [{"name": "clicked"}]},
      {"tag_name": "x-broken", "source_path": "src/broken.py"},
      {"tag_name": "x-other", "source_path": "lib/other.py"},
    ]
  }
  (tmp_path / "components.json").write_text(json.dumps(manifest), encoding="utf-8")
  return tmp_path


def test_version_flag(capsys):
  with pytest.raises(SystemExit) as exc:
    main(["--version"])
  assert exc.value.code == 0
  assert __version__ in capsys.readouterr().out


def test_hydrate_single_file(project, captured):
  out_dir = project / "out"
  rc = main(
    [
      "hydrate",
      str(project / "src" / "button.py"),
      "--manifest",
      str(project / "components.json"),
      "--out",
      str(out_dir),
    ]
  )

  assert rc == 0
  result = (out_dir / "button.hydrate.py").read_text(encoding="utf-8")
  assert "def __init__(self, host_ref):" in result
  assert "from hydrate_runtime import" in result
  assert not (out_dir / "other.hydrate.py").exists()
  assert "Build Complete" in captured.export_text()


def test_hydrate_writes_beside_source(project, captured):
  rc = main(
    ["hydrate", str(project / "lib"), "--manifest", str(project / "components.json"), "--format", "namespace"]
  )

  assert rc == 0
  result = (project / "lib" / "other.hydrate.py").read_text(encoding="utf-8")
  assert result.startswith("import hydrate_runtime\n")
  assert "hydrate_runtime.register_instance(self, host_ref)" in result


def test_hydrate_directory_reports_errors(project, captured):
  out_dir = project / "out"
  rc = main(
    ["hydrate", str(project / "src"), "--manifest", str(project / "components.json"), "--out", str(out_dir)]
  )

  assert rc == 1
  assert not (out_dir / "broken.hydrate.py").exists()
  text = captured.export_text()
  assert "Hydration Report" in text
  assert "broken.py" in text
  assert "Hydration failed" in text


def test_missing_manifest_file(project, captured):
  rc = main(["hydrate", str(project / "src"), "--manifest", str(project / "absent.json")])
  assert rc == 1
  assert "Cannot read manifest" in captured.export_text()


def test_no_manifest_configured(tmp_path, captured):
  (tmp_path / "m.py").write_text("x = 1\n", encoding="utf-8")
  rc = main(["hydrate", str(tmp_path / "m.py")])
  assert rc == 1
  assert "No component manifest" in captured.export_text()


def test_missing_input(tmp_path, captured):
  rc = main(["hydrate", str(tmp_path / "nope.py"), "--manifest", str(tmp_path / "m.json")])
  assert rc == 1
  assert "Input not found" in captured.export_text()


def test_missing_source_module_is_a_build_error(tmp_path, captured):
  (tmp_path / "pkg").mkdir()
  manifest = {"components": [{"tag_name": "x-gone", "source_path": "pkg/gone.py"}]}
  (tmp_path / "m.json").write_text(json.dumps(manifest), encoding="utf-8")

  rc = main(["hydrate", str(tmp_path / "pkg"), "--manifest", str(tmp_path / "m.json")])

  assert rc == 1
  assert "Cannot read component module" in captured.export_text()


def test_nothing_selected(project, captured):
  empty = project / "empty"
  empty.mkdir()
  rc = main(["hydrate", str(empty), "--manifest", str(project / "components.json")])
  assert rc == 0
  assert "No manifest components" in captured.export_text()


def test_verbose_shows_pass_logs(project, captured):
  rc = main(["-v", "hydrate", str(project / "lib"), "--manifest", str(project / "components.json")])
  assert rc == 0
  assert "Hydrated 1 class(es)" in captured.export_text()
