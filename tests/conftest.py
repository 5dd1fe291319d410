"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Sample component metadata and module sources shared across suites.
- Console isolation so captured output never leaks between tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'hydrant' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from hydrant.metadata.schema import ComponentMetadata, EventMeta, MethodMeta, PropertyMeta  # noqa: E402
from hydrant.utils.console import reset_console, set_log_level  # noqa: E402

BUTTON_SOURCE = '''"""A clickable button."""

from ui import HTMLElement, custom_element


def helper(x):
    return x * 2


@custom_element("my-button")
class MyButton(HTMLElement):
    label: str = "Click"
    clicked: "EventEmitter"

    def __init__(self):
        super().__init__()
        self.count = 0

    def render(self):
        return f"<button>{self.label}</button>"


class Unrelated:
    def keep(self):
        return 1
'''


@pytest.fixture
def button_meta() -> ComponentMetadata:
  """Metadata matching ``MyButton`` in ``BUTTON_SOURCE``."""
  return ComponentMetadata(
    tag_name="my-button",
    source_path="src/button.py",
    properties=[PropertyMeta(name="label"), PropertyMeta(name="secret", internal=True)],
    events=[EventMeta(name="clicked", composed=False)],
    methods=[MethodMeta(name="render")],
  )


@pytest.fixture
def button_source() -> str:
  """A component module with one component class and unrelated code."""
  return BUTTON_SOURCE


@pytest.fixture(autouse=True)
def isolate_console():
  """Ensures console is reset to stdout after every test."""
  yield
  set_log_level(logging.INFO)
  reset_console()
