"""
Component Locator.

Maps class declarations back to the component metadata produced upstream.
The lookup is keyed by the pair ``(file, declared class name)`` and is built
once per module before traversal, so locating a node is a single dict lookup
and can be tested without walking any tree.
"""

import posixpath
from pathlib import PurePath
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import libcst as cst

from hydrant.metadata.schema import ComponentMetadata

IndexKey = Tuple[str, str]


def normalize_path(path: Union[str, PurePath]) -> str:
  """
  Normalises a file path for use as an index key.

  Separators are unified to ``/`` and redundant segments collapsed, so
  ``src\\a\\..\\cmp.py`` and ``src/cmp.py`` produce the same key.
  """
  return posixpath.normpath(str(path).replace("\\", "/"))


class ComponentIndex:
  """
  Read-only index of component metadata keyed by ``(file, class name)``.
  """

  def __init__(self, entries: Dict[IndexKey, ComponentMetadata]) -> None:
    self._entries = dict(entries)

  @classmethod
  def build(cls, components: Iterable[ComponentMetadata]) -> "ComponentIndex":
    """
    Builds an index from metadata entries.

    Later entries with the same key replace earlier ones.

    Args:
        components: Metadata to register.

    Returns:
        ComponentIndex: The index.
    """
    entries: Dict[IndexKey, ComponentMetadata] = {}
    for cmp in components:
      entries[(normalize_path(cmp.source_path), cmp.component_class_name)] = cmp
    return cls(entries)

  def get(self, source_file: Union[str, PurePath], class_name: str) -> Optional[ComponentMetadata]:
    """Exact-match lookup."""
    return self._entries.get((normalize_path(source_file), class_name))

  def for_file(self, source_file: Union[str, PurePath]) -> List[ComponentMetadata]:
    """All components registered for a file, in registration order."""
    key = normalize_path(source_file)
    return [cmp for (path, _), cmp in self._entries.items() if path == key]

  def __iter__(self) -> Iterator[ComponentMetadata]:
    return iter(self._entries.values())

  def __len__(self) -> int:
    return len(self._entries)


class ComponentLocator:
  """
  Decides whether a node is a known component class.
  """

  def __init__(self, index: ComponentIndex) -> None:
    self.index = index

  def locate(self, node: cst.CSTNode, source_file: Union[str, PurePath]) -> Optional[ComponentMetadata]:
    """
    Returns the metadata for ``node`` if it declares a registered component.

    Args:
        node: Any CST node.
        source_file: The module the node was parsed from.

    Returns:
        Optional[ComponentMetadata]: The matching metadata, or None for
        non-class nodes and unregistered classes.
    """
    if not isinstance(node, cst.ClassDef):
      return None
    return self.index.get(source_file, node.name.value)
