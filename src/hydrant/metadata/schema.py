"""
Pydantic Schemas for Component Metadata.

Component metadata is produced by an earlier analysis stage and describes the
shape of each UI component: its tag, the class implementing it and its
declared properties, events and methods. It is read-only for the whole
hydration phase, so every model here is frozen and can be shared across
threads without synchronisation.

Members flagged ``internal`` are kept in the runtime metadata emitted into
hydrated classes but excluded from any externally facing surface (see the
``public_*`` helpers).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hydrant.enums import Encapsulation

# Event flag bits understood by the hydration runtime's ``create_event``.
EVENT_FLAG_CANCELABLE = 1 << 0
EVENT_FLAG_COMPOSED = 1 << 1
EVENT_FLAG_BUBBLES = 1 << 2


def dash_to_pascal_case(value: str) -> str:
  """
  Converts a dashed tag name to a PascalCase class name.

  Example:
      >>> dash_to_pascal_case("my-button")
      'MyButton'
  """
  return "".join(part[:1].upper() + part[1:] for part in value.split("-") if part)


class MemberMeta(BaseModel):
  """A declared component member."""

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., min_length=1, description="Attribute name on the component class.")
  internal: bool = Field(False, description="If True, hidden from externally facing surfaces.")


class PropertyMeta(MemberMeta):
  """A declared input property."""

  mutable: bool = Field(False, description="If True, the component may reassign the property itself.")
  reflect: bool = Field(False, description="If True, the value is mirrored to a host attribute.")


class EventMeta(MemberMeta):
  """
  A declared event.

  ``name`` is the dispatched event name, ``method_name`` the attribute holding
  the emitter on the instance.
  """

  method_name: Optional[str] = Field(None, description="Emitter attribute. Defaults to the event name.")
  bubbles: bool = True
  composed: bool = True
  cancelable: bool = True

  @property
  def attribute(self) -> str:
    """The instance attribute the emitter is assigned to."""
    return self.method_name or self.name

  @property
  def flags(self) -> int:
    """Bit set passed to ``create_event``."""
    flags = 0
    if self.cancelable:
      flags |= EVENT_FLAG_CANCELABLE
    if self.composed:
      flags |= EVENT_FLAG_COMPOSED
    if self.bubbles:
      flags |= EVENT_FLAG_BUBBLES
    return flags


class MethodMeta(MemberMeta):
  """A declared public method."""


class ComponentMetadata(BaseModel):
  """
  Identity and shape of a single UI component.
  """

  model_config = ConfigDict(frozen=True)

  tag_name: str = Field(..., min_length=1, description="Unique tag identifier (e.g. 'my-button').")
  component_class_name: str = Field(
    "",
    description="Name of the implementing class. Derived from the tag name when omitted.",
  )
  source_path: str = Field(..., description="Path of the module declaring the component.")
  encapsulation: Encapsulation = Field(Encapsulation.NONE)
  properties: List[PropertyMeta] = Field(default_factory=list)
  events: List[EventMeta] = Field(default_factory=list)
  methods: List[MethodMeta] = Field(default_factory=list)
  element_ref: Optional[str] = Field(None, description="Member exposing the host element, if any.")

  @model_validator(mode="before")
  @classmethod
  def derive_class_name(cls, data):
    """Fills ``component_class_name`` from ``tag_name`` when missing."""
    if isinstance(data, dict) and not data.get("component_class_name") and data.get("tag_name"):
      data = dict(data)
      data["component_class_name"] = dash_to_pascal_case(data["tag_name"])
    return data

  def public_properties(self) -> List[str]:
    """Names of non-internal properties, in declaration order."""
    return [p.name for p in self.properties if not p.internal]

  def public_events(self) -> List[str]:
    """Names of non-internal events, in declaration order."""
    return [e.name for e in self.events if not e.internal]

  def public_methods(self) -> List[str]:
    """Names of non-internal methods, in declaration order."""
    return [m.name for m in self.methods if not m.internal]


class ComponentManifest(BaseModel):
  """
  Root of a metadata manifest file: ``{"components": [...]}``.
  """

  components: List[ComponentMetadata] = Field(default_factory=list)

  @model_validator(mode="after")
  def check_unique_tags(self) -> "ComponentManifest":
    """Tag names must be unique within a build."""
    seen = set()
    for cmp in self.components:
      if cmp.tag_name in seen:
        raise ValueError(f"Duplicate component tag '{cmp.tag_name}'")
      seen.add(cmp.tag_name)
    return self
