"""In-memory rendering backend.

Views are plain objects recording their properties, children and event
listeners, which makes compile output inspectable without a device and gives
the snapshot adapters something to serialize.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from styled_markup.styling import StyleAttribute

from .backend import RenderBackend

Listener = Callable[[Dict[str, Any]], Any]


@dataclass
class AttributedString:
    """Text with ranged rich-text attributes."""

    text: str
    attributes: List[StyleAttribute] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "text": self.text,
            "attributes": [a.to_dict() for a in self.attributes],
        }


@dataclass(eq=False)
class View:
    """A native view with children.

    Attributes:
        kind: View kind ("view", "scroll_view", "label", "image_view")
        properties: Creation properties
        children: Child views in insertion order
        add_to: Active nested sub-container receiving new labels
    """

    kind: str = "view"
    properties: Dict[str, Any] = field(default_factory=dict)
    children: List["View"] = field(default_factory=list)
    parent: Optional["View"] = field(default=None, repr=False)
    add_to: Optional["View"] = field(default=None, repr=False)
    listeners: Dict[str, List[Listener]] = field(default_factory=dict)

    def add(self, child: "View") -> None:
        """Append a child view."""
        child.parent = self
        self.children.append(child)

    def remove_all_children(self) -> None:
        """Detach every child view."""
        for child in self.children:
            child.parent = None
        self.children.clear()
        self.add_to = None

    def add_event_listener(self, name: str, listener: Listener) -> None:
        """Register a listener for an event name."""
        self.listeners.setdefault(name, []).append(listener)

    def fire_event(self, name: str, event: Optional[Dict[str, Any]] = None) -> None:
        """Invoke the listeners of an event name in registration order."""
        for listener in list(self.listeners.get(name, [])):
            listener(dict(event or {}))

    def iter_views(self) -> List["View"]:
        """This view and all its descendants, depth-first."""
        views = [self]
        for child in self.children:
            views.extend(child.iter_views())
        return views

    def find_all(self, kind: str) -> List["View"]:
        """All descendant views of a kind."""
        return [view for view in self.iter_views()[1:] if view.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the view tree to plain dictionaries."""
        return {
            "type": self.kind,
            "properties": dict(self.properties),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(eq=False)
class Label(View):
    """A label rendering an attributed string."""

    kind: str = "label"

    @property
    def attributed_string(self) -> Optional[AttributedString]:
        return self.properties.get("attributed_string")

    @property
    def text(self) -> str:
        attributed = self.attributed_string
        return attributed.text if attributed else self.properties.get("text", "")

    @property
    def attributes(self) -> List[StyleAttribute]:
        attributed = self.attributed_string
        return list(attributed.attributes) if attributed else []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        properties = data["properties"]
        attributed = properties.pop("attributed_string", None)
        if attributed is not None:
            data["attributed_string"] = attributed.to_dict()
        return data


class MemoryBackend(RenderBackend):
    """Backend creating :class:`View` objects.

    Attributes:
        opened_urls: URLs passed to :meth:`open_url`, in call order
    """

    def __init__(self, platform: str = "ios") -> None:
        if platform not in ("ios", "android"):
            raise ValueError("platform must be 'ios' or 'android'")
        self.platform = platform
        self.opened_urls: List[str] = []

    def create_attributed_string(
        self, text: str, attributes: List[StyleAttribute]
    ) -> AttributedString:
        return AttributedString(text=text, attributes=list(attributes))

    def create_label(self, properties: Dict[str, Any]) -> Label:
        return Label(properties=dict(properties))

    def create_view(self, properties: Dict[str, Any]) -> View:
        return View(kind="view", properties=dict(properties))

    def create_scroll_view(self, properties: Dict[str, Any]) -> View:
        return View(kind="scroll_view", properties=dict(properties))

    def create_image_view(self, properties: Dict[str, Any]) -> View:
        return View(kind="image_view", properties=dict(properties))

    def open_url(self, url: str) -> None:
        self.opened_urls.append(url)
