"""Rendering backend interface.

The native widget toolkit is an external collaborator. The compiler only
talks to it through :class:`RenderBackend`, a factory for the handful of view
kinds it needs, plus the platform's default URL opener.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from styled_markup.styling import StyleAttribute


class RenderBackend(ABC):
    """Factory for native views used by the compiler and built-in proxies."""

    #: Platform name, "ios" or "android"
    platform: str = "ios"

    @abstractmethod
    def create_attributed_string(
        self, text: str, attributes: List[StyleAttribute]
    ) -> Any:
        """Create the renderable styled-text object of a finalized run."""

    @abstractmethod
    def create_label(self, properties: Dict[str, Any]) -> Any:
        """Create a label showing an attributed string."""

    @abstractmethod
    def create_view(self, properties: Dict[str, Any]) -> Any:
        """Create a plain layout view."""

    @abstractmethod
    def create_scroll_view(self, properties: Dict[str, Any]) -> Any:
        """Create a scroll view, used as the default container."""

    @abstractmethod
    def create_image_view(self, properties: Dict[str, Any]) -> Any:
        """Create an image view."""

    @abstractmethod
    def open_url(self, url: str) -> None:
        """Open a link target with the platform's default handler."""


def attach(container: Any, view: Any) -> None:
    """Add a view to the container's active sub-container, or to the container."""
    target = getattr(container, "add_to", None) or container
    target.add(view)
