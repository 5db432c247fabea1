"""Rendering backends for compiled markup.

Key Components:
    RenderBackend: Interface of the native widget toolkit
    MemoryBackend: Backend building inspectable in-memory views
    View, Label, AttributedString: In-memory view types
"""

from .backend import RenderBackend, attach
from .memory import AttributedString, Label, MemoryBackend, View

__all__ = [
    "RenderBackend",
    "attach",
    "AttributedString",
    "Label",
    "MemoryBackend",
    "View",
]
