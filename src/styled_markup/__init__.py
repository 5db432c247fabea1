"""Styled Markup.

Compiles a small XML dialect (``<b>``, ``<i>``, ``<a href>``, ``<font>``,
``<br/>``, ``<img/>``, ``<view>`` and caller-defined tags) into native views:
styled-text labels carrying ranged rich-text attributes, interleaved with
custom elements.

Progressive API Disclosure:
- Level 1: Simple functions - process(), override_proxies(), override_replacers()
- Level 2: Parser instances - MarkupParser class with its own registries
- Level 3: Custom proxies and rendering backends
"""

__version__ = "0.1.0"
__author__ = "Styled Markup Team"

# Level 1: Simple functions operating on the process-wide parser
# Level 2: Parser instances
from .api import (
    MarkupParser,
    get_container,
    override_proxies,
    override_replacers,
    process,
    set_container,
)
from .compiler import compile_markup
from .device import Device, StaticPlatform

# Extension points
from .extraction import Block, extract
from .proxies import CustomProxy, ProxyType, Replacer, TextProxy
from .rendering import MemoryBackend, RenderBackend

# Configuration and result objects
from .shared import CompileReport, NewlineStripping, ParseOptions
from .styling import AttributeType, ProxyResult, StyleAttribute

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "process",
    "override_proxies",
    "override_replacers",
    "set_container",
    "get_container",

    # Level 2: Parser instances
    "MarkupParser",

    # Extension points
    "Block",
    "compile_markup",
    "extract",
    "CustomProxy",
    "ProxyType",
    "Replacer",
    "TextProxy",
    "MemoryBackend",
    "RenderBackend",
    "AttributeType",
    "ProxyResult",
    "StyleAttribute",

    # Configuration and results
    "CompileReport",
    "NewlineStripping",
    "ParseOptions",

    # Device helpers
    "Device",
    "StaticPlatform",
]
