"""Public API for styled markup compilation.

Key Components:
    process: Compile markup with the process-wide parser
    MarkupParser: Parser instance with its own registries and container
    Snapshot adapters: Export compiled view trees to dicts, JSON and XML
"""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    AdapterType,
    ConversionResult,
    DictAdapter,
    ElementTreeAdapter,
    LxmlAdapter,
    SnapshotAdapter,
    get_adapter,
    get_adapter_registry,
    list_available_adapters,
)
from .parser import (
    DEFAULT_CONTAINER_PROPERTIES,
    TYPE_CUSTOM,
    TYPE_TEXT,
    MarkupParser,
    get_container,
    get_default_parser,
    override_proxies,
    override_replacers,
    process,
    set_container,
)

__all__ = [
    "AdapterMetadata",
    "AdapterRegistry",
    "AdapterType",
    "ConversionResult",
    "DictAdapter",
    "ElementTreeAdapter",
    "LxmlAdapter",
    "SnapshotAdapter",
    "get_adapter",
    "get_adapter_registry",
    "list_available_adapters",
    "DEFAULT_CONTAINER_PROPERTIES",
    "TYPE_CUSTOM",
    "TYPE_TEXT",
    "MarkupParser",
    "get_container",
    "get_default_parser",
    "override_proxies",
    "override_replacers",
    "process",
    "set_container",
]
