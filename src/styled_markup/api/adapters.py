"""Snapshot adapters exporting compiled view trees to other representations.

A compiled container is a tree of native views. Adapters turn it into a
plain dictionary (and JSON), an ``xml.etree.ElementTree`` element or an
``lxml.etree`` element, so the output of a compile pass can be inspected,
diffed or stored. Adapters never raise: failures are reported through the
returned :class:`ConversionResult`.
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from styled_markup.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)


class AdapterType(Enum):
    """Types of snapshot adapters."""

    PLAIN_DATA = auto()     # Dictionaries and JSON text
    XML_LIBRARY = auto()    # XML element trees (ElementTree, lxml)


@dataclass
class AdapterMetadata:
    """Metadata about a snapshot adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str
    author: str = "styled-markup"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def _snapshot(view: Any) -> Dict[str, Any]:
    if not hasattr(view, "to_dict"):
        raise TypeError(f"Cannot snapshot {type(view).__name__}, expected a view")
    return view.to_dict()


def _build_tree(data: Dict[str, Any], ET: Any) -> Any:
    """Build an element tree from a view snapshot.

    Views become elements named after their kind, with their properties as
    attributes. A label's attributed string becomes its text, each style
    attribute a child ``<attribute>`` element.
    """
    element = ET.Element(data["type"])
    for key, value in sorted(data.get("properties", {}).items()):
        element.set(key, _format_value(value))

    attributed = data.get("attributed_string")
    if attributed is not None:
        element.text = attributed["text"]
        for attribute in attributed["attributes"]:
            child = ET.SubElement(element, "attribute")
            child.set("type", attribute["type"] or "")
            child.set("value", _format_value(attribute["value"]))
            if attribute["range"] is not None:
                offset, length = attribute["range"]
                child.set("offset", str(offset))
                child.set("length", str(length))

    for child_data in data.get("children", []):
        element.append(_build_tree(child_data, ET))
    return element


class SnapshotAdapter(ABC):
    """Abstract base class for all snapshot adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library is available."""

    @abstractmethod
    def to_target(self, container: Any) -> ConversionResult:
        """Convert a compiled container to the target representation.

        Args:
            container: Root view of a compile pass

        Returns:
            ConversionResult holding the converted data
        """

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.error(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class DictAdapter(SnapshotAdapter):
    """Adapter producing plain dictionaries."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="dict",
            version="1.0.0",
            adapter_type=AdapterType.PLAIN_DATA,
            target_library="builtins",
            description="Convert compiled view trees to plain dictionaries"
        )

    def is_available(self) -> bool:
        """Always available."""
        return True

    def to_target(self, container: Any) -> ConversionResult:
        start_time = time.time()
        try:
            data = _snapshot(container)
        except (TypeError, AttributeError, KeyError) as e:
            return self._create_error_result(
                f"Failed to convert to dict: {e}",
                container,
                (time.time() - start_time) * 1000
            )
        return ConversionResult(
            success=True,
            converted_data=data,
            original_data=container,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"child_count": len(data["children"])}
        )

    def to_json(self, container: Any, indent: Optional[int] = 2) -> ConversionResult:
        """Convert a compiled container to JSON text."""
        result = self.to_target(container)
        if result.success:
            result.converted_data = json.dumps(
                result.converted_data, indent=indent, default=str
            )
        return result


class ElementTreeAdapter(SnapshotAdapter):
    """Adapter producing ``xml.etree.ElementTree`` elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Convert compiled view trees to ElementTree elements"
        )

    def is_available(self) -> bool:
        """ElementTree ships with the standard library."""
        return True

    def to_target(self, container: Any) -> ConversionResult:
        start_time = time.time()
        try:
            import xml.etree.ElementTree as ET

            root = _build_tree(_snapshot(container), ET)
        except (TypeError, AttributeError, KeyError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert to ElementTree: {e}",
                container,
                (time.time() - start_time) * 1000
            )
        return ConversionResult(
            success=True,
            converted_data=root,
            original_data=container,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"element_count": len(list(root.iter()))}
        )


class LxmlAdapter(SnapshotAdapter):
    """Adapter producing ``lxml.etree`` elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Convert compiled view trees to lxml.etree elements"
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, container: Any) -> ConversionResult:
        start_time = time.time()
        try:
            import lxml.etree as ET

            root = _build_tree(_snapshot(container), ET)
        except ImportError as e:
            return self._create_error_result(
                f"lxml is not available: {e}",
                container,
                (time.time() - start_time) * 1000
            )
        except (TypeError, AttributeError, KeyError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert to lxml: {e}",
                container,
                (time.time() - start_time) * 1000
            )
        return ConversionResult(
            success=True,
            converted_data=root,
            original_data=container,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={
                "lxml_version": ET.LXML_VERSION,
                "element_count": len(root.xpath("//*")),
            }
        )


class AdapterRegistry:
    """Registry for managing snapshot adapters."""

    def __init__(self) -> None:
        """Initialize the adapter registry."""
        self._adapters: Dict[str, Type[SnapshotAdapter]] = {}

    def register(self, adapter_class: Type[SnapshotAdapter]) -> None:
        """Register an adapter class under its metadata name.

        Args:
            adapter_class: Adapter class to register
        """
        self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[SnapshotAdapter]:
        """Get an adapter instance by name.

        Args:
            adapter_name: Name of the adapter
            correlation_id: Optional correlation ID

        Returns:
            Adapter instance if found and available, None otherwise
        """
        adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List all available adapters with their metadata."""
        available = []
        for adapter_class in self._adapters.values():
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


_global_registry = AdapterRegistry()
for _adapter_class in (DictAdapter, ElementTreeAdapter, LxmlAdapter):
    _global_registry.register(_adapter_class)


def get_adapter_registry() -> AdapterRegistry:
    """Get the global adapter registry."""
    return _global_registry


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[SnapshotAdapter]:
    """Get an adapter from the global registry."""
    return _global_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available adapters of the global registry."""
    return _global_registry.list_available_adapters()
