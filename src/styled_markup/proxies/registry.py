"""Proxy and replacer registries.

A proxy maps a tag name to the handler interpreting its elements. It is one
of two kinds:

- :class:`TextProxy` handlers return a :class:`ProxyResult` (text plus style
  attributes) and must not touch the container.
- :class:`CustomProxy` handlers build a native element and attach it to the
  container themselves. An optional ``end`` callback runs after the
  element's children were compiled.

Registries are layered. The built-in layer is immutable; overrides are merged
on top of it, later registrations winning for the same tag name.
"""

from collections import ChainMap
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Set, TypeVar, Union

from styled_markup.extraction import Block
from styled_markup.styling import ProxyResult


class ProxyType(Enum):
    """Kinds of proxy."""

    TEXT = 0
    CUSTOM = 1


TextHandler = Callable[[Block, Any], Union[ProxyResult, Dict[str, Any], str, None]]
CustomHandler = Callable[[Block, Any], Any]
EndCallback = Callable[[Any], Any]


@dataclass(frozen=True)
class TextProxy:
    """Proxy contributing text and style attributes to the open run."""

    handler: TextHandler

    @property
    def type(self) -> ProxyType:
        return ProxyType.TEXT


@dataclass(frozen=True)
class CustomProxy:
    """Proxy attaching its own element to the container."""

    handler: CustomHandler
    end: Optional[EndCallback] = None

    @property
    def type(self) -> ProxyType:
        return ProxyType.CUSTOM


ProxyDefinition = Union[TextProxy, CustomProxy]


@dataclass(frozen=True)
class Replacer:
    """Textual substitution of a tag's opening and closing markup.

    A missing tag is substituted with an empty string by the preprocessor,
    which also logs a warning.
    """

    open_tag: Optional[str] = None
    close_tag: Optional[str] = None


def _passthrough(block: Block, container: Any) -> ProxyResult:
    return ProxyResult(block.text)


SPAN_PROXY = TextProxy(_passthrough)


def coerce_proxy(value: Any) -> ProxyDefinition:
    """Accept a proxy definition or a ``{"type", "handler", "end"}`` mapping.

    Raises:
        TypeError: When the value cannot describe a proxy
    """
    if isinstance(value, (TextProxy, CustomProxy)):
        return value
    if isinstance(value, Mapping) and callable(value.get("handler")):
        proxy_type = value.get("type", ProxyType.TEXT)
        if not isinstance(proxy_type, ProxyType):
            proxy_type = ProxyType(proxy_type)
        if proxy_type is ProxyType.CUSTOM:
            return CustomProxy(value["handler"], value.get("end"))
        return TextProxy(value["handler"])
    raise TypeError(f"Cannot use {type(value).__name__} as a proxy definition")


def coerce_replacer(value: Any) -> Replacer:
    """Accept a Replacer or a mapping with open/close tag keys.

    Both ``open_tag``/``close_tag`` and ``openTag``/``closeTag`` spellings
    are understood.
    """
    if isinstance(value, Replacer):
        return value
    if isinstance(value, Mapping):
        return Replacer(
            open_tag=value.get("open_tag", value.get("openTag")),
            close_tag=value.get("close_tag", value.get("closeTag")),
        )
    raise TypeError(f"Cannot use {type(value).__name__} as a replacer")


T = TypeVar("T")


class _LayeredRegistry(Generic[T]):
    """Tag-name registry with an immutable base and mutable overrides."""

    def __init__(
        self,
        base: Optional[Mapping[str, Any]] = None,
        overrides: Optional[Mapping[str, Any]] = None
    ) -> None:
        self._base: Mapping[str, T] = MappingProxyType(
            {name: self._coerce(value) for name, value in (base or {}).items()}
        )
        self._overrides: Dict[str, T] = {}
        if overrides:
            self.override(overrides)

    def _coerce(self, value: Any) -> T:
        raise NotImplementedError

    def override(self, entries: Mapping[str, Any]) -> None:
        """Merge entries over the registry; later calls win per tag name."""
        self._overrides.update(
            {name: self._coerce(value) for name, value in entries.items()}
        )

    def layered(self, entries: Optional[Mapping[str, Any]]) -> "_LayeredRegistry[T]":
        """New registry with entries as the highest-precedence layer."""
        registry = type(self)(self._base, self._overrides)
        if entries:
            registry.override(entries)
        return registry

    @property
    def entries(self) -> Mapping[str, T]:
        """Effective tag-name mapping, overrides first."""
        return ChainMap(self._overrides, dict(self._base))

    def names(self) -> Set[str]:
        """All registered tag names."""
        return set(self._base) | set(self._overrides)

    def get(self, name: str) -> Optional[T]:
        """Entry for a tag name, None when unregistered."""
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._overrides or name in self._base

    def __len__(self) -> int:
        return len(self.names())


class ProxyRegistry(_LayeredRegistry[ProxyDefinition]):
    """Registry of proxies by tag name."""

    def _coerce(self, value: Any) -> ProxyDefinition:
        return coerce_proxy(value)

    def resolve(self, name: Optional[str]) -> ProxyDefinition:
        """Proxy for a tag name, the span proxy when unregistered."""
        proxy = self.get(name) if name else None
        if proxy is None:
            proxy = self.get("span") or SPAN_PROXY
        return proxy


class ReplacerRegistry(_LayeredRegistry[Replacer]):
    """Registry of replacers by tag name."""

    def _coerce(self, value: Any) -> Replacer:
        return coerce_replacer(value)
