"""Proxy and replacer registries for the markup dialect.

Key Components:
    TextProxy, CustomProxy: The two kinds of tag handler
    ProxyRegistry: Layered tag-name to proxy mapping with a span fallback
    ReplacerRegistry: Layered tag-name to replacer mapping
    builtin_proxies: Built-in proxy layer for a font transform and backend
"""

from .builtins import builtin_proxies, font_proxy
from .registry import (
    SPAN_PROXY,
    CustomProxy,
    ProxyDefinition,
    ProxyRegistry,
    ProxyType,
    Replacer,
    ReplacerRegistry,
    TextProxy,
    coerce_proxy,
    coerce_replacer,
)

__all__ = [
    "builtin_proxies",
    "font_proxy",
    "SPAN_PROXY",
    "CustomProxy",
    "ProxyDefinition",
    "ProxyRegistry",
    "ProxyType",
    "Replacer",
    "ReplacerRegistry",
    "TextProxy",
    "coerce_proxy",
    "coerce_replacer",
]
