"""Built-in proxies of the markup dialect.

The built-in layer depends on the effective font transform of a call and on
the rendering backend creating custom elements, so it is produced by
:func:`builtin_proxies` rather than declared once.
"""

from typing import Any, Dict, Mapping

from styled_markup.extraction import Block
from styled_markup.rendering import RenderBackend, attach
from styled_markup.styling import AttributeType, ProxyResult, StyleAttribute

from .registry import SPAN_PROXY, CustomProxy, ProxyDefinition, TextProxy

DEFAULT_UNDERLINE_STYLE = "single"
DEFAULT_VIEW_LAYOUT = "vertical"


def font_proxy(patch: Mapping[str, Any]) -> TextProxy:
    """Text proxy styling its text with a font patch."""
    value = dict(patch)

    def handler(block: Block, container: Any) -> ProxyResult:
        return ProxyResult(block.text, [StyleAttribute(AttributeType.FONT, dict(value))])

    return TextProxy(handler)


def _number(value: str) -> Any:
    try:
        number = float(value)
    except ValueError:
        return value
    return int(number) if number.is_integer() else number


def _link(block: Block, container: Any) -> ProxyResult:
    href = block.attributes.get("href")
    if not href:
        return ProxyResult(block.text)
    return ProxyResult(block.text, [StyleAttribute(AttributeType.LINK, href)])


def _underline(block: Block, container: Any) -> ProxyResult:
    return ProxyResult(
        block.text, [StyleAttribute(AttributeType.UNDERLINE, DEFAULT_UNDERLINE_STYLE)]
    )


def _font(block: Block, container: Any) -> ProxyResult:
    attributes = []
    font: Dict[str, Any] = {}
    if block.attributes.get("size"):
        font["font_size"] = _number(block.attributes["size"])
    if block.attributes.get("face"):
        font["font_family"] = block.attributes["face"]
    if font:
        attributes.append(StyleAttribute(AttributeType.FONT, font))
    if block.attributes.get("color"):
        attributes.append(
            StyleAttribute(AttributeType.FOREGROUND_COLOR, block.attributes["color"])
        )
    return ProxyResult(block.text, attributes)


def _line_break(block: Block, container: Any) -> None:
    """Zero-width element: dispatching it is enough to close the open run."""


def builtin_proxies(
    font_transform: Mapping[str, Mapping[str, Any]],
    backend: RenderBackend
) -> Dict[str, ProxyDefinition]:
    """Build the built-in proxy layer.

    Args:
        font_transform: Effective font patches, with "bold" and "italic" keys
        backend: Backend creating the elements of custom proxies

    Returns:
        Tag name to proxy mapping
    """

    def image(block: Block, container: Any) -> None:
        properties: Dict[str, Any] = {"image": block.attributes.get("src", "")}
        for key in ("width", "height"):
            if key in block.attributes:
                properties[key] = _number(block.attributes[key])
        attach(container, backend.create_image_view(properties))

    def open_view(block: Block, container: Any) -> None:
        # Text directly inside a leaf <view> is not rendered, wrap it in <span>
        properties: Dict[str, Any] = {
            key: _number(value) for key, value in block.attributes.items()
        }
        properties.setdefault("layout", DEFAULT_VIEW_LAYOUT)
        view = backend.create_view(properties)
        attach(container, view)
        container.add_to = view

    def close_view(container: Any) -> None:
        container.add_to = None

    bold = font_proxy(font_transform.get("bold", {}))
    italic = font_proxy(font_transform.get("italic", {}))
    return {
        "span": SPAN_PROXY,
        "b": bold,
        "strong": bold,
        "i": italic,
        "em": italic,
        "u": TextProxy(_underline),
        "a": TextProxy(_link),
        "font": TextProxy(_font),
        "br": CustomProxy(_line_break),
        "img": CustomProxy(image),
        "view": CustomProxy(open_view, end=close_view),
    }
