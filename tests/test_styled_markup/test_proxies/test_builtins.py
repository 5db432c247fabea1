"""Tests for the built-in proxies."""

import pytest

from styled_markup.extraction import extract
from styled_markup.proxies import CustomProxy, TextProxy, builtin_proxies
from styled_markup.rendering import MemoryBackend
from styled_markup.shared import DEFAULT_FONT_TRANSFORM
from styled_markup.styling import AttributeType


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def proxies(backend):
    return builtin_proxies(DEFAULT_FONT_TRANSFORM, backend)


@pytest.fixture
def container(backend):
    return backend.create_view({})


class TestTextProxies:
    """Test the built-in text proxies."""

    def test_builtin_names(self, proxies):
        """Test the registered tag names."""
        assert set(proxies) == {
            "span", "b", "strong", "i", "em", "u", "a", "font", "br", "img", "view",
        }
        assert isinstance(proxies["b"], TextProxy)
        assert isinstance(proxies["img"], CustomProxy)

    def test_bold(self, proxies, container):
        """Test the bold font patch."""
        result = proxies["b"].handler(extract("<b>Hi</b>", "b"), container)

        assert result.text == "Hi"
        assert result.attributes[0].type is AttributeType.FONT
        assert result.attributes[0].value == {"font_weight": "bold"}

    def test_custom_font_transform(self, backend, container):
        """Test that the font transform drives the bold and italic patches."""
        proxies = builtin_proxies({"bold": {"font_family": "Heavy"}}, backend)
        result = proxies["strong"].handler(extract("<strong>a</strong>", "strong"), container)

        assert result.attributes[0].value == {"font_family": "Heavy"}

    def test_link(self, proxies, container):
        """Test link targets."""
        result = proxies["a"].handler(extract('<a href="http://x">go</a>', "a"), container)
        bare = proxies["a"].handler(extract("<a>go</a>", "a"), container)

        assert result.attributes[0].type is AttributeType.LINK
        assert result.attributes[0].value == "http://x"
        assert bare.attributes == []

    def test_underline(self, proxies, container):
        """Test the underline style."""
        result = proxies["u"].handler(extract("<u>x</u>", "u"), container)

        assert result.attributes[0].type is AttributeType.UNDERLINE

    def test_font(self, proxies, container):
        """Test font size, face and color."""
        block = extract('<font size="18" face="Serif" color="#f00">x</font>', "font")
        result = proxies["font"].handler(block, container)

        assert [(a.type, a.value) for a in result.attributes] == [
            (AttributeType.FONT, {"font_size": 18, "font_family": "Serif"}),
            (AttributeType.FOREGROUND_COLOR, "#f00"),
        ]


class TestCustomProxies:
    """Test the built-in custom proxies."""

    def test_image(self, proxies, container):
        """Test that images are attached to the container."""
        block = extract('<img src="a.png" width="20" height="10.5"/>', "img")
        proxies["img"].handler(block, container)

        image = container.children[0]
        assert image.kind == "image_view"
        assert image.properties == {"image": "a.png", "width": 20, "height": 10.5}

    def test_view_sets_and_clears_sub_container(self, proxies, container):
        """Test that a view becomes the active sub-container until its end."""
        definition = proxies["view"]
        definition.handler(extract('<view layout="horizontal"></view>', "view"), container)

        view = container.children[0]
        assert view.kind == "view"
        assert view.properties == {"layout": "horizontal"}
        assert container.add_to is view

        definition.end(container)
        assert container.add_to is None
