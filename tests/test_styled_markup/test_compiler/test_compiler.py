"""Tests for the recursive descent compiler.

Markup is compiled directly, without preprocessing, into a plain view
container so that every label and custom element can be inspected.
"""

import pytest

from styled_markup.compiler import MarkupCompiler, compile_markup
from styled_markup.proxies import CustomProxy, ProxyRegistry, TextProxy, builtin_proxies
from styled_markup.rendering import MemoryBackend
from styled_markup.shared import DiagnosticSeverity, ParseOptions
from styled_markup.styling import AttributeType, ProxyResult, StyleAttribute

BOLD = {"font_weight": "bold"}
ITALIC = {"font_style": "italic"}


def compile_direct(markup, extra_proxies=None, platform="ios", **options):
    backend = MemoryBackend(platform)
    opts = ParseOptions(**options)
    proxies = ProxyRegistry(
        builtin_proxies(opts.effective_font_transform, backend), extra_proxies
    )
    container = backend.create_view({})
    compiler = MarkupCompiler(proxies, container, backend, opts)
    compiler.compile(markup)
    return container, compiler


def font_ranges(label):
    return [(a.value, a.range) for a in label.attributes if a.type is AttributeType.FONT]


class TestTextRuns:
    """Test accumulation of text proxies into labels."""

    def test_plain_text(self):
        """Test a single plain run."""
        container, _ = compile_direct("Hello")

        assert len(container.children) == 1
        assert container.children[0].text == "Hello"
        assert container.children[0].attributes == []

    def test_bold_then_plain(self):
        """Test a styled element followed by plain text."""
        container, _ = compile_direct("<b>Hi</b> there")

        label = container.children[0]
        assert len(container.children) == 1
        assert label.text == "Hi there"
        assert font_ranges(label) == [(BOLD, (0, 2))]

    def test_adjacent_spans(self):
        """Test contiguous, non-overlapping ranges for adjacent elements."""
        container, _ = compile_direct("<i>Hello</i><b>World</b>")

        label = container.children[0]
        assert label.text == "HelloWorld"
        assert font_ranges(label) == [(ITALIC, (0, 5)), (BOLD, (5, 5))]

    def test_nested_fonts_merge(self):
        """Test that nested font patches merge into one attribute."""
        container, _ = compile_direct("<b><i>Hi</i></b>")

        assert font_ranges(container.children[0]) == [({**BOLD, **ITALIC}, (0, 2))]

    def test_parent_styling_covers_mixed_children(self):
        """Test parent styling across leading text and a styled child."""
        container, _ = compile_direct("<b>Hi <i>there</i></b>")

        label = container.children[0]
        assert label.text == "Hi there"
        assert font_ranges(label) == [(BOLD, (0, 3)), ({**BOLD, **ITALIC}, (3, 5))]

    def test_link_and_font(self):
        """Test non-font attributes alongside fonts."""
        container, _ = compile_direct(
            'Go <a href="http://x">here</a> <font color="red">now</font>'
        )

        label = container.children[0]
        assert label.text == "Go here now"
        ranges = {a.type: (a.value, a.range) for a in label.attributes}
        assert ranges[AttributeType.LINK] == ("http://x", (3, 4))
        assert ranges[AttributeType.FOREGROUND_COLOR] == ("red", (8, 3))

    def test_every_attribute_fits(self):
        """Test that every finalized attribute lies inside its label text."""
        container, _ = compile_direct(
            "<b>a<i>b</i>c</b><u>d</u><span>e<b>f</b></span>g<br/><i>h</i>"
        )

        for label in container.find_all("label"):
            for attribute in label.attributes:
                assert attribute.range is not None
                assert attribute.fits(len(label.text))


class TestCustomElements:
    """Test custom proxies interrupting the text stream."""

    def test_line_break_splits_labels(self):
        """Test that a line break yields two labels."""
        container, _ = compile_direct("a<br/>b")

        assert [label.text for label in container.children] == ["a", "b"]

    def test_image_between_runs(self):
        """Test the order of labels and images."""
        container, _ = compile_direct("before<img/>after")

        assert [child.kind for child in container.children] == [
            "label", "image_view", "label",
        ]

    def test_view_collects_children(self):
        """Test that labels inside a view are attached to the view."""
        container, _ = compile_direct("<view><span>inside</span></view>after")

        view, label = container.children
        assert view.kind == "view"
        assert [child.text for child in view.children] == ["inside"]
        assert label.text == "after"
        assert container.add_to is None

    def test_custom_proxy_receives_block(self):
        """Test that custom handlers receive their block and the container."""
        seen = []

        def card(block, container):
            seen.append((block.name, block.attributes, container))

        container, _ = compile_direct(
            'x<card id="1"/>y', extra_proxies={"card": CustomProxy(card)}
        )

        assert seen == [("card", {"id": "1"}, container)]
        assert [label.text for label in container.children] == ["x", "y"]

    def test_end_callback_runs_after_children(self):
        """Test that end callbacks see the children compiled."""
        events = []

        def box(block, container):
            events.append("open")

        def close(container):
            events.append(("close", [child.text for child in container.children]))

        container, _ = compile_direct(
            "<box><b>in</b></box>", extra_proxies={"box": CustomProxy(box, end=close)}
        )

        assert events == ["open", ("close", ["in"])]

    def test_end_closes_sub_container(self):
        """Test that later runs leave a sub-container whose end keeps it open."""
        def panel(block, container):
            view = MemoryBackend().create_view({})
            container.add(view)
            container.add_to = view

        container, _ = compile_direct(
            "<panel><span>x</span></panel>after",
            extra_proxies={"panel": CustomProxy(panel, end=lambda container: None)},
        )

        view, label = container.children
        assert [child.text for child in view.children] == ["x"]
        assert label.text == "after"
        assert container.add_to is None

    def test_text_proxy_override(self):
        """Test a caller-defined text proxy."""
        def shout(block, container):
            return ProxyResult(
                block.text.upper(), [StyleAttribute(AttributeType.FONT, {"font_size": 20})]
            )

        container, _ = compile_direct(
            "say <shout>hi</shout>", extra_proxies={"shout": TextProxy(shout)}
        )

        label = container.children[0]
        assert label.text == "say HI"
        assert font_ranges(label) == [({"font_size": 20}, (4, 2))]

    def test_handler_errors_propagate(self):
        """Test that handler exceptions reach the caller."""
        def broken(block, container):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            compile_direct("<x>a</x>", extra_proxies={"x": TextProxy(broken)})


class TestLabels:
    """Test label creation."""

    def test_base_properties(self):
        """Test the base font size and text style patch."""
        container, _ = compile_direct(
            "abc", base_font_size=16, text_style={"color": "#333"}
        )

        properties = container.children[0].properties
        assert properties["font"] == {"font_size": 16}
        assert properties["color"] == "#333"

    def test_document_spacing(self):
        """Test paragraph and kerning attributes over the whole run."""
        container, _ = compile_direct("abc", line_spacing=4, character_spacing=1.5)

        by_type = {a.type: (a.value, a.range) for a in container.children[0].attributes}
        assert by_type[AttributeType.PARAGRAPH_STYLE] == ({"line_spacing": 4}, (0, 3))
        assert by_type[AttributeType.KERN] == (1.5, (0, 3))

    def test_android_line_spacing_on_label(self):
        """Test that Android labels carry line spacing instead of attributes."""
        container, _ = compile_direct(
            "<b>abc</b>", platform="android", line_spacing=4, character_spacing=1.5
        )

        label = container.children[0]
        assert label.properties["line_spacing"] == {"add": 4, "multiply": 1.2}
        assert [a.type for a in label.attributes] == [AttributeType.FONT]

    def test_android_without_line_spacing(self):
        """Test that Android labels get no line spacing unless requested."""
        container, _ = compile_direct("abc", platform="android")

        assert "line_spacing" not in container.children[0].properties

    def test_ios_keeps_spacing_off_label(self):
        """Test that iOS labels carry spacing only as attributes."""
        container, _ = compile_direct("abc", line_spacing=4)

        assert "line_spacing" not in container.children[0].properties

    def test_link_opens_url(self):
        """Test the default link behaviour."""
        container, compiler = compile_direct('<a href="http://x">go</a>')

        container.children[0].fire_event("link", {"url": "http://x"})

        assert compiler.backend.opened_urls == ["http://x"]

    def test_link_handler(self):
        """Test that a link handler replaces the default behaviour."""
        events = []
        container, compiler = compile_direct(
            '<a href="http://x">go</a>', link_handler=events.append
        )

        container.children[0].fire_event("link", {"url": "http://x"})

        assert events == [{"url": "http://x"}]
        assert compiler.backend.opened_urls == []

    def test_empty_markup(self):
        """Test that empty markup creates no label."""
        container, compiler = compile_direct("")

        assert container.children == []
        assert compiler.report.metrics.labels_created == 0


class TestDegradation:
    """Test malformed markup."""

    def test_stray_closing_tag(self):
        """Test that a closing tag without opening tag is dropped."""
        container, compiler = compile_direct("a</b>c")

        assert container.children[0].text == "ac"
        warnings = compiler.report.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert warnings[0].details == {"tag": "b"}

    def test_unmatched_opening_tag(self):
        """Test that an opening tag without close is dropped."""
        container, compiler = compile_direct("<b>abc")

        assert container.children[0].text == "abc"
        assert container.children[0].attributes == []
        assert compiler.report.has_warnings

    def test_unterminated_tag(self):
        """Test that an unterminated tag degrades to text."""
        container, compiler = compile_direct('x<b class="y')

        assert container.children[0].text == 'x<b class="y'
        errors = compiler.report.get_diagnostics_by_severity(DiagnosticSeverity.ERROR)
        assert len(errors) == 1


class TestMetrics:
    """Test compile metrics."""

    def test_counts(self):
        """Test element, label and custom element counters."""
        _, compiler = compile_direct("a<br/><b>b</b><img/>")
        metrics = compiler.report.metrics

        assert metrics.labels_created == 2
        assert metrics.custom_elements == 2
        assert metrics.elements_processed == 4
        assert metrics.characters_processed == len("a<br/><b>b</b><img/>")


class TestCompileMarkup:
    """Test the one-call preprocess and compile entry point."""

    def test_plain_mappings(self):
        """Test proxies and replacers given as plain mappings."""
        backend = MemoryBackend()
        proxies = builtin_proxies(ParseOptions().effective_font_transform, backend)
        container = backend.create_view({})

        result = compile_markup(
            "<!-- c --><title>Hi</title> <foo>there</foo>",
            proxies,
            {"title": {"open_tag": "<b>", "close_tag": "</b>"}},
            container,
            backend=backend,
        )

        assert result is container
        label = container.children[0]
        assert label.text == "Hi there"
        assert font_ranges(label) == [(BOLD, (0, 2))]
