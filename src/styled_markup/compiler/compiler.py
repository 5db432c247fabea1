"""Recursive descent compiler turning preprocessed markup into native views.

The markup is a flat list of siblings interleaved with nested elements. The
compiler walks it front to back. Each element is delimited with
:func:`~styled_markup.extraction.extract` and dispatched to its proxy:

- text proxies feed the open run of the :class:`StyleAccumulator`,
- custom proxies first close the open run into a label, then attach their
  own element.

Container-like elements are dispatched before their children are compiled,
so styling they contribute is staged before the children's text arrives.
"""

import time
from typing import Any, Dict, Mapping, Optional, Union

from styled_markup.extraction import (
    LEADING_CLOSING_TAG_PATTERN,
    LEADING_OPENING_TAG_PATTERN,
    TAG_START_PATTERN,
    Block,
    extract,
    find_tag_end,
)
from styled_markup.preprocessing import preprocess
from styled_markup.proxies import (
    CustomProxy,
    ProxyDefinition,
    ProxyRegistry,
    ReplacerRegistry,
    TextProxy,
)
from styled_markup.rendering import MemoryBackend, RenderBackend, attach
from styled_markup.shared import (
    CompileReport,
    DiagnosticSeverity,
    ParseOptions,
    get_logger,
)
from styled_markup.styling import ProxyResult, StyleAccumulator

_COMPONENT = "compiler"

ANDROID = "android"
ANDROID_LINE_SPACING_MULTIPLIER = 1.2


class MarkupCompiler:
    """Compiler state for one top-level compile call.

    A compiler instance owns the accumulator shared by every recursion level
    and must not be reused concurrently or re-entered from a proxy handler.

    Attributes:
        proxies: Effective proxy registry of the call
        container: Output container receiving labels and custom elements
        backend: Rendering backend creating labels
        options: Options of the call
        report: Diagnostics and metrics of the call
    """

    def __init__(
        self,
        proxies: ProxyRegistry,
        container: Any,
        backend: RenderBackend,
        options: Optional[ParseOptions] = None,
        report: Optional[CompileReport] = None
    ) -> None:
        self.proxies = proxies
        self.container = container
        self.backend = backend
        self.options = options or ParseOptions()
        self.report = report or CompileReport(correlation_id=self.options.correlation_id)
        self.accumulator = StyleAccumulator()
        self.logger = get_logger(__name__, self.options.correlation_id, _COMPONENT)

    def compile(self, markup: str) -> Any:
        """Compile preprocessed markup into the container.

        Args:
            markup: Markup already stripped of comments, replacers and
                undefined tags

        Returns:
            The container
        """
        start_time = time.time()
        self.logger.info(
            "Starting markup compilation",
            extra={"content_length": len(markup)}
        )

        self.walk(markup)
        self.finalize_label()

        metrics = self.report.metrics
        metrics.characters_processed += len(markup)
        metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.info(
            "Markup compilation completed",
            extra={
                "elements_processed": metrics.elements_processed,
                "labels_created": metrics.labels_created,
                "custom_elements": metrics.custom_elements,
                "processing_time_ms": metrics.processing_time_ms,
            }
        )
        return self.container

    def walk(self, data: str) -> None:
        """Compile a fragment of sibling elements and text runs, in order."""
        while data:
            opening = LEADING_OPENING_TAG_PATTERN.match(data)
            if opening is None:
                data = self._compile_text(data)
                continue

            block = extract(data, opening.group(1))
            if not block:
                data = self._drop_unmatched_tag(data, opening.group(1), opening.end())
                continue

            data = data[:block.start] + data[block.end:]
            self._compile_block(block)

    def _compile_text(self, data: str) -> str:
        """Dispatch the leading text run of a fragment, return the rest."""
        stray = LEADING_CLOSING_TAG_PATTERN.match(data)
        if stray is not None:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Dropped stray closing tag </{stray.group(1)}>",
                {"tag": stray.group(1)},
            )
            return data[stray.end():]

        next_tag = TAG_START_PATTERN.search(data, 1)
        if next_tag is None:
            text, rest = data, ""
        else:
            text, rest = data[:next_tag.start()], data[next_tag.start():]

        self.dispatch(Block.text_run(text, rest))
        return rest

    def _drop_unmatched_tag(self, data: str, name: str, name_end: int) -> str:
        """Drop an opening tag without a matching close, return the rest."""
        tag_end = find_tag_end(data, name_end)
        if tag_end == -1:
            # Unterminated tag: the remainder degrades to plain text
            self._diagnose(
                DiagnosticSeverity.ERROR,
                f"Unterminated <{name}> tag compiled as text",
                {"tag": name},
            )
            self.dispatch(Block.text_run(data))
            return ""

        self._diagnose(
            DiagnosticSeverity.WARNING,
            f"Dropped <{name}> tag without matching close tag",
            {"tag": name},
        )
        return data[tag_end:]

    def _compile_block(self, block: Block) -> None:
        """Dispatch an element and compile its children."""
        content = block.content
        if LEADING_OPENING_TAG_PATTERN.match(content):
            definition = self.dispatch(block)
            self.walk(content)
        elif content:
            if block.has_trailing_markup:
                definition = self.dispatch(block.cleared())
                self.walk(content)
            else:
                definition = self.dispatch(block)
        else:
            definition = self.dispatch(block)

        if isinstance(definition, CustomProxy) and definition.end is not None:
            self.finalize_label()
            # Sub-containers opened by the element close with it
            if hasattr(self.container, "add_to"):
                self.container.add_to = None
            definition.end(self.container)

    def dispatch(self, element: Block) -> ProxyDefinition:
        """Hand an element to its proxy.

        Returns:
            The proxy definition the element was dispatched to
        """
        self.report.metrics.elements_processed += 1
        definition = self.proxies.resolve(element.name)

        if isinstance(definition, TextProxy):
            run = ProxyResult.coerce(definition.handler(element, self.container))
            self.accumulator.append(run, element)
        else:
            self.finalize_label()
            self.report.metrics.custom_elements += 1
            definition.handler(element, self.container)
        return definition

    def finalize_label(self) -> None:
        """Close the open run into a label attached to the container.

        On iOS document spacing becomes paragraph and kerning attributes over
        the whole run. Android attributed strings support neither, so line
        spacing is set on the label instead and character spacing is ignored.
        """
        android = self.backend.platform == ANDROID
        if android:
            run = self.accumulator.flush()
        else:
            run = self.accumulator.flush(
                self.options.line_spacing, self.options.character_spacing
            )
        if run is None:
            return

        attributed = self.backend.create_attributed_string(run.text, run.attributes)
        properties: Dict[str, Any] = {
            "attributed_string": attributed,
            "font": {"font_size": self.options.base_font_size},
        }
        if android and self.options.line_spacing:
            properties["line_spacing"] = {
                "add": self.options.line_spacing,
                "multiply": ANDROID_LINE_SPACING_MULTIPLIER,
            }
        properties.update(self.options.text_style)

        label = self.backend.create_label(properties)
        label.add_event_listener("link", self._handle_link)
        attach(self.container, label)

        self.report.metrics.labels_created += 1
        self.logger.debug(
            "Label finalized",
            extra={"text_length": len(run.text), "attribute_count": len(run.attributes)}
        )

    def _handle_link(self, event: Dict[str, Any]) -> None:
        if self.options.link_handler is not None:
            self.options.link_handler(event)
            return
        url = event.get("url")
        if url:
            self.backend.open_url(url)

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Dict[str, Any]
    ) -> None:
        if severity is DiagnosticSeverity.ERROR:
            self.logger.error(message, extra=details)
        else:
            self.logger.warning(message, extra=details)
        self.report.add_diagnostic(severity, message, _COMPONENT, details=details)


def compile_markup(
    markup: str,
    proxies: Union[ProxyRegistry, Mapping[str, Any]],
    replacers: Union[ReplacerRegistry, Mapping[str, Any], None],
    container: Any,
    options: Optional[ParseOptions] = None,
    backend: Optional[RenderBackend] = None,
    report: Optional[CompileReport] = None
) -> Any:
    """Preprocess and compile markup into a container in one pass.

    Args:
        markup: Raw markup string
        proxies: Effective proxies, a registry or a tag-name mapping
        replacers: Effective replacers, a registry or a tag-name mapping
        container: Output container
        options: Options of the call
        backend: Rendering backend, in-memory views when omitted
        report: Report receiving diagnostics and metrics

    Returns:
        The container
    """
    options = options or ParseOptions()
    if not isinstance(proxies, ProxyRegistry):
        proxies = ProxyRegistry(proxies)
    if not isinstance(replacers, ReplacerRegistry):
        replacers = ReplacerRegistry(replacers)
    report = report or CompileReport(correlation_id=options.correlation_id)

    prepared = preprocess(
        markup or "",
        replacers.entries,
        proxies.names(),
        options.newline_stripping,
        get_logger(__name__, options.correlation_id, "preprocessor"),
        report,
    )
    compiler = MarkupCompiler(proxies, container, backend or MemoryBackend(), options, report)
    return compiler.compile(prepared)
