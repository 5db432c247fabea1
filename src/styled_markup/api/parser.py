"""Parser API with progressive disclosure for styled markup.

Simple use goes through the module-level functions, which share one
process-wide default parser::

    >>> from styled_markup import process, override_proxies
    >>> container = process("<b>Hi</b> there")
    >>> container.children[0].text
    'Hi there'

Advanced use creates :class:`MarkupParser` instances, each with its own
registries, rendering backend and default container, so tests and
concurrent callers never share mutable registry state.
"""

import time
import uuid
from typing import Any, Dict, Mapping, Optional, Union

from styled_markup.compiler import compile_markup
from styled_markup.proxies import (
    ProxyRegistry,
    ProxyType,
    ReplacerRegistry,
    builtin_proxies,
)
from styled_markup.rendering import MemoryBackend, RenderBackend
from styled_markup.shared import CompileReport, ParseOptions, get_logger

OptionsType = Union[ParseOptions, Dict[str, Any], None]

# Aliases kept for handlers written against the type constants
TYPE_TEXT = ProxyType.TEXT
TYPE_CUSTOM = ProxyType.CUSTOM

DEFAULT_CONTAINER_PROPERTIES: Dict[str, Any] = {
    "layout": "vertical",
    "height": "auto",
    "width": "auto",
}

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


class MarkupParser:
    """Markup parser with its own registries and default container.

    Attributes:
        backend: Rendering backend creating views
        correlation_id: Default correlation ID of compile calls
        last_report: Diagnostics and metrics of the latest call

    Examples:
        >>> parser = MarkupParser()
        >>> container = parser.process("before<img/>after")
        >>> [child.kind for child in container.children]
        ['label', 'image_view', 'label']
    """

    def __init__(
        self,
        backend: Optional[RenderBackend] = None,
        container: Any = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            backend: Rendering backend, in-memory views when omitted
            container: Default output container
            correlation_id: Default correlation ID of compile calls
        """
        self.backend = backend or MemoryBackend()
        self.correlation_id = correlation_id
        self.last_report: Optional[CompileReport] = None
        self.logger = get_logger(__name__, correlation_id, "markup_parser")

        self._container = container
        self._proxies = ProxyRegistry()
        self._replacers = ReplacerRegistry()

        self._process_count = 0
        self._total_processing_time = 0.0

    def override_proxies(self, proxies: Mapping[str, Any]) -> None:
        """Register proxies; later registrations win for the same tag name."""
        self._proxies.override(proxies)
        self.logger.debug("Proxies registered", extra={"tags": sorted(proxies)})

    def override_replacers(self, replacers: Mapping[str, Any]) -> None:
        """Register replacers; later registrations win for the same tag name."""
        self._replacers.override(replacers)
        self.logger.debug("Replacers registered", extra={"tags": sorted(replacers)})

    def set_container(self, container: Any) -> None:
        """Set the default output container."""
        self._container = container

    def get_container(self) -> Any:
        """Get the default output container, None before the first call."""
        return self._container

    container = property(get_container, set_container)

    def proxy_registry(self, options: Optional[ParseOptions] = None) -> ProxyRegistry:
        """Effective proxy registry of a call.

        Layers, highest precedence first: per-call proxies, registered
        proxies, built-in proxies.
        """
        options = options or ParseOptions()
        base = builtin_proxies(options.effective_font_transform, self.backend)
        registry = ProxyRegistry(base, self._proxies.entries)
        return registry.layered(options.proxies)

    def replacer_registry(self, options: Optional[ParseOptions] = None) -> ReplacerRegistry:
        """Effective replacer registry of a call."""
        options = options or ParseOptions()
        return self._replacers.layered(options.replacers)

    def process(self, markup: str, options: OptionsType = None) -> Any:
        """Compile markup into the output container.

        Args:
            markup: Markup string
            options: ParseOptions or option dictionary

        Returns:
            The populated container; the same object across calls unless
            overridden through options or :meth:`set_container`

        Raises:
            OptionsValidationError: When the options are invalid
        """
        start_time = time.time()
        opts = ParseOptions.coerce(options)
        if opts.correlation_id is None:
            opts = opts.override(
                correlation_id=self.correlation_id or uuid.uuid4().hex[:12]
            )
        logger = self.logger.bind(opts.correlation_id)
        report = CompileReport(correlation_id=opts.correlation_id)
        self.last_report = report

        markup = markup or ""
        logger.info(
            "Starting markup processing",
            extra={
                "content_length": len(markup),
                "preview": (
                    markup[:PREVIEW_LENGTH] + "..."
                    if len(markup) > PREVIEW_LENGTH else markup
                ),
            }
        )

        container = opts.container if opts.container is not None else self._container
        if container is None:
            container = self.backend.create_scroll_view(dict(DEFAULT_CONTAINER_PROPERTIES))
        self._container = container

        compile_markup(
            markup,
            self.proxy_registry(opts),
            self.replacer_registry(opts),
            container,
            opts,
            self.backend,
            report,
        )

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        report.metrics.processing_time_ms = processing_time
        self._process_count += 1
        self._total_processing_time += processing_time

        logger.info(
            "Markup processing completed",
            extra={
                "processing_time_ms": processing_time,
                "labels_created": report.metrics.labels_created,
                "diagnostics_count": len(report.diagnostics),
            }
        )

        if opts.callback is not None:
            opts.callback()
        return container

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_calls": self._process_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._process_count
                if self._process_count > 0 else 0.0
            ),
            "registered_proxies": sorted(self._proxies.names()),
            "registered_replacers": sorted(self._replacers.names()),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._process_count = 0
        self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")


_default_parser = MarkupParser()


def get_default_parser() -> MarkupParser:
    """Process-wide parser used by the module-level functions."""
    return _default_parser


def process(markup: str, options: OptionsType = None) -> Any:
    """Compile markup with the process-wide parser.

    Args:
        markup: Markup string
        options: ParseOptions or option dictionary

    Returns:
        The populated container

    Examples:
        >>> container = process("a<br/>b")
        >>> [label.text for label in container.find_all("label")][-2:]
        ['a', 'b']
    """
    return _default_parser.process(markup, options)


def override_proxies(proxies: Mapping[str, Any]) -> None:
    """Register proxies on the process-wide parser.

    Registration is not synchronized; callers registering from several
    threads must serialize it themselves.
    """
    _default_parser.override_proxies(proxies)


def override_replacers(replacers: Mapping[str, Any]) -> None:
    """Register replacers on the process-wide parser."""
    _default_parser.override_replacers(replacers)


def set_container(container: Any) -> None:
    """Set the default container of the process-wide parser."""
    _default_parser.set_container(container)


def get_container() -> Any:
    """Get the default container of the process-wide parser."""
    return _default_parser.get_container()
