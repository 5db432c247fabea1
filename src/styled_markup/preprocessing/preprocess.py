"""Textual passes run over the markup before structural compilation.

None of these passes understand nesting. They rewrite the markup string once
per compile call:

1. trim and strip comments (and newlines, unless deferred),
2. substitute replacer tags with their open/close text,
3. strip newlines when deferred past the replacers,
4. remove every tag no proxy is registered for.
"""

import re
from typing import Callable, Collection, List, Mapping, Optional, Tuple

from styled_markup.proxies import Replacer
from styled_markup.shared import (
    CompileReport,
    CorrelationLogger,
    DiagnosticSeverity,
    NewlineStripping,
    get_logger,
)

COMMENT_PATTERN = re.compile(r"<!--[\s\S]*?-->")
NEWLINE_PATTERN = re.compile(r"\r?\n")
ANY_TAG_PATTERN = re.compile(r"<(/?)([\w\-:.]+)[^>]*>")

_COMPONENT = "preprocessor"


def strip_comments(markup: str) -> str:
    """Remove ``<!-- ... -->`` comments."""
    return COMMENT_PATTERN.sub("", markup)


def strip_newlines(markup: str) -> str:
    """Remove raw newlines."""
    return NEWLINE_PATTERN.sub("", markup)


def _literal(text: str) -> Callable[["re.Match[str]"], str]:
    return lambda match: text


def apply_replacers(
    markup: str,
    replacers: Mapping[str, Replacer],
    logger: Optional[CorrelationLogger] = None,
    report: Optional[CompileReport] = None
) -> str:
    """Substitute replacer tags with their open and close text.

    Every ``<name ...>`` (self-closing included) becomes ``open_tag`` and every
    ``</name>`` becomes ``close_tag``. A replacer without one of them falls
    back to an empty string and a warning.

    Args:
        markup: Markup to rewrite
        replacers: Tag name to replacer mapping
        logger: Logger receiving warnings
        report: Report receiving diagnostics

    Returns:
        Rewritten markup
    """
    logger = logger or get_logger(__name__, component=_COMPONENT)
    for name, replacer in replacers.items():
        open_tag, close_tag = replacer.open_tag, replacer.close_tag
        for field_name, value in (("open_tag", open_tag), ("close_tag", close_tag)):
            if value is not None:
                continue
            message = (
                f"A replacer has been defined for {name} but with no {field_name}. "
                "Defaulting to empty string."
            )
            logger.warning(message, extra={"tag": name, "field": field_name})
            if report is not None:
                report.add_diagnostic(
                    DiagnosticSeverity.WARNING, message, _COMPONENT,
                    details={"tag": name, "field": field_name},
                )

        escaped = re.escape(name)
        markup = re.sub(r"<" + escaped + r"(?=[\s/>])[^>]*>", _literal(open_tag or ""), markup)
        markup = re.sub(r"</" + escaped + r"\s*>", _literal(close_tag or ""), markup)
    return markup


def remove_undefined_tags(markup: str, names: Collection[str]) -> Tuple[str, List[str]]:
    """Remove opening, closing and self-closing tags with unregistered names.

    Args:
        markup: Markup to filter
        names: Registered tag names

    Returns:
        Filtered markup and the removed tag names in order of appearance
    """
    removed: List[str] = []

    def strip(match: "re.Match[str]") -> str:
        if match.group(2) in names:
            return match.group(0)
        removed.append(match.group(2))
        return ""

    return ANY_TAG_PATTERN.sub(strip, markup or ""), removed


def preprocess(
    markup: str,
    replacers: Mapping[str, Replacer],
    names: Collection[str],
    newline_stripping: NewlineStripping = NewlineStripping.BEFORE_REPLACERS,
    logger: Optional[CorrelationLogger] = None,
    report: Optional[CompileReport] = None
) -> str:
    """Run every textual pass in order.

    Args:
        markup: Raw markup
        replacers: Effective replacers
        names: Effective proxy tag names
        newline_stripping: Whether newlines go before or after the replacers
        logger: Logger for warnings and debug output
        report: Report receiving diagnostics and the stripped-tag count

    Returns:
        Markup ready for structural compilation
    """
    logger = logger or get_logger(__name__, component=_COMPONENT)

    markup = strip_comments((markup or "").strip())
    if newline_stripping is NewlineStripping.BEFORE_REPLACERS:
        markup = strip_newlines(markup)

    markup = apply_replacers(markup, replacers, logger, report)

    if newline_stripping is NewlineStripping.AFTER_REPLACERS:
        markup = strip_newlines(markup)

    markup, removed = remove_undefined_tags(markup, names)
    if removed:
        logger.debug("Stripped undefined tags", extra={"tags": sorted(set(removed))})
        if report is not None:
            report.metrics.tags_stripped += len(removed)
            report.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"Removed {len(removed)} undefined tag(s)",
                _COMPONENT,
                details={"tags": sorted(set(removed))},
            )
    return markup
