"""Tag extraction for styled markup.

Key Components:
    extract: Locate the first nesting-aware element of a markup fragment
    Block: Boundaries, attributes, text and content of a matched element
"""

from .extract import (
    LEADING_CLOSING_TAG_PATTERN,
    LEADING_OPENING_TAG_PATTERN,
    OPENING_TAG_PATTERN,
    TAG_START_PATTERN,
    Block,
    extract,
    find_tag_end,
    leading_text,
    parse_attributes,
    strip_quotes,
)

__all__ = [
    "LEADING_CLOSING_TAG_PATTERN",
    "LEADING_OPENING_TAG_PATTERN",
    "OPENING_TAG_PATTERN",
    "TAG_START_PATTERN",
    "Block",
    "extract",
    "find_tag_end",
    "leading_text",
    "parse_attributes",
    "strip_quotes",
]
