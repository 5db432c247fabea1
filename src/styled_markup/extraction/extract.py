"""Nesting-aware tag extraction.

:func:`extract` locates the first ``<name ...>`` element of a markup fragment
and its matching close tag, skipping nested elements of the same name by
counting depth while scanning forward. It never raises: a tag that is absent,
unterminated or never closed yields the empty :class:`Block`.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Pattern, Tuple

# Tag names allow prefixes (ns:tag), dashes and dots
TAG_NAME = r"[\w\-:.]+"

OPENING_TAG_PATTERN = re.compile(r"<(" + TAG_NAME + r")")
LEADING_OPENING_TAG_PATTERN = re.compile(r"^<(" + TAG_NAME + r")\s*")
LEADING_CLOSING_TAG_PATTERN = re.compile(r"^</(" + TAG_NAME + r")\s*>")
TAG_START_PATTERN = re.compile(r"</?" + TAG_NAME)

ATTRIBUTE_PATTERN = re.compile(
    r"(" + TAG_NAME + r")"
    r"(?:\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s\"'>]+))?"
)

_QUOTES = ("\"", "'")


@dataclass
class Block:
    """Boundaries and content of one matched element.

    Attributes:
        name: Tag name, None when nothing matched
        attributes: Attribute values with quotes stripped
        start: Offset of the opening ``<``
        end: Offset just past the closing ``>``
        text: Content before the first child tag
        content: Everything between the opening and closing tags
        self_closing: Whether the element was written as ``<name/>``
    """

    name: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    start: int = -1
    end: int = -1
    text: str = ""
    content: str = ""
    self_closing: bool = False

    def __bool__(self) -> bool:
        return self.name is not None

    @property
    def length(self) -> int:
        """Length of the matched region, 0 for the empty block."""
        return self.end - self.start if self else 0

    @property
    def has_trailing_markup(self) -> bool:
        """Check whether the content holds markup after its leading text."""
        return len(self.text) != len(self.content)

    def cleared(self) -> "Block":
        """Copy of this block with text and content emptied."""
        return replace(self, attributes=dict(self.attributes), text="", content="")

    @classmethod
    def text_run(cls, text: str, remainder: str = "") -> "Block":
        """Block standing for a run of plain text outside any tag."""
        return cls(
            name="span",
            start=0,
            end=len(remainder),
            text=text,
            content=remainder,
        )


def strip_quotes(value: str) -> str:
    """Remove one pair of surrounding quotes from an attribute value."""
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_attributes(source: str) -> Dict[str, str]:
    """Parse ``key="value"`` pairs of an opening tag.

    Values may be double-quoted, single-quoted or bare. Attributes written
    without a value map to an empty string.

    Args:
        source: Opening tag text after the tag name, without the final ``>``

    Returns:
        Attribute mapping in source order
    """
    attributes: Dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(source):
        key, value = match.group(1), match.group(2)
        attributes[key] = strip_quotes(value) if value is not None else ""
    return attributes


def find_tag_end(markup: str, pos: int) -> int:
    """Find the ``>`` closing an opening tag, ignoring quoted ``>``.

    Returns:
        Offset just past the ``>``, or -1 when the tag is unterminated
    """
    quote: Optional[str] = None
    for index in range(pos, len(markup)):
        char = markup[index]
        if quote:
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == ">":
            return index + 1
    return -1


def _tag_patterns(tag_name: str) -> Tuple[Pattern[str], Pattern[str]]:
    escaped = re.escape(tag_name)
    return (
        re.compile(r"<" + escaped + r"(?=[\s/>])"),
        re.compile(r"</" + escaped + r"\s*>"),
    )


def leading_text(content: str) -> str:
    """Text of a fragment up to its first opening tag."""
    match = OPENING_TAG_PATTERN.search(content)
    return content[:match.start()] if match else content


def extract(markup: str, tag_name: str) -> Block:
    """Extract the first ``tag_name`` element of a markup fragment.

    Nested elements with the same name are skipped: the matching close tag is
    the first one found while the nesting depth is zero.

    Args:
        markup: Markup fragment to search
        tag_name: Element name to match exactly

    Returns:
        The matched Block, or the empty Block when there is no complete match

    Examples:
        >>> block = extract('<b class="x">Hi <b>there</b></b>!', "b")
        >>> block.content
        'Hi <b>there</b>'
        >>> block.text, block.attributes, block.end
        ('Hi ', {'class': 'x'}, 32)
    """
    if not markup or not tag_name:
        return Block()

    opening, closing = _tag_patterns(tag_name)
    first = opening.search(markup)
    if first is None:
        return Block()

    open_end = find_tag_end(markup, first.end())
    if open_end == -1:
        return Block()

    tag_source = markup[first.end():open_end - 1].rstrip()
    self_closing = tag_source.endswith("/")
    if self_closing:
        tag_source = tag_source[:-1]
    attributes = parse_attributes(tag_source)

    if self_closing:
        return Block(
            name=tag_name,
            attributes=attributes,
            start=first.start(),
            end=open_end,
            self_closing=True,
        )

    depth = 1
    pos = open_end
    while True:
        next_close = closing.search(markup, pos)
        if next_close is None:
            return Block()

        next_open = opening.search(markup, pos, next_close.start())
        if next_open is not None:
            nested_end = find_tag_end(markup, next_open.end())
            if nested_end == -1:
                return Block()
            if not markup[next_open.end():nested_end - 1].rstrip().endswith("/"):
                depth += 1
            pos = nested_end
            continue

        depth -= 1
        if depth == 0:
            content = markup[open_end:next_close.start()]
            return Block(
                name=tag_name,
                attributes=attributes,
                start=first.start(),
                end=next_close.end(),
                text=leading_text(content),
                content=content,
            )
        pos = next_close.end()
