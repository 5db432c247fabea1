"""Rich-text attribute types consumed by the rendering backend."""

from copy import copy
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

Range = Tuple[int, int]


class AttributeType(Enum):
    """Kinds of attribute an attributed string understands."""

    FONT = auto()              # Font descriptor patch (weight, style, size)
    KERN = auto()              # Character spacing
    PARAGRAPH_STYLE = auto()   # Paragraph settings such as line spacing
    LINK = auto()              # Tappable link target
    FOREGROUND_COLOR = auto()  # Text color
    UNDERLINE = auto()         # Underline style


# Attribute types whose values are dictionaries merged key by key
MERGEABLE_TYPES: FrozenSet[AttributeType] = frozenset({AttributeType.FONT})


@dataclass
class StyleAttribute:
    """One attribute of a run, ranged as ``(offset, length)`` once known."""

    type: Optional[AttributeType]
    value: Any = None
    range: Optional[Range] = None

    def copy(self) -> "StyleAttribute":
        """Copy with its own value dictionary."""
        value = dict(self.value) if isinstance(self.value, dict) else copy(self.value)
        return StyleAttribute(self.type, value, self.range)

    def with_range(self, offset: int, length: int) -> "StyleAttribute":
        """Copy of this attribute covering ``length`` characters from ``offset``."""
        ranged = self.copy()
        ranged.range = (offset, length)
        return ranged

    def fits(self, text_length: int) -> bool:
        """Check that the range lies within a text of the given length."""
        if self.range is None:
            return False
        offset, length = self.range
        return offset >= 0 and length >= 0 and offset + length <= text_length

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "type": self.type.name if self.type else None,
            "value": self.value,
            "range": list(self.range) if self.range is not None else None,
        }


@dataclass
class ProxyResult:
    """Contribution of a text proxy: its text and the attributes styling it."""

    text: str = ""
    attributes: List[StyleAttribute] = field(default_factory=list)

    @classmethod
    def coerce(cls, value: Any) -> "ProxyResult":
        """Accept a ProxyResult, a ``{"text", "attributes"}`` dict, a string or None."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, dict):
            return cls(
                text=value.get("text") or "",
                attributes=list(value.get("attributes") or []),
            )
        raise TypeError(
            f"Text proxy handlers must return ProxyResult, got {type(value).__name__}"
        )


def concat_attributes(
    haystack: Iterable[StyleAttribute],
    needles: Iterable[StyleAttribute]
) -> List[StyleAttribute]:
    """Concatenate two attribute lists, merging mergeable types.

    A needle whose type is in ``MERGEABLE_TYPES`` is merged (needle keys
    win) into a haystack entry of the same type and range instead of being
    appended. Needles never merge with each other. Inputs are left untouched.

    Examples:
        >>> bold = StyleAttribute(AttributeType.FONT, {"font_weight": "bold"})
        >>> italic = StyleAttribute(AttributeType.FONT, {"font_style": "italic"})
        >>> [a.value for a in concat_attributes([bold], [italic])]
        [{'font_weight': 'bold', 'font_style': 'italic'}]
    """
    merged = [attribute.copy() for attribute in haystack]
    appended = []
    for needle in needles:
        target = None
        if needle.type in MERGEABLE_TYPES:
            target = next(
                (a for a in merged if a.type == needle.type and a.range == needle.range),
                None,
            )
        if target is not None and isinstance(target.value, dict):
            target.value = {**target.value, **(needle.value or {})}
        else:
            appended.append(needle.copy())
    return merged + appended
