"""Incremental accumulation of a styled text run.

Text proxies contribute text piece by piece. The accumulator appends each
piece to the open :class:`LabelBuffer` and ranges its attributes against the
buffer's text. Attributes contributed with whitespace-only text (typically an
element whose text lives in its children) have no offset yet and wait in the
staging list until visible text arrives.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from styled_markup.extraction import Block

from .attributes import (
    AttributeType,
    ProxyResult,
    StyleAttribute,
    concat_attributes,
)


@dataclass
class LabelBuffer:
    """Text and ranged attributes of the run being accumulated."""

    text: str = ""
    attributes: List[StyleAttribute] = field(default_factory=list)


@dataclass
class FinalizedRun:
    """A closed run, ready to become a label."""

    text: str
    attributes: List[StyleAttribute]


class StyleAccumulator:
    """Accumulator for one open run at a time.

    Attributes:
        buffer: The open run, None when no run is open
        staged: Attributes waiting for visible text
    """

    def __init__(self) -> None:
        self.buffer: Optional[LabelBuffer] = None
        self.staged: List[StyleAttribute] = []

    @property
    def is_open(self) -> bool:
        """Check whether a run is currently open."""
        return self.buffer is not None

    def open(self) -> LabelBuffer:
        """Return the open run, opening a new one if needed."""
        if self.buffer is None:
            self.buffer = LabelBuffer()
        return self.buffer

    def append(self, run: ProxyResult, source: Block) -> None:
        """Append a text proxy's contribution to the open run.

        Args:
            run: Text and attributes returned by the proxy
            source: Block the proxy was dispatched for
        """
        buffer = self.open()
        buffer.text += run.text

        if not run.text.strip():
            self.staged = concat_attributes(self.staged, run.attributes)
            return

        length = len(run.text)
        start = len(buffer.text) - length
        for attribute in concat_attributes(self.staged, run.attributes):
            if attribute.range is None:
                attribute = attribute.with_range(start, length)
            buffer.attributes.append(attribute)

        # Staged styling still applies to the rest of the source's content
        if not source.has_trailing_markup:
            self.staged = []

    def flush(
        self,
        line_spacing: Optional[float] = None,
        character_spacing: Optional[float] = None
    ) -> Optional[FinalizedRun]:
        """Close the open run.

        Document-wide paragraph and kerning attributes spanning the whole run
        are appended when requested. Attributes without a type or whose range
        falls outside the text are dropped.

        Returns:
            The finalized run, or None when no run was open or its text is empty
        """
        buffer = self.buffer
        self.reset()
        if buffer is None or not buffer.text:
            return None

        length = len(buffer.text)
        attributes = list(buffer.attributes)
        if line_spacing:
            attributes.append(StyleAttribute(
                AttributeType.PARAGRAPH_STYLE,
                {"line_spacing": line_spacing},
                (0, length),
            ))
        if character_spacing:
            attributes.append(StyleAttribute(
                AttributeType.KERN, character_spacing, (0, length)
            ))

        return FinalizedRun(
            text=buffer.text,
            attributes=[a for a in attributes if a.type is not None and a.fits(length)],
        )

    def reset(self) -> None:
        """Discard the open run and the staging list."""
        self.buffer = None
        self.staged = []
