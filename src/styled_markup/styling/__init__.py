"""Rich-text attributes and run accumulation."""

from .accumulator import FinalizedRun, LabelBuffer, StyleAccumulator
from .attributes import (
    MERGEABLE_TYPES,
    AttributeType,
    ProxyResult,
    StyleAttribute,
    concat_attributes,
)

__all__ = [
    "FinalizedRun",
    "LabelBuffer",
    "StyleAccumulator",
    "MERGEABLE_TYPES",
    "AttributeType",
    "ProxyResult",
    "StyleAttribute",
    "concat_attributes",
]
