"""Shared utilities for styled markup compilation.

This module provides shared data structures, configuration objects, result
types and logging helpers used across all processing layers.
"""

from .config import (
    DEFAULT_BASE_FONT_SIZE,
    DEFAULT_FONT_TRANSFORM,
    NewlineStripping,
    OptionsError,
    OptionsValidationError,
    ParseOptions,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    CompileMetrics,
    CompileReport,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "DEFAULT_BASE_FONT_SIZE",
    "DEFAULT_FONT_TRANSFORM",
    "NewlineStripping",
    "OptionsError",
    "OptionsValidationError",
    "ParseOptions",
    "CorrelationLogger",
    "get_logger",
    "CompileMetrics",
    "CompileReport",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
