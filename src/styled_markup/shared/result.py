"""Diagnostics and metrics produced by markup compilation.

The compiler never raises for malformed markup; instead every degradation
(a stripped tag, a replacer without an open tag, an unclosed element) is
recorded here so callers can inspect what happened after the fact.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Input was altered to keep compiling
    ERROR = auto()      # Input was dropped to keep compiling


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class CompileMetrics:
    """Counters collected during one compile pass."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_processed: int = 0
    labels_created: int = 0
    custom_elements: int = 0
    tags_stripped: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class CompileReport:
    """Diagnostics and metrics of the last compile pass of a parser."""

    correlation_id: Optional[str] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: CompileMetrics = field(default_factory=CompileMetrics)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to the report."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    @property
    def has_warnings(self) -> bool:
        """Check if the pass had to alter or drop any input."""
        return any(
            diag.severity in (DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Summarize the report as a plain dictionary."""
        counts: Dict[str, int] = {}
        for diag in self.diagnostics:
            counts[diag.severity.name] = counts.get(diag.severity.name, 0) + 1
        return {
            "correlation_id": self.correlation_id,
            "diagnostics": counts,
            "processing_time_ms": self.metrics.processing_time_ms,
            "elements_processed": self.metrics.elements_processed,
            "labels_created": self.metrics.labels_created,
            "custom_elements": self.metrics.custom_elements,
            "tags_stripped": self.metrics.tags_stripped,
        }
