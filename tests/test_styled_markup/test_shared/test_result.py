"""Tests for diagnostics and compile reports."""

import pytest

from styled_markup.shared import (
    CompileMetrics,
    CompileReport,
    DiagnosticEntry,
    DiagnosticSeverity,
)


class TestDiagnosticEntry:
    """Test diagnostic validation."""

    def test_valid_entry(self):
        """Test a complete entry."""
        entry = DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "compiler")

        assert entry.timestamp > 0
        assert entry.details is None

    def test_empty_message(self):
        """Test that empty messages are rejected."""
        with pytest.raises(ValueError):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "compiler")

    def test_empty_component(self):
        """Test that empty components are rejected."""
        with pytest.raises(ValueError):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "")


class TestCompileReport:
    """Test report aggregation."""

    def test_add_and_filter(self):
        """Test adding and filtering diagnostics."""
        report = CompileReport(correlation_id="req")
        report.add_diagnostic(DiagnosticSeverity.INFO, "a", "preprocessor")
        report.add_diagnostic(DiagnosticSeverity.WARNING, "b", "compiler", {"tag": "x"})

        warnings = report.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert [d.message for d in warnings] == ["b"]
        assert warnings[0].correlation_id == "req"
        assert report.has_warnings

    def test_no_warnings(self):
        """Test that informational diagnostics are not warnings."""
        report = CompileReport()
        report.add_diagnostic(DiagnosticSeverity.INFO, "a", "preprocessor")

        assert not report.has_warnings

    def test_summary(self):
        """Test the summary dictionary."""
        report = CompileReport(correlation_id="req")
        report.add_diagnostic(DiagnosticSeverity.ERROR, "a", "compiler")
        report.metrics.labels_created = 3

        summary = report.summary()

        assert summary["correlation_id"] == "req"
        assert summary["diagnostics"] == {"ERROR": 1}
        assert summary["labels_created"] == 3


class TestCompileMetrics:
    """Test metric helpers."""

    def test_characters_per_second(self):
        """Test throughput computation."""
        assert CompileMetrics(processing_time_ms=500, characters_processed=100) \
            .characters_per_second == 200.0
        assert CompileMetrics().characters_per_second == 0.0
