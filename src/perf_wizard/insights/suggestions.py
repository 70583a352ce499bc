"""Findings derived from traditional metrics and file size."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import Finding, FindingKind, Severity, format_size

if TYPE_CHECKING:
    from ..config import ThresholdConfig
    from ..scanning.metrics import TraditionalMetrics


def metric_findings(size: int, metrics: TraditionalMetrics, thresholds: ThresholdConfig) -> list[Finding]:
    """Threshold checks over one file's lexical metrics."""
    findings = []

    if size > thresholds.file_size:
        findings.append(
            Finding(
                kind=FindingKind.LARGE_FILE,
                severity=Severity.HIGH,
                category="size",
                message=f"Large file size ({format_size(size)}) - consider splitting",
                remediation="Split the file into smaller modules",
                impact="Bundle size, loading time",
            )
        )

    if metrics.lines > thresholds.lines:
        findings.append(
            Finding(
                kind=FindingKind.LONG_FILE,
                severity=Severity.MEDIUM,
                category="maintainability",
                message=f"Long file ({metrics.lines} lines)",
                remediation="Extract cohesive parts into their own modules",
                impact="Code maintainability, review effort",
            )
        )

    if metrics.functions > thresholds.functions:
        findings.append(
            Finding(
                kind=FindingKind.HIGH_FUNCTION_COUNT,
                severity=Severity.MEDIUM,
                category="maintainability",
                message=f"High function count ({metrics.functions}) - consider modularization",
                impact="Code maintainability, testing complexity",
            )
        )

    if metrics.loops > thresholds.loops:
        findings.append(
            Finding(
                kind=FindingKind.MANY_LOOPS,
                severity=Severity.LOW,
                category="maintainability",
                message=f"Many loops and iteration calls ({metrics.loops})",
                remediation="Check for repeated passes over the same data",
                impact="Runtime performance",
            )
        )

    if metrics.complexity > thresholds.complexity:
        findings.append(
            Finding(
                kind=FindingKind.HIGH_COMPLEXITY,
                severity=Severity.HIGH,
                category="complexity",
                message=f"High cyclomatic complexity ({metrics.complexity}) - refactor needed",
                impact="Code maintainability, bug risk",
            )
        )

    if metrics.duplicated_code > thresholds.duplicated_lines:
        findings.append(
            Finding(
                kind=FindingKind.DUPLICATED_CODE,
                severity=Severity.MEDIUM,
                category="duplication",
                message=f"Duplicated code detected ({metrics.duplicated_code} instances)",
                autofixable=True,
                impact="Maintainability, bundle size",
            )
        )

    if metrics.todos > 0:
        findings.append(
            Finding(
                kind=FindingKind.TODO_COMMENTS,
                severity=Severity.LOW,
                category="maintenance",
                message=f"{metrics.todos} TODO/FIXME comments found",
                impact="Code completion status",
            )
        )

    return findings


WELL_OPTIMIZED = Finding(
    kind=FindingKind.WELL_OPTIMIZED,
    severity=Severity.INFO,
    category="quality",
    message="Code structure looks well optimized!",
    impact="No performance concerns detected",
)
