"""Project aggregator: file reports -> ProjectSummary."""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import AnalysisSettings
from ..exceptions import AggregationError
from ..scanning.dialects import BUNDLE_EXTENSIONS
from .models import CriticalIssue, FileReport, ProjectSummary, Severity
from .ranking import count_by_severity
from .scoring import MAX_SCORE, MIN_SCORE, grade_for


def average_score(reports: Sequence[FileReport]) -> int:
    """Arithmetic mean of file scores, rounded half up; 0 for no files."""
    if not reports:
        return 0
    total = sum(r.score for r in reports)
    # Integer round-half-up, avoids banker's rounding of round()
    return (2 * total + len(reports)) // (2 * len(reports))


def critical_issues(reports: Sequence[FileReport], limit: int) -> list[CriticalIssue]:
    """First ``limit`` high severity findings in file processing order.

    Not re-sorted by magnitude: the first files processed fill the list.
    """
    issues: list[CriticalIssue] = []
    for report in reports:
        for finding in report.findings:
            if len(issues) >= limit:
                return issues
            if finding.severity is Severity.HIGH:
                issues.append(CriticalIssue(path=report.path, finding=finding))
    return issues


def estimated_bundle_size(reports: Sequence[FileReport]) -> int:
    """Total raw size of script files that would end up in a bundle."""
    return sum(r.size for r in reports if r.path.suffix.lower() in BUNDLE_EXTENSIONS)


def summarize(
    reports: Sequence[FileReport],
    settings: Optional[AnalysisSettings] = None,
    execution_ms: int = 0,
) -> ProjectSummary:
    """Aggregate file reports into the run summary.

    Raises:
        AggregationError: If a report violates the score bounds or a size
            is negative (a bug upstream, fatal for the run)
    """
    settings = settings or AnalysisSettings()

    for report in reports:
        if not MIN_SCORE <= report.score <= MAX_SCORE:
            raise AggregationError(f"score {report.score} out of range for {report.path}")
        if report.size < 0:
            raise AggregationError(f"negative size for {report.path}")

    average = average_score(reports)
    issue_count = count_by_severity(f for r in reports for f in r.findings)

    return ProjectSummary(
        total_files=len(reports),
        total_size=sum(r.size for r in reports),
        average_score=average,
        grade=grade_for(average),
        issue_count=issue_count,
        critical_issues=tuple(critical_issues(reports, settings.top_findings)),
        estimated_bundle_size=estimated_bundle_size(reports),
        execution_ms=execution_ms,
        score_threshold=settings.thresholds.performance_score,
    )
