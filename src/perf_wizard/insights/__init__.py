"""Diagnostic engine: detectors, aggregation, scoring and reports."""

from .kernel import AnalysisKernel, AnalysisRun, analyze_paths
from .models import (
    AdvancedAnalysis,
    AdvancedStatus,
    CriticalIssue,
    FileReport,
    Finding,
    FindingKind,
    ProjectSummary,
    Severity,
)
from .report import analyze_file, analyze_source, build_file_report
from .scoring import compute_score, grade_for, score_findings
from .summary import summarize

__all__ = [
    "AdvancedAnalysis",
    "AdvancedStatus",
    "AnalysisKernel",
    "AnalysisRun",
    "CriticalIssue",
    "FileReport",
    "Finding",
    "FindingKind",
    "ProjectSummary",
    "Severity",
    "analyze_file",
    "analyze_paths",
    "analyze_source",
    "build_file_report",
    "compute_score",
    "grade_for",
    "score_findings",
    "summarize",
]
