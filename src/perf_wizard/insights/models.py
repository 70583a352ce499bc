"""Data models for the diagnostic engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ..scanning.dialects import Dialect
from ..scanning.metrics import TraditionalMetrics

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(num_bytes: int) -> str:
    """Human readable size with a 1024 base.

    Example:
        >>> format_size(1536)
        '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort key: 0 for high, growing toward info."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2, Severity.INFO: 3}


class FindingKind(str, Enum):
    # syntax tree detectors
    NESTED_LOOP = "nested-loop"
    LONG_CHAIN = "long-chain"
    DOM_IN_LOOP = "dom-in-loop"
    EVENT_LISTENER_LEAK = "event-listener-leak"
    TIMER_LEAK = "timer-leak"
    HEAVY_IMPORT = "heavy-import"
    REACT_ANTI_PATTERN = "react-anti-pattern"
    REACT_OPTIMIZATION = "react-optimization"
    # traditional metrics
    LARGE_FILE = "large-file"
    LONG_FILE = "long-file"
    HIGH_FUNCTION_COUNT = "high-function-count"
    MANY_LOOPS = "many-loops"
    HIGH_COMPLEXITY = "high-complexity"
    DUPLICATED_CODE = "duplicated-code"
    TODO_COMMENTS = "todo-comments"
    WELL_OPTIMIZED = "well-optimized"


@dataclass(frozen=True)
class Finding:
    """One reported issue.

    Attributes:
        kind: What was detected
        severity: high | medium | low | info
        category: Tag used by the score model and output grouping
            ("performance", "memory", "bundle", "react", ...)
        message: One-line description
        line: 1-indexed source line, None for file-level findings
        remediation: Suggested fix
        autofixable: Whether a mechanical fix exists
        impact: What the issue affects ("Runtime performance", ...)
        offset: Start byte of the reported node; tells apart two findings
            of the same kind on one line
    """

    kind: FindingKind
    severity: Severity
    category: str
    message: str
    line: Optional[int] = None
    remediation: Optional[str] = None
    autofixable: bool = False
    impact: Optional[str] = None
    offset: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "category": self.category,
            "message": self.message,
            "line": self.line,
            "remediation": self.remediation,
            "autofix": self.autofixable,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class ImportRecord:
    source: str
    specifiers: tuple[str, ...]
    is_default: bool
    is_namespace: bool
    line: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "specifiers": list(self.specifiers),
            "isDefaultImport": self.is_default,
            "isNamespaceImport": self.is_namespace,
            "line": self.line,
        }


@dataclass(frozen=True)
class HeavyImport:
    library: str
    estimated_size: str
    alternative: str
    line: int
    offset: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "library": self.library,
            "estimatedSize": self.estimated_size,
            "alternative": self.alternative,
            "line": self.line,
        }


class AdvancedStatus(str, Enum):
    """Outcome of the syntax tree analysis of one file."""

    OK = "ok"
    PARSE_ERROR = "parse-error"
    NO_SCRIPT = "no-script"  # markup without a <script> block
    NOT_APPLICABLE = "not-applicable"  # plain text dialect
    DISABLED = "disabled"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class AdvancedAnalysis:
    """Syntax tree analysis results, present only when the tree was analyzed.

    Attributes:
        findings: Detector findings, already ordered by the aggregator
        imports: Every import declaration of the file
        heavy_imports: Imports matched against the heavy library table
        failed_detectors: Names of detectors that raised and were skipped
    """

    findings: tuple[Finding, ...] = ()
    imports: tuple[ImportRecord, ...] = ()
    heavy_imports: tuple[HeavyImport, ...] = ()
    failed_detectors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "imports": [i.to_dict() for i in self.imports],
            "heavyImports": [h.to_dict() for h in self.heavy_imports],
            "failedDetectors": list(self.failed_detectors),
        }


@dataclass(frozen=True)
class FileReport:
    """Everything known about one analyzed file.

    ``score`` is a pure function of the findings and traditional metrics.
    ``advanced`` is None whenever the syntax tree analysis is absent;
    ``advanced_status`` says why.
    """

    path: Path
    size: int
    dialect: Dialect
    metrics: TraditionalMetrics
    findings: tuple[Finding, ...]
    score: int
    advanced: Optional[AdvancedAnalysis] = None
    advanced_status: AdvancedStatus = AdvancedStatus.NOT_APPLICABLE
    parse_error: Optional[str] = None

    @property
    def has_advanced(self) -> bool:
        return self.advanced is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": str(self.path),
            "size": self.size,
            "sizeFormatted": format_size(self.size),
            "dialect": self.dialect.value,
            "type": self.path.suffix.lstrip(".").upper() or "FILE",
            "performanceScore": self.score,
            "findings": [f.to_dict() for f in self.findings],
            "traditionalAnalysis": self.metrics.to_dict(),
            "advanced": self.advanced.to_dict() if self.advanced else None,
            "advancedStatus": self.advanced_status.value,
            "parseError": self.parse_error,
        }


@dataclass(frozen=True)
class CriticalIssue:
    """A high severity finding together with the file it came from."""

    path: Path
    finding: Finding

    def to_dict(self) -> dict[str, Any]:
        return {"file": str(self.path), **self.finding.to_dict()}


@dataclass(frozen=True)
class ProjectSummary:
    """Run-level aggregate of all file reports."""

    total_files: int
    total_size: int
    average_score: int
    grade: str
    issue_count: dict[str, int] = field(default_factory=dict)
    critical_issues: tuple[CriticalIssue, ...] = ()
    estimated_bundle_size: int = 0
    execution_ms: int = 0
    score_threshold: int = 80

    @property
    def passed_threshold(self) -> bool:
        return self.average_score >= self.score_threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "totalSize": self.total_size,
            "totalSizeFormatted": format_size(self.total_size),
            "averageScore": self.average_score,
            "grade": self.grade,
            "issueCount": dict(self.issue_count),
            "criticalIssues": [issue.to_dict() for issue in self.critical_issues],
            "estimatedBundleSize": self.estimated_bundle_size,
            "estimatedBundleSizeFormatted": format_size(self.estimated_bundle_size),
            "executionTime": self.execution_ms,
            "scoreThreshold": self.score_threshold,
            "passedThreshold": self.passed_threshold,
        }
