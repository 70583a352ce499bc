"""Score model: findings and traditional metrics -> integer score in [0, 100].

Every function here is pure and uses integer arithmetic only, so a score
is reproducible and independent of the order findings are summed in.

Each finding category charges its own penalty table:

    performance   high 15, medium 8, otherwise 3
    memory        high 12, medium 6, otherwise 2
    bundle        5 per finding

Other categories (component patterns, traditional-metric findings) carry
no penalty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from .models import Severity

if TYPE_CHECKING:
    from ..config import ThresholdConfig
    from ..scanning.metrics import TraditionalMetrics
    from .models import Finding

MAX_SCORE = 100
MIN_SCORE = 0

BOTTLENECK_PENALTIES = {Severity.HIGH: 15, Severity.MEDIUM: 8}
BOTTLENECK_DEFAULT_PENALTY = 3

LEAK_PENALTIES = {Severity.HIGH: 12, Severity.MEDIUM: 6}
LEAK_DEFAULT_PENALTY = 2

HEAVY_IMPORT_PENALTY = 5

# Fallback model when the syntax tree analysis is absent
LARGE_FILE_PENALTY = 10
COMPLEXITY_PENALTY = 20
FUNCTION_COUNT_PENALTY = 10
DUPLICATION_PENALTY = 15


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def bottleneck_penalty(finding: Finding) -> int:
    return BOTTLENECK_PENALTIES.get(finding.severity, BOTTLENECK_DEFAULT_PENALTY)


def leak_penalty(finding: Finding) -> int:
    return LEAK_PENALTIES.get(finding.severity, LEAK_DEFAULT_PENALTY)


def bundle_penalty(finding: Finding) -> int:
    return HEAVY_IMPORT_PENALTY


PENALTY_TABLES = {
    "performance": bottleneck_penalty,
    "memory": leak_penalty,
    "bundle": bundle_penalty,
}


def finding_penalty(finding: Finding) -> int:
    """Points a single finding takes off the score."""
    charge = PENALTY_TABLES.get(finding.category)
    return charge(finding) if charge else 0


def score_findings(findings: Iterable[Finding]) -> int:
    """Additive penalty model over detector findings."""
    return clamp_score(MAX_SCORE - sum(finding_penalty(f) for f in findings))


def score_traditional(size: int, metrics: TraditionalMetrics, thresholds: ThresholdConfig) -> int:
    """Fallback score from file size and lexical metrics."""
    score = MAX_SCORE
    if size > thresholds.file_size:
        score -= LARGE_FILE_PENALTY
    if metrics.complexity > thresholds.complexity:
        score -= COMPLEXITY_PENALTY
    if metrics.functions > thresholds.functions:
        score -= FUNCTION_COUNT_PENALTY
    if metrics.duplicated_code > thresholds.duplicated_lines:
        score -= DUPLICATION_PENALTY
    return clamp_score(score)


def compute_score(
    size: int,
    metrics: TraditionalMetrics,
    thresholds: ThresholdConfig,
    advanced_findings: Optional[Iterable[Finding]],
) -> int:
    """Score a file.

    Args:
        size: File size in bytes
        metrics: Traditional metrics of the file
        thresholds: Limits for the fallback model
        advanced_findings: Detector findings, or None when the syntax tree
            analysis is absent

    Returns:
        Integer score in [0, 100]
    """
    if advanced_findings is not None:
        return score_findings(advanced_findings)
    return score_traditional(size, metrics, thresholds)


def grade_for(score: int) -> str:
    """Letter grade from fixed score bands."""
    if score >= 90:
        return "A+"
    if score >= 80:
        return "A"
    if score >= 70:
        return "B"
    if score >= 60:
        return "C"
    if score >= 50:
        return "D"
    return "F"
