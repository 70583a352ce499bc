"""Finding aggregation: merge, deduplication and severity ranking."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Iterable, Sequence

from .models import Severity

if TYPE_CHECKING:
    from .models import Finding


def merge_findings(outputs: Iterable[Sequence[Finding]]) -> list[Finding]:
    """Concatenate per-detector outputs in registry order."""
    merged: list[Finding] = []
    for output in outputs:
        merged.extend(output)
    return merged


def deduplicate_findings(findings: list[Finding]) -> list[Finding]:
    """Drop repeated reports of the same issue at the same node.

    Two findings are the same issue when kind, line, node offset and message
    match. Distinct nodes on one line (two ``appendChild`` calls) both stay.
    The first occurrence is kept.

    Args:
        findings: Findings in detection order

    Returns:
        Deduplicated list, detection order preserved
    """
    seen: set[tuple[str, int | None, int | None, str]] = set()
    result = []
    for f in findings:
        key = (f.kind.value, f.line, f.offset, f.message)
        if key in seen:
            continue
        seen.add(key)
        result.append(f)
    return result


def sort_by_severity(findings: list[Finding]) -> list[Finding]:
    """High first, then medium, then low and info; ties keep detection order."""
    # sorted() is stable, so equal ranks stay in detection order
    return sorted(findings, key=lambda f: f.severity.rank)


def aggregate_findings(outputs: Iterable[Sequence[Finding]]) -> list[Finding]:
    """Merge, deduplicate and order one file's detector outputs."""
    return sort_by_severity(deduplicate_findings(merge_findings(outputs)))


def count_by_severity(findings: Iterable[Finding]) -> dict[str, int]:
    """Severity histogram; ``info`` entries are not issues and are not counted."""
    counts: Counter[str] = Counter(
        f.severity.value for f in findings if f.severity is not Severity.INFO
    )
    return {s.value: counts.get(s.value, 0) for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)}
