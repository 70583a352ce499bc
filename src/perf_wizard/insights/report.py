"""Report builder: one SourceUnit -> one FileReport.

Failures inside the syntax tree analysis never escape this module. A parse
failure, a raising detector or a fired cancellation token each degrade the
report (fewer or no advanced findings) while the traditional metrics, and
therefore a report, are always produced.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from ..cancellation import CancellationToken
from ..config import AnalysisSettings
from ..exceptions import AnalysisCancelled, DetectorError, ParsingError
from ..logging_config import get_logger
from ..scanning.adapter import NO_SCRIPT_BLOCK
from ..scanning.dialects import Dialect
from ..scanning.metrics import compute_traditional_metrics
from ..scanning.nodes import SyntaxTree
from ..scanning.source import SourceUnit, create_source_unit, read_text
from .detectors import collect_imports, get_default_detectors
from .models import AdvancedAnalysis, AdvancedStatus, FileReport, Finding
from .protocols import Detector
from .ranking import aggregate_findings
from .scoring import compute_score
from .suggestions import WELL_OPTIMIZED, metric_findings

logger = get_logger(__name__)


def advanced_enabled(path: Path, settings: AnalysisSettings) -> bool:
    """Whether the syntax tree analysis is switched on for this file."""
    if path.suffix.lower() == ".vue" and not settings.analysis.vue:
        return False
    return True


def run_detectors(
    tree: SyntaxTree,
    settings: AnalysisSettings,
    detectors: Sequence[Detector],
    cancel: Optional[CancellationToken] = None,
) -> tuple[list[list[Finding]], list[str]]:
    """Run every applicable detector against one tree.

    A detector that raises contributes nothing; the others still run.

    Returns:
        (per-detector finding lists in registry order, names of failed detectors)

    Raises:
        AnalysisCancelled: If ``cancel`` fires
    """
    outputs: list[list[Finding]] = []
    failed: list[str] = []
    for detector in detectors:
        if cancel is not None:
            cancel.raise_if_cancelled(tree.path)
        if not detector.applies(tree, settings):
            continue
        try:
            outputs.append(list(detector.detect(tree)))
        except AnalysisCancelled:
            raise
        except Exception as e:
            error = DetectorError(detector.name, tree.path, str(e))
            logger.debug(str(error))
            failed.append(detector.name)
    return outputs, failed


def _advanced_analysis(
    tree: SyntaxTree,
    settings: AnalysisSettings,
    detectors: Sequence[Detector],
    cancel: Optional[CancellationToken],
) -> AdvancedAnalysis:
    outputs, failed = run_detectors(tree, settings, detectors, cancel)
    imports, heavy = collect_imports(tree) if settings.analysis.bundle_impact else ([], [])
    return AdvancedAnalysis(
        findings=tuple(aggregate_findings(outputs)),
        imports=tuple(imports),
        heavy_imports=tuple(heavy),
        failed_detectors=tuple(failed),
    )


def _status_without_tree(unit: SourceUnit, settings: AnalysisSettings) -> AdvancedStatus:
    if unit.dialect is Dialect.TEXT:
        return AdvancedStatus.NOT_APPLICABLE
    if not advanced_enabled(unit.path, settings):
        return AdvancedStatus.DISABLED
    if unit.parse_failure is not None and unit.parse_failure.reason == NO_SCRIPT_BLOCK:
        return AdvancedStatus.NO_SCRIPT
    return AdvancedStatus.PARSE_ERROR


def build_file_report(
    unit: SourceUnit,
    settings: AnalysisSettings,
    detectors: Optional[Sequence[Detector]] = None,
    cancel: Optional[CancellationToken] = None,
    status: Optional[AdvancedStatus] = None,
) -> FileReport:
    """Combine traditional metrics, detector findings and the score.

    Args:
        unit: The file to report on
        settings: Run settings (thresholds and toggles)
        detectors: Detector registry; defaults to get_default_detectors()
        cancel: Per-file cancellation token
        status: Forces the advanced status (used when parsing was cancelled)

    Returns:
        FileReport; ``advanced`` is None whenever the tree analysis is absent
    """
    detectors = get_default_detectors() if detectors is None else detectors
    metrics = compute_traditional_metrics(unit.text)

    advanced: Optional[AdvancedAnalysis] = None
    if status is None:
        if unit.tree is None:
            status = _status_without_tree(unit, settings)
        else:
            try:
                advanced = _advanced_analysis(unit.tree, settings, detectors, cancel)
                status = AdvancedStatus.OK
            except AnalysisCancelled:
                logger.debug(f"Advanced analysis cancelled: {unit.path}")
                status = AdvancedStatus.CANCELLED

    # Traditional findings first, then detector findings; severity order wins
    findings = aggregate_findings(
        [
            metric_findings(unit.size, metrics, settings.thresholds),
            advanced.findings if advanced else (),
        ]
    )
    if not findings:
        findings = [WELL_OPTIMIZED]

    score = compute_score(
        unit.size,
        metrics,
        settings.thresholds,
        advanced.findings if advanced else None,
    )

    parse_error = None
    if unit.parse_failure is not None and status is AdvancedStatus.PARSE_ERROR:
        failure = unit.parse_failure
        parse_error = failure.reason if failure.line is None else f"{failure.reason} (line {failure.line})"
        logger.debug(str(ParsingError(unit.path, unit.dialect.value, parse_error)))

    return FileReport(
        path=unit.path,
        size=unit.size,
        dialect=unit.dialect,
        metrics=metrics,
        findings=tuple(findings),
        score=score,
        advanced=advanced,
        advanced_status=status,
        parse_error=parse_error,
    )


def analyze_source(
    text: str,
    path: Path | str = "<source>",
    settings: Optional[AnalysisSettings] = None,
    size: Optional[int] = None,
    dialect: Optional[Dialect] = None,
    detectors: Optional[Sequence[Detector]] = None,
    cancel: Optional[CancellationToken] = None,
) -> FileReport:
    """Analyze source text that is already in memory.

    Never raises for malformed source or a fired cancel token: both yield a
    report with ``advanced`` absent.

    Example:
        >>> report = analyze_source("for (;;) { for (;;) {} }", "loops.js")
        >>> report.findings[0].kind.value
        'nested-loop'
    """
    settings = settings or AnalysisSettings()
    path = Path(path)
    parse = advanced_enabled(path, settings)
    try:
        unit = create_source_unit(path, text, size=size, dialect=dialect, parse=parse, cancel=cancel)
    except AnalysisCancelled:
        logger.debug(f"Parsing cancelled: {path}")
        unit = create_source_unit(path, text, size=size, dialect=dialect, parse=False)
        return build_file_report(unit, settings, detectors, status=AdvancedStatus.CANCELLED)
    return build_file_report(unit, settings, detectors, cancel=cancel)


def analyze_file(
    path: Path | str,
    settings: Optional[AnalysisSettings] = None,
    detectors: Optional[Sequence[Detector]] = None,
    cancel: Optional[CancellationToken] = None,
) -> FileReport:
    """Read and analyze one file from disk.

    Raises:
        BinaryFileError: If the file looks binary
        FileAccessError: If the file cannot be read
    """
    path = Path(path)
    text, size = read_text(path)
    return analyze_source(text, path, settings=settings, size=size, detectors=detectors, cancel=cancel)
