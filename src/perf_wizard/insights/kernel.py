"""AnalysisKernel: discover files, analyze them in parallel, aggregate.

Files are independent: each worker owns one file's SourceUnit, tree and
findings, and reports are joined in discovery order before aggregation.
A per-file time budget is enforced by firing that file's cancel token from
a timer; the file then still yields a report with the traditional metrics.
"""

from __future__ import annotations

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from ..cancellation import CancellationToken
from ..config import AnalysisSettings
from ..exceptions import FileAccessError
from ..logging_config import get_logger
from ..scanning.discovery import discover_files
from .detectors import get_default_detectors
from .models import AdvancedStatus, FileReport, ProjectSummary
from .protocols import Detector
from .report import analyze_file
from .summary import summarize

ProgressCallback = Optional[Callable[[str], None]]

logger = get_logger(__name__)

_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many files the pool overhead is not worth it
_PARALLEL_MIN_FILES = 4


@dataclass(frozen=True)
class AnalysisRun:
    """Result of one run: per-file reports in discovery order plus the summary."""

    reports: tuple[FileReport, ...]
    summary: ProjectSummary

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.reports],
        }


class AnalysisKernel:
    """Orchestrate a run: discover -> analyze (parallel files) -> summarize."""

    def __init__(
        self,
        settings: Optional[AnalysisSettings] = None,
        detectors: Optional[Sequence[Detector]] = None,
    ):
        self.settings = settings or AnalysisSettings()
        self._detectors = list(detectors) if detectors is not None else get_default_detectors()
        self._max_workers = self.settings.workers or _DEFAULT_WORKERS

    def discover(self, paths: Iterable[Path | str]) -> list[tuple[Path, int]]:
        """Discover files under every root, dropping repeats."""
        seen: set[Path] = set()
        found: list[tuple[Path, int]] = []
        for root in paths:
            for path, size in discover_files(root, self.settings):
                if path in seen:
                    continue
                seen.add(path)
                found.append((path, size))
        return found

    def analyze_one(self, path: Path) -> Optional[FileReport]:
        """Analyze one file under the per-file time budget.

        Returns None for unreadable or binary files, which are excluded
        from the results rather than reported.
        """
        cancel = CancellationToken()
        timer: Optional[threading.Timer] = None
        if self.settings.timeout_seconds is not None:
            timer = threading.Timer(self.settings.timeout_seconds, cancel.cancel)
            timer.daemon = True
            timer.start()
        try:
            report = analyze_file(path, self.settings, self._detectors, cancel)
        except FileAccessError as e:
            logger.debug(f"Skipped {path}: {e.reason}")
            return None
        finally:
            if timer is not None:
                timer.cancel()

        if report.advanced_status is AdvancedStatus.CANCELLED:
            logger.warning(
                f"Analysis of {path} exceeded {self.settings.timeout_seconds}s; "
                "advanced analysis skipped"
            )
        return report

    def analyze_files(
        self, files: Sequence[Path], on_progress: ProgressCallback = None
    ) -> list[FileReport]:
        """Analyze files, returning reports in the order the files were given."""
        results: list[Optional[FileReport]] = [None] * len(files)

        def _progress(done: int) -> None:
            if on_progress is not None:
                on_progress(f"Analyzed {done}/{len(files)} files")

        if self._max_workers == 1 or len(files) < _PARALLEL_MIN_FILES:
            for i, path in enumerate(files):
                results[i] = self.analyze_one(path)
                _progress(i + 1)
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                futures = {executor.submit(self.analyze_one, path): i for i, path in enumerate(files)}
                for done, future in enumerate(as_completed(futures), 1):
                    results[futures[future]] = future.result()
                    _progress(done)

        return [r for r in results if r is not None]

    def run(self, paths: Iterable[Path | str], on_progress: ProgressCallback = None) -> AnalysisRun:
        """Execute discovery, per-file analysis and aggregation.

        Raises:
            InvalidPathError: If a root does not exist
            AggregationError: If aggregation hits an impossible state
        """
        start = time.perf_counter()

        if on_progress is not None:
            on_progress("Discovering files...")
        files = [path for path, _ in self.discover(paths)]
        logger.info(f"Discovered {len(files)} files")

        reports = self.analyze_files(files, on_progress)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        summary = summarize(reports, self.settings, execution_ms=elapsed_ms)
        logger.info(f"Analyzed {summary.total_files} files in {elapsed_ms}ms")
        return AnalysisRun(reports=tuple(reports), summary=summary)


def analyze_paths(
    paths: Iterable[Path | str],
    settings: Optional[AnalysisSettings] = None,
    on_progress: ProgressCallback = None,
) -> AnalysisRun:
    """Analyze files and directories with the default detectors."""
    return AnalysisKernel(settings).run(paths, on_progress)
