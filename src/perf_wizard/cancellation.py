"""Cooperative cancellation for per-file analysis.

A token is handed to the adapter and the detectors of exactly one file.
Long traversals poll it and abandon work by raising AnalysisCancelled; the
report builder catches that and keeps the traditional metrics.
"""

from __future__ import annotations

import threading
from pathlib import Path

from .exceptions import AnalysisCancelled


class CancellationToken:
    """Thread-safe, one-way cancel flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, filepath: Path | str = "<source>") -> None:
        if self._event.is_set():
            raise AnalysisCancelled(Path(filepath))
