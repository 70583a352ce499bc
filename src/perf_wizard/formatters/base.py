"""Base formatter interface for Perf Wizard output rendering."""

from abc import ABC, abstractmethod

from ..insights.kernel import AnalysisRun


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, run: AnalysisRun) -> None:
        """Render a run to stdout."""

    @abstractmethod
    def format(self, run: AnalysisRun) -> str:
        """Return formatted string representation of a run."""
