"""Summary formatter: the project summary panel only."""

from typing import Optional

from rich.console import Console

from ..insights.kernel import AnalysisRun
from .base import BaseFormatter
from .rich_formatter import capture, print_summary


class SummaryFormatter(BaseFormatter):
    """Render grade, totals and issue counts without per-file detail."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, run: AnalysisRun) -> None:
        print_summary(self.console, run.summary)

    def format(self, run: AnalysisRun) -> str:
        return capture(lambda console: print_summary(console, run.summary))
