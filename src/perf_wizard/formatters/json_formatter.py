"""JSON formatter for Perf Wizard."""

import json
from datetime import datetime, timezone

from .. import __version__
from ..insights.kernel import AnalysisRun
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render a run as one JSON document: summary, results, version, generatedAt."""

    def render(self, run: AnalysisRun) -> None:
        print(self.format(run))

    def format(self, run: AnalysisRun) -> str:
        data = {
            **run.to_dict(),
            "version": __version__,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(data, indent=2)
