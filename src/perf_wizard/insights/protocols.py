"""Protocol class for detector plugins."""

from typing import Protocol

from ..config import AnalysisSettings
from ..scanning.nodes import SyntaxTree
from .models import Finding


class Detector(Protocol):
    """Detectors read a syntax tree (NEVER mutate it) and return findings.

    A detector keeps no state between calls, so one instance can serve
    every file of a run from any worker thread.
    """

    name: str
    category: str  # score model table the findings are charged to

    def applies(self, tree: SyntaxTree, settings: AnalysisSettings) -> bool: ...

    def detect(self, tree: SyntaxTree) -> list[Finding]: ...
