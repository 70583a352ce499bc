"""
Perf Wizard - Performance and maintainability diagnostics for JavaScript projects

Inspects JavaScript, TypeScript, JSX and Vue/Svelte sources with tree-sitter,
reports actionable findings (nested loops, leaking listeners and timers,
heavy imports, long method chains, React rendering pitfalls) and scores
every file from 0 to 100, with a letter grade for the whole project.
"""

__version__ = "2.0.0"

from .config import AnalysisSettings, load_config
from .insights import (
    AnalysisKernel,
    AnalysisRun,
    FileReport,
    Finding,
    ProjectSummary,
    analyze_paths,
    analyze_source,
)

__all__ = [
    "analyze_source",  # One in-memory file
    "analyze_paths",  # Files and directories on disk
    "AnalysisKernel",
    "AnalysisRun",
    "AnalysisSettings",
    "FileReport",
    "Finding",
    "ProjectSummary",
    "load_config",
]
