"""Exception hierarchy for Perf Wizard."""

from .analysis import (
    AggregationError,
    AnalysisCancelled,
    AnalysisError,
    BinaryFileError,
    DetectorError,
    FileAccessError,
    ParsingError,
)
from .base import PerfWizardError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "PerfWizardError",
    "AnalysisError",
    "FileAccessError",
    "BinaryFileError",
    "ParsingError",
    "DetectorError",
    "AnalysisCancelled",
    "AggregationError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
