"""Analysis-related exceptions: file access, parsing, detection, aggregation.

Only AggregationError is fatal for a run. The others are raised inside the
engine and absorbed per file, degrading that file's report.
"""

from pathlib import Path

from .base import PerfWizardError


class AnalysisError(PerfWizardError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class BinaryFileError(FileAccessError):
    """Raised when a file looks binary and cannot be analyzed as text."""

    def __init__(self, filepath: Path):
        super().__init__(filepath, "binary content")


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, dialect: str, reason: str):
        super().__init__(
            f"Failed to parse {dialect} file: {filepath}",
            details={"filepath": str(filepath), "dialect": dialect, "reason": reason},
        )
        self.filepath = filepath
        self.dialect = dialect
        self.reason = reason


class DetectorError(AnalysisError):
    """Raised when a single detector fails on a file."""

    def __init__(self, detector: str, filepath: Path, reason: str):
        super().__init__(
            f"Detector {detector} failed on {filepath}",
            details={"detector": detector, "filepath": str(filepath), "reason": reason},
        )
        self.detector = detector
        self.filepath = filepath
        self.reason = reason


class AnalysisCancelled(AnalysisError):
    """Raised from inside a traversal when the file's cancel signal fires."""

    def __init__(self, filepath: Path):
        super().__init__(f"Analysis cancelled: {filepath}", details={"filepath": str(filepath)})
        self.filepath = filepath


class AggregationError(AnalysisError):
    """Raised when project aggregation hits an impossible state."""

    def __init__(self, reason: str):
        super().__init__(f"Aggregation failed: {reason}", details={"reason": reason})
        self.reason = reason
