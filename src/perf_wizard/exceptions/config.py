"""Errors in user input: analysis roots and settings values.

These are fatal for a run. The CLI reports them and exits with status 1.
"""

from pathlib import Path
from typing import Any

from .base import PerfWizardError


class ConfigurationError(PerfWizardError):
    """The run cannot start with the given input."""


class InvalidPathError(ConfigurationError):
    """An analysis root does not exist or cannot be walked."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path: {path}", {"path": str(path), "reason": reason})


class InvalidConfigError(ConfigurationError):
    """A settings key is unknown or its value is out of range."""

    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            {"key": key, "value": str(value), "reason": reason},
        )
