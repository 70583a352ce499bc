"""Root of the Perf Wizard error hierarchy."""

from typing import Any, Mapping, Optional


class PerfWizardError(Exception):
    """Any failure raised by Perf Wizard itself.

    ``details`` holds structured context (file path, option name, ...) that
    is appended to the message as ``key=value`` pairs when rendered.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def _render_details(self) -> str:
        return ", ".join(f"{key}={value}" for key, value in self.details.items())

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({self._render_details()})"
