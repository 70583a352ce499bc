"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisSettings, load_config

console = Console()
err_console = Console(stderr=True)


def split_patterns(values: Optional[list[str]]) -> Optional[list[str]]:
    """Flatten repeated and comma-separated ``--exclude`` values."""
    if not values:
        return None
    patterns = [p.strip() for value in values for p in value.split(",")]
    return [p for p in patterns if p]


def resolve_output_format(json_output: bool, summary: bool, detailed: bool) -> Optional[str]:
    if json_output:
        return "json"
    if summary:
        return "summary"
    if detailed:
        return "detailed"
    return None


def resolve_settings(
    config: Optional[Path] = None,
    output_format: Optional[str] = None,
    quiet: bool = False,
    debug: bool = False,
    exclude: Optional[list[str]] = None,
    score_threshold: Optional[int] = None,
    no_react: bool = False,
    no_vue: bool = False,
    autofix: bool = False,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
) -> AnalysisSettings:
    """Build settings from CLI options.

    Flags that were not given are left out, so config files keep their values.
    """
    overrides: dict = {
        "output_format": output_format,
        "exclude": split_patterns(exclude),
        "workers": workers,
        "timeout_seconds": timeout,
    }
    if quiet:
        overrides["log_level"] = "quiet"
    if debug:
        overrides["log_level"] = "debug"
    if autofix:
        overrides["autofix"] = True
    if score_threshold is not None:
        overrides["thresholds"] = {"performance_score": score_threshold}

    toggles = {}
    if no_react:
        toggles["react"] = False
    if no_vue:
        toggles["vue"] = False
    if toggles:
        overrides["analysis"] = toggles

    return load_config(config_file=config, **overrides)
