"""Configuration loading and management for Perf Wizard.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisSettings)
    2. Project config (./.perf-wizardrc, ./.perf-wizardrc.json, ./perf-wizard.toml)
    3. Explicit config file
    4. Environment variables (PERF_WIZARD_* prefix)
    5. CLI overrides (passed as kwargs)

The resulting settings value is immutable and is passed explicitly into the
engine for each run.

Example:
    >>> settings = load_config(log_level="debug", workers=4)
    >>> settings.log_level
    'debug'
    >>> settings.thresholds.file_size
    100000
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, PerfWizardError

OutputFormat = Literal["console", "json", "summary", "detailed"]
LogLevel = Literal["quiet", "info", "debug"]

OUTPUT_FORMATS = ("console", "json", "summary", "detailed")
LOG_LEVELS = ("quiet", "info", "debug")

PROJECT_CONFIG_FILES = (".perf-wizardrc", ".perf-wizardrc.json", "perf-wizard.toml")

DEFAULT_EXCLUDE = (
    "node_modules",
    "dist",
    "build",
    ".git",
    "coverage",
    ".nyc_output",
    "*.min.js",
)


@dataclass(frozen=True)
class ThresholdConfig:
    """Limits that turn traditional metrics into findings.

    Attributes:
        file_size: Bytes above which a file is reported as large
        functions: Function count above which a file needs modularization
        loops: Loop count above which a file is flagged for loop density
        lines: Line count above which a file is reported as long
        performance_score: Minimum acceptable average score (CI gate)
        bundle_size: Estimated script bundle size budget in bytes
        complexity: Cyclomatic approximation above which a file is complex
        duplicated_lines: Duplicate line count above which duplication is reported
    """

    file_size: int = 100_000
    functions: int = 20
    loops: int = 10
    lines: int = 1000
    performance_score: int = 80
    bundle_size: int = 500_000
    complexity: int = 15
    duplicated_lines: int = 5

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidConfigError(f"thresholds.{f.name}", value, "must be a non-negative integer")
        if self.performance_score > 100:
            raise InvalidConfigError(
                "thresholds.performance_score", self.performance_score, "must be at most 100"
            )


@dataclass(frozen=True)
class AnalysisToggles:
    """Feature switches for the advanced (syntax tree) analysis."""

    react: bool = True
    vue: bool = True
    angular: bool = False
    bundle_impact: bool = True
    memory_leaks: bool = True
    performance: bool = True
    accessibility: bool = False


@dataclass(frozen=True)
class AnalysisSettings:
    """Settings for one analysis run.

    Attributes:
        exclude: Substring or glob patterns excluded from discovery
        thresholds: Metric limits (see ThresholdConfig)
        analysis: Feature toggles (see AnalysisToggles)
        output_format: console | json | summary | detailed
        log_level: quiet | info | debug
        autofix: Surface auto-fix hints in output
        workers: Parallel file workers (None = auto-detect)
        timeout_seconds: Per-file advanced analysis budget (None = unbounded)
        max_file_size_bytes: Files above this are skipped by discovery
        top_findings: Length of the project's critical-issue list
    """

    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    analysis: AnalysisToggles = field(default_factory=AnalysisToggles)
    output_format: OutputFormat = "console"
    log_level: LogLevel = "info"
    autofix: bool = False
    workers: Optional[int] = None
    timeout_seconds: Optional[float] = None
    max_file_size_bytes: int = 5_000_000
    top_findings: int = 5

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format", self.output_format, f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if self.log_level not in LOG_LEVELS:
            raise InvalidConfigError(
                "log_level", self.log_level, f"expected one of {', '.join(LOG_LEVELS)}"
            )
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.max_file_size_bytes < 1:
            raise InvalidConfigError("max_file_size_bytes", self.max_file_size_bytes, "must be positive")
        if self.top_findings < 0:
            raise InvalidConfigError("top_findings", self.top_findings, "must be non-negative")

    def with_overrides(self, **overrides: Any) -> AnalysisSettings:
        """Return a copy with top-level fields replaced."""
        return replace(self, **overrides)


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisSettings:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path (JSON or TOML)
        **overrides: Direct overrides (typically from CLI flags). ``thresholds``
            and ``analysis`` may be partial dicts; ``exclude`` extends the list.

    Returns:
        Validated AnalysisSettings instance

    Raises:
        PerfWizardError: If a config file is missing or unreadable
        InvalidConfigError: If a key or value is invalid
    """
    merged: dict[str, Any] = {}

    for name in PROJECT_CONFIG_FILES:
        project_config = Path.cwd() / name
        if project_config.exists():
            _merge(merged, _load_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise PerfWizardError(f"Config file not found: {config_file}")
        _merge(merged, _load_file(config_file))

    _merge(merged, _load_env_vars())
    _merge(merged, {k: v for k, v in overrides.items() if v is not None})

    return _build_settings(merged)


def _merge(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Merge normalized config dicts; nested sections merge, exclude extends."""
    for key, value in _normalize_keys(source).items():
        if key in ("thresholds", "analysis") and isinstance(value, dict):
            section = dict(target.get(key, {}))
            section.update(_normalize_keys(value))
            target[key] = section
        elif key == "exclude":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, (list, tuple)):
                raise InvalidConfigError("exclude", value, "expected a list of patterns")
            target["exclude"] = [*target.get("exclude", []), *value]
        else:
            target[key] = value


def _build_settings(merged: dict[str, Any]) -> AnalysisSettings:
    known = {f.name for f in fields(AnalysisSettings)}
    for key in merged:
        if key not in known:
            raise InvalidConfigError(key, merged[key], "unknown configuration key")

    kwargs = dict(merged)
    if "exclude" in kwargs:
        kwargs["exclude"] = tuple(dict.fromkeys([*DEFAULT_EXCLUDE, *kwargs["exclude"]]))
    if "thresholds" in kwargs:
        kwargs["thresholds"] = _build_section(ThresholdConfig, "thresholds", kwargs["thresholds"])
    if "analysis" in kwargs:
        kwargs["analysis"] = _build_section(AnalysisToggles, "analysis", kwargs["analysis"])

    return AnalysisSettings(**kwargs)


def _build_section(cls: type, name: str, value: Any) -> Any:
    if isinstance(value, cls):
        return value
    if not isinstance(value, dict):
        raise InvalidConfigError(name, value, "expected a table/object")
    allowed = {f.name for f in fields(cls)}
    for key in value:
        if key not in allowed:
            raise InvalidConfigError(f"{name}.{key}", value[key], "unknown configuration key")
    return cls(**value)


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    """Map camelCase (rc files) and kebab-case (TOML) keys to field names."""
    return _CAMEL_RE.sub("_", key).replace("-", "_").lower()


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_snake(k): v for k, v in data.items()}


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from PERF_WIZARD_* environment variables.

    Supported environment variables:
        PERF_WIZARD_OUTPUT_FORMAT: console/json/summary/detailed
        PERF_WIZARD_LOG_LEVEL: quiet/info/debug
        PERF_WIZARD_AUTOFIX: bool (true/false/1/0)
        PERF_WIZARD_WORKERS: int
        PERF_WIZARD_TIMEOUT_SECONDS: float
        PERF_WIZARD_MAX_FILE_SIZE_BYTES: int
        PERF_WIZARD_TOP_FINDINGS: int

    Returns:
        Dict of field_name -> parsed_value for any PERF_WIZARD_* vars found.
    """
    type_hints = get_type_hints(AnalysisSettings)

    result: dict[str, Any] = {}

    for f in fields(AnalysisSettings):
        env_key = f"PERF_WIZARD_{f.name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot be set from the environment
    (nested sections, pattern lists).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_file(path: Path) -> dict[str, Any]:
    """Load a JSON (rc) or TOML config file.

    Raises:
        PerfWizardError: If parsing fails
    """
    try:
        if path.suffix == ".toml":
            return _load_toml_file(path)
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise PerfWizardError(f"Invalid config file '{path}': {e}")
    if not isinstance(data, dict):
        raise PerfWizardError(f"Invalid config file '{path}': expected an object")
    return data


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict."""
    import tomllib

    with open(path, "rb") as f:
        data = tomllib.load(f)
    # Allow both a bare file and a [perf-wizard] table
    section = data.get("perf-wizard", data.get("perf_wizard"))
    return section if isinstance(section, dict) else data
