"""Tests for configuration loading and validation."""

import json

import pytest

from perf_wizard.config import (
    DEFAULT_EXCLUDE,
    AnalysisSettings,
    AnalysisToggles,
    ThresholdConfig,
    load_config,
)
from perf_wizard.exceptions import InvalidConfigError, PerfWizardError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test from an empty directory with no PERF_WIZARD_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in [
        "OUTPUT_FORMAT",
        "LOG_LEVEL",
        "AUTOFIX",
        "WORKERS",
        "TIMEOUT_SECONDS",
        "MAX_FILE_SIZE_BYTES",
        "TOP_FINDINGS",
    ]:
        monkeypatch.delenv(f"PERF_WIZARD_{name}", raising=False)
    return tmp_path


class TestDefaults:
    """Settings without any config source."""

    def test_defaults(self):
        settings = load_config()
        assert settings == AnalysisSettings()
        assert settings.exclude == DEFAULT_EXCLUDE
        assert settings.thresholds.performance_score == 80
        assert settings.thresholds.file_size == 100_000
        assert settings.analysis.react
        assert not settings.analysis.angular
        assert settings.output_format == "console"
        assert settings.top_findings == 5


class TestValidation:
    """Invalid values are rejected at construction."""

    def test_invalid_output_format(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            AnalysisSettings(output_format="xml")
        assert exc_info.value.key == "output_format"

    def test_invalid_log_level(self):
        with pytest.raises(InvalidConfigError):
            AnalysisSettings(log_level="loud")

    def test_negative_threshold(self):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(loops=-1)

    def test_score_threshold_above_100(self):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(performance_score=101)

    def test_workers_and_timeout(self):
        with pytest.raises(InvalidConfigError):
            AnalysisSettings(workers=0)
        with pytest.raises(InvalidConfigError):
            AnalysisSettings(timeout_seconds=0)

    def test_frozen(self):
        settings = AnalysisSettings()
        with pytest.raises(AttributeError):
            settings.workers = 3  # type: ignore[misc]


class TestConfigFiles:
    """JSON rc files and TOML files."""

    def test_camel_case_json(self, isolated_cwd):
        path = isolated_cwd / "custom.json"
        path.write_text(
            json.dumps(
                {
                    "exclude": ["legacy"],
                    "thresholds": {"performanceScore": 70, "fileSize": 50000},
                    "analysis": {"react": False},
                    "outputFormat": "json",
                }
            )
        )
        settings = load_config(path)
        assert settings.exclude == (*DEFAULT_EXCLUDE, "legacy")
        assert settings.thresholds.performance_score == 70
        assert settings.thresholds.file_size == 50000
        assert settings.thresholds.loops == 10
        assert settings.analysis == AnalysisToggles(react=False)
        assert settings.output_format == "json"

    def test_project_rc_discovered(self, isolated_cwd):
        (isolated_cwd / ".perf-wizardrc").write_text(json.dumps({"topFindings": 3}))
        assert load_config().top_findings == 3

    def test_toml_table(self, isolated_cwd):
        path = isolated_cwd / "perf-wizard.toml"
        path.write_text(
            "[perf-wizard]\n"
            'log-level = "debug"\n'
            "workers = 2\n"
            "\n"
            "[perf-wizard.thresholds]\n"
            "complexity = 25\n"
        )
        settings = load_config(path)
        assert settings.log_level == "debug"
        assert settings.workers == 2
        assert settings.thresholds.complexity == 25

    def test_unknown_key(self, isolated_cwd):
        path = isolated_cwd / "bad.json"
        path.write_text(json.dumps({"colour": "blue"}))
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.key == "colour"

    def test_unknown_threshold(self, isolated_cwd):
        path = isolated_cwd / "bad.json"
        path.write_text(json.dumps({"thresholds": {"speed": 1}}))
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.key == "thresholds.speed"

    def test_malformed_json(self, isolated_cwd):
        path = isolated_cwd / "broken.json"
        path.write_text("{not json")
        with pytest.raises(PerfWizardError, match="Invalid config file"):
            load_config(path)

    def test_missing_file(self, isolated_cwd):
        with pytest.raises(PerfWizardError, match="Config file not found"):
            load_config(isolated_cwd / "nope.json")


class TestEnvironmentAndOverrides:
    """Environment variables and direct overrides."""

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("PERF_WIZARD_WORKERS", "3")
        monkeypatch.setenv("PERF_WIZARD_AUTOFIX", "yes")
        monkeypatch.setenv("PERF_WIZARD_OUTPUT_FORMAT", "summary")
        monkeypatch.setenv("PERF_WIZARD_TIMEOUT_SECONDS", "1.5")
        settings = load_config()
        assert settings.workers == 3
        assert settings.autofix is True
        assert settings.output_format == "summary"
        assert settings.timeout_seconds == 1.5

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("PERF_WIZARD_AUTOFIX", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_overrides_win(self, isolated_cwd, monkeypatch):
        (isolated_cwd / ".perf-wizardrc.json").write_text(json.dumps({"workers": 2}))
        monkeypatch.setenv("PERF_WIZARD_WORKERS", "3")
        assert load_config().workers == 3
        assert load_config(workers=4).workers == 4

    def test_none_overrides_ignored(self):
        assert load_config(workers=None, output_format=None) == AnalysisSettings()

    def test_partial_sections(self):
        settings = load_config(thresholds={"performance_score": 60}, analysis={"vue": False})
        assert settings.thresholds == ThresholdConfig(performance_score=60)
        assert settings.analysis == AnalysisToggles(vue=False)

    def test_with_overrides(self):
        assert AnalysisSettings().with_overrides(workers=2).workers == 2
