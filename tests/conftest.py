"""Shared test fixtures for Perf Wizard tests."""

from pathlib import Path

import pytest

from perf_wizard.config import AnalysisSettings
from perf_wizard.scanning.adapter import ParseFailure, parse_source
from perf_wizard.scanning.dialects import detect_dialect
from perf_wizard.scanning.nodes import SyntaxTree

FIXTURES = Path(__file__).parent / "fixtures"


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def parse_snippet(code: str, filename: str = "snippet.js", cancel=None) -> SyntaxTree:
    """Parse a snippet, failing the test if it does not parse cleanly."""
    result = parse_source(code, detect_dialect(filename), path=filename, cancel=cancel)
    if isinstance(result, ParseFailure):
        pytest.fail(f"snippet did not parse: {result.reason} (line {result.line})")
    return result


@pytest.fixture
def parse_js():
    """Parse a JavaScript snippet into a SyntaxTree."""
    return lambda code: parse_snippet(code, "snippet.js")


@pytest.fixture
def parse_jsx():
    """Parse a JSX snippet into a SyntaxTree."""
    return lambda code: parse_snippet(code, "Component.jsx")


@pytest.fixture
def parse_ts():
    """Parse a TypeScript snippet into a SyntaxTree."""
    return lambda code: parse_snippet(code, "snippet.ts")


@pytest.fixture
def parse_tsx():
    """Parse a TSX snippet into a SyntaxTree."""
    return lambda code: parse_snippet(code, "Component.tsx")


@pytest.fixture
def settings():
    """Default analysis settings."""
    return AnalysisSettings()


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def dashboard_source():
    """A React component with leaks, nested loops, heavy imports and inline props."""
    return (FIXTURES / "LeakyDashboard.jsx").read_text(encoding="utf-8")
