"""Renderers for an AnalysisRun, selected by ``settings.output_format``."""

from typing import Callable

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import DetailedFormatter, RichFormatter
from .summary_formatter import SummaryFormatter

# Only the console renderers show auto-fix markers
_FACTORIES: dict[str, Callable[[bool], BaseFormatter]] = {
    "console": lambda autofix: RichFormatter(autofix=autofix),
    "detailed": lambda autofix: DetailedFormatter(autofix=autofix),
    "json": lambda autofix: JsonFormatter(),
    "summary": lambda autofix: SummaryFormatter(),
}


def get_formatter(name: str, autofix: bool = False) -> BaseFormatter:
    """Formatter for an output format name.

    Raises:
        ValueError: If ``name`` is not one of console, detailed, json, summary
    """
    try:
        factory = _FACTORIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(_FACTORIES))}"
        ) from None
    return factory(autofix)


__all__ = [
    "BaseFormatter",
    "DetailedFormatter",
    "JsonFormatter",
    "RichFormatter",
    "SummaryFormatter",
    "get_formatter",
]
