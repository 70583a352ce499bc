"""
Logging for Perf Wizard.

All loggers live under the ``perf_wizard`` namespace. Terminal output goes
through rich on stderr so it never mixes with JSON written to stdout.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "perf_wizard"

# settings.log_level -> logging level; progress notes (INFO) stay hidden
# unless debugging
LOG_LEVELS = {
    "quiet": logging.ERROR,
    "info": logging.WARNING,
    "debug": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``perf_wizard`` logger.

    Calling it again replaces the handlers installed by a previous call, so
    repeated CLI invocations in one process do not stack output.

    Args:
        verbose: DEBUG level, with source paths and tracebacks locals
        quiet: ERROR level only (wins over ``verbose``)
        log_file: Also append plain-text records to this file

    Returns:
        The configured ``perf_wizard`` logger
    """
    level = _resolve_level(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_terminal_handler(verbose))
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def setup_logging_for(log_level: str, log_file: Optional[str] = None) -> logging.Logger:
    """Configure logging from a settings ``log_level`` value."""
    level = LOG_LEVELS.get(log_level, logging.WARNING)
    return setup_logging(
        verbose=level == logging.DEBUG,
        quiet=level == logging.ERROR,
        log_file=log_file,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, namespaced under ``perf_wizard``.

    Example:
        >>> get_logger("scanning.adapter").name
        'perf_wizard.scanning.adapter'
    """
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
