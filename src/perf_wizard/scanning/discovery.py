"""File discovery: walk a root and apply the exclusion rules.

Unreadable and binary files are silently dropped here. They are not
reported as errors; an excluded file simply has no report.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable

from ..config import AnalysisSettings
from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .source import is_binary_path

logger = get_logger(__name__)

# Directory names holding tests or fixtures
TEST_DIR_NAMES = frozenset({"test", "tests", "__tests__", "__mocks__", "spec", "specs"})

# Name fragments marking a test or spec file (``Button.test.jsx``)
TEST_NAME_MARKERS = (".test.", ".spec.", "_test.", "_spec.")


def is_excluded(relative: Path, patterns: Iterable[str]) -> bool:
    """Match exclude patterns against a path relative to the walk root.

    A pattern excludes the path when it is a substring of any path part, or
    when it glob-matches the file name or the whole relative path.
    """
    parts = relative.parts
    posix = relative.as_posix()
    for pattern in patterns:
        if any(ch in pattern for ch in "*?["):
            if fnmatch.fnmatch(relative.name, pattern) or fnmatch.fnmatch(posix, pattern):
                return True
        elif any(pattern in part for part in parts):
            return True
    return False


def is_test_file(relative: Path) -> bool:
    name = relative.name.lower()
    if any(marker in name for marker in TEST_NAME_MARKERS):
        return True
    return any(part.lower() in TEST_DIR_NAMES for part in relative.parts[:-1])


def is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in relative.parts)


def _should_skip(relative: Path, settings: AnalysisSettings) -> bool:
    if is_hidden(relative) or is_test_file(relative):
        return True
    if is_binary_path(relative):
        return True
    return is_excluded(relative, settings.exclude)


def discover_files(root: Path | str, settings: AnalysisSettings) -> list[tuple[Path, int]]:
    """Collect analyzable files under ``root``.

    Args:
        root: Directory to walk, or a single file
        settings: Supplies exclude patterns and the size limit

    Returns:
        ``(path, size)`` pairs in sorted path order

    Raises:
        InvalidPathError: If ``root`` does not exist
    """
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "path does not exist")

    # A single file given explicitly bypasses the name-based rules
    if root.is_file():
        if is_binary_path(root):
            logger.debug(f"Skipped (binary): {root}")
            return []
        size = root.stat().st_size
        if size > settings.max_file_size_bytes:
            logger.debug(f"Skipped (size): {root} ({size} bytes)")
            return []
        return [(root, size)]

    found: list[tuple[Path, int]] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        relative_dir = current.relative_to(root)
        # Prune excluded and hidden directories before descending
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not d.startswith(".") and not is_excluded(relative_dir / d, settings.exclude)
        )

        for filename in sorted(filenames):
            filepath = current / filename
            relative = relative_dir / filename
            if _should_skip(relative, settings):
                skipped += 1
                continue
            try:
                size = filepath.stat().st_size
            except OSError as e:
                skipped += 1
                logger.debug(f"Cannot stat {filepath}: {e}")
                continue
            if size > settings.max_file_size_bytes:
                skipped += 1
                logger.debug(f"Skipped (size): {filepath} ({size} bytes)")
                continue
            found.append((filepath, size))

    logger.debug(f"Discovery complete: {len(found)} files, {skipped} skipped under {root}")
    return found
