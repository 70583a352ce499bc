"""SourceUnit: one analyzed file, read and (optionally) parsed."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..cancellation import CancellationToken
from ..exceptions import BinaryFileError, FileAccessError
from .adapter import ParseFailure, parse_source
from .dialects import Dialect, detect_dialect
from .nodes import SyntaxTree

# Binary extensions: never try to read these as text.
BINARY_EXTENSIONS = frozenset(
    {
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".o",
        ".a",
        ".class",
        ".jar",
        ".pyc",
        ".wasm",
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".bmp",
        ".ico",
        ".webp",
        ".mp3",
        ".mp4",
        ".mov",
        ".wav",
        ".zip",
        ".tar",
        ".gz",
        ".bz2",
        ".xz",
        ".7z",
        ".pdf",
        ".ttf",
        ".otf",
        ".woff",
        ".woff2",
        ".eot",
        ".db",
        ".sqlite",
        ".bin",
    }
)

# Bytes sniffed for NUL when deciding whether content is binary
_SNIFF_BYTES = 8192


@dataclass(frozen=True)
class SourceUnit:
    """An analyzed file.

    Attributes:
        path: File identity
        size: Raw size in bytes
        dialect: Source flavor
        text: Decoded content
        tree: Lowered syntax tree, None when not parsed
        parse_failure: Why the tree is absent, when parsing was attempted
    """

    path: Path
    size: int
    dialect: Dialect
    text: str
    tree: Optional[SyntaxTree] = None
    parse_failure: Optional[ParseFailure] = None

    @property
    def parsed(self) -> bool:
        return self.tree is not None


def is_binary_path(path: Path | str) -> bool:
    return Path(path).suffix.lower() in BINARY_EXTENSIONS


def read_text(path: Path) -> tuple[str, int]:
    """Read a file as UTF-8 text.

    Returns:
        (text, size in bytes)

    Raises:
        BinaryFileError: If the extension or content looks binary
        FileAccessError: If the file cannot be read
    """
    if is_binary_path(path):
        raise BinaryFileError(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileAccessError(path, str(e))
    if b"\x00" in raw[:_SNIFF_BYTES]:
        raise BinaryFileError(path)
    return raw.decode("utf-8", errors="replace"), len(raw)


def create_source_unit(
    path: Path | str,
    text: str,
    size: Optional[int] = None,
    dialect: Optional[Dialect] = None,
    parse: bool = True,
    cancel: Optional[CancellationToken] = None,
) -> SourceUnit:
    """Build a SourceUnit, parsing analyzable dialects.

    Raises:
        AnalysisCancelled: If ``cancel`` fires while parsing
    """
    path = Path(path)
    dialect = dialect or detect_dialect(path)
    size = len(text.encode("utf-8", errors="replace")) if size is None else size

    tree: Optional[SyntaxTree] = None
    failure: Optional[ParseFailure] = None
    if parse and dialect.is_analyzable:
        result = parse_source(text, dialect, path=path, cancel=cancel)
        if isinstance(result, ParseFailure):
            failure = result
        else:
            tree = result

    return SourceUnit(path=path, size=size, dialect=dialect, text=text, tree=tree, parse_failure=failure)


def read_source_unit(
    path: Path | str,
    parse: bool = True,
    cancel: Optional[CancellationToken] = None,
) -> SourceUnit:
    """Read a file from disk and build its SourceUnit.

    Raises:
        BinaryFileError: If the file looks binary
        FileAccessError: If the file cannot be read
        AnalysisCancelled: If ``cancel`` fires while parsing
    """
    path = Path(path)
    text, size = read_text(path)
    return create_source_unit(path, text, size=size, parse=parse, cancel=cancel)
