"""Dialect configuration: the single source of truth for source flavors.

A dialect decides which grammar parses a file and which detectors apply.
Markup files (.vue, .svelte) carry their script in ``<script>`` blocks,
which are cut out here and handed to the script grammar with a line offset.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Dialect(str, Enum):
    """Source flavor of an analyzed file."""

    SCRIPT = "script"
    TYPED = "typed"
    MARKUP = "markup"
    TEXT = "text"  # readable, but no advanced analysis

    @property
    def is_analyzable(self) -> bool:
        return self is not Dialect.TEXT


@dataclass(frozen=True)
class DialectConfig:
    """Everything the adapter needs to know about one file extension."""

    extension: str
    dialect: Dialect
    grammar: str
    embedded: bool = False  # script lives inside <script> blocks


_CONFIGS = (
    DialectConfig(".js", Dialect.SCRIPT, "javascript"),
    DialectConfig(".mjs", Dialect.SCRIPT, "javascript"),
    DialectConfig(".cjs", Dialect.SCRIPT, "javascript"),
    DialectConfig(".ts", Dialect.TYPED, "typescript"),
    DialectConfig(".mts", Dialect.TYPED, "typescript"),
    DialectConfig(".cts", Dialect.TYPED, "typescript"),
    # tree-sitter-javascript parses JSX natively
    DialectConfig(".jsx", Dialect.MARKUP, "javascript"),
    DialectConfig(".tsx", Dialect.MARKUP, "tsx"),
    DialectConfig(".vue", Dialect.MARKUP, "javascript", embedded=True),
    DialectConfig(".svelte", Dialect.MARKUP, "javascript", embedded=True),
)

_EXTENSION_TO_CONFIG: dict[str, DialectConfig] = {c.extension: c for c in _CONFIGS}

# Extensions counted toward the estimated bundle size
BUNDLE_EXTENSIONS = frozenset({".js", ".mjs", ".cjs", ".ts", ".mts", ".cts", ".jsx", ".tsx"})


def get_dialect_config(filepath: Path | str) -> DialectConfig | None:
    """Return the dialect config for a path, or None for plain text files."""
    return _EXTENSION_TO_CONFIG.get(Path(filepath).suffix.lower())


def detect_dialect(filepath: Path | str) -> Dialect:
    config = get_dialect_config(filepath)
    return config.dialect if config else Dialect.TEXT


def grammar_for(dialect: Dialect, filepath: Path | str | None = None) -> str:
    """Pick a grammar when only a dialect hint is known."""
    if filepath is not None:
        config = get_dialect_config(filepath)
        if config is not None:
            return config.grammar
    if dialect is Dialect.TYPED:
        return "typescript"
    if dialect is Dialect.MARKUP:
        return "tsx"
    return "javascript"


@dataclass(frozen=True)
class ScriptBlock:
    """A ``<script>`` block cut out of a markup file."""

    content: str
    line_offset: int  # lines before the block content in the original file
    byte_offset: int  # UTF-8 bytes before the block content
    grammar: str


_SCRIPT_BLOCK_RE = re.compile(
    r"<script(?P<attrs>[^>]*)>(?P<body>.*?)</script\s*>", re.DOTALL | re.IGNORECASE
)
_LANG_ATTR_RE = re.compile(r"""\blang\s*=\s*["']?(?P<lang>[\w-]+)""", re.IGNORECASE)


def extract_script_blocks(markup: str) -> list[ScriptBlock]:
    """Cut every ``<script>`` block out of Vue/Svelte markup.

    A ``lang="ts"`` (or ``tsx``) attribute selects the TypeScript grammar.
    """
    blocks: list[ScriptBlock] = []
    for match in _SCRIPT_BLOCK_RE.finditer(markup):
        lang_match = _LANG_ATTR_RE.search(match.group("attrs"))
        lang = lang_match.group("lang").lower() if lang_match else "js"
        if lang in ("ts", "typescript"):
            grammar = "typescript"
        elif lang == "tsx":
            grammar = "tsx"
        else:
            grammar = "javascript"
        blocks.append(
            ScriptBlock(
                content=match.group("body"),
                line_offset=markup.count("\n", 0, match.start("body")),
                byte_offset=len(markup[: match.start("body")].encode("utf-8", errors="replace")),
                grammar=grammar,
            )
        )
    return blocks
