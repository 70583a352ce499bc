"""Tree-sitter parser wrapper.

Provides a unified interface for tree-sitter parsing across the grammars
the engine consumes (JavaScript with JSX, TypeScript, TSX).

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "javascript")
"""

from __future__ import annotations

import threading
from typing import Any

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from ..logging_config import get_logger

logger = get_logger(__name__)

# grammar name -> factory returning the raw language capsule
_GRAMMARS = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}


def get_supported_grammars() -> list[str]:
    """Get list of grammar names this parser can load."""
    return list(_GRAMMARS)


class TreeSitterParser:
    """Wrapper around tree-sitter for the script grammars.

    Parsers are not thread-safe, so each thread gets its own set; the
    Language objects are shared.
    """

    def __init__(self) -> None:
        self._languages: dict[str, Any] = {}
        self._local = threading.local()

        for name, factory in _GRAMMARS.items():
            # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
            self._languages[name] = tree_sitter.Language(factory())

    def _parser_for(self, grammar: str) -> Any:
        parsers = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = self._local.parsers = {}
        parser = parsers.get(grammar)
        if parser is None:
            parser = parsers[grammar] = tree_sitter.Parser(self._languages[grammar])
        return parser

    def parse(self, code: bytes, grammar: str) -> Any:
        """Parse code and return the tree-sitter Tree.

        Args:
            code: Source code as bytes
            grammar: Grammar name ("javascript", "typescript", "tsx")

        Raises:
            KeyError: If the grammar is not supported
        """
        if grammar not in self._languages:
            raise KeyError(f"Unsupported grammar: {grammar}")
        return self._parser_for(grammar).parse(code)

    def is_grammar_supported(self, grammar: str) -> bool:
        """Check if a grammar is supported."""
        return grammar in self._languages


_shared_parser: TreeSitterParser | None = None
_shared_lock = threading.Lock()


def get_parser() -> TreeSitterParser:
    """Return the process-wide parser (languages load once)."""
    global _shared_parser
    with _shared_lock:
        if _shared_parser is None:
            logger.debug("Loading tree-sitter grammars: %s", ", ".join(_GRAMMARS))
            _shared_parser = TreeSitterParser()
        return _shared_parser
