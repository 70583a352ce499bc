"""Source scanning: dialects, syntax tree adapter, traditional metrics, discovery."""

from .adapter import ParseFailure, ParseResult, parse_source
from .dialects import (
    BUNDLE_EXTENSIONS,
    Dialect,
    DialectConfig,
    detect_dialect,
    extract_script_blocks,
    get_dialect_config,
)
from .discovery import discover_files
from .metrics import TraditionalMetrics, compute_traditional_metrics
from .nodes import (
    CallNode,
    ElementNode,
    FunctionNode,
    ImportNode,
    JsxAttribute,
    LoopNode,
    MemberNode,
    NodeKind,
    Scope,
    SyntaxNode,
    SyntaxTree,
    ValueShape,
)
from .source import SourceUnit, create_source_unit, read_source_unit
from .treesitter_parser import TreeSitterParser, get_parser

__all__ = [
    "BUNDLE_EXTENSIONS",
    "CallNode",
    "Dialect",
    "DialectConfig",
    "ElementNode",
    "FunctionNode",
    "ImportNode",
    "JsxAttribute",
    "LoopNode",
    "MemberNode",
    "NodeKind",
    "ParseFailure",
    "ParseResult",
    "Scope",
    "SourceUnit",
    "SyntaxNode",
    "SyntaxTree",
    "TraditionalMetrics",
    "TreeSitterParser",
    "ValueShape",
    "compute_traditional_metrics",
    "create_source_unit",
    "detect_dialect",
    "discover_files",
    "extract_script_blocks",
    "get_dialect_config",
    "get_parser",
    "parse_source",
    "read_source_unit",
]
