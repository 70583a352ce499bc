"""Syntax tree adapter: tree-sitter parse tree -> lowered SyntaxTree.

``parse_source`` never raises for malformed input. A source with syntax
errors yields a ParseFailure, which the report builder records while still
computing traditional metrics. Only a fired cancellation token escapes, as
AnalysisCancelled.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..cancellation import CancellationToken
from ..exceptions import AnalysisCancelled
from ..logging_config import get_logger
from .dialects import Dialect, extract_script_blocks, get_dialect_config, grammar_for
from .nodes import (
    CallNode,
    ElementNode,
    FunctionNode,
    ImportNode,
    JsxAttribute,
    LoopNode,
    MemberNode,
    Scope,
    SyntaxNode,
    SyntaxTree,
    ValueShape,
)
from .treesitter_parser import get_parser

logger = get_logger(__name__)

LOOP_TYPES = {
    "for_statement": "for",
    "while_statement": "while",
    "do_statement": "do-while",
}

FUNCTION_TYPES = {
    "function_declaration": "declaration",
    "generator_function_declaration": "declaration",
    "function_expression": "expression",
    "generator_function": "expression",
    "arrow_function": "arrow",
    "method_definition": "method",
}

ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")

# Wrapping calls whose callback takes the outer binding's name
COMPONENT_WRAPPERS = frozenset({"memo", "forwardRef", "observer"})

ASSIGNMENT_TYPES = ("assignment_expression", "augmented_assignment_expression")

# Wrappers looked through when classifying an expression
_TRANSPARENT_TYPES = (
    "parenthesized_expression",
    "non_null_expression",
    "as_expression",
    "satisfies_expression",
    "type_assertion",
)

_SHAPES = {
    "object": ValueShape.OBJECT,
    "array": ValueShape.ARRAY,
    "arrow_function": ValueShape.FUNCTION,
    "function_expression": ValueShape.FUNCTION,
    "string": ValueShape.STRING,
    "template_string": ValueShape.STRING,
    "number": ValueShape.NUMBER,
    "identifier": ValueShape.IDENTIFIER,
    "member_expression": ValueShape.MEMBER,
    "call_expression": ValueShape.CALL,
}


@dataclass(frozen=True)
class ParseFailure:
    """Structured outcome for source the grammar could not parse cleanly."""

    reason: str
    line: Optional[int] = None


ParseResult = Union[SyntaxTree, ParseFailure]

# Reason recorded for markup files without a <script> block
NO_SCRIPT_BLOCK = "no script block"


def parse_source(
    source: str,
    dialect: Dialect,
    path: Path | str = "<source>",
    cancel: Optional[CancellationToken] = None,
) -> ParseResult:
    """Parse source text into a SyntaxTree.

    Args:
        source: Raw file content
        dialect: Dialect hint (script, typed, markup)
        path: File path, used for grammar choice and diagnostics
        cancel: Optional per-file cancellation token

    Returns:
        SyntaxTree, or ParseFailure when the text has syntax errors, the
        dialect is not analyzable, or a markup file holds no script block.

    Raises:
        AnalysisCancelled: If ``cancel`` fires during lowering
    """
    if not dialect.is_analyzable:
        return ParseFailure(reason=f"{dialect.value} files are not parsed")

    config = get_dialect_config(path)
    if config is not None and config.embedded:
        blocks = extract_script_blocks(source)
        if not blocks:
            return ParseFailure(reason=NO_SCRIPT_BLOCK)
        units = [(block.content, block.grammar, block.line_offset, block.byte_offset) for block in blocks]
    else:
        units = [(source, grammar_for(dialect, path), 0, 0)]

    lowering = _Lowering(path, cancel)
    try:
        for content, grammar, line_offset, byte_offset in units:
            code = content.encode("utf-8", errors="replace")
            tree = get_parser().parse(code, grammar)
            failure = _find_syntax_error(tree.root_node, line_offset)
            if failure is not None:
                logger.debug(f"Syntax error in {path}: {failure.reason} (line {failure.line})")
                return failure
            lowering.lower(tree.root_node, line_offset, byte_offset)
    except AnalysisCancelled:
        raise
    except Exception as e:
        # Grammar crashes and unexpected node shapes degrade to a failure
        logger.debug(f"Parser failure for {path}: {e}")
        return ParseFailure(reason=f"parser error: {e}")

    return SyntaxTree(
        nodes=lowering.nodes,
        scopes=lowering.scopes,
        dialect=dialect,
        path=path,
        mentions_react="React" in source,
        cancel=cancel,
    )


def _find_syntax_error(root: Any, line_offset: int) -> Optional[ParseFailure]:
    """Locate the first ERROR or MISSING node of a tree that has errors."""
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            what = f"missing {node.type}" if node.is_missing else "unexpected syntax"
            return ParseFailure(reason=what, line=node.start_point[0] + 1 + line_offset)
        if node.has_error:
            stack.extend(reversed(node.children))
    return ParseFailure(reason="unexpected syntax")


def _text(node: Any) -> str:
    if node is None or node.text is None:
        return ""
    return str(node.text.decode("utf-8", errors="replace"))


def _unwrap(node: Any) -> Any:
    while node is not None and node.type in _TRANSPARENT_TYPES:
        node = node.named_children[0] if node.named_children else None
    return node


def _shape(node: Any) -> ValueShape:
    node = _unwrap(node)
    if node is None:
        return ValueShape.OTHER
    return _SHAPES.get(node.type, ValueShape.OTHER)


def _string_value(node: Any) -> Optional[str]:
    node = _unwrap(node)
    if node is None or node.type != "string":
        return None
    return _text(node)[1:-1]


class _Lowering:
    """Single preorder pass collecting node variants and scopes."""

    def __init__(self, path: Path | str, cancel: Optional[CancellationToken]) -> None:
        self.path = path
        self.cancel = cancel
        self.nodes: list[SyntaxNode] = []
        self.scopes: list[Scope] = []
        self._visited = 0
        self._line_offset = 0
        self._byte_offset = 0

    def lower(self, root: Any, line_offset: int, byte_offset: int) -> None:
        self._line_offset = line_offset
        self._byte_offset = byte_offset
        receivers: dict[int, tuple[int, int]] = {}
        calls_by_span: dict[tuple[int, int], int] = {}
        first = len(self.nodes)

        stack: list[tuple[Any, Optional[int], Optional[int]]] = [(root, None, None)]
        while stack:
            ts_node, parent, scope = stack.pop()
            self._visited += 1
            if self.cancel is not None and self._visited % 512 == 0:
                self.cancel.raise_if_cancelled(self.path)

            scope_kind = self._scope_kind(ts_node)
            if scope is None and scope_kind is None:
                scope_kind = "program"

            # A node belongs to the scope around it; its children to its own
            if scope is not None:
                lowered = self._lower_node(ts_node, len(self.nodes), parent, scope, receivers)
                if lowered is not None:
                    self.nodes.append(lowered)
                    parent = lowered.index
                    if isinstance(lowered, CallNode):
                        calls_by_span[(lowered.start, lowered.end)] = lowered.index

            if scope_kind is not None:
                self.scopes.append(
                    Scope(
                        index=len(self.scopes),
                        kind=scope_kind,
                        line=self._line(ts_node),
                        start=self._start(ts_node),
                        end=self._end(ts_node),
                        parent=scope,
                    )
                )
                scope = len(self.scopes) - 1

            # Keyword and punctuation tokens never lower to a variant or open a scope
            for child in reversed(ts_node.named_children):
                stack.append((child, parent, scope))

        for index, span in receivers.items():
            receiver = calls_by_span.get(span)
            if receiver is not None and receiver >= first:
                self.nodes[index] = dataclasses.replace(self.nodes[index], receiver=receiver)

    # ── Positions ──────────────────────────────────────────────

    def _line(self, node: Any) -> int:
        return int(node.start_point[0]) + 1 + self._line_offset

    def _start(self, node: Any) -> int:
        return int(node.start_byte) + self._byte_offset

    def _end(self, node: Any) -> int:
        return int(node.end_byte) + self._byte_offset

    def _base(self, node: Any, index: int, parent: Optional[int], scope: int) -> dict[str, Any]:
        return {
            "index": index,
            "line": self._line(node),
            "start": self._start(node),
            "end": self._end(node),
            "parent": parent,
            "scope": scope,
        }

    # ── Scopes ─────────────────────────────────────────────────

    @staticmethod
    def _scope_kind(node: Any) -> Optional[str]:
        node_type = node.type
        if node_type == "program":
            return "program"
        if node_type in FUNCTION_TYPES:
            return "function"
        if node_type in ("for_statement", "for_in_statement"):
            return "loop"
        if node_type == "catch_clause":
            return "catch"
        if node_type in ("class_declaration", "class", "abstract_class_declaration"):
            return "class"
        if node_type == "statement_block":
            parent = node.parent
            # Function bodies and catch bodies share the owner's scope
            if parent is not None and (parent.type in FUNCTION_TYPES or parent.type == "catch_clause"):
                return None
            return "block"
        return None

    # ── Variants ───────────────────────────────────────────────

    def _lower_node(
        self,
        node: Any,
        index: int,
        parent: Optional[int],
        scope: int,
        receivers: dict[int, tuple[int, int]],
    ) -> Optional[SyntaxNode]:
        node_type = node.type
        if node_type in LOOP_TYPES:
            return self._loop(node, index, parent, scope, LOOP_TYPES[node_type])
        if node_type == "for_in_statement":
            return self._loop(node, index, parent, scope, self._for_in_type(node))
        if node_type == "call_expression":
            return self._call(node, index, parent, scope, receivers)
        if node_type == "import_statement":
            return self._import(node, index, parent, scope)
        if node_type in FUNCTION_TYPES:
            return self._function(node, index, parent, scope)
        if node_type == "member_expression":
            return self._member(node, index, parent, scope)
        if node_type in ELEMENT_TYPES:
            return self._element(node, index, parent, scope)
        return None

    def _loop(self, node: Any, index: int, parent: Optional[int], scope: int, loop_type: str) -> LoopNode:
        # for-in / for-of iterables and for initializers are evaluated once
        start, end = self._start(node), self._end(node)
        if node.type == "for_in_statement":
            body = node.child_by_field_name("body")
            start, end = (self._start(body), self._end(body)) if body is not None else (end, end)
        elif node.type == "for_statement":
            initializer = node.child_by_field_name("initializer")
            if initializer is not None:
                start = self._end(initializer)
        return LoopNode(
            **self._base(node, index, parent, scope),
            loop_type=loop_type,
            iteration_start=start,
            iteration_end=end,
        )

    @staticmethod
    def _for_in_type(node: Any) -> str:
        operator = node.child_by_field_name("operator")
        if operator is not None:
            return "for-of" if operator.type == "of" else "for-in"
        for child in node.children:
            if child.type == "of":
                return "for-of"
        return "for-in"

    def _call(
        self,
        node: Any,
        index: int,
        parent: Optional[int],
        scope: int,
        receivers: dict[int, tuple[int, int]],
    ) -> CallNode:
        callee = _unwrap(node.child_by_field_name("function"))
        callee_name: Optional[str] = None
        callee_object: Optional[str] = None
        is_method = False
        if callee is not None and callee.type == "identifier":
            callee_name = _text(callee)
        elif callee is not None and callee.type == "member_expression":
            is_method = True
            callee_name = _text(callee.child_by_field_name("property")) or None
            obj = _unwrap(callee.child_by_field_name("object"))
            if obj is not None:
                if obj.type in ("identifier", "this", "member_expression"):
                    callee_object = _text(obj)
                elif obj.type == "call_expression":
                    receivers[index] = (self._start(obj), self._end(obj))
        elif callee is not None and callee.type == "import":
            callee_name = "import"

        args_node = node.child_by_field_name("arguments")
        args = [c for c in args_node.named_children if c.type != "comment"] if args_node else []
        return CallNode(
            **self._base(node, index, parent, scope),
            callee_name=callee_name,
            callee_object=callee_object,
            is_method=is_method,
            receiver=None,
            arguments=tuple(_shape(a) for a in args),
            first_string_argument=_string_value(args[0]) if args else None,
            identifier_arguments=tuple(_text(a) for a in args if a.type == "identifier"),
        )

    def _import(self, node: Any, index: int, parent: Optional[int], scope: int) -> Optional[ImportNode]:
        source = _string_value(node.child_by_field_name("source"))
        if source is None:
            return None
        specifiers: list[str] = []
        is_default = False
        is_namespace = False
        for child in node.named_children:
            if child.type != "import_clause":
                continue
            for part in child.named_children:
                if part.type == "identifier":
                    is_default = True
                    specifiers.append(_text(part))
                elif part.type == "namespace_import":
                    is_namespace = True
                    specifiers.extend(_text(c) for c in part.named_children if c.type == "identifier")
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        specifiers.append(_text(local))
        return ImportNode(
            **self._base(node, index, parent, scope),
            source=source,
            specifiers=tuple(specifiers),
            is_default=is_default,
            is_namespace=is_namespace,
        )

    def _function(self, node: Any, index: int, parent: Optional[int], scope: int) -> FunctionNode:
        name_node = node.child_by_field_name("name")
        name = _text(name_node) or None
        if name is None:
            name = self._binding_name(node)

        params = node.child_by_field_name("parameters")
        if params is not None:
            param_count = sum(1 for c in params.named_children if c.type != "comment")
        else:
            # Single bare parameter arrow: ``x => x``
            param_count = 1 if node.child_by_field_name("parameter") is not None else 0

        ts_parent = node.parent
        callback_of = parent if ts_parent is not None and ts_parent.type == "arguments" else None

        return FunctionNode(
            **self._base(node, index, parent, scope),
            name=name,
            form=FUNCTION_TYPES[node.type],
            param_count=param_count,
            callback_of=callback_of,
        )

    @staticmethod
    def _binding_name(node: Any) -> Optional[str]:
        """Name a function expression takes from what it is bound to."""
        ts_parent = node.parent
        # ``memo(() => ...)`` / ``forwardRef(function ...)``: name from the outer binding
        if ts_parent is not None and ts_parent.type == "arguments":
            call = ts_parent.parent
            callee = call.child_by_field_name("function") if call is not None else None
            if callee is not None and callee.type == "member_expression":
                callee = callee.child_by_field_name("property")
            if _text(callee) not in COMPONENT_WRAPPERS:
                return None
            ts_parent = call.parent
        while ts_parent is not None and ts_parent.type in _TRANSPARENT_TYPES:
            ts_parent = ts_parent.parent
        if ts_parent is None:
            return None
        if ts_parent.type == "variable_declarator":
            return _text(ts_parent.child_by_field_name("name")) or None
        if ts_parent.type in ASSIGNMENT_TYPES:
            left = ts_parent.child_by_field_name("left")
            if left is not None and left.type == "member_expression":
                left = left.child_by_field_name("property")
            return _text(left) or None
        if ts_parent.type == "pair":
            return _text(ts_parent.child_by_field_name("key")) or None
        return None

    def _member(self, node: Any, index: int, parent: Optional[int], scope: int) -> MemberNode:
        ts_parent = node.parent
        assigned = (
            ts_parent is not None
            and ts_parent.type in ASSIGNMENT_TYPES
            and ts_parent.child_by_field_name("left") == node
        )
        return MemberNode(
            **self._base(node, index, parent, scope),
            object_text=_text(node.child_by_field_name("object")),
            property=_text(node.child_by_field_name("property")),
            assigned=bool(assigned),
        )

    def _element(self, node: Any, index: int, parent: Optional[int], scope: int) -> ElementNode:
        opening = node.child_by_field_name("open_tag") if node.type == "jsx_element" else node
        if opening is None:
            opening = node
        attributes: list[JsxAttribute] = []
        for child in opening.named_children:
            if child.type != "jsx_attribute":
                continue
            parts = child.named_children
            if not parts:
                continue
            value: Optional[ValueShape] = None
            if len(parts) > 1:
                raw = parts[1]
                if raw.type == "jsx_expression":
                    inner = [c for c in raw.named_children if c.type != "comment"]
                    value = _shape(inner[0]) if inner else ValueShape.OTHER
                else:
                    value = _shape(raw)
            attributes.append(JsxAttribute(name=_text(parts[0]), value=value, line=self._line(child)))
        return ElementNode(
            **self._base(node, index, parent, scope),
            tag=_text(opening.child_by_field_name("name")),
            attributes=tuple(attributes),
        )
