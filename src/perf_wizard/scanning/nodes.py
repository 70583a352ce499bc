"""Syntax models consumed by the detectors.

The adapter lowers a tree-sitter parse tree into a flat, preorder tuple of
tagged node variants, one variant per syntax kind the detectors consume:

    LoopNode      for / for-in / for-of / while / do-while
    CallNode      any call expression
    ImportNode    ES module import declaration
    FunctionNode  declaration, expression, arrow or method
    MemberNode    property access (``a.b``), flagged when assigned to
    ElementNode   JSX element (opening or self-closing)

Every node records its byte span, its nearest lowered ancestor (``parent``)
and its innermost lexical scope. Containment questions ("is this call inside
a loop", "what does this scope contain") are answered from spans, so the
tree never needs the parser objects once lowered.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Sequence, TypeVar

from ..cancellation import CancellationToken
from .dialects import Dialect


class NodeKind(str, Enum):
    LOOP = "loop"
    CALL = "call"
    IMPORT = "import"
    FUNCTION = "function-definition"
    MEMBER = "member-access"
    ELEMENT = "jsx-element"


class ValueShape(str, Enum):
    """Coarse shape of an expression (argument or prop value)."""

    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"
    STRING = "string"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    MEMBER = "member"
    CALL = "call"
    OTHER = "other"

    @property
    def is_literal_collection(self) -> bool:
        return self in (ValueShape.OBJECT, ValueShape.ARRAY)


@dataclass(frozen=True)
class SyntaxNode:
    """Fields shared by all node variants.

    Attributes:
        index: Position in the preorder node tuple
        line: 1-indexed line in the original file
        start: Start byte offset
        end: End byte offset (exclusive)
        parent: Index of the nearest lowered ancestor, None at top level
        scope: Index of the innermost enclosing lexical scope
    """

    kind: ClassVar[NodeKind]

    index: int
    line: int
    start: int
    end: int
    parent: Optional[int]
    scope: int


@dataclass(frozen=True)
class LoopNode(SyntaxNode):
    """A loop statement.

    Attributes:
        loop_type: "for" | "for-in" | "for-of" | "while" | "do-while"
        iteration_start: Start of the span evaluated on every iteration
        iteration_end: End of that span; the body plus, for ``for`` and
            ``while`` loops, the test and update expressions
    """

    kind: ClassVar[NodeKind] = NodeKind.LOOP

    loop_type: str
    iteration_start: int
    iteration_end: int

    def repeats(self, node: SyntaxNode) -> bool:
        """Whether ``node`` runs once per iteration of this loop."""
        return self.iteration_start <= node.start and node.end <= self.iteration_end


@dataclass(frozen=True)
class CallNode(SyntaxNode):
    """A call expression.

    Attributes:
        callee_name: Identifier name, or the property name of a member callee
        callee_object: Source text of a member callee's object (``JSON``,
            ``window``, ``this.el``), None for plain identifier callees
        is_method: True when the callee is a member access
        receiver: Index of the CallNode the method is invoked on
            (``a.b().c()``: the ``c`` call's receiver is the ``b`` call)
        arguments: Shape of each argument
        first_string_argument: Value of the first argument when it is a string
        identifier_arguments: Names of the arguments that are bare identifiers
    """

    kind: ClassVar[NodeKind] = NodeKind.CALL

    callee_name: Optional[str]
    callee_object: Optional[str]
    is_method: bool
    receiver: Optional[int]
    arguments: tuple[ValueShape, ...]
    first_string_argument: Optional[str]
    identifier_arguments: tuple[str, ...] = ()

    @property
    def callee_path(self) -> Optional[str]:
        """Dotted callee (``JSON.parse``), or the bare name."""
        if self.callee_name is None:
            return None
        if self.callee_object:
            return f"{self.callee_object}.{self.callee_name}"
        return self.callee_name


@dataclass(frozen=True)
class ImportNode(SyntaxNode):
    kind: ClassVar[NodeKind] = NodeKind.IMPORT

    source: str
    specifiers: tuple[str, ...]
    is_default: bool
    is_namespace: bool


@dataclass(frozen=True)
class FunctionNode(SyntaxNode):
    """A function definition of any form.

    Attributes:
        name: Declared name, or the binding it is assigned to
            (``const Foo = () => ...``), None for anonymous callbacks
        form: "declaration" | "expression" | "arrow" | "method"
        param_count: Number of formal parameters
        callback_of: Index of the CallNode this function is passed to
    """

    kind: ClassVar[NodeKind] = NodeKind.FUNCTION

    name: Optional[str]
    form: str
    param_count: int
    callback_of: Optional[int]

    @property
    def is_component_like(self) -> bool:
        return bool(self.name) and self.name[0].isupper()


@dataclass(frozen=True)
class MemberNode(SyntaxNode):
    kind: ClassVar[NodeKind] = NodeKind.MEMBER

    object_text: str
    property: str
    assigned: bool  # left-hand side of an assignment


@dataclass(frozen=True)
class JsxAttribute:
    name: str
    value: Optional[ValueShape]  # None for bare attributes (``<input disabled />``)
    line: int


@dataclass(frozen=True)
class ElementNode(SyntaxNode):
    kind: ClassVar[NodeKind] = NodeKind.ELEMENT

    tag: str
    attributes: tuple[JsxAttribute, ...]

    def attribute(self, name: str) -> Optional[JsxAttribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass(frozen=True)
class Scope:
    """A lexical block: program, function, block statement, loop head, catch or class."""

    index: int
    kind: str
    line: int
    start: int
    end: int
    parent: Optional[int]


N = TypeVar("N", bound=SyntaxNode)

# Poll the cancel token every this many visited nodes
_CHECK_INTERVAL = 256


class SyntaxTree:
    """Read-only, lowered syntax tree of one file.

    Detectors only read from it; nothing here mutates after construction.
    """

    def __init__(
        self,
        nodes: Sequence[SyntaxNode],
        scopes: Sequence[Scope],
        dialect: Dialect,
        path: Path | str = "<source>",
        mentions_react: bool = False,
        cancel: Optional[CancellationToken] = None,
    ) -> None:
        self.nodes: tuple[SyntaxNode, ...] = tuple(nodes)
        self.scopes: tuple[Scope, ...] = tuple(scopes)
        self.dialect = dialect
        self.path = Path(path)
        self.mentions_react = mentions_react
        self._cancel = cancel
        self._starts = [n.start for n in self.nodes]
        by_kind: dict[NodeKind, list[int]] = {kind: [] for kind in NodeKind}
        for node in self.nodes:
            by_kind[node.kind].append(node.index)
        self._by_kind = {kind: tuple(indexes) for kind, indexes in by_kind.items()}

    def __len__(self) -> int:
        return len(self.nodes)

    def _checkpoint(self, counter: int) -> None:
        if self._cancel is not None and counter % _CHECK_INTERVAL == 0:
            self._cancel.raise_if_cancelled(self.path)

    # ── Visitation ─────────────────────────────────────────────

    def visit(self, cls: type[N]) -> Iterator[N]:
        """Depth-first (preorder) visitation of one node variant."""
        for count, index in enumerate(self._by_kind[cls.kind], 1):
            self._checkpoint(count)
            yield self.nodes[index]  # type: ignore[misc]

    def count(self, cls: type[SyntaxNode]) -> int:
        return len(self._by_kind[cls.kind])

    def descendants(self, node: SyntaxNode, cls: Optional[type[N]] = None) -> Iterator[N]:
        """Nodes strictly inside ``node``, in preorder."""
        for index in range(node.index + 1, len(self.nodes)):
            self._checkpoint(index)
            candidate = self.nodes[index]
            if candidate.start >= node.end or candidate.end > node.end:
                break
            if cls is None or isinstance(candidate, cls):
                yield candidate  # type: ignore[misc]

    # ── Parent chain ───────────────────────────────────────────

    def parent(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        return None if node.parent is None else self.nodes[node.parent]

    def ancestors(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        """Lowered ancestors, innermost first."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def has_ancestor(self, node: SyntaxNode, cls: type[SyntaxNode]) -> bool:
        return any(isinstance(a, cls) for a in self.ancestors(node))

    def in_loop_iteration(self, node: SyntaxNode) -> bool:
        """Whether an enclosing loop evaluates ``node`` on every iteration.

        A for-of iterable or a for initializer is inside the loop node but
        runs once, so it does not count.
        """
        return any(isinstance(a, LoopNode) and a.repeats(node) for a in self.ancestors(node))

    def nearest(self, node: SyntaxNode, cls: type[N]) -> Optional[N]:
        for ancestor in self.ancestors(node):
            if isinstance(ancestor, cls):
                return ancestor
        return None

    # ── Scope chain ────────────────────────────────────────────

    def scope_of(self, node: SyntaxNode) -> Scope:
        return self.scopes[node.scope]

    def scope_chain(self, node: SyntaxNode) -> tuple[Scope, ...]:
        """Enclosing scopes, innermost first."""
        chain = []
        current: Optional[Scope] = self.scopes[node.scope]
        while current is not None:
            chain.append(current)
            current = None if current.parent is None else self.scopes[current.parent]
        return tuple(chain)

    def nodes_in_scope(self, scope: Scope, cls: Optional[type[N]] = None) -> Iterator[N]:
        """Every node lexically inside the scope's block, nested blocks included."""
        first = bisect_left(self._starts, scope.start)
        for index in range(first, len(self.nodes)):
            self._checkpoint(index)
            candidate = self.nodes[index]
            if candidate.start >= scope.end:
                break
            if candidate.end <= scope.end and (cls is None or isinstance(candidate, cls)):
                yield candidate  # type: ignore[misc]
