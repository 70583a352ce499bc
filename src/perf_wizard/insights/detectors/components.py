"""COMPONENT PATTERNS: React rendering anti-patterns and missed optimizations.

Category: react (anti-patterns), react-optimization (recommendations)
Severity: medium (anti-patterns), low (recommendations)

A component is a named, capitalized function that renders JSX or calls
hooks. Within components the detector flags:

- object/array literals passed as JSX prop values (new identity per render)
- expensive calls made directly in the render body
- effect/memo hooks called without a dependency array
- components taking props that are never wrapped in ``memo``
- ``.map`` callbacks whose top element has no ``key``

Only runs for markup and typed dialects, or scripts mentioning ``React``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...scanning.dialects import Dialect
from ...scanning.nodes import CallNode, ElementNode, FunctionNode
from ..models import Finding, FindingKind, Severity

if TYPE_CHECKING:
    from ...config import AnalysisSettings
    from ...scanning.nodes import SyntaxTree

EXPENSIVE_METHODS = frozenset({"sort", "reduce", "filter", "flatMap"})
EXPENSIVE_FUNCTIONS = frozenset({"JSON.parse", "JSON.stringify", "structuredClone"})

DEPENDENCY_HOOKS = frozenset({"useEffect", "useLayoutEffect", "useMemo", "useCallback"})

MEMO_WRAPPERS = frozenset({"memo"})

_ANTI_PATTERN_IMPACT = "Component performance, re-renders"
_OPTIMIZATION_IMPACT = "Component performance"


def _is_react_call(call: CallNode, names: frozenset[str]) -> bool:
    """``useEffect(...)`` or ``React.useEffect(...)``."""
    if call.callee_name not in names:
        return False
    return not call.is_method or call.callee_object == "React"


def _is_hook_call(call: CallNode) -> bool:
    name = call.callee_name or ""
    return name.startswith("use") and (not call.is_method or call.callee_object == "React")


class ComponentPatternDetector:
    """Detects React component anti-patterns and optimization opportunities."""

    name = "components"
    category = "react"

    def applies(self, tree: SyntaxTree, settings: AnalysisSettings) -> bool:
        if not settings.analysis.react:
            return False
        return tree.dialect in (Dialect.MARKUP, Dialect.TYPED) or tree.mentions_react

    def detect(self, tree: SyntaxTree) -> list[Finding]:
        components = self._components(tree)
        findings: list[Finding] = []
        findings.extend(self._inline_props(tree, components))
        findings.extend(self._expensive_render_calls(tree, components))
        findings.extend(self._hook_dependencies(tree))
        findings.extend(self._memo_opportunities(tree, components))
        findings.extend(self._missing_keys(tree))
        return findings

    @staticmethod
    def _components(tree: SyntaxTree) -> dict[int, FunctionNode]:
        components = {}
        for func in tree.visit(FunctionNode):
            if func.form == "method" or not func.is_component_like:
                continue
            renders = next(tree.descendants(func, ElementNode), None) is not None
            if renders or any(_is_hook_call(c) for c in tree.descendants(func, CallNode)):
                components[func.index] = func
        return components

    # ── Anti-patterns ──────────────────────────────────────────

    def _inline_props(self, tree: SyntaxTree, components: dict[int, FunctionNode]) -> list[Finding]:
        findings = []
        for element in tree.visit(ElementNode):
            if not any(a.index in components for a in tree.ancestors(element)):
                continue
            for attr in element.attributes:
                if attr.value is None or not attr.value.is_literal_collection:
                    continue
                findings.append(
                    Finding(
                        kind=FindingKind.REACT_ANTI_PATTERN,
                        severity=Severity.MEDIUM,
                        category=self.category,
                        line=attr.line,
                        offset=element.start,
                        message=f"Inline {attr.value.value} literal in prop '{attr.name}' creates a new reference every render",
                        remediation="Hoist the value to a module constant or wrap it in useMemo",
                        impact=_ANTI_PATTERN_IMPACT,
                    )
                )
        return findings

    def _expensive_render_calls(
        self, tree: SyntaxTree, components: dict[int, FunctionNode]
    ) -> list[Finding]:
        findings = []
        for call in tree.visit(CallNode):
            if call.is_method and call.callee_name in EXPENSIVE_METHODS:
                label = f".{call.callee_name}()"
            elif call.callee_path in EXPENSIVE_FUNCTIONS:
                label = f"{call.callee_path}()"
            else:
                continue
            owner = tree.nearest(call, FunctionNode)
            if owner is None or owner.index not in components:
                continue
            findings.append(
                Finding(
                    kind=FindingKind.REACT_ANTI_PATTERN,
                    severity=Severity.MEDIUM,
                    category=self.category,
                    line=call.line,
                    offset=call.start,
                    message=f"Expensive operation {label} in render of {owner.name}",
                    remediation="Move the computation into useMemo or out of the component",
                    impact=_ANTI_PATTERN_IMPACT,
                )
            )
        return findings

    def _hook_dependencies(self, tree: SyntaxTree) -> list[Finding]:
        findings = []
        for call in tree.visit(CallNode):
            if not _is_react_call(call, DEPENDENCY_HOOKS) or len(call.arguments) >= 2:
                continue
            findings.append(
                Finding(
                    kind=FindingKind.REACT_ANTI_PATTERN,
                    severity=Severity.MEDIUM,
                    category=self.category,
                    line=call.line,
                    offset=call.start,
                    message=f"{call.callee_name} called without a dependency array",
                    remediation="Pass the dependency array so the hook does not rerun every render",
                    impact=_ANTI_PATTERN_IMPACT,
                )
            )
        return findings

    # ── Recommendations ────────────────────────────────────────

    def _memo_opportunities(
        self, tree: SyntaxTree, components: dict[int, FunctionNode]
    ) -> list[Finding]:
        memo_calls: set[int] = set()
        memo_names: set[str] = set()
        for call in tree.visit(CallNode):
            if _is_react_call(call, MEMO_WRAPPERS):
                memo_calls.add(call.index)
                memo_names.update(call.identifier_arguments)

        findings = []
        for func in components.values():
            if func.param_count == 0 or tree.nearest(func, FunctionNode) is not None:
                continue
            if func.callback_of in memo_calls or func.name in memo_names:
                continue
            findings.append(
                Finding(
                    kind=FindingKind.REACT_OPTIMIZATION,
                    severity=Severity.LOW,
                    category="react-optimization",
                    line=func.line,
                    offset=func.start,
                    message=f"Component {func.name} could be wrapped in React.memo",
                    remediation=f"export default React.memo({func.name})",
                    autofixable=True,
                    impact=_OPTIMIZATION_IMPACT,
                )
            )
        return findings

    def _missing_keys(self, tree: SyntaxTree) -> list[Finding]:
        callbacks: dict[int, list[FunctionNode]] = {}
        for func in tree.visit(FunctionNode):
            if func.callback_of is not None:
                callbacks.setdefault(func.callback_of, []).append(func)

        findings = []
        for call in tree.visit(CallNode):
            if not call.is_method or call.callee_name != "map":
                continue
            for callback in callbacks.get(call.index, ()):
                # First element in preorder is the outermost one rendered
                element = next(tree.descendants(callback, ElementNode), None)
                if element is None or element.attribute("key") is not None:
                    continue
                findings.append(
                    Finding(
                        kind=FindingKind.REACT_OPTIMIZATION,
                        severity=Severity.LOW,
                        category="react-optimization",
                        line=element.line,
                        offset=element.start,
                        message=f"Missing key prop on <{element.tag or 'Fragment'}> rendered in .map()",
                        remediation="Add a stable key prop (an id, not the array index)",
                        autofixable=True,
                        impact=_OPTIMIZATION_IMPACT,
                    )
                )
        return findings
