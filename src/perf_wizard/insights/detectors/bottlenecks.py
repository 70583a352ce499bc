"""BOTTLENECKS: runtime performance hazards visible in the syntax tree.

Category: performance
Severity: high (nested loops, DOM work in loops), medium (long chains)

Three independent rules share this detector:

- NestedLoop: a loop that contains another loop. Only the outermost loop
  of a nest reports, so a triple nest yields one finding.
- LongChain: more than three consecutive method calls chained onto an
  array iteration method (``a.map().filter().reduce().find()``). Only the
  outermost call of a chain reports.
- DomInLoop: DOM lookup/creation/mutation calls, or ``innerHTML`` /
  ``outerHTML`` assignments, evaluated on every iteration of a loop. A
  for-of iterable (``for (const el of document.querySelectorAll(...))``)
  runs once and is not reported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...scanning.nodes import CallNode, LoopNode, MemberNode
from ..models import Finding, FindingKind, Severity

if TYPE_CHECKING:
    from ...config import AnalysisSettings
    from ...scanning.nodes import SyntaxNode, SyntaxTree

CHAIN_METHODS = frozenset({"map", "filter", "reduce", "forEach", "find", "some", "every"})

DOM_METHODS = frozenset(
    {
        "querySelector",
        "querySelectorAll",
        "getElementById",
        "getElementsByClassName",
        "getElementsByTagName",
        "appendChild",
        "insertBefore",
        "removeChild",
        "replaceChild",
        "createElement",
        "setAttribute",
        "removeAttribute",
        "insertAdjacentHTML",
    }
)

DOM_CONTENT_PROPERTIES = frozenset({"innerHTML", "outerHTML"})

_IMPACT = "Runtime performance"


class BottleneckDetector:
    """Detects nested loops, long iteration chains and DOM work in loops."""

    name = "bottlenecks"
    category = "performance"

    MAX_CHAIN_LENGTH = 3

    def applies(self, tree: SyntaxTree, settings: AnalysisSettings) -> bool:
        return settings.analysis.performance

    def detect(self, tree: SyntaxTree) -> list[Finding]:
        findings: list[Finding] = []
        findings.extend(self._nested_loops(tree))
        findings.extend(self._long_chains(tree))
        findings.extend(self._dom_in_loops(tree))
        return findings

    # ── NestedLoop ─────────────────────────────────────────────

    def _nested_loops(self, tree: SyntaxTree) -> list[Finding]:
        findings = []
        for loop in tree.visit(LoopNode):
            if tree.has_ancestor(loop, LoopNode):
                continue
            if next(tree.descendants(loop, LoopNode), None) is None:
                continue
            findings.append(
                Finding(
                    kind=FindingKind.NESTED_LOOP,
                    severity=Severity.HIGH,
                    category=self.category,
                    line=loop.line,
                    offset=loop.start,
                    message="Nested loops detected - O(n²) complexity",
                    remediation="Consider using Map/Set for lookups or optimize algorithm",
                    impact=_IMPACT,
                )
            )
        return findings

    # ── LongChain ──────────────────────────────────────────────

    def _long_chains(self, tree: SyntaxTree) -> list[Finding]:
        calls = list(tree.visit(CallNode))
        # Chain calls that another chain call is invoked on are not outermost
        inner = {
            call.receiver
            for call in calls
            if call.receiver is not None and call.callee_name in CHAIN_METHODS
        }

        findings = []
        for call in calls:
            if not call.is_method or call.callee_name not in CHAIN_METHODS:
                continue
            if call.index in inner:
                continue
            length = self._chain_length(tree, call)
            if length <= self.MAX_CHAIN_LENGTH:
                continue
            findings.append(
                Finding(
                    kind=FindingKind.LONG_CHAIN,
                    severity=Severity.MEDIUM,
                    category=self.category,
                    line=call.line,
                    offset=call.start,
                    message=f"Long array method chain ({length} methods)",
                    remediation="Consider combining operations or using for-loop for better performance",
                    impact=_IMPACT,
                )
            )
        return findings

    @staticmethod
    def _chain_length(tree: SyntaxTree, call: CallNode) -> int:
        """Count method calls by following each call's receiver."""
        length = 0
        current: CallNode | None = call
        while current is not None and current.is_method:
            length += 1
            if current.receiver is None:
                break
            receiver = tree.nodes[current.receiver]
            current = receiver if isinstance(receiver, CallNode) else None
        return length

    # ── DomInLoop ──────────────────────────────────────────────

    def _dom_in_loops(self, tree: SyntaxTree) -> list[Finding]:
        findings = []
        for call in tree.visit(CallNode):
            if call.callee_name in DOM_METHODS and tree.in_loop_iteration(call):
                findings.append(self._dom_finding(call, f"{call.callee_name}()"))

        for member in tree.visit(MemberNode):
            if (
                member.assigned
                and member.property in DOM_CONTENT_PROPERTIES
                and tree.in_loop_iteration(member)
            ):
                findings.append(self._dom_finding(member, f"{member.property} assignment"))

        findings.sort(key=lambda f: (f.line or 0, f.offset or 0))
        return findings

    def _dom_finding(self, node: SyntaxNode, operation: str) -> Finding:
        return Finding(
            kind=FindingKind.DOM_IN_LOOP,
            severity=Severity.HIGH,
            category=self.category,
            line=node.line,
            offset=node.start,
            message=f"DOM manipulation inside loop ({operation})",
            remediation="Batch DOM updates outside the loop",
            impact=_IMPACT,
        )
