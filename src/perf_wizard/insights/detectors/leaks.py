"""LEAKS: listeners and timers registered without a cleanup in scope.

Category: memory
Severity: medium

For every ``x.addEventListener(...)`` and every ``setTimeout`` /
``setInterval`` / ``requestAnimationFrame`` call, the enclosing lexical
scope (including nested functions, so a returned effect cleanup counts) is
searched for a matching cleanup call. Any ``removeEventListener`` clears
every listener of that scope, and any clear/cancel call clears every
timer: the check does not compare listener or timer identities, so
several registrations sharing one scope can hide each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...scanning.nodes import CallNode
from ..models import Finding, FindingKind, Severity

if TYPE_CHECKING:
    from ...config import AnalysisSettings
    from ...scanning.nodes import Scope, SyntaxTree

LISTENER_METHOD = "addEventListener"
LISTENER_CLEANUP = "removeEventListener"

TIMER_FUNCTIONS = frozenset({"setTimeout", "setInterval", "requestAnimationFrame"})
TIMER_CLEANUPS = frozenset({"clearTimeout", "clearInterval", "cancelAnimationFrame"})

# ``window.setTimeout(...)`` is the same global as ``setTimeout(...)``
GLOBAL_OBJECTS = frozenset({"window", "globalThis", "self"})

_IMPACT = "Memory usage, potential crashes"


def _is_global_call(call: CallNode, names: frozenset[str]) -> bool:
    if call.callee_name not in names:
        return False
    return not call.is_method or call.callee_object in GLOBAL_OBJECTS


def is_listener_registration(call: CallNode) -> bool:
    return call.is_method and call.callee_name == LISTENER_METHOD


def is_timer_registration(call: CallNode) -> bool:
    return _is_global_call(call, TIMER_FUNCTIONS)


class LeakDetector:
    """Detects event listeners and timers with no cleanup in their scope."""

    name = "memory_leaks"
    category = "memory"

    def applies(self, tree: SyntaxTree, settings: AnalysisSettings) -> bool:
        return settings.analysis.memory_leaks

    def detect(self, tree: SyntaxTree) -> list[Finding]:
        findings: list[Finding] = []
        # scope index -> (has listener cleanup, has timer cleanup)
        cleanups: dict[int, tuple[bool, bool]] = {}

        for call in tree.visit(CallNode):
            listener = is_listener_registration(call)
            timer = is_timer_registration(call)
            if not (listener or timer):
                continue

            scope = tree.scope_of(call)
            if scope.index not in cleanups:
                cleanups[scope.index] = self._scan_cleanups(tree, scope)
            has_listener_cleanup, has_timer_cleanup = cleanups[scope.index]

            if listener and not has_listener_cleanup:
                findings.append(
                    Finding(
                        kind=FindingKind.EVENT_LISTENER_LEAK,
                        severity=Severity.MEDIUM,
                        category=self.category,
                        line=call.line,
                        offset=call.start,
                        message=self._listener_message(call),
                        remediation="Add removeEventListener in cleanup function",
                        impact=_IMPACT,
                    )
                )
            elif timer and not has_timer_cleanup:
                findings.append(
                    Finding(
                        kind=FindingKind.TIMER_LEAK,
                        severity=Severity.MEDIUM,
                        category=self.category,
                        line=call.line,
                        offset=call.start,
                        message=f"Timer without cleanup ({call.callee_name})",
                        remediation="Store timer ID and clear in cleanup",
                        impact=_IMPACT,
                    )
                )
        return findings

    @staticmethod
    def _scan_cleanups(tree: SyntaxTree, scope: Scope) -> tuple[bool, bool]:
        listener_cleanup = False
        timer_cleanup = False
        for call in tree.nodes_in_scope(scope, CallNode):
            if call.is_method and call.callee_name == LISTENER_CLEANUP:
                listener_cleanup = True
            elif _is_global_call(call, TIMER_CLEANUPS):
                timer_cleanup = True
            if listener_cleanup and timer_cleanup:
                break
        return listener_cleanup, timer_cleanup

    @staticmethod
    def _listener_message(call: CallNode) -> str:
        if call.first_string_argument:
            return f"Event listener without cleanup ('{call.first_string_argument}')"
        return "Event listener without cleanup"
