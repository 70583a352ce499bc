"""Tests for BottleneckDetector: nested loops, long chains, DOM work in loops."""

from perf_wizard.config import AnalysisSettings, AnalysisToggles
from perf_wizard.insights.detectors import BottleneckDetector
from perf_wizard.insights.models import FindingKind, Severity


def _detect(tree):
    return BottleneckDetector().detect(tree)


def _kinds(findings):
    return [f.kind for f in findings]


class TestNestedLoops:
    """Only the outermost loop of a nest reports."""

    def test_double_loop(self, parse_js):
        tree = parse_js(
            "for (let i = 0; i < n; i++) {\n"
            "  for (let j = 0; j < n; j++) {\n"
            "    total += i * j;\n"
            "  }\n"
            "}\n"
        )
        (finding,) = _detect(tree)
        assert finding.kind is FindingKind.NESTED_LOOP
        assert finding.severity is Severity.HIGH
        assert finding.category == "performance"
        assert finding.line == 1
        assert finding.message == "Nested loops detected - O(n²) complexity"
        assert "Map/Set" in finding.remediation

    def test_triple_nest_reports_once(self, parse_js):
        tree = parse_js(
            "for (const a of xs) {\n"
            "  for (const b of ys) {\n"
            "    while (more()) { step(a, b); }\n"
            "  }\n"
            "}\n"
        )
        assert _kinds(_detect(tree)) == [FindingKind.NESTED_LOOP]

    def test_separate_nests_report_separately(self, parse_js):
        tree = parse_js(
            "for (const a of xs) { for (const b of xs) {} }\n"
            "\n"
            "while (x) { do { x--; } while (x > 3); }\n"
        )
        findings = _detect(tree)
        assert [f.line for f in findings] == [1, 3]

    def test_single_loop_is_fine(self, parse_js):
        assert _detect(parse_js("for (const a of xs) { use(a); }\n")) == []

    def test_loop_inside_callback_inside_loop(self, parse_js):
        """A loop in a function defined inside a loop still nests lexically."""
        tree = parse_js("for (const a of xs) {\n  ys.map((y) => { for (const z of y) {} });\n}\n")
        assert _kinds(_detect(tree)) == [FindingKind.NESTED_LOOP]


class TestLongChains:
    """Method chains longer than three calls."""

    def test_four_method_chain(self, parse_js):
        tree = parse_js("const r = xs.map(f).filter(g).map(h).reduce(add, 0);\n")
        (finding,) = _detect(tree)
        assert finding.kind is FindingKind.LONG_CHAIN
        assert finding.severity is Severity.MEDIUM
        assert finding.message == "Long array method chain (4 methods)"

    def test_three_method_chain_is_fine(self, parse_js):
        assert _detect(parse_js("const r = xs.map(f).filter(g).reduce(add, 0);\n")) == []

    def test_counts_every_chained_method(self, parse_js):
        tree = parse_js("const r = items.slice(1).map(f).filter(g).find(h);\n")
        (finding,) = _detect(tree)
        assert finding.message == "Long array method chain (4 methods)"

    def test_chain_split_across_lines(self, parse_js):
        tree = parse_js(
            "const r = xs\n"
            "  .map(f)\n"
            "  .filter(g)\n"
            "  .some(h)\n"
            "  .every(k);\n"
        )
        assert _kinds(_detect(tree)) == [FindingKind.LONG_CHAIN]


class TestDomInLoops:
    """DOM calls and HTML assignments inside loop bodies."""

    def test_dom_call_in_loop(self, parse_js):
        tree = parse_js(
            "for (const item of items) {\n"
            "  const li = document.createElement('li');\n"
            "  list.appendChild(li);\n"
            "}\n"
        )
        findings = _detect(tree)
        assert [f.message for f in findings] == [
            "DOM manipulation inside loop (createElement())",
            "DOM manipulation inside loop (appendChild())",
        ]
        assert all(f.severity is Severity.HIGH for f in findings)
        assert findings[0].remediation == "Batch DOM updates outside the loop"

    def test_inner_html_assignment_in_loop(self, parse_js):
        tree = parse_js("while (i < n) {\n  el.innerHTML += rows[i++];\n}\n")
        (finding,) = _detect(tree)
        assert finding.kind is FindingKind.DOM_IN_LOOP
        assert finding.message == "DOM manipulation inside loop (innerHTML assignment)"
        assert finding.line == 2

    def test_dom_outside_loop_is_fine(self, parse_js):
        tree = parse_js("document.getElementById('out').innerHTML = html;\n")
        assert _detect(tree) == []

    def test_reading_inner_html_is_fine(self, parse_js):
        tree = parse_js("for (const el of els) { copy.push(el.innerHTML); }\n")
        assert _detect(tree) == []

    def test_for_of_iterable_lookup_is_fine(self, parse_js):
        tree = parse_js(
            "for (const b of document.querySelectorAll('.btn')) {\n"
            "  b.disabled = true;\n"
            "}\n"
        )
        assert _detect(tree) == []

    def test_lookup_in_for_condition(self, parse_js):
        tree = parse_js("for (let i = 0; i < document.querySelectorAll('li').length; i++) {}\n")
        (finding,) = _detect(tree)
        assert finding.message == "DOM manipulation inside loop (querySelectorAll())"

    def test_two_calls_on_one_line(self, parse_js):
        tree = parse_js("for (;;) { el.appendChild(a); el.appendChild(b); }\n")
        findings = _detect(tree)
        assert len(findings) == 2
        assert findings[0].offset < findings[1].offset


class TestApplies:
    """Toggle gating."""

    def test_performance_toggle(self, parse_js):
        tree = parse_js("f();\n")
        detector = BottleneckDetector()
        assert detector.applies(tree, AnalysisSettings())
        off = AnalysisSettings(analysis=AnalysisToggles(performance=False))
        assert not detector.applies(tree, off)
