"""Tests for lexical (traditional) metrics."""

from perf_wizard.scanning.metrics import (
    calculate_complexity,
    compute_traditional_metrics,
    detect_duplicated_lines,
)


class TestCounts:
    """Regex based counts."""

    def test_basic_counts(self):
        content = "function load() {}\nconst b = () => {\n  // TODO: cache\n};\n"
        metrics = compute_traditional_metrics(content)
        assert metrics.lines == 5
        assert metrics.chars == len(content)
        assert metrics.functions == 3
        assert metrics.todos == 1
        assert metrics.loops == 0

    def test_loops_and_imports(self):
        content = (
            "import a from 'a';\n"
            "const b = require('b');\n"
            "for (const x of xs) {}\n"
            "while (ok) {}\n"
            "xs.forEach(f);\n"
            "xs.map(f).filter(g);\n"
        )
        metrics = compute_traditional_metrics(content)
        assert metrics.imports == 2
        assert metrics.loops == 5

    def test_empty_content(self):
        metrics = compute_traditional_metrics("")
        assert metrics.lines == 1
        assert metrics.chars == 0
        assert metrics.complexity == 1
        assert metrics.duplicated_code == 0


class TestComplexity:
    """Cyclomatic approximation."""

    def test_branching_keywords(self):
        content = (
            "if (a) {} else if (b) {}\n"
            "switch (c) { case 1: break; }\n"
            "try {} catch (e) {}\n"
        )
        # 1 + if x2 + else + switch + case + catch
        assert calculate_complexity(content) == 7

    def test_straight_line_code(self):
        assert calculate_complexity("const a = 1;\nconst b = a + 1;\n") == 1


class TestDuplicatedLines:
    """Exact repeats of normalized lines."""

    def test_whitespace_normalized(self):
        content = "const total = a + b;\nconst total = a + b;\n  const   total = a + b;\n"
        dups = detect_duplicated_lines(content)
        assert [d.line for d in dups] == [2, 3]
        assert all(d.first_occurrence == 1 for d in dups)
        assert dups[0].content == "const total = a + b;"

    def test_short_lines_ignored(self):
        assert detect_duplicated_lines("x = 1;\nx = 1;\n}\n}\n") == []

    def test_to_dict_uses_camel_case(self):
        content = "return value + 1;\nreturn value + 1;\n"
        data = compute_traditional_metrics(content).to_dict()
        assert data["duplicatedCode"] == 1
        assert set(data) == {
            "lines",
            "chars",
            "functions",
            "loops",
            "imports",
            "complexity",
            "todos",
            "duplicatedCode",
        }
