"""Traditional (lexical) metrics.

Computed for every readable text file from the raw content with fixed regex
patterns, independent of whether the syntax tree parsed. These numbers are
approximate by design; the syntax-tree detectors are the precise layer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

FUNCTION_PATTERN = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\(|=>\s*\{")
LOOP_PATTERN = re.compile(r"for\s*\(|while\s*\(|forEach\(|map\(|filter\(")
IMPORT_PATTERN = re.compile(r"import\s+.*from|require\s*\(")
TODO_PATTERN = re.compile(r"TODO|FIXME|XXX", re.IGNORECASE)

# Each occurrence adds one path to the cyclomatic approximation
COMPLEXITY_PATTERNS = (
    re.compile(r"if\s*\("),
    re.compile(r"else"),
    re.compile(r"for\s*\("),
    re.compile(r"while\s*\("),
    re.compile(r"switch\s*\("),
    re.compile(r"case\s+"),
    re.compile(r"catch\s*\("),
    re.compile(r"\?\s*:"),
)

# Lines this short (after trimming) are too common to count as duplication
MIN_DUPLICATE_LENGTH = 10

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class DuplicateLine:
    """A repeated line.

    Attributes:
        line: 1-indexed line of the repeat
        content: Whitespace-normalized text
        first_occurrence: 1-indexed line where the text first appeared
    """

    line: int
    content: str
    first_occurrence: int


@dataclass(frozen=True)
class TraditionalMetrics:
    """Lexical metrics of one file."""

    lines: int
    chars: int
    functions: int
    loops: int
    imports: int
    complexity: int
    todos: int
    duplicates: tuple[DuplicateLine, ...] = field(default_factory=tuple)

    @property
    def duplicated_code(self) -> int:
        return len(self.duplicates)

    def to_dict(self) -> dict:
        return {
            "lines": self.lines,
            "chars": self.chars,
            "functions": self.functions,
            "loops": self.loops,
            "imports": self.imports,
            "complexity": self.complexity,
            "todos": self.todos,
            "duplicatedCode": self.duplicated_code,
        }


def calculate_complexity(content: str) -> int:
    """Cyclomatic approximation: 1 + branching keyword occurrences."""
    return 1 + sum(len(pattern.findall(content)) for pattern in COMPLEXITY_PATTERNS)


def detect_duplicated_lines(content: str, min_length: int = MIN_DUPLICATE_LENGTH) -> list[DuplicateLine]:
    """Find exact repeats of whitespace-normalized lines.

    Only lines longer than ``min_length`` characters (after trimming) are
    considered.
    """
    duplicates: list[DuplicateLine] = []
    seen: dict[str, int] = {}

    for index, line in enumerate(content.split("\n")):
        if len(line.strip()) <= min_length:
            continue
        normalized = _WHITESPACE.sub(" ", line.strip())
        if normalized in seen:
            duplicates.append(
                DuplicateLine(line=index + 1, content=normalized, first_occurrence=seen[normalized])
            )
        else:
            seen[normalized] = index + 1

    return duplicates


def compute_traditional_metrics(content: str) -> TraditionalMetrics:
    """Compute all lexical metrics for a file's content."""
    return TraditionalMetrics(
        lines=len(content.split("\n")),
        chars=len(content),
        functions=len(FUNCTION_PATTERN.findall(content)),
        loops=len(LOOP_PATTERN.findall(content)),
        imports=len(IMPORT_PATTERN.findall(content)),
        complexity=calculate_complexity(content),
        todos=len(TODO_PATTERN.findall(content)),
        duplicates=tuple(detect_duplicated_lines(content)),
    )
