"""BUNDLE IMPACT: imports of libraries known to weigh down a bundle.

Category: bundle
Severity: medium

Import sources are matched by substring against a fixed table, so
``lodash/debounce`` and ``@material-ui/core`` match their library.
Unmatched imports are still recorded for the file's import list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Optional

from ...scanning.nodes import ImportNode
from ..models import Finding, FindingKind, HeavyImport, ImportRecord, Severity

if TYPE_CHECKING:
    from ...config import AnalysisSettings
    from ...scanning.nodes import SyntaxTree


class HeavyLibrary(NamedTuple):
    name: str
    estimated_size: str
    alternative: str


DEFAULT_ALTERNATIVE = "Consider lighter alternatives"

# Order matters: the first substring match wins
HEAVY_LIBRARIES = (
    HeavyLibrary("lodash", "70KB", "Use native ES6 methods or lodash-es for tree shaking"),
    HeavyLibrary("moment", "67KB", "Use date-fns or dayjs (2KB vs 67KB)"),
    HeavyLibrary("axios", "Unknown", DEFAULT_ALTERNATIVE),
    HeavyLibrary("jquery", "87KB", "Use vanilla JavaScript or modern alternatives"),
    HeavyLibrary("bootstrap", "158KB", "Use Tailwind CSS or CSS Modules"),
    HeavyLibrary("material-ui", "300KB+", "Use Mantine or Chakra UI (lighter alternatives)"),
    HeavyLibrary("antd", "500KB+", "Use individual component imports"),
    HeavyLibrary("react-router-dom", "Unknown", DEFAULT_ALTERNATIVE),
)


def match_heavy_library(source: str) -> Optional[HeavyLibrary]:
    """Return the table entry whose name occurs in an import source."""
    for library in HEAVY_LIBRARIES:
        if library.name in source:
            return library
    return None


def collect_imports(tree: SyntaxTree) -> tuple[list[ImportRecord], list[HeavyImport]]:
    """All import declarations of a file, and the heavy ones among them."""
    imports: list[ImportRecord] = []
    heavy: list[HeavyImport] = []
    for node in tree.visit(ImportNode):
        imports.append(
            ImportRecord(
                source=node.source,
                specifiers=node.specifiers,
                is_default=node.is_default,
                is_namespace=node.is_namespace,
                line=node.line,
            )
        )
        library = match_heavy_library(node.source)
        if library is not None:
            heavy.append(
                HeavyImport(
                    library=node.source,
                    estimated_size=library.estimated_size,
                    alternative=library.alternative,
                    line=node.line,
                    offset=node.start,
                )
            )
    return imports, heavy


class BundleImpactDetector:
    """Detects imports matching the heavy library table."""

    name = "bundle_impact"
    category = "bundle"

    def applies(self, tree: SyntaxTree, settings: AnalysisSettings) -> bool:
        return settings.analysis.bundle_impact

    def detect(self, tree: SyntaxTree) -> list[Finding]:
        _, heavy = collect_imports(tree)
        return [
            Finding(
                kind=FindingKind.HEAVY_IMPORT,
                severity=Severity.MEDIUM,
                category=self.category,
                line=item.line,
                offset=item.offset,
                message=f"Heavy dependency: {item.library} ({item.estimated_size})",
                remediation=item.alternative,
                impact="Bundle size, loading time",
            )
            for item in heavy
        ]
