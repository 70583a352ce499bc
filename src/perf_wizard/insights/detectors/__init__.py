"""Detector implementations: read a SyntaxTree and produce Findings.

The registry is ordered and fixed. Detectors are independent of each other;
their outputs are concatenated in registry order and never interleaved.
"""

from .bottlenecks import BottleneckDetector
from .bundle import BundleImpactDetector, collect_imports, match_heavy_library
from .components import ComponentPatternDetector
from .leaks import LeakDetector


def get_default_detectors() -> list:
    """Return all detectors in registry order.

    1. Performance bottlenecks
    2. Memory leaks
    3. Bundle impact
    4. Component patterns
    """
    return [
        BottleneckDetector(),
        LeakDetector(),
        BundleImpactDetector(),
        ComponentPatternDetector(),
    ]


__all__ = [
    "BottleneckDetector",
    "BundleImpactDetector",
    "ComponentPatternDetector",
    "LeakDetector",
    "collect_imports",
    "get_default_detectors",
    "match_heavy_library",
]
