"""globdiff - Wildcard pattern matching and line diffing.

Import the main entry points from here:
    from globdiff import WildcardPattern, is_match, analyze, render_report
"""

from globdiff.core.constants import GLOBDIFF_VERSION
from globdiff.diff import DiffAnalyzer, DiffOptions, DiffResult, LineMatchResult, analyze, render_report
from globdiff.patterns import (
    WildcardOptions,
    WildcardPattern,
    WildcardPatternError,
    contains_wildcard_characters,
    escape,
    is_like,
    is_match,
    unescape,
)

__version__ = GLOBDIFF_VERSION

__all__ = [
    "WildcardOptions",
    "WildcardPattern",
    "WildcardPatternError",
    "is_match",
    "is_like",
    "escape",
    "unescape",
    "contains_wildcard_characters",
    "DiffAnalyzer",
    "DiffOptions",
    "DiffResult",
    "LineMatchResult",
    "analyze",
    "render_report",
]
