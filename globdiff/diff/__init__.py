"""globdiff Diff Engine.

Line-by-line comparison of expected wildcard patterns with actual text:
- DiffAnalyzer / analyze: Positional line diff with wildcard captures
- LineMatchResult / DiffResult: Comparison results
- render_report: Human-readable report rendering
"""

from .analyzer import (
    DiffAnalyzer,
    DiffResult,
    LineMatchResult,
    analyze,
    find_mismatch_position,
    split_lines,
)
from .report import DiffOptions, DiffReportRenderer, ReportError, display, render_report

__all__ = [
    "DiffAnalyzer",
    "DiffResult",
    "LineMatchResult",
    "analyze",
    "find_mismatch_position",
    "split_lines",
    "DiffOptions",
    "DiffReportRenderer",
    "ReportError",
    "display",
    "render_report",
]
