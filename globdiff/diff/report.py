#!/usr/bin/env python3
"""Human-readable rendering of diff results using Jinja2.

Two layouts are available:
- DEFAULT: the expected and actual text as two blocks
- ENHANCED_WILDCARD_DIFF: a line-by-line breakdown with match markers,
  wildcard captures, mismatch hints and a summary

Example:
    >>> result = analyze("Hello *", "Hello world")
    >>> print(render_report(result, header="Greeting"))
    Greeting: Output does not match expected pattern using wildcards.
    ...
"""

from enum import IntFlag
from typing import Any, Dict, Optional

import jinja2

from globdiff.core.constants import MATCH_MARKER, MISMATCH_MARKER, ErrorCode
from globdiff.diff.analyzer import DiffResult

DEFAULT_HEADER = "Expectation failed"
SEPARATOR = "-" * 35

ENHANCED_TEMPLATE = """\
{{ header }}: Output does not match expected pattern using wildcards.
{% for line in result.line_results %}
{{ separator }}
Line {{ line.line_number }}:
{% if line.is_extra %}
Expected: <no more lines>
Actual  : {{ line.actual_line | display }}
Match   : {{ mismatch_marker }} ({{ line.mismatch_reason }})
{% elif line.is_missing %}
Expected: {{ line.expected_line | display }}
Actual  : <missing line>
Match   : {{ mismatch_marker }} ({{ line.mismatch_reason }})
{% elif line.is_match %}
Expected: {{ line.expected_line | display }}
Actual  : {{ line.actual_line | display }}
Match   : {{ match_marker }}
{% if line.wildcard_captures %}
Wildcard matches:
{% for capture in line.wildcard_captures %}
  * => "{{ capture | display }}"
{% endfor %}
{% endif %}
{% else %}
Expected: {{ line.expected_line | display }}
Actual  : {{ line.actual_line | display }}
Match   : {{ mismatch_marker }}
Reason  : {{ line.mismatch_reason }}
{% if line.mismatch_hint %}
Hint    : {{ line.mismatch_hint }}
{% endif %}
{% endif %}
{% endfor %}
{{ separator }}
Summary:
  {{ match_marker }} {{ result.matched_count }} matched
  {{ mismatch_marker }} {{ result.mismatched_count }} mismatched
  + {{ result.extra_count }} extra
  - {{ result.missing_count }} missing
"""

DEFAULT_TEMPLATE = """\
{{ header }}: Output does not match expected pattern using wildcards.
{{ separator }}
Expected:
{{ result.expected_text }}
{{ separator }}
Actual  :
{{ result.actual_text }}
{{ separator }}
"""


class DiffOptions(IntFlag):
    """Report layout selection."""

    DEFAULT = 0
    ENHANCED_WILDCARD_DIFF = 1


class ReportError(Exception):
    """Raised when a report template cannot be rendered."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def display(value: Optional[str]) -> str:
    """Make a value printable on one line: control characters become visible."""
    if value is None:
        return "<null>"
    if value == "":
        return "<empty>"
    return value.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")


class DiffReportRenderer:
    """Renders DiffResult values through Jinja2 templates.

    Templates may be overridden; they receive ``result``, ``header``,
    ``separator`` and the two markers, plus the ``display`` filter.
    """

    def __init__(
        self,
        enhanced_template: str = ENHANCED_TEMPLATE,
        default_template: str = DEFAULT_TEMPLATE,
        **jinja_options: Any,
    ):
        """Initialize renderer.

        Args:
            enhanced_template: Template source for the enhanced layout
            default_template: Template source for the default layout
            **jinja_options: Additional Jinja2 environment options
        """
        options: Dict[str, Any] = {
            "trim_blocks": True,
            "lstrip_blocks": True,
            "keep_trailing_newline": True,
            "undefined": jinja2.StrictUndefined,
        }
        options.update(jinja_options)

        self._env = jinja2.Environment(**options)
        self._env.filters["display"] = display
        self._sources = {
            DiffOptions.ENHANCED_WILDCARD_DIFF: enhanced_template,
            DiffOptions.DEFAULT: default_template,
        }
        self._templates: Dict[DiffOptions, jinja2.Template] = {}

    def _get_template(self, options: DiffOptions) -> jinja2.Template:
        if options not in self._templates:
            try:
                self._templates[options] = self._env.from_string(self._sources[options])
            except jinja2.TemplateSyntaxError as e:
                raise ReportError(f"Template error: {e}")
        return self._templates[options]

    def render(
        self,
        result: DiffResult,
        options: DiffOptions = DiffOptions.ENHANCED_WILDCARD_DIFF,
        header: str = DEFAULT_HEADER,
    ) -> str:
        """Render ``result``.

        Raises:
            ReportError: If the template fails to compile or render
        """
        layout = (
            DiffOptions.ENHANCED_WILDCARD_DIFF
            if options & DiffOptions.ENHANCED_WILDCARD_DIFF
            else DiffOptions.DEFAULT
        )
        template = self._get_template(layout)

        try:
            return template.render(
                result=result,
                header=header,
                separator=SEPARATOR,
                match_marker=MATCH_MARKER,
                mismatch_marker=MISMATCH_MARKER,
            )
        except jinja2.TemplateError as e:
            raise ReportError(f"Template error: {e}")


_default_renderer: Optional[DiffReportRenderer] = None


def render_report(
    result: DiffResult,
    options: DiffOptions = DiffOptions.ENHANCED_WILDCARD_DIFF,
    header: str = DEFAULT_HEADER,
) -> str:
    """Render ``result`` with the shared default renderer."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = DiffReportRenderer()
    return _default_renderer.render(result, options, header)
