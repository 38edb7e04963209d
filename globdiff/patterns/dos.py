#!/usr/bin/env python3
"""Translation of wildcard patterns into DOS wildcards.

DOS wildcards only know ``*`` and ``?``, so a bracket expression collapses to
``?`` (any single character) and literals are copied as they are.

Example:
    >>> to_dos_wildcard(WildcardPattern("report-[0-9][0-9].*"))
    'report-??.*'
"""

from typing import TYPE_CHECKING, List

from globdiff.core.constants import Wildcards
from globdiff.patterns.parser import PatternVisitor, parse

if TYPE_CHECKING:
    from globdiff.patterns.pattern import WildcardPattern


class DosWildcardEmitter(PatternVisitor):
    """Visitor that writes the DOS wildcard equivalent of a pattern."""

    def __init__(self):
        self._parts: List[str] = []

    def begin_pattern(self, pattern: "WildcardPattern") -> None:
        self._parts = []

    def on_literal(self, char: str) -> None:
        self._parts.append(char)

    def on_asterisk(self) -> None:
        self._parts.append(Wildcards.ANY_RUN)

    def on_question_mark(self) -> None:
        self._parts.append(Wildcards.ANY_CHAR)

    def on_bracket_start(self) -> None:
        pass

    def on_bracket_literal(self, char: str) -> None:
        pass

    def on_bracket_range(self, low: str, high: str) -> None:
        pass

    def on_bracket_end(self) -> None:
        self._parts.append(Wildcards.ANY_CHAR)

    @property
    def result(self) -> str:
        return "".join(self._parts)


def to_dos_wildcard(pattern: "WildcardPattern") -> str:
    """Translate ``pattern`` into a DOS wildcard string."""
    emitter = DosWildcardEmitter()
    parse(pattern, emitter)
    return emitter.result
