#!/usr/bin/env python3
r"""Translation of wildcard patterns into Python regular expressions.

Two forms are produced from the same parse events:

    wildcard     plain            capturing
    --------     -----            ---------
    foo          ^foo\Z           ^foo\Z
    foo*bar      ^foo.*bar\Z      ^foo(.*?)bar\Z
    *foo*        foo              ^(.*?)foo(.*?)\Z
    a?[0-9]      ^a.[0-9]\Z       ^a(.)([0-9])\Z
    a\*b         ^a\*b\Z          ^a\*b\Z

Both end in ``\Z`` since ``$`` also matches before a trailing newline. The
plain form drops a leading ``^.*`` and a trailing ``.*\Z`` and is meant for
``re.search``; ``*`` alone translates to the empty regex. The capturing form
is never simplified, so every wildcard keeps its group, and is meant for
``re.fullmatch``. Both are compiled with ``re.DOTALL``.
"""

import re
from typing import TYPE_CHECKING, List, Pattern

from globdiff.patterns.parser import PatternVisitor, invalid_pattern, parse

if TYPE_CHECKING:
    from globdiff.patterns.pattern import WildcardPattern

END_ANCHOR = r"\Z"
MATCH_EVERYTHING = "^.*" + END_ANCHOR
LEADING_ANY_RUN = "^.*"
TRAILING_ANY_RUN = ".*" + END_ANCHOR


def regex_flags(pattern: "WildcardPattern") -> int:
    """Regex flags equivalent to the pattern's options."""
    flags = re.DOTALL
    if pattern.case_insensitive:
        flags |= re.IGNORECASE
    return flags


def simplify(regex: str) -> str:
    """Drop match-everything anchoring that does not change what matches."""
    if regex == MATCH_EVERYTHING:
        return ""
    if regex.startswith(LEADING_ANY_RUN):
        regex = regex[len(LEADING_ANY_RUN):]
    if regex.endswith(TRAILING_ANY_RUN):
        regex = regex[: -len(TRAILING_ANY_RUN)]
    return regex


class RegexEmitter(PatternVisitor):
    """Visitor that writes the regex equivalent of a pattern."""

    def __init__(self, capture: bool = False):
        self.capture = capture
        self._parts: List[str] = []
        self._result = ""

    def begin_pattern(self, pattern: "WildcardPattern") -> None:
        self._parts = ["^"]

    def on_literal(self, char: str) -> None:
        self._parts.append(re.escape(char))

    def on_asterisk(self) -> None:
        self._parts.append("(.*?)" if self.capture else ".*")

    def on_question_mark(self) -> None:
        self._parts.append("(.)" if self.capture else ".")

    def on_bracket_start(self) -> None:
        self._parts.append("([" if self.capture else "[")

    def on_bracket_literal(self, char: str) -> None:
        # re.escape also covers '-', ']', '[', '^' and '\'
        self._parts.append(re.escape(char))

    def on_bracket_range(self, low: str, high: str) -> None:
        self._parts.append(f"{re.escape(low)}-{re.escape(high)}")

    def on_bracket_end(self) -> None:
        self._parts.append("])" if self.capture else "]")

    def end_pattern(self) -> None:
        self._parts.append(END_ANCHOR)
        regex = "".join(self._parts)
        self._result = regex if self.capture else simplify(regex)

    @property
    def result(self) -> str:
        return self._result


def to_regex(pattern: "WildcardPattern", capture: bool = False) -> str:
    """Translate ``pattern`` into regex source.

    Args:
        pattern: Wildcard pattern
        capture: Produce the capturing form (one group per wildcard)

    Returns:
        Regular expression source text
    """
    emitter = RegexEmitter(capture=capture)
    parse(pattern, emitter)
    return emitter.result


def compile_regex(pattern: "WildcardPattern", capture: bool = False) -> Pattern[str]:
    """Translate and compile ``pattern``.

    Raises:
        WildcardPatternError: If the translated expression does not compile
    """
    source = to_regex(pattern, capture=capture)
    try:
        return re.compile(source, regex_flags(pattern))
    except re.error as e:
        raise invalid_pattern(pattern.text) from e
