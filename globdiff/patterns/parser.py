#!/usr/bin/env python3
"""Wildcard pattern parser.

A single left-to-right scan of the pattern text that reports what it finds to
a PatternVisitor. Every backend (NFA compiler, regex emitter, DOS emitter) is
a visitor, so all of them share one reading of escapes and brackets.

Pattern syntax:
    *       any run of characters, including none
    ?       exactly one character
    [...]   one character from a set of literals and ``x-y`` ranges;
            the first unescaped ``]`` closes the set, except directly
            after the opening ``[`` where it is a literal member
    <esc>c  literal ``c`` when an escape character is configured

Example:
    >>> events = parse_events(WildcardPattern("a[0-9]*"))
    >>> [event.kind.value for event in events]
    ['literal', 'bracket_start', 'bracket_range', 'bracket_end', 'asterisk']
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from globdiff.core.constants import ErrorCode, Wildcards

if TYPE_CHECKING:
    from globdiff.patterns.pattern import WildcardPattern


class WildcardPatternError(ValueError):
    """Raised when a wildcard pattern is malformed.

    Always raised while a pattern is constructed or translated, never while
    an input string is being matched.
    """

    def __init__(
        self,
        message: str,
        pattern: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INVALID_PATTERN,
    ):
        self.message = message
        self.pattern = pattern
        self.error_code = error_code
        super().__init__(message)


def invalid_pattern(pattern: str) -> WildcardPatternError:
    """Build the error reported for unparseable pattern text."""
    return WildcardPatternError(f"The wildcard pattern, '{pattern}', is invalid.", pattern)


class EventKind(Enum):
    """Kinds of parse events, in the vocabulary of PatternVisitor."""

    LITERAL = "literal"
    ASTERISK = "asterisk"
    QUESTION_MARK = "question_mark"
    BRACKET_START = "bracket_start"
    BRACKET_LITERAL = "bracket_literal"
    BRACKET_RANGE = "bracket_range"
    BRACKET_END = "bracket_end"


@dataclass(frozen=True)
class ParseEvent:
    """One parse event; ``chars`` holds the literal or the range bounds."""

    kind: EventKind
    chars: Tuple[str, ...] = ()


class PatternVisitor(ABC):
    """Receiver of parse events.

    ``parse`` calls ``begin_pattern`` once, then the ``on_*`` operations in
    pattern order, then ``end_pattern``. A bracket expression always arrives
    as ``on_bracket_start``, zero or more ``on_bracket_literal`` /
    ``on_bracket_range`` calls, and ``on_bracket_end``.
    """

    def begin_pattern(self, pattern: "WildcardPattern") -> None:
        pass

    def end_pattern(self) -> None:
        pass

    @abstractmethod
    def on_literal(self, char: str) -> None:
        """The next part of the pattern matches ``char`` exactly."""

    @abstractmethod
    def on_asterisk(self) -> None:
        """The next part of the pattern matches any run, including empty."""

    @abstractmethod
    def on_question_mark(self) -> None:
        """The next part of the pattern matches any single character."""

    @abstractmethod
    def on_bracket_start(self) -> None:
        pass

    @abstractmethod
    def on_bracket_literal(self, char: str) -> None:
        pass

    @abstractmethod
    def on_bracket_range(self, low: str, high: str) -> None:
        """Inclusive range ``low``..``high``; ``low <= high`` is guaranteed."""

    @abstractmethod
    def on_bracket_end(self) -> None:
        pass


class EventRecorder(PatternVisitor):
    """Visitor that records the event stream as ParseEvent values."""

    def __init__(self):
        self.events: List[ParseEvent] = []

    def begin_pattern(self, pattern: "WildcardPattern") -> None:
        self.events = []

    def on_literal(self, char: str) -> None:
        self.events.append(ParseEvent(EventKind.LITERAL, (char,)))

    def on_asterisk(self) -> None:
        self.events.append(ParseEvent(EventKind.ASTERISK))

    def on_question_mark(self) -> None:
        self.events.append(ParseEvent(EventKind.QUESTION_MARK))

    def on_bracket_start(self) -> None:
        self.events.append(ParseEvent(EventKind.BRACKET_START))

    def on_bracket_literal(self, char: str) -> None:
        self.events.append(ParseEvent(EventKind.BRACKET_LITERAL, (char,)))

    def on_bracket_range(self, low: str, high: str) -> None:
        self.events.append(ParseEvent(EventKind.BRACKET_RANGE, (low, high)))

    def on_bracket_end(self) -> None:
        self.events.append(ParseEvent(EventKind.BRACKET_END))


def _emit_bracket_expression(
    contents: List[str], is_range_operator: List[bool], pattern: str, visitor: PatternVisitor
) -> None:
    """Report one collected bracket expression to the visitor.

    ``is_range_operator[i]`` is True when ``contents[i]`` is an unescaped
    ``-``; only those split a range.
    """
    visitor.on_bracket_start()

    i = 0
    while i < len(contents):
        if i + 2 < len(contents) and is_range_operator[i + 1]:
            low, high = contents[i], contents[i + 2]
            i += 3

            if low > high:
                raise invalid_pattern(pattern)

            visitor.on_bracket_range(low, high)
        else:
            visitor.on_bracket_literal(contents[i])
            i += 1

    visitor.on_bracket_end()


def parse(pattern: "WildcardPattern", visitor: PatternVisitor) -> None:
    """Parse ``pattern`` and drive ``visitor`` with the resulting events.

    Parsing keeps no state outside this call, so a pattern can be parsed any
    number of times, by any number of visitors.

    Args:
        pattern: Pattern supplying ``text`` and ``escape_character``
        visitor: Backend receiving the events

    Raises:
        WildcardPatternError: On an unterminated bracket expression or an
            inverted character range
    """
    text = pattern.text
    escape = pattern.escape_character

    visitor.begin_pattern(pattern)

    previous_is_escape = False
    previous_opened_bracket = False
    inside_bracket = False
    contents: List[str] = []
    is_range_operator: List[bool] = []

    for char in text:
        if inside_bracket:
            if (
                char == Wildcards.BRACKET_CLOSE
                and not previous_opened_bracket
                and not previous_is_escape
            ):
                # No nesting: the first unescaped ']' closes the expression
                inside_bracket = False
                _emit_bracket_expression(contents, is_range_operator, text, visitor)
                contents = []
                is_range_operator = []
            elif char != escape or previous_is_escape:
                contents.append(char)
                is_range_operator.append(char == Wildcards.RANGE and not previous_is_escape)

            previous_opened_bracket = False
        elif char == Wildcards.ANY_RUN and not previous_is_escape:
            visitor.on_asterisk()
        elif char == Wildcards.ANY_CHAR and not previous_is_escape:
            visitor.on_question_mark()
        elif char == Wildcards.BRACKET_OPEN and not previous_is_escape:
            inside_bracket = True
            previous_opened_bracket = True
        elif char != escape or previous_is_escape:
            visitor.on_literal(char)

        previous_is_escape = char == escape and not previous_is_escape

    if inside_bracket:
        raise invalid_pattern(text)

    # A trailing escape is a literal escape, but a pattern made of nothing
    # but the escape character is the empty pattern.
    if previous_is_escape and text != escape:
        visitor.on_literal(text[-1])

    visitor.end_pattern()


def parse_events(pattern: "WildcardPattern") -> List[ParseEvent]:
    """Parse ``pattern`` and return its event stream."""
    recorder = EventRecorder()
    parse(pattern, recorder)
    return recorder.events


def count_wildcards(pattern: "WildcardPattern") -> int:
    """Count the wildcard constructs (``*``, ``?`` and bracket expressions)."""
    wildcard_kinds = (EventKind.ASTERISK, EventKind.QUESTION_MARK, EventKind.BRACKET_START)
    return sum(1 for event in parse_events(pattern) if event.kind in wildcard_kinds)
