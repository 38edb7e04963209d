#!/usr/bin/env python3
r"""Wildcard pattern model.

A WildcardPattern holds the pattern text, the optional escape character and
the match options. It is validated and compiled when it is created, so a
malformed pattern fails before anything is matched against it.

Example:
    >>> pattern = WildcardPattern("a\\*b", escape_character="\\")
    >>> pattern.is_match("a*b"), pattern.is_match("axb")
    (True, False)
    >>> WildcardPattern("[a-c]?.txt").to_dos_wildcard()
    '??.txt'
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import List, Optional, Pattern

from globdiff.core.constants import Wildcards
from globdiff.patterns.dos import to_dos_wildcard
from globdiff.patterns.matcher import WildcardMatcher
from globdiff.patterns.parser import ParseEvent, WildcardPatternError, parse_events
from globdiff.patterns.regex import compile_regex, to_regex


class WildcardOptions(IntFlag):
    """Options that control match behavior."""

    NONE = 0
    COMPILED = 1  # Accepted for compatibility; every pattern is compiled
    IGNORE_CASE = 2
    CULTURE_INVARIANT = 4


def is_wildcard_char(char: str) -> bool:
    """Check whether ``char`` is one of ``* ? [ ]``."""
    return len(char) == 1 and char in Wildcards.ALL


def _validate_escapes(text: str, escape_character: str) -> None:
    """Reject an escape character, or a run of them, followed by an ordinary character."""
    previous_is_escape = False
    for char in text:
        if char == escape_character:
            previous_is_escape = True
            continue
        if previous_is_escape and not is_wildcard_char(char):
            raise WildcardPatternError(
                f"pattern contains escape characters, '{escape_character}', "
                "with non-wildcard characters.",
                text,
            )
        previous_is_escape = False


@dataclass(frozen=True)
class WildcardPattern:
    """Immutable, pre-compiled wildcard pattern.

    Attributes:
        text: Pattern text
        escape_character: Character that makes the following wildcard
            metacharacter literal, or None for no escaping
        options: WildcardOptions flags
    """

    text: str
    escape_character: Optional[str] = None
    options: WildcardOptions = WildcardOptions.NONE
    _matcher: WildcardMatcher = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f"pattern must be a str, not {type(self.text).__name__}")

        if self.escape_character is not None:
            if not isinstance(self.escape_character, str) or len(self.escape_character) != 1:
                raise WildcardPatternError(
                    f"escape character must be a single character, got {self.escape_character!r}",
                    self.text,
                )
            _validate_escapes(self.text, self.escape_character)

        object.__setattr__(self, "options", WildcardOptions(self.options))
        # Compiling parses the pattern, which reports bracket errors
        object.__setattr__(self, "_matcher", WildcardMatcher(self))

    @classmethod
    def get(cls, text: str, options: WildcardOptions = WildcardOptions.NONE) -> "WildcardPattern":
        """Create a pattern, reusing a shared instance for ``*``."""
        if text == Wildcards.ANY_RUN:
            return _MATCH_ALL
        return cls(text, options=options)

    @property
    def case_insensitive(self) -> bool:
        return bool(self.options & WildcardOptions.IGNORE_CASE)

    @property
    def culture_invariant(self) -> bool:
        return bool(self.options & WildcardOptions.CULTURE_INVARIANT)

    def is_match(self, text: Optional[str]) -> bool:
        """Check whether the whole of ``text`` matches this pattern.

        Args:
            text: Input string; anything that is not a str never matches

        Returns:
            True if the pattern matches
        """
        if not isinstance(text, str):
            return False
        if self.text == Wildcards.ANY_RUN:
            return True
        return self._matcher.is_match(text)

    def to_regex(self, capture: bool = False) -> str:
        """Regex source equivalent to this pattern (see globdiff.patterns.regex)."""
        return to_regex(self, capture=capture)

    def compile_regex(self, capture: bool = False) -> Pattern[str]:
        return compile_regex(self, capture=capture)

    def to_dos_wildcard(self) -> str:
        return to_dos_wildcard(self)

    def events(self) -> List[ParseEvent]:
        return parse_events(self)


_MATCH_ALL = WildcardPattern(Wildcards.ANY_RUN)


def escape(text: str, escape_character: str, chars_not_to_escape: str = "") -> str:
    """Escape every wildcard metacharacter in ``text``.

    Args:
        text: Text to make literal
        escape_character: Escape character to insert
        chars_not_to_escape: Metacharacters to leave as wildcards

    Returns:
        Pattern text matching ``text`` literally
    """
    if text is None:
        raise TypeError("text must not be None")

    parts = []
    for char in text:
        if is_wildcard_char(char) and char not in chars_not_to_escape:
            parts.append(escape_character)
        parts.append(char)
    return "".join(parts)


def unescape(text: str, escape_character: str) -> str:
    """Undo ``escape``.

    An escape before a wildcard metacharacter is dropped, a doubled escape
    becomes one escape, and any other escape (including a trailing one) is
    kept as an ordinary character.
    """
    if text is None:
        raise TypeError("text must not be None")

    parts = []
    previous_is_escape = False
    for char in text:
        if char == escape_character:
            if previous_is_escape:
                parts.append(char)
                previous_is_escape = False
            else:
                previous_is_escape = True
            continue

        if previous_is_escape and not is_wildcard_char(char):
            parts.append(escape_character)

        parts.append(char)
        previous_is_escape = False

    if previous_is_escape:
        parts.append(escape_character)

    return "".join(parts)


def contains_wildcard_characters(text: Optional[str], escape_character: Optional[str] = None) -> bool:
    """Check whether ``text`` holds an unescaped wildcard metacharacter."""
    if not text:
        return False

    index = 0
    while index < len(text):
        if is_wildcard_char(text[index]):
            return True
        if text[index] == escape_character:
            # Skip the escaped character
            index += 1
        index += 1
    return False


def is_match(
    pattern: str,
    text: Optional[str],
    escape_character: Optional[str] = None,
    options: WildcardOptions = WildcardOptions.NONE,
) -> bool:
    """Match ``text`` against pattern text in one call.

    Raises:
        WildcardPatternError: If ``pattern`` is malformed
    """
    return WildcardPattern(pattern, escape_character, options).is_match(text)


def is_like(
    text: Optional[str],
    pattern: str,
    escape_character: Optional[str] = None,
    options: WildcardOptions = WildcardOptions.NONE,
) -> bool:
    """``is_match`` with the text first, reading as ``text is like pattern``."""
    return is_match(pattern, text, escape_character, options)
