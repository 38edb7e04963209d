#!/usr/bin/env python3
"""NFA compilation and matching of wildcard patterns.

Patterns compile into a flat tuple of PatternElement values. Matching walks
the input once, carrying the set of pattern positions reachable for the
prefix read so far (the frontier), so the cost is bounded by
O(len(pattern) * len(text)) however many ``*`` the pattern holds.

Example:
    >>> matcher = WildcardMatcher(WildcardPattern("Hello *!"))
    >>> matcher.is_match("Hello world!")
    True
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional, Set, Tuple

from globdiff.patterns.parser import PatternVisitor, parse

if TYPE_CHECKING:
    from globdiff.patterns.pattern import WildcardPattern


class ElementKind(Enum):
    """Kinds of compiled pattern elements."""

    LITERAL = "literal"  # one specific character
    ANY_CHAR = "any_char"  # '?'
    ANY_CHAR_IN_SET = "any_char_in_set"  # '[...]'
    ANY_RUN = "any_run"  # '*'


@dataclass(frozen=True)
class CharacterSet:
    """Members of a bracket expression: literal characters plus inclusive ranges."""

    members: FrozenSet[str] = frozenset()
    ranges: Tuple[Tuple[str, str], ...] = ()
    case_insensitive: bool = False

    def contains(self, char: str) -> bool:
        """Check membership, trying every case variant when case-insensitive."""
        candidates = (char, char.lower(), char.upper()) if self.case_insensitive else (char,)
        for candidate in candidates:
            if candidate in self.members:
                return True
            if len(candidate) == 1:
                for low, high in self.ranges:
                    if low <= candidate <= high:
                        return True
        return False


@dataclass(frozen=True)
class PatternElement:
    """One matchable step of a compiled pattern."""

    kind: ElementKind
    char: Optional[str] = None
    char_set: Optional[CharacterSet] = None


ANY_CHAR = PatternElement(ElementKind.ANY_CHAR)
ANY_RUN = PatternElement(ElementKind.ANY_RUN)


class CharacterNormalizer:
    """Case folding applied to pattern literals and input characters alike.

    Culture-invariant folding is plain ``str.lower``; otherwise the full
    Unicode ``str.casefold`` is used.
    """

    def __init__(self, case_insensitive: bool = False, culture_invariant: bool = False):
        self._fold: Optional[Callable[[str], str]] = None
        if case_insensitive:
            self._fold = str.lower if culture_invariant else str.casefold

    def normalize(self, char: str) -> str:
        if self._fold is None:
            return char
        return self._fold(char)


class _ElementCompiler(PatternVisitor):
    """Visitor that turns parse events into pattern elements."""

    def __init__(self, normalizer: CharacterNormalizer, case_insensitive: bool):
        self._normalizer = normalizer
        self._case_insensitive = case_insensitive
        self.elements: List[PatternElement] = []
        self._members: Set[str] = set()
        self._ranges: List[Tuple[str, str]] = []

    def on_literal(self, char: str) -> None:
        self.elements.append(
            PatternElement(ElementKind.LITERAL, char=self._normalizer.normalize(char))
        )

    def on_asterisk(self) -> None:
        self.elements.append(ANY_RUN)

    def on_question_mark(self) -> None:
        self.elements.append(ANY_CHAR)

    def on_bracket_start(self) -> None:
        self._members = set()
        self._ranges = []

    def on_bracket_literal(self, char: str) -> None:
        self._members.add(char)

    def on_bracket_range(self, low: str, high: str) -> None:
        self._ranges.append((low, high))

    def on_bracket_end(self) -> None:
        char_set = CharacterSet(
            members=frozenset(self._members),
            ranges=tuple(self._ranges),
            case_insensitive=self._case_insensitive,
        )
        self.elements.append(PatternElement(ElementKind.ANY_CHAR_IN_SET, char_set=char_set))


def compile_elements(pattern: "WildcardPattern") -> Tuple[PatternElement, ...]:
    """Compile ``pattern`` into its element sequence."""
    normalizer = CharacterNormalizer(pattern.case_insensitive, pattern.culture_invariant)
    compiler = _ElementCompiler(normalizer, pattern.case_insensitive)
    parse(pattern, compiler)
    return tuple(compiler.elements)


class _Frontier:
    """Pattern positions reachable at one string position.

    ``_marker[p]`` holds the last string position at which ``p`` was added,
    so each position is queued at most once per string position. Position
    ``length`` (end of pattern) is marked but never queued.
    """

    __slots__ = ("_length", "_marker", "_pending", "string_position")

    def __init__(self, length: int):
        self._length = length
        self._marker = [-1] * (length + 1)
        self._pending: List[int] = []
        self.string_position = 0

    def add(self, position: int) -> None:
        if self._marker[position] == self.string_position:
            return
        self._marker[position] = self.string_position
        if position < self._length:
            self._pending.append(position)

    def pop(self) -> Optional[int]:
        if self._pending:
            return self._pending.pop()
        return None

    def has_pending(self) -> bool:
        return bool(self._pending)

    @property
    def reached_end(self) -> bool:
        return self._marker[self._length] >= self.string_position


class WildcardMatcher:
    """Compiled wildcard pattern.

    The element tuple is immutable and all matching state lives in the
    frontiers created by each ``is_match`` call, so one matcher can serve
    many threads.
    """

    def __init__(self, pattern: "WildcardPattern"):
        self._normalizer = CharacterNormalizer(pattern.case_insensitive, pattern.culture_invariant)
        self._elements = compile_elements(pattern)

    @property
    def elements(self) -> Tuple[PatternElement, ...]:
        return self._elements

    def is_match(self, text: str) -> bool:
        """Check whether the whole of ``text`` matches the pattern.

        State (pattern position, string position) moves:
            literal/?/[...]:  (p, s) -> (p + 1, s + 1) when the character fits
            *:                (p, s) -> (p + 1, s) and (p, s + 1)
            * at end of text: (p, end) -> (p + 1, end)
        and the text matches when (len(elements), len(text)) is reachable.
        """
        elements = self._elements
        normalize = self._normalizer.normalize

        current = _Frontier(len(elements))
        following = _Frontier(len(elements))
        current.add(0)

        last_index = len(text) - 1
        for index, raw_char in enumerate(text):
            char = normalize(raw_char)
            current.string_position = index
            following.string_position = index + 1

            position = current.pop()
            while position is not None:
                element = elements[position]
                kind = element.kind

                if kind is ElementKind.ANY_RUN:
                    current.add(position + 1)
                    following.add(position)
                elif kind is ElementKind.LITERAL:
                    if element.char == char:
                        following.add(position + 1)
                elif kind is ElementKind.ANY_CHAR:
                    following.add(position + 1)
                elif element.char_set.contains(raw_char):
                    following.add(position + 1)

                position = current.pop()

            current, following = following, current

            if not current.has_pending() and index < last_index:
                # Every path died before the end of the text
                return False

        position = current.pop()
        while position is not None:
            if elements[position].kind is ElementKind.ANY_RUN:
                current.add(position + 1)
            position = current.pop()

        return current.reached_end
