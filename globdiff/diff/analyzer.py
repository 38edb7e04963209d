#!/usr/bin/env python3
"""Line-oriented diff of an expected wildcard pattern against actual text.

Expected and actual text are split into lines and paired by position: line
N of the pattern is matched against line N of the text, with no attempt to
re-align once the two diverge. Each pair yields a LineMatchResult; the whole
comparison yields a DiffResult.

Example:
    >>> result = analyze("Hello * world", "Hello beautiful world")
    >>> result.overall_match, result.line_results[0].wildcard_captures
    (True, ('beautiful',))
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from globdiff.core.constants import (
    DEFAULT_ESCAPE_CHARACTER,
    MATCH_MARKER,
    MATCHED_CONTENT_PLACEHOLDER,
    MISMATCH_MARKER,
    ConfigKey,
    MismatchReason,
)
from globdiff.infrastructure.config_manager import ConfigManager
from globdiff.infrastructure.logger import Logger, get_logger
from globdiff.patterns.matcher import CharacterNormalizer
from globdiff.patterns.parser import EventKind, WildcardPatternError, count_wildcards
from globdiff.patterns.pattern import WildcardOptions, WildcardPattern

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: Optional[str]) -> List[str]:
    """Split text on ``\\r\\n``, ``\\r`` or ``\\n``.

    Empty text has no lines, and a trailing line terminator does not start
    an extra empty line.
    """
    if not text:
        return []

    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def _display_char(char: str) -> str:
    return {"\r": "\\r", "\n": "\\n", "\t": "\\t"}.get(char, char)


def _pattern_positions(pattern: WildcardPattern) -> List[Optional[str]]:
    """One entry per single-character position: the literal, or None for a wildcard.

    A bracket expression occupies one position; ``*`` is counted as one too.
    """
    positions: List[Optional[str]] = []
    for event in pattern.events():
        if event.kind == EventKind.LITERAL:
            positions.append(event.chars[0])
        elif event.kind in (EventKind.ASTERISK, EventKind.QUESTION_MARK, EventKind.BRACKET_START):
            positions.append(None)
    return positions


def find_mismatch_position(expected: Union[str, WildcardPattern], actual: str) -> Optional[str]:
    """Describe where a pattern line and an actual line first diverge.

    Positions are compared one to one: wildcards and bracket expressions are
    skipped since they match anything there, and an escaped metacharacter
    counts as the single literal it stands for. Literals are compared with
    the pattern's case folding. This is a hint for humans, not a matcher.

    Args:
        expected: Pattern line, or pattern text read without an escape character
        actual: Actual line

    Returns:
        Description of the divergence, or None if none is found

    Raises:
        WildcardPatternError: If ``expected`` is text that is not a valid pattern
    """
    pattern = expected if isinstance(expected, WildcardPattern) else WildcardPattern(expected)
    normalizer = CharacterNormalizer(pattern.case_insensitive, pattern.culture_invariant)
    positions = _pattern_positions(pattern)

    for i, (literal, char) in enumerate(zip(positions, actual)):
        if literal is not None and normalizer.normalize(literal) != normalizer.normalize(char):
            return (
                f"Mismatch at position {i}: expected '{_display_char(literal)}' "
                f"but got '{_display_char(char)}'"
            )

    if len(positions) != len(actual):
        return f"Length mismatch: expected {len(positions)} characters but got {len(actual)}"

    return None


@dataclass(frozen=True)
class LineMatchResult:
    """Outcome of comparing one pattern line with one actual line.

    ``expected_line`` is None for an unexpected extra actual line and
    ``actual_line`` is None for a missing line.
    """

    line_number: int
    expected_line: Optional[str]
    actual_line: Optional[str]
    is_match: bool
    wildcard_captures: Tuple[str, ...] = ()
    mismatch_reason: Optional[str] = None
    mismatch_hint: Optional[str] = None

    @property
    def is_extra(self) -> bool:
        return self.expected_line is None

    @property
    def is_missing(self) -> bool:
        return self.actual_line is None

    @property
    def status(self) -> str:
        return MATCH_MARKER if self.is_match else MISMATCH_MARKER


@dataclass(frozen=True)
class DiffResult:
    """Outcome of comparing a whole expected pattern with actual text."""

    line_results: Tuple[LineMatchResult, ...] = ()

    @property
    def overall_match(self) -> bool:
        return all(line.is_match for line in self.line_results)

    @property
    def matched_count(self) -> int:
        return sum(1 for line in self.line_results if line.is_match)

    @property
    def mismatched_count(self) -> int:
        return sum(
            1
            for line in self.line_results
            if not line.is_match and not line.is_extra and not line.is_missing
        )

    @property
    def extra_lines(self) -> List[str]:
        return [line.actual_line for line in self.line_results if line.is_extra]

    @property
    def missing_lines(self) -> List[str]:
        return [line.expected_line for line in self.line_results if line.is_missing]

    @property
    def extra_count(self) -> int:
        return len(self.extra_lines)

    @property
    def missing_count(self) -> int:
        return len(self.missing_lines)

    @property
    def expected_text(self) -> str:
        """The expected lines, rejoined with ``\\n``."""
        return "\n".join(line.expected_line for line in self.line_results if not line.is_extra)

    @property
    def actual_text(self) -> str:
        """The actual lines, rejoined with ``\\n``."""
        return "\n".join(line.actual_line for line in self.line_results if not line.is_missing)


class DiffAnalyzer:
    """Compares expected wildcard patterns with actual text, line by line.

    Features:
    - Positional line pairing (no re-alignment)
    - Linear-time NFA matching per line
    - Wildcard capture extraction for matched lines
    - Literal divergence hints for mismatched lines
    """

    def __init__(
        self,
        escape_character: Optional[str] = DEFAULT_ESCAPE_CHARACTER,
        options: WildcardOptions = WildcardOptions.NONE,
        placeholder: str = MATCHED_CONTENT_PLACEHOLDER,
        mismatch_hints: bool = True,
        logger: Optional[Logger] = None,
    ):
        """Initialize diff analyzer.

        Args:
            escape_character: Escape character for pattern lines (None disables escaping)
            options: Wildcard options applied to every pattern line
            placeholder: Capture text used when extraction is not possible
            mismatch_hints: Whether to compute divergence hints for mismatches
            logger: Logger (defaults to the global logger)
        """
        self.escape_character = escape_character
        self.options = WildcardOptions(options)
        self.placeholder = placeholder
        self.mismatch_hints = mismatch_hints
        self._logger = logger or get_logger()

    @classmethod
    def from_config(cls, config: ConfigManager, logger: Optional[Logger] = None) -> "DiffAnalyzer":
        """Build an analyzer from ``globdiff.pattern.*`` and ``globdiff.diff.*`` settings."""
        options = WildcardOptions.NONE
        if config.get(ConfigKey.CASE_INSENSITIVE, False):
            options |= WildcardOptions.IGNORE_CASE
        if config.get(ConfigKey.CULTURE_INVARIANT, False):
            options |= WildcardOptions.CULTURE_INVARIANT

        return cls(
            escape_character=config.get(ConfigKey.ESCAPE_CHARACTER, DEFAULT_ESCAPE_CHARACTER),
            options=options,
            placeholder=config.get(ConfigKey.PLACEHOLDER, MATCHED_CONTENT_PLACEHOLDER),
            mismatch_hints=config.get(ConfigKey.MISMATCH_HINTS, True),
            logger=logger,
        )

    def analyze(self, expected_pattern: Optional[str], actual_text: Optional[str]) -> DiffResult:
        """Compare an expected multi-line pattern with actual multi-line text.

        Args:
            expected_pattern: Expected text, one wildcard pattern per line
            actual_text: Actual text

        Returns:
            DiffResult with one LineMatchResult per line position

        Raises:
            WildcardPatternError: If an expected line is not a valid pattern
        """
        expected_lines = split_lines(expected_pattern)
        actual_lines = split_lines(actual_text)

        self._logger.debug(
            "Analyzing diff",
            expected_lines=len(expected_lines),
            actual_lines=len(actual_lines),
        )

        results: List[LineMatchResult] = []
        for index in range(max(len(expected_lines), len(actual_lines))):
            line_number = index + 1

            if index >= len(expected_lines):
                results.append(
                    LineMatchResult(
                        line_number=line_number,
                        expected_line=None,
                        actual_line=actual_lines[index],
                        is_match=False,
                        mismatch_reason=MismatchReason.EXTRA_LINE,
                    )
                )
            elif index >= len(actual_lines):
                results.append(
                    LineMatchResult(
                        line_number=line_number,
                        expected_line=expected_lines[index],
                        actual_line=None,
                        is_match=False,
                        mismatch_reason=MismatchReason.MISSING_LINE,
                    )
                )
            else:
                with self._logger.add_context(line=line_number):
                    results.append(
                        self.match_line(expected_lines[index], actual_lines[index], line_number)
                    )

        result = DiffResult(line_results=tuple(results))
        self._logger.debug(
            "Diff analyzed",
            overall_match=result.overall_match,
            matched=result.matched_count,
            extra=result.extra_count,
            missing=result.missing_count,
        )
        return result

    def match_line(
        self, expected_line: str, actual_line: str, line_number: int = 1
    ) -> LineMatchResult:
        """Match one actual line against one pattern line.

        Raises:
            WildcardPatternError: If ``expected_line`` is not a valid pattern
        """
        pattern = WildcardPattern(expected_line, self.escape_character, self.options)

        if pattern.is_match(actual_line):
            return LineMatchResult(
                line_number=line_number,
                expected_line=expected_line,
                actual_line=actual_line,
                is_match=True,
                wildcard_captures=self.extract_captures(pattern, actual_line),
            )

        hint = find_mismatch_position(pattern, actual_line) if self.mismatch_hints else None
        return LineMatchResult(
            line_number=line_number,
            expected_line=expected_line,
            actual_line=actual_line,
            is_match=False,
            mismatch_reason=MismatchReason.PATTERN_MISMATCH,
            mismatch_hint=hint,
        )

    def extract_captures(self, pattern: WildcardPattern, actual_line: str) -> Tuple[str, ...]:
        """Recover the text each wildcard consumed in an already matched line.

        Falls back to one placeholder per wildcard when the capturing regex
        cannot be built or does not match; the line stays a match either way.
        """
        try:
            match = pattern.compile_regex(capture=True).fullmatch(actual_line)
        except WildcardPatternError as e:
            self._logger.warning(
                "Capture regex could not be compiled", pattern=pattern.text, error=e.message
            )
            match = None

        if match is None:
            count = count_wildcards(pattern)
            self._logger.warning(
                "Falling back to placeholder captures", pattern=pattern.text, wildcards=count
            )
            return (self.placeholder,) * count

        return match.groups()


def analyze(
    expected_pattern: Optional[str],
    actual_text: Optional[str],
    escape_character: Optional[str] = DEFAULT_ESCAPE_CHARACTER,
    options: WildcardOptions = WildcardOptions.NONE,
) -> DiffResult:
    """Compare expected pattern and actual text with a default DiffAnalyzer."""
    return DiffAnalyzer(escape_character=escape_character, options=options).analyze(
        expected_pattern, actual_text
    )
