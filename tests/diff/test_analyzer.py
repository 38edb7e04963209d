#!/usr/bin/env python3
"""Tests for the line diff engine."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from globdiff.core.constants import (
    MATCH_MARKER,
    MATCHED_CONTENT_PLACEHOLDER,
    MISMATCH_MARKER,
    MismatchReason,
)
from globdiff.diff.analyzer import (
    DiffAnalyzer,
    DiffResult,
    LineMatchResult,
    analyze,
    find_mismatch_position,
    split_lines,
)
from globdiff.infrastructure.config_manager import ConfigManager
from globdiff.infrastructure.logger import Logger, LogLevel
from globdiff.patterns.parser import WildcardPatternError
from globdiff.patterns.pattern import WildcardOptions, WildcardPattern


class ListHandler(logging.Handler):
    """Collects formatted log messages."""

    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def log_handler():
    return ListHandler()


@pytest.fixture
def logger(log_handler):
    return Logger(name="globdiff.test.analyzer", level=LogLevel.DEBUG, handlers=[log_handler])


class TestSplitLines:
    """Tests for split_lines."""

    def test_empty(self):
        """Test empty or missing text has no lines."""
        assert split_lines("") == []
        assert split_lines(None) == []

    def test_single_line(self):
        """Test text without terminator."""
        assert split_lines("abc") == ["abc"]

    def test_trailing_terminator_ignored(self):
        """Test one trailing terminator adds no empty line."""
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_only_one_trailing_terminator_ignored(self):
        """Test a second trailing terminator is a real empty line."""
        assert split_lines("a\n\n") == ["a", ""]
        assert split_lines("\n") == [""]

    def test_mixed_terminators(self):
        """Test \\r\\n, \\r and \\n all split."""
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_blank_lines_kept(self):
        """Test inner empty lines are kept."""
        assert split_lines("a\n\nb") == ["a", "", "b"]


class TestFindMismatchPosition:
    """Tests for find_mismatch_position."""

    def test_first_differing_position(self):
        """Test first literal divergence is reported."""
        assert find_mismatch_position("Hello", "Help!") == (
            "Mismatch at position 3: expected 'l' but got 'p'"
        )

    def test_wildcard_positions_skipped(self):
        """Test '*' and '?' in the pattern are not divergences."""
        assert find_mismatch_position("a?c", "abd") == "Mismatch at position 2: expected 'c' but got 'd'"

    def test_length_mismatch(self):
        """Test equal prefix with different lengths."""
        assert find_mismatch_position("abc", "abcde") == (
            "Length mismatch: expected 3 characters but got 5"
        )

    def test_no_divergence(self):
        """Test identical strings give no hint."""
        assert find_mismatch_position("abc", "abc") is None

    def test_control_characters_displayed(self):
        """Test tabs are made visible."""
        assert find_mismatch_position("a b", "a\tb") == (
            "Mismatch at position 1: expected ' ' but got '\\t'"
        )

    def test_bracket_expression_is_one_position(self):
        """Test a bracket expression is skipped as a single position."""
        assert find_mismatch_position("[0-9]x", "5y") == (
            "Mismatch at position 1: expected 'x' but got 'y'"
        )
        assert find_mismatch_position("[]a]bc", "]bd") == (
            "Mismatch at position 2: expected 'c' but got 'd'"
        )

    def test_escaped_metacharacter_is_one_position(self):
        """Test an escape and the character it escapes form one literal."""
        pattern = WildcardPattern("a\\*b", "\\")
        assert find_mismatch_position(pattern, "a*c") == (
            "Mismatch at position 2: expected 'b' but got 'c'"
        )
        assert find_mismatch_position(pattern, "axb") == (
            "Mismatch at position 1: expected '*' but got 'x'"
        )

    def test_case_folding(self):
        """Test letters differing only in case are not a divergence when ignoring case."""
        pattern = WildcardPattern("ABC", options=WildcardOptions.IGNORE_CASE)
        assert find_mismatch_position(pattern, "abd") == (
            "Mismatch at position 2: expected 'C' but got 'd'"
        )

    def test_length_counts_positions(self):
        """Test the length hint counts a bracket expression as one character."""
        assert find_mismatch_position("[ab]c", "acx") == (
            "Length mismatch: expected 2 characters but got 3"
        )

    def test_match_line_uses_escape_character(self):
        """Test hints from the analyzer honour its escape character."""
        result = DiffAnalyzer(escape_character="~").match_line("~[x~]!", "[x]?")
        assert result.mismatch_hint == "Mismatch at position 3: expected '!' but got '?'"


class TestLineMatchResult:
    """Tests for LineMatchResult."""

    def test_extra_line(self):
        """Test a line with no expected counterpart."""
        result = LineMatchResult(1, None, "x", False, mismatch_reason=MismatchReason.EXTRA_LINE)
        assert result.is_extra
        assert not result.is_missing
        assert result.status == MISMATCH_MARKER

    def test_missing_line(self):
        """Test a line with no actual counterpart."""
        result = LineMatchResult(1, "x", None, False)
        assert result.is_missing
        assert not result.is_extra

    def test_match_status(self):
        """Test status marker for a match."""
        assert LineMatchResult(1, "a", "a", True).status == MATCH_MARKER

    def test_immutable(self):
        """Test results cannot be modified."""
        result = LineMatchResult(1, "a", "a", True)
        with pytest.raises(AttributeError):
            result.is_match = False


class TestDiffResult:
    """Tests for DiffResult aggregation."""

    def test_empty_result_matches(self):
        """Test no lines means overall match."""
        result = DiffResult()
        assert result.overall_match
        assert result.matched_count == 0

    def test_counts(self):
        """Test derived counts."""
        result = DiffResult(
            line_results=(
                LineMatchResult(1, "a", "a", True),
                LineMatchResult(2, "b", "c", False, mismatch_reason=MismatchReason.PATTERN_MISMATCH),
                LineMatchResult(3, None, "extra", False, mismatch_reason=MismatchReason.EXTRA_LINE),
                LineMatchResult(4, None, "more", False, mismatch_reason=MismatchReason.EXTRA_LINE),
            )
        )
        assert not result.overall_match
        assert result.matched_count == 1
        assert result.mismatched_count == 1
        assert result.extra_count == 2
        assert result.missing_count == 0
        assert result.extra_lines == ["extra", "more"]
        assert result.expected_text == "a\nb"
        assert result.actual_text == "a\nc\nextra\nmore"


class TestAnalyze:
    """Tests for the analyze entry point."""

    def test_identical_text(self):
        """Test identical text matches line for line."""
        result = analyze("one\ntwo", "one\ntwo")
        assert result.overall_match
        assert [line.line_number for line in result.line_results] == [1, 2]
        assert all(line.wildcard_captures == () for line in result.line_results)

    def test_both_empty(self):
        """Test two empty inputs match with no lines."""
        result = analyze("", "")
        assert result.overall_match
        assert result.line_results == ()

    def test_wildcard_capture(self):
        """Test captured text of a matched line."""
        result = analyze("Hello * world", "Hello beautiful world")
        assert result.overall_match
        assert result.line_results[0].wildcard_captures == ("beautiful",)

    def test_multiple_captures(self, expected_output, actual_output):
        """Test captures for several wildcard kinds."""
        result = analyze(expected_output, actual_output)
        assert result.overall_match
        captures = [line.wildcard_captures for line in result.line_results]
        assert captures == [("10:42",), ("1", "2"), ("0",), ()]

    def test_extra_actual_line(self):
        """Test an actual line beyond the expected ones."""
        result = analyze("a\nb", "a\nb\nc")
        assert not result.overall_match
        assert result.matched_count == 2
        assert result.extra_lines == ["c"]
        extra = result.line_results[2]
        assert extra.line_number == 3
        assert extra.expected_line is None
        assert extra.mismatch_reason == "unexpected extra line"

    def test_missing_actual_line(self):
        """Test an expected line with no actual counterpart."""
        result = analyze("a\nb\nc", "a")
        assert result.missing_lines == ["b", "c"]
        assert result.missing_count == 2
        assert result.line_results[1].mismatch_reason == "missing line"
        assert result.line_results[1].actual_line is None

    def test_pattern_mismatch(self):
        """Test a line that fails its pattern."""
        result = analyze("Hello *!", "Hello world?")
        line = result.line_results[0]
        assert not line.is_match
        assert line.mismatch_reason == "pattern does not match"
        assert line.mismatch_hint == "Mismatch at position 7: expected '!' but got 'o'"
        assert line.wildcard_captures == ()

    def test_positional_alignment(self):
        """Test lines are paired by position without re-alignment."""
        result = analyze("a\nb\nc", "b\nc")
        assert [line.is_match for line in result.line_results] == [False, False, False]
        assert result.line_results[2].is_missing

    def test_terminators_do_not_matter(self):
        """Test CRLF actual text against LF expected text."""
        assert analyze("a\nb*\n", "a\r\nbc\r\n").overall_match

    def test_escape_character(self):
        """Test default escape character in expected lines."""
        assert analyze("Total: 5 \\* 3", "Total: 5 * 3").overall_match
        assert not analyze("Total: 5 \\* 3", "Total: 5 x 3").overall_match

    def test_no_escape_character(self):
        """Test escaping can be disabled."""
        assert analyze("C:\\temp\\*", "C:\\temp\\file", escape_character=None).overall_match

    def test_options(self):
        """Test options reach the matcher."""
        assert analyze("HELLO *", "hello you", options=WildcardOptions.IGNORE_CASE).overall_match
        assert not analyze("HELLO *", "hello you").overall_match

    def test_invalid_pattern_line_raises(self):
        """Test malformed expected lines raise."""
        with pytest.raises(WildcardPatternError):
            analyze("ok\n[z-a]", "ok\nq")


class TestDiffAnalyzer:
    """Tests for DiffAnalyzer."""

    def test_match_line(self):
        """Test matching a single line pair."""
        result = DiffAnalyzer().match_line("v?.*", "v1.2", line_number=7)
        assert result.line_number == 7
        assert result.is_match
        assert result.wildcard_captures == ("1", "2")

    def test_mismatch_hints_disabled(self):
        """Test hints can be turned off."""
        result = DiffAnalyzer(mismatch_hints=False).match_line("abc", "abd")
        assert not result.is_match
        assert result.mismatch_hint is None

    def test_logs_analysis(self, logger, log_handler):
        """Test debug logging of an analysis."""
        DiffAnalyzer(logger=logger).analyze("a\nb", "a\nb\nc")
        assert any(message.startswith("Analyzing diff") for message in log_handler.messages)
        assert any("extra=1" in message for message in log_handler.messages)

    def test_placeholder_when_regex_fails(self, logger, log_handler):
        """Test capture fallback when the capturing regex cannot be compiled."""
        analyzer = DiffAnalyzer(logger=logger)
        with patch(
            "globdiff.patterns.pattern.compile_regex",
            side_effect=WildcardPatternError("boom", "a*?"),
        ):
            result = analyzer.match_line("a*?", "abc")

        assert result.is_match
        assert result.wildcard_captures == (MATCHED_CONTENT_PLACEHOLDER,) * 2
        assert any("Capture regex could not be compiled" in m for m in log_handler.messages)
        assert any("Falling back to placeholder captures" in m for m in log_handler.messages)

    def test_placeholder_when_regex_does_not_match(self, logger, log_handler):
        """Test capture fallback when the capturing regex finds nothing."""
        never = MagicMock()
        never.fullmatch.return_value = None
        analyzer = DiffAnalyzer(placeholder="<?>", logger=logger)
        with patch("globdiff.patterns.pattern.compile_regex", return_value=never):
            result = analyzer.match_line("x[0-9]*", "x1yz")

        assert result.is_match
        assert result.wildcard_captures == ("<?>", "<?>")

    def test_regex_captures_for_generated_lines(self, logger, log_handler):
        """Test the placeholder path is not taken for ordinary patterns."""
        analyzer = DiffAnalyzer(logger=logger)
        lines = ["*", "a*b", "?-?", "[0-9]*x", "*\\**", "[]a]?"]
        texts = ["", "aXb", "1-2", "42x", "a*b", "]z"]
        for pattern, text in zip(lines, texts):
            assert analyzer.match_line(pattern, text).is_match
        assert not any("placeholder" in m for m in log_handler.messages)

    def test_from_config(self, config_file):
        """Test analyzer settings from configuration."""
        analyzer = DiffAnalyzer.from_config(ConfigManager(str(config_file)))
        assert analyzer.escape_character == "~"
        assert analyzer.options == WildcardOptions.IGNORE_CASE
        assert analyzer.placeholder == "<captured>"
        assert analyzer.mismatch_hints is False
        assert analyzer.analyze("A~*", "a*").overall_match

    def test_from_default_config(self):
        """Test defaults match the analyze() defaults."""
        analyzer = DiffAnalyzer.from_config(ConfigManager(load_environment=False))
        assert analyzer.escape_character == "\\"
        assert analyzer.options == WildcardOptions.NONE
        assert analyzer.placeholder == MATCHED_CONTENT_PLACEHOLDER
        assert analyzer.mismatch_hints is True
