#!/usr/bin/env python3
"""Tests for the wildcard pattern model and pattern utilities."""

import random

import pytest

from globdiff.patterns.parser import WildcardPatternError
from globdiff.patterns.pattern import (
    WildcardOptions,
    WildcardPattern,
    contains_wildcard_characters,
    escape,
    is_like,
    is_match,
    is_wildcard_char,
    unescape,
)


class TestWildcardOptions:
    """Tests for WildcardOptions flags."""

    def test_flag_values(self):
        """Test flag values."""
        assert WildcardOptions.NONE == 0
        assert WildcardOptions.COMPILED == 1
        assert WildcardOptions.IGNORE_CASE == 2
        assert WildcardOptions.CULTURE_INVARIANT == 4

    def test_options_coerced_from_int(self):
        """Test a plain int is accepted and coerced."""
        pattern = WildcardPattern("a", options=2)
        assert isinstance(pattern.options, WildcardOptions)
        assert pattern.case_insensitive
        assert not pattern.culture_invariant

    def test_compiled_has_no_effect(self):
        """Test COMPILED does not change results."""
        pattern = WildcardPattern("a*", options=WildcardOptions.COMPILED)
        assert pattern.is_match("abc")
        assert not pattern.is_match("ABC")


class TestWildcardPatternConstruction:
    """Tests for WildcardPattern creation and validation."""

    def test_attributes(self):
        """Test stored attributes."""
        pattern = WildcardPattern("a*", "\\", WildcardOptions.IGNORE_CASE)
        assert pattern.text == "a*"
        assert pattern.escape_character == "\\"
        assert pattern.options == WildcardOptions.IGNORE_CASE

    def test_immutable(self):
        """Test patterns cannot be modified."""
        pattern = WildcardPattern("a*")
        with pytest.raises(AttributeError):
            pattern.text = "b"

    def test_equality_ignores_compiled_state(self):
        """Test equal inputs give equal patterns."""
        assert WildcardPattern("a*", "\\") == WildcardPattern("a*", "\\")
        assert WildcardPattern("a*") != WildcardPattern("a?")

    def test_non_string_text_raises(self):
        """Test text must be a str."""
        with pytest.raises(TypeError):
            WildcardPattern(None)

    @pytest.mark.parametrize("escape_character", ["", "ab"])
    def test_escape_character_length(self, escape_character):
        """Test escape character must be one character."""
        with pytest.raises(WildcardPatternError, match="single character"):
            WildcardPattern("a", escape_character)

    @pytest.mark.parametrize("text", ["\\a", "x\\yz", "[\\-]", "a\\b*", "\\\\a", "x\\\\y*"])
    def test_escape_before_ordinary_character_raises(self, text):
        """Test escape misuse is rejected at construction."""
        with pytest.raises(WildcardPatternError) as exc_info:
            WildcardPattern(text, "\\")
        assert "escape characters, '\\'" in exc_info.value.message
        assert exc_info.value.pattern == text

    @pytest.mark.parametrize("text", ["\\*", "\\?", "\\[\\]", "\\\\", "\\\\*", "a\\", "\\"])
    def test_valid_escapes(self, text):
        """Test escapes before metacharacters, escapes and the end are allowed."""
        WildcardPattern(text, "\\")

    def test_backslash_is_ordinary_without_escape(self):
        """Test no escape validation without an escape character."""
        assert WildcardPattern("\\a").is_match("\\a")

    def test_invalid_bracket_fails_at_construction(self):
        """Test parse errors surface when the pattern is created."""
        with pytest.raises(WildcardPatternError):
            WildcardPattern("[z-a]")
        with pytest.raises(WildcardPatternError):
            WildcardPattern("[abc")


class TestWildcardPatternMatching:
    """Tests for WildcardPattern.is_match."""

    def test_non_string_input_never_matches(self):
        """Test None and other non-str inputs return False."""
        pattern = WildcardPattern("*")
        assert pattern.is_match(None) is False
        assert pattern.is_match(42) is False

    def test_match_all(self):
        """Test '*' matches every string."""
        pattern = WildcardPattern("*")
        for text in ("", "x", "a\nb", "*?[]"):
            assert pattern.is_match(text)

    @pytest.mark.parametrize("text", ["", "abc", "a.b", "x y z", "MiXeD"])
    def test_literal_pattern_is_string_equality(self, text):
        """Test a pattern without wildcards matches only itself."""
        pattern = WildcardPattern(text)
        assert pattern.is_match(text)
        assert not pattern.is_match(text + "!")
        assert not pattern.is_match("!" + text)

    def test_literal_pattern_ignoring_case(self):
        """Test literal pattern under IGNORE_CASE is case-insensitive equality."""
        pattern = WildcardPattern("MiXeD", options=WildcardOptions.IGNORE_CASE)
        assert pattern.is_match("mixed")
        assert pattern.is_match("MIXED")
        assert not pattern.is_match("mixer")

    def test_get_shares_match_all(self):
        """Test get() returns one shared instance for '*'."""
        assert WildcardPattern.get("*") is WildcardPattern.get("*")
        assert WildcardPattern.get("a*").text == "a*"
        assert WildcardPattern.get("A*", WildcardOptions.IGNORE_CASE).is_match("abc")


class TestWildcardPatternTranslation:
    """Tests for translation shortcuts."""

    def test_to_regex(self):
        """Test regex shortcut."""
        assert WildcardPattern("a?").to_regex() == "^a.\\Z"
        assert WildcardPattern("a?").to_regex(capture=True) == "^a(.)\\Z"

    def test_compile_regex(self):
        """Test compiled regex shortcut."""
        assert WildcardPattern("a*").compile_regex().search("abc")

    def test_to_dos_wildcard(self):
        """Test DOS shortcut."""
        assert WildcardPattern("[a-c]?.txt").to_dos_wildcard() == "??.txt"

    def test_events(self):
        """Test event shortcut."""
        assert len(WildcardPattern("a*").events()) == 2


class TestIsWildcardChar:
    """Tests for is_wildcard_char."""

    def test_metacharacters(self):
        """Test the four metacharacters."""
        for char in "*?[]":
            assert is_wildcard_char(char)

    def test_other_characters(self):
        """Test ordinary characters and non-single strings."""
        for char in ("a", "-", "\\", "", "**"):
            assert not is_wildcard_char(char)


class TestEscape:
    """Tests for escape and unescape."""

    def test_escape(self):
        """Test every metacharacter gets an escape."""
        assert escape("a*b?[c]", "\\") == "a\\*b\\?\\[c\\]"

    def test_escape_with_exclusions(self):
        """Test chars_not_to_escape are left as wildcards."""
        assert escape("a*b?", "\\", chars_not_to_escape="*") == "a*b\\?"

    def test_escape_none_raises(self):
        """Test None text is rejected."""
        with pytest.raises(TypeError):
            escape(None, "\\")

    def test_unescape(self):
        """Test escapes before metacharacters are dropped."""
        assert unescape("a\\*b\\?\\[c\\]", "\\") == "a*b?[c]"

    def test_unescape_doubled_escape(self):
        """Test a doubled escape becomes one."""
        assert unescape("a\\\\b", "\\") == "a\\b"

    def test_unescape_keeps_other_escapes(self):
        """Test escapes before ordinary characters and at the end stay."""
        assert unescape("\\a", "\\") == "\\a"
        assert unescape("a\\", "\\") == "a\\"

    def test_unescape_none_raises(self):
        """Test None text is rejected."""
        with pytest.raises(TypeError):
            unescape(None, "\\")

    def test_escaped_text_matches_itself(self):
        """Test escape(s) used as a pattern matches exactly s."""
        rng = random.Random(20240601)
        alphabet = "ab*?[]-."
        for _ in range(300):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 8)))
            pattern = WildcardPattern(escape(text, "\\"), "\\")
            assert pattern.is_match(text), text
            assert not pattern.is_match(text + "a"), text
            assert unescape(escape(text, "\\"), "\\") == text


class TestContainsWildcardCharacters:
    """Tests for contains_wildcard_characters."""

    def test_empty_and_none(self):
        """Test empty input has no wildcards."""
        assert not contains_wildcard_characters("")
        assert not contains_wildcard_characters(None)

    def test_unescaped_wildcards(self):
        """Test any unescaped metacharacter is reported."""
        assert contains_wildcard_characters("a*")
        assert contains_wildcard_characters("x]")
        assert not contains_wildcard_characters("plain text")

    def test_escaped_wildcards(self):
        """Test escaped metacharacters do not count."""
        assert not contains_wildcard_characters("a\\*b\\?", "\\")
        assert contains_wildcard_characters("a\\*b?", "\\")
        assert contains_wildcard_characters("a\\*", None)


class TestModuleFunctions:
    """Tests for is_match and is_like."""

    def test_is_match(self):
        """Test one-call matching."""
        assert is_match("Hello *", "Hello world")
        assert not is_match("Hello *", "Goodbye")
        assert is_match("a\\*", "a*", escape_character="\\")
        assert is_match("HELLO", "hello", options=WildcardOptions.IGNORE_CASE)

    def test_is_match_invalid_pattern(self):
        """Test malformed patterns raise."""
        with pytest.raises(WildcardPatternError):
            is_match("[abc", "a")

    def test_is_like(self):
        """Test argument order reads text first."""
        assert is_like("report.txt", "*.txt")
        assert not is_like("*.txt", "report.txt")
