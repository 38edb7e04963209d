"""
globdiff Core: Constants

This module provides system-wide constants, error codes, and the fixed strings
that the diff engine reports.
"""
from enum import IntEnum

# Version information
GLOBDIFF_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for globdiff operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad argument or configuration value
    NOT_FOUND = 2  # File or resource doesn't exist
    INVALID_PATTERN = 3  # Wildcard pattern cannot be parsed or compiled
    INTERNAL_ERROR = 6  # Bug in globdiff


class Wildcards:
    """Wildcard metacharacters of the pattern mini-language."""

    ANY_RUN = "*"
    ANY_CHAR = "?"
    BRACKET_OPEN = "["
    BRACKET_CLOSE = "]"
    RANGE = "-"

    # Characters an escape character may precede
    ALL = "*?[]"


DEFAULT_ESCAPE_CHARACTER = "\\"


class MismatchReason:
    """Reason strings attached to non-matching diff lines."""

    EXTRA_LINE = "unexpected extra line"
    MISSING_LINE = "missing line"
    PATTERN_MISMATCH = "pattern does not match"


# Substituted for each wildcard capture when extraction is not possible
MATCHED_CONTENT_PLACEHOLDER = "<matched content>"

MATCH_MARKER = "✅"
MISMATCH_MARKER = "❌"


# Configuration keys
class ConfigKey:
    """Configuration key constants (dot paths under the ``globdiff`` root)."""

    ROOT = "globdiff"

    ESCAPE_CHARACTER = "globdiff.pattern.escape_character"
    CASE_INSENSITIVE = "globdiff.pattern.case_insensitive"
    CULTURE_INVARIANT = "globdiff.pattern.culture_invariant"

    PLACEHOLDER = "globdiff.diff.placeholder"
    MISMATCH_HINTS = "globdiff.diff.mismatch_hints"
    ENHANCED = "globdiff.diff.enhanced"

    LOG_LEVEL = "globdiff.logging.level"
    LOG_FILE = "globdiff.logging.file"
