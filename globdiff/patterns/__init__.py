"""globdiff Pattern Engine.

Wildcard patterns and the backends that consume them:
- WildcardPattern: Validated, pre-compiled pattern value
- parse / PatternVisitor: The shared parser and its visitor interface
- WildcardMatcher: Linear-time NFA matcher
- to_regex / compile_regex: Regular expression translation
- to_dos_wildcard: DOS wildcard translation
"""

from .dos import DosWildcardEmitter, to_dos_wildcard
from .matcher import CharacterSet, ElementKind, PatternElement, WildcardMatcher, compile_elements
from .parser import (
    EventKind,
    EventRecorder,
    ParseEvent,
    PatternVisitor,
    WildcardPatternError,
    count_wildcards,
    parse,
    parse_events,
)
from .pattern import (
    WildcardOptions,
    WildcardPattern,
    contains_wildcard_characters,
    escape,
    is_like,
    is_match,
    is_wildcard_char,
    unescape,
)
from .regex import RegexEmitter, compile_regex, to_regex

__all__ = [
    # Pattern model
    "WildcardOptions",
    "WildcardPattern",
    "WildcardPatternError",
    "is_match",
    "is_like",
    "escape",
    "unescape",
    "contains_wildcard_characters",
    "is_wildcard_char",
    # Parser
    "EventKind",
    "ParseEvent",
    "PatternVisitor",
    "EventRecorder",
    "parse",
    "parse_events",
    "count_wildcards",
    # Backends
    "ElementKind",
    "CharacterSet",
    "PatternElement",
    "WildcardMatcher",
    "compile_elements",
    "RegexEmitter",
    "to_regex",
    "compile_regex",
    "DosWildcardEmitter",
    "to_dos_wildcard",
]
