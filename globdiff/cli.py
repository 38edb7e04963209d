#!/usr/bin/env python3
"""Command-line interface for globdiff.

This module provides the ``globdiff`` console script:
- Argument parsing and validation
- Configuration file loading
- Logging setup
- ``match``, ``diff`` and ``translate`` commands

Example:
    >>> from globdiff.cli import parse_arguments
    >>> args = parse_arguments(["match", "Hello *", "Hello world"])
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from globdiff.core.constants import GLOBDIFF_VERSION, ConfigKey, ErrorCode
from globdiff.diff.analyzer import DiffAnalyzer
from globdiff.diff.report import DEFAULT_HEADER, DiffOptions, ReportError, render_report
from globdiff.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from globdiff.infrastructure.logger import Logger, set_global_logger
from globdiff.patterns.parser import WildcardPatternError
from globdiff.patterns.pattern import WildcardOptions, WildcardPattern

# Version information
VERSION = GLOBDIFF_VERSION
DESCRIPTION = "globdiff - Wildcard pattern matching and line diffing"

# Exit codes
EXIT_MATCH = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130

STDIN_PATH = "-"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If arguments parse but are inconsistent
    """
    parser = argparse.ArgumentParser(
        prog="globdiff",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Test one string against a pattern
  globdiff match "Hello *" "Hello world"

  # Compare captured output with an expected-output file
  globdiff diff expected.txt actual.txt

  # Read the actual output from stdin
  ./run-tests | globdiff diff expected.txt -

  # Show the regex equivalent of a pattern
  globdiff translate "report-[0-9]?.txt" --capture
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    # Pattern options
    pattern_group = parser.add_argument_group("pattern options")

    escape_group = pattern_group.add_mutually_exclusive_group()
    escape_group.add_argument(
        "--escape",
        metavar="CHAR",
        type=str,
        help="Escape character for wildcard metacharacters (default: \\)",
    )
    escape_group.add_argument(
        "--no-escape",
        action="store_true",
        help="Treat every character literally except the wildcards",
    )

    pattern_group.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        help="Match case-insensitively",
    )

    pattern_group.add_argument(
        "--culture-invariant",
        action="store_true",
        help="Use simple lowercase folding for case-insensitive matching",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log output to FILE",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    match_parser = subparsers.add_parser(
        "match", help="Test whether TEXT matches PATTERN (exit 0 on match, 1 otherwise)"
    )
    match_parser.add_argument("pattern", metavar="PATTERN", help="Wildcard pattern")
    match_parser.add_argument("text", metavar="TEXT", help="Text to test")

    diff_parser = subparsers.add_parser(
        "diff", help="Compare an actual file line by line with an expected-pattern file"
    )
    diff_parser.add_argument(
        "expected", metavar="EXPECTED_FILE", help="File holding one wildcard pattern per line"
    )
    diff_parser.add_argument(
        "actual", metavar="ACTUAL_FILE", help="File holding the actual text ('-' for stdin)"
    )
    diff_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the expected and actual blocks without the line-by-line breakdown",
    )
    diff_parser.add_argument(
        "--header",
        metavar="TEXT",
        default=DEFAULT_HEADER,
        help=f"Report header (default: {DEFAULT_HEADER})",
    )

    translate_parser = subparsers.add_parser(
        "translate", help="Print the regex or DOS wildcard equivalent of PATTERN"
    )
    translate_parser.add_argument("pattern", metavar="PATTERN", help="Wildcard pattern")
    translate_parser.add_argument(
        "--to",
        dest="target",
        choices=["regex", "dos"],
        default="regex",
        help="Translation target (default: regex)",
    )
    translate_parser.add_argument(
        "--capture",
        action="store_true",
        help="Emit one capturing group per wildcard (regex only)",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    if args.escape is not None and len(args.escape) != 1:
        raise CLIError(f"Escape character must be a single character: {args.escape!r}")

    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(
                f"Configuration file does not exist: {args.config}", ErrorCode.NOT_FOUND
            )

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    if args.command == "diff":
        for path in (args.expected, args.actual):
            if path == STDIN_PATH:
                continue
            if not Path(path).is_file():
                raise CLIError(f"File does not exist: {path}", ErrorCode.NOT_FOUND)

        if args.expected == STDIN_PATH and args.actual == STDIN_PATH:
            raise CLIError("Only one of EXPECTED_FILE and ACTUAL_FILE can be stdin")

    if args.command == "translate" and args.capture and args.target != "regex":
        raise CLIError("--capture is only supported with --to regex")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Only options given on the command line are included, so file and
    environment settings still apply to everything else.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    pattern: Dict[str, Any] = {}
    if args.no_escape:
        pattern["escape_character"] = None
    elif args.escape is not None:
        pattern["escape_character"] = args.escape
    if args.ignore_case:
        pattern["case_insensitive"] = True
    if args.culture_invariant:
        pattern["culture_invariant"] = True

    logging_config: Dict[str, Any] = {}
    if args.debug:
        logging_config["level"] = "DEBUG"
    if args.log_file:
        logging_config["file"] = args.log_file

    config: Dict[str, Any] = {}
    if pattern:
        config["pattern"] = pattern
    if logging_config:
        config["logging"] = logging_config
    if getattr(args, "plain", False):
        config["diff"] = {"enhanced": False}

    return {ConfigKey.ROOT: config}


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Load configuration from file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Validated configuration manager

    Raises:
        CLIError: If the configuration cannot be loaded or is invalid
    """
    try:
        config = ConfigManager(config_file=args.config)
        config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
        config.validate_schema()
    except ConfigError as e:
        raise CLIError(e.message, e.error_code)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Configuration manager

    Returns:
        Configured logger instance, installed as the global logger
    """
    log_level = config.get(ConfigKey.LOG_LEVEL, "WARNING")
    log_file = config.get(ConfigKey.LOG_FILE)

    try:
        logger = Logger("globdiff", level=log_level)
    except (KeyError, ValueError):
        raise CLIError(f"Unknown log level: {log_level}")

    if log_file:
        try:
            logger.add_handler(logger.create_file_handler(log_file))
        except OSError as e:
            raise CLIError(f"Cannot open log file: {log_file}\n{e}")

    set_global_logger(logger)
    logger.debug("Logging configured", level=log_level, file=log_file)
    return logger


def pattern_options(config: ConfigManager) -> WildcardOptions:
    """Wildcard options selected by the configuration."""
    options = WildcardOptions.NONE
    if config.get(ConfigKey.CASE_INSENSITIVE, False):
        options |= WildcardOptions.IGNORE_CASE
    if config.get(ConfigKey.CULTURE_INVARIANT, False):
        options |= WildcardOptions.CULTURE_INVARIANT
    return options


def read_text(path: str) -> str:
    """
    Read a text file, or stdin for ``-``, keeping its line breaks.

    Raises:
        CLIError: If the file cannot be read
    """
    if path == STDIN_PATH:
        return sys.stdin.read()

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise CLIError(f"File is not valid UTF-8: {path}\n{e}")
    except OSError as e:
        raise CLIError(f"Failed to read file: {path}\n{e}")


def run_match(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    pattern = WildcardPattern(
        args.pattern, config.get(ConfigKey.ESCAPE_CHARACTER), pattern_options(config)
    )
    matched = pattern.is_match(args.text)
    logger.debug("Matched text", pattern=args.pattern, matched=matched)
    return EXIT_MATCH if matched else EXIT_MISMATCH


def run_diff(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    expected = read_text(args.expected)
    actual = read_text(args.actual)

    analyzer = DiffAnalyzer.from_config(config, logger=logger)
    result = analyzer.analyze(expected, actual)

    if result.overall_match:
        logger.info("All lines matched", lines=len(result.line_results))
        return EXIT_MATCH

    options = (
        DiffOptions.ENHANCED_WILDCARD_DIFF
        if config.get(ConfigKey.ENHANCED, True)
        else DiffOptions.DEFAULT
    )
    try:
        print(render_report(result, options, args.header), end="")
    except ReportError as e:
        raise CLIError(e.message, e.error_code)
    return EXIT_MISMATCH


def run_translate(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    pattern = WildcardPattern(
        args.pattern, config.get(ConfigKey.ESCAPE_CHARACTER), pattern_options(config)
    )
    if args.target == "dos":
        print(pattern.to_dos_wildcard())
    else:
        print(pattern.to_regex(capture=args.capture))
    return EXIT_MATCH


COMMANDS = {
    "match": run_match,
    "diff": run_diff,
    "translate": run_translate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code: 0 on match, 1 on mismatch, 2 on error
    """
    try:
        args = parse_arguments(argv)
        config = load_config(args)
        logger = setup_logging(config)

        return COMMANDS[args.command](args, config, logger)

    except (CLIError, WildcardPatternError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
