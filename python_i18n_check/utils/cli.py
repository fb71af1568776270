"""
Command-line interface utilities for the i18n checker.
This module provides the argument parsing and the validation of flag
combinations that has to happen before any work starts.
"""
import logging
import sys
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from typing import List, Optional, Tuple

from ..errors import create_fail_error
from ..models.config import RawFlags, RunFlags
from .helpers import get_version

IGNORE_FLAGS = ('ignore_incompatible', 'ignore_unused', 'ignore_missing', 'ignore_untracked')


class CustomArgumentParser(ArgumentParser):
    """
    Custom ArgumentParser that handles errors in a more user-friendly way.
    """
    def error(self, message: str):
        """
        Display a cleaner error message with usage information.

        Args:
            message (str): Error message
        """
        self.print_help()
        sys.stderr.write(f'\nError: {message}\n')
        sys.exit(2)


def _add_switch(group, name: str, help_text: str):
    """Add --name and --no-name writing True/False to the same destination."""
    dest = name.replace('-', '_')
    group.add_argument(f"--{name}", dest=dest, action="store_const", const=True, default=None, help=help_text)
    group.add_argument(f"--no-{name}", dest=dest, action="store_const", const=False, help=f"Turn off --{name}")


def build_parser() -> CustomArgumentParser:
    """Create the argument parser."""
    parser = CustomArgumentParser(
        description="Check that translation files match the messages used in the source code",
        epilog="""
Examples:
  # Check everything configured in pyproject.toml
  i18n-check

  # Only extract messages below one directory
  i18n-check --path src/myapp

  # Rewrite translation files so that they match the sources
  i18n-check --fix

  # Merge an extra configuration file
  i18n-check --include-config plugins/i18n.toml --ignore-missing
""",
        formatter_class=lambda prog: RawDescriptionHelpFormatter(prog, max_help_position=35, width=100)
    )

    check_group = parser.add_argument_group('Check Options')
    config_group = parser.add_argument_group('Configuration')
    output_group = parser.add_argument_group('Output')

    _add_switch(check_group, "ignore-incompatible", "Do not fail on translations with mismatched placeholders")
    _add_switch(check_group, "ignore-missing", "Do not fail on messages missing from translation files")
    _add_switch(check_group, "ignore-unused", "Do not fail on translations no source message uses")
    # Accepts a value so that the validator can reject it with a proper message
    check_group.add_argument(
        "--ignore-untracked",
        nargs="?",
        const=True,
        default=None,
        metavar="VALUE",
        help="Skip the scan for messages outside of the configured paths"
    )
    check_group.add_argument(
        "--no-ignore-untracked",
        dest="ignore_untracked",
        action="store_const",
        const=False,
        help="Turn off --ignore-untracked"
    )
    check_group.add_argument(
        "--fix",
        nargs="?",
        const=True,
        default=False,
        metavar="VALUE",
        help="Rewrite translation files: drop unused and incompatible translations, add missing messages"
    )

    config_group.add_argument(
        "--include-config",
        nargs="?",
        const=True,
        default=None,
        metavar="FILE",
        help="Extra TOML configuration merged on top of pyproject.toml"
    )
    config_group.add_argument(
        "--path",
        nargs="?",
        const=True,
        default=None,
        metavar="PATH",
        help="Only extract default messages from configured paths below PATH"
    )
    config_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Abort the whole run after SECONDS (a translation file being rewritten is finished first)"
    )

    output_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v for INFO, -vv for DEBUG)"
    )
    output_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode - only show errors"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f'%(prog)s {get_version()}'
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Tuple[Namespace, List[str]]:
    """
    Parse command-line arguments. Unknown arguments are returned, not rejected.

    Returns:
        Tuple[Namespace, List[str]]: Parsed arguments and the unknown ones
    """
    return build_parser().parse_known_args(argv)


def raw_flags_from_args(args: Namespace) -> RawFlags:
    """Copy the check flags out of the argparse namespace."""
    return RawFlags(
        ignore_incompatible=args.ignore_incompatible,
        ignore_missing=args.ignore_missing,
        ignore_unused=args.ignore_unused,
        include_config=args.include_config,
        ignore_untracked=args.ignore_untracked,
        fix=args.fix,
        path=args.path,
        timeout=args.timeout,
    )


def validate_flags(flags: RawFlags):
    """
    Reject invalid flag combinations.

    Args:
        flags (RawFlags): Flags as given on the command line

    Raises:
        FailError: With a distinct message for each kind of problem
    """
    if flags.fix and any(getattr(flags, name) is not None for name in IGNORE_FLAGS):
        raise create_fail_error(
            "none of the --ignore-incompatible, --ignore-unused or --ignore-missing or --ignore-untracked "
            "is allowed when --fix is set."
        )

    if isinstance(flags.path, bool) or isinstance(flags.include_config, bool):
        raise create_fail_error("--path and --include-config require a value")

    if not isinstance(flags.fix, bool):
        raise create_fail_error("--fix can't have a value")

    if flags.ignore_untracked is not None and not isinstance(flags.ignore_untracked, bool):
        raise create_fail_error("--ignore-untracked can't have a value")


def build_run_flags(flags: RawFlags) -> RunFlags:
    """
    Validate raw flags and turn them into typed run flags.

    Raises:
        FailError: If the flags do not pass validation
    """
    validate_flags(flags)
    return RunFlags(
        fix=flags.fix,
        ignore_incompatible=flags.ignore_incompatible,
        ignore_missing=flags.ignore_missing,
        ignore_unused=flags.ignore_unused,
        ignore_untracked=flags.ignore_untracked,
        include_config=flags.include_config,
        path=flags.path,
        timeout=flags.timeout,
    )


def warn_unknown_args(unknown: List[str]):
    """Unknown arguments are tolerated but mentioned."""
    if unknown:
        logging.warning("Ignoring unknown arguments: %s", " ".join(unknown))
