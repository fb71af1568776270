"""
i18n-check
Main entry point for the i18n checker.
"""

import logging
import sys
import traceback
from typing import List, Optional

from .errors import FailError, TaskListError, UntrackedMessagesError
from .models.config import RunFlags
from .services.error_reporter import ErrorReporter
from .services.orchestrator import ExtractionOrchestrator
from .utils.cli import build_run_flags, parse_args, raw_flags_from_args, warn_unknown_args
from .utils.config_loader import merge_configs


def setup_logging(verbose: int = 0, quiet: bool = False):
    """
    Initialize logging configuration based on verbosity level.

    Args:
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        quiet: If True, only show errors
    """
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )
    logging.getLogger().setLevel(level)


def report_run_outcome(orchestrator: ExtractionOrchestrator, reporter: ErrorReporter) -> int:
    """
    Run the stages and turn whatever they raise into an exit code.

    Returns:
        int: 0 when every stage passed, 1 when sub-tasks failed

    Raises:
        FailError: With every reported error when the reporter holds entries
        SystemExit: On any error that did not come from a failed stage
    """
    try:
        orchestrator.run()
    except TaskListError as error:
        if len(reporter):
            # Untracked message failures are already in the reporter, anything else is added
            unreported = [str(e) for e in error.errors if not isinstance(e, UntrackedMessagesError)]
            raise FailError("\n\n".join([reporter.format()] + unreported)) from error
        for sub_error in error.errors:
            logging.error("%s", sub_error)
        return 1
    except FailError:
        raise
    except Exception:
        logging.error("Unhandled exception!")
        logging.error(traceback.format_exc())
        sys.exit(1)
    return 0


def run_checks(flags: RunFlags) -> int:
    """
    Load the configuration and check every translation file.

    Args:
        flags: Validated run flags

    Returns:
        int: Process exit code
    """
    config = merge_configs(flags.include_config)
    if not config.translations:
        logging.info("No translation files configured, nothing to check")
        return 0

    logging.info("Checking %d translation file(s) against %d message path(s)",
                 len(config.translations), len(config.message_dirs))
    reporter = ErrorReporter()
    orchestrator = ExtractionOrchestrator(flags, config, reporter)
    exit_code = report_run_outcome(orchestrator, reporter)
    if exit_code == 0:
        logging.info("i18n check completed successfully")
    return exit_code


def main(argv: Optional[List[str]] = None):
    """
    Main function to parse arguments and initiate the check.
    """
    args, unknown = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    warn_unknown_args(unknown)

    try:
        flags = build_run_flags(raw_flags_from_args(args))
        exit_code = run_checks(flags)
    except FailError as e:
        logging.error("%s", e)
        exit_code = e.exit_code
    except KeyboardInterrupt:
        logging.info("\ni18n check cancelled.")
        exit_code = 130
    except Exception as e:
        logging.error("An unexpected error occurred: %s", str(e))
        logging.debug(traceback.format_exc())
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
