import argparse
import logging
import sys
from typing import List, Optional

from logarchiver.config import DEFAULT_AGE_DAYS, DEFAULT_EXTENSION, DEFAULT_LOG_FILE, RunConfig
from logarchiver.errors import MissingArgumentError, PathNotFoundError
from logarchiver.orchestrator import CleanupOrchestrator
from logarchiver.runlog import configure_run_logging

logger = logging.getLogger("logarchiver.main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="logarchiver",
        description="Zip old log files by month and delete the originals once the archive is verified.",
    )
    parser.add_argument("source", help="Folder containing the log files")
    parser.add_argument("destination", nargs="?", default=None,
                        help="Optional folder to move finished archives into")
    parser.add_argument("--extension", default=DEFAULT_EXTENSION,
                        help=f"File extension to archive (default: {DEFAULT_EXTENSION})")
    parser.add_argument("--days", type=int, default=DEFAULT_AGE_DAYS,
                        help=f"Only archive files created more than this many days ago (default: {DEFAULT_AGE_DAYS})")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE,
                        help=f"Run log, overwritten on every run (default: {DEFAULT_LOG_FILE})")
    parser.add_argument("--dry-run", action="store_true",
                        help="Only report what would be archived and deleted")
    parser.add_argument("--quiet", action="store_true", help="Do not echo the run log to the console")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = RunConfig.build(
            args.source,
            destination=args.destination,
            extension=args.extension,
            age_days=args.days,
            dry_run=args.dry_run,
            log_file=args.log_file,
        )
    except (MissingArgumentError, ValueError) as e:
        print(f"logarchiver: error: {e}", file=sys.stderr)
        return 2

    configure_run_logging(config.log_file, console=not args.quiet)
    logger.info("Started at %s", config.now.strftime("%Y-%m-%d %H:%M:%S"))
    logger.info("Source: %s", config.source_dir)
    if config.destination:
        logger.info("Destination: %s", config.destination)
    if config.dry_run:
        logger.info("Dry run: nothing will be written or deleted")

    try:
        CleanupOrchestrator(config).run()
    except PathNotFoundError as e:
        logger.warning("PathNotFound: %s", e)
        return 1

    logger.info("Finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
