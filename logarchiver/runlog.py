import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class QuietFileHandler(logging.FileHandler):
    """File handler whose write failures never reach the archiving code."""

    def handleError(self, record):
        pass


def configure_run_logging(
    log_file: Optional[Path], console: bool = True, level: int = logging.INFO
) -> List[logging.Handler]:
    """
    Route the package's log records to a per-run file and the console.

    The file is truncated at the start of each run. If it cannot be opened
    the run carries on with console output only.
    """
    pkg_logger = logging.getLogger("logarchiver")
    pkg_logger.setLevel(level)
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(QuietFileHandler(log_file, mode="w", encoding="utf-8"))
        except OSError as e:
            print(f"Cannot write run log {log_file}: {e}", file=sys.stderr)

    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    for h in handlers:
        h.setFormatter(formatter)
        pkg_logger.addHandler(h)
    return handlers
