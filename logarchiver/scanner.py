import logging
import os
from pathlib import Path
from typing import List

from .config import RunConfig
from .models import LogFile
from .utils import ensure_directory

logger = logging.getLogger(__name__)


def creation_timestamp(st: os.stat_result) -> float:
    """Best-effort creation time, never later than the modification time."""
    created = getattr(st, "st_birthtime", None)
    if created is None:
        # Windows reports creation here; elsewhere it is the inode change time.
        created = st.st_ctime
    return min(created, st.st_mtime)


class LogScanner:
    """Lists the log files in a single folder that are older than the run's cutoff."""

    def __init__(self, config: RunConfig, ignore_hidden: bool = True):
        self.root = config.source_dir
        self.extension = config.extension
        self.cutoff = config.cutoff.timestamp()
        self.ignore_hidden = ignore_hidden
        self.exclude = {config.log_file} if config.log_file else set()

    def scan(self) -> List[LogFile]:
        ensure_directory(self.root)

        files: List[LogFile] = []
        for p in self.root.glob("*"):
            if p.suffix.lower() != self.extension:
                continue
            if self.ignore_hidden and p.name.startswith("."):
                continue
            if p in self.exclude:
                continue

            try:
                if not p.is_file():
                    continue
                st = p.stat()
            except OSError as e:
                logger.warning("Cannot stat %s, skipping: %s", p, e)
                continue

            created = creation_timestamp(st)
            if created >= self.cutoff:
                continue

            files.append(
                LogFile(
                    path=p,
                    name=p.name,
                    size=st.st_size,
                    created=created,
                    modified=st.st_mtime,
                )
            )
        return files
