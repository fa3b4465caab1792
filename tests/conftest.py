import logging
import os
import time
from datetime import datetime
from pathlib import Path

import pytest

DAY = 24 * 60 * 60


def write_log(folder: Path, name: str, days_ago: float = 0, content: str = "GET / 200\n") -> Path:
    """Create a log file whose timestamps are `days_ago` days in the past."""
    p = folder / name
    p.write_text(content, encoding="utf-8")
    if days_ago:
        ts = time.time() - days_ago * DAY
        os.utime(p, (ts, ts))
    return p


@pytest.fixture
def logs_dir(tmp_path):
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def now():
    return datetime.now()


@pytest.fixture
def hold_lock():
    """Hold an exclusive flock on a file for the rest of the test."""
    if os.name == "nt":
        pytest.skip("flock is POSIX only")
    import fcntl

    handles = []

    def _hold(path: Path):
        fh = open(path, "rb")
        fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        handles.append(fh)
        return fh

    yield _hold
    for fh in handles:
        fh.close()


@pytest.fixture(autouse=True)
def reset_package_logging():
    yield
    pkg_logger = logging.getLogger("logarchiver")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
        h.close()


@pytest.fixture
def make_log(logs_dir):
    def _make(name, days_ago=0, content="GET / 200\n", folder=None):
        return write_log(folder or logs_dir, name, days_ago, content)
    return _make
