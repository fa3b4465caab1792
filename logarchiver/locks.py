"""
Exclusive-access probe used before archiving a log and before trusting a
finished archive.

The probe answers with a LockState instead of a bool so callers decide
what to do with an I/O error that is not a lock.

On Windows the file is opened with no sharing at all, which fails while
any other process (a web server writing its active log, say) has it open.
Elsewhere a non-blocking exclusive flock stands in for that.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import PathNotFoundError
from .models import LockState
from .utils import ensure_path

if os.name == "nt":
    import ctypes
    from ctypes import wintypes

    _kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    _CreateFileW = _kernel32.CreateFileW
    _CreateFileW.argtypes = [
        wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
        wintypes.DWORD, wintypes.DWORD, wintypes.HANDLE,
    ]
    _CreateFileW.restype = wintypes.HANDLE
    _CloseHandle = _kernel32.CloseHandle
    _CloseHandle.argtypes = [wintypes.HANDLE]
    _CloseHandle.restype = wintypes.BOOL
    _INVALID_HANDLE_VALUE = wintypes.HANDLE(-1).value
else:
    import fcntl

logger = logging.getLogger(__name__)

GENERIC_READ = 0x80000000
NO_SHARING = 0
OPEN_EXISTING = 3
FILE_ATTRIBUTE_NORMAL = 0x80

# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_WIN_LOCK_ERRORS = {32, 33}
# ERROR_FILE_NOT_FOUND, ERROR_PATH_NOT_FOUND
_WIN_MISSING_ERRORS = {2, 3}


def state_from_winerror(code: int) -> Optional[LockState]:
    """Map a failed no-share CreateFileW to a LockState; None means the file is gone."""
    if code in _WIN_LOCK_ERRORS:
        return LockState.LOCKED
    if code in _WIN_MISSING_ERRORS:
        return None
    return LockState.ERROR


def _probe_windows(p: Path) -> LockState:
    handle = _CreateFileW(
        str(p), GENERIC_READ, NO_SHARING, None, OPEN_EXISTING, FILE_ATTRIBUTE_NORMAL, None
    )
    if handle is None or handle == _INVALID_HANDLE_VALUE:
        code = ctypes.get_last_error()
        state = state_from_winerror(code)
        if state is None:
            raise PathNotFoundError(f"Path does not exist: {p}")
        if state is LockState.ERROR:
            logger.warning("Cannot open %s to check for locks: %s", p, ctypes.FormatError(code))
        return state
    try:
        return LockState.OPEN
    finally:
        _CloseHandle(handle)


def _try_exclusive(fd: int) -> LockState:
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError:
        return LockState.LOCKED
    fcntl.flock(fd, fcntl.LOCK_UN)
    return LockState.OPEN


def _probe_posix(p: Path) -> LockState:
    try:
        fh = open(p, "rb")
    except OSError as e:
        logger.warning("Cannot open %s to check for locks: %s", p, e)
        return LockState.ERROR

    try:
        return _try_exclusive(fh.fileno())
    except OSError as e:
        logger.warning("Lock probe failed for %s: %s", p, e)
        return LockState.ERROR
    finally:
        fh.close()


def probe_lock(path: Union[str, Path]) -> LockState:
    """
    Try to get exclusive read access to `path` without waiting.

    Raises MissingArgumentError for an empty path and PathNotFoundError if
    the file does not exist. The file is never modified and every handle
    opened here is closed before returning.
    """
    p = ensure_path(path)
    if os.name == "nt":
        return _probe_windows(p)
    return _probe_posix(p)


def is_locked(path: Union[str, Path]) -> bool:
    return probe_lock(path) is LockState.LOCKED
