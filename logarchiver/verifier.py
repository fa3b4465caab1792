import logging
import zipfile
from typing import Callable

from .errors import ArchiveIncompleteError
from .locks import probe_lock
from .models import ArchiveArtifact, ArchiveStatus, LockState

logger = logging.getLogger(__name__)


class ArchiveVerifier:
    """
    Decides whether an archive is trustworthy enough to delete its sources.

    Fails closed: anything unexpected marks the artifact failed.
    """

    def __init__(self, lock_probe: Callable = probe_lock):
        self.lock_probe = lock_probe

    def verify(self, artifact: ArchiveArtifact) -> ArchiveStatus:
        if artifact.status is ArchiveStatus.FAILED:
            return artifact.status

        try:
            problem = self._check(artifact)
        except Exception as e:
            problem = f"verification error: {e}"

        if problem:
            artifact.fail(problem)
            logger.warning("Archive %s failed verification: %s", artifact.path.name, problem)
        else:
            artifact.status = ArchiveStatus.COMPLETE
            logger.info("Archive %s verified", artifact.path.name)
        return artifact.status

    def _check(self, artifact: ArchiveArtifact) -> str:
        path = artifact.path
        if not path.is_file():
            return "archive does not exist"
        if path.stat().st_size == 0:
            return "archive is empty"

        # A writer still finalising the zip would hold it.
        state = self.lock_probe(path)
        if state is not LockState.OPEN:
            return f"archive lock state is {state.value}"

        with zipfile.ZipFile(path) as zf:
            bad = zf.testzip()
            if bad is not None:
                return f"corrupt member {bad}"
            names = set(zf.namelist())

        missing = [rec.name for rec in artifact.added if rec.name not in names]
        if missing:
            return f"missing members: {', '.join(missing)}"
        return ""


def require_complete(artifact: ArchiveArtifact) -> None:
    if artifact.status is not ArchiveStatus.COMPLETE:
        raise ArchiveIncompleteError(
            f"Archive {artifact.path.name} is {artifact.status.value}"
            + (f": {artifact.reason}" if artifact.reason else "")
        )
