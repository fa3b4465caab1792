import logging
import zipfile
from pathlib import Path
from typing import Callable

from .errors import FileLockedError, LockCheckFailedError
from .locks import probe_lock
from .models import ArchiveArtifact, ArchiveStatus, LockState, LogFile, MonthGroup
from .utils import unique_path

logger = logging.getLogger(__name__)


class ZipArchiver:
    """Compresses one month-group into <key>.zip inside `output_dir`."""

    def __init__(
        self,
        output_dir: Path,
        compression: int = zipfile.ZIP_DEFLATED,
        lock_probe: Callable[[Path], LockState] = probe_lock,
    ):
        self.output_dir = output_dir
        self.compression = compression
        self.lock_probe = lock_probe

    def archive_path(self, key: str) -> Path:
        # Never overwrite an earlier archive of the same month.
        return unique_path(self.output_dir / f"{key}.zip")

    def _add_one(self, zf: zipfile.ZipFile, rec: LogFile) -> None:
        state = self.lock_probe(rec.path)
        if state is LockState.LOCKED:
            raise FileLockedError(f"{rec.name} is in use by another process")
        if state is LockState.ERROR:
            raise LockCheckFailedError(f"{rec.name} could not be checked for locks")
        zf.write(rec.path, arcname=rec.name)

    def _write(self, artifact: ArchiveArtifact, group: MonthGroup) -> None:
        # Logs touched before 1980 are stored with a 1980-01-01 date.
        with zipfile.ZipFile(
            artifact.path, "w", self.compression, strict_timestamps=False
        ) as zf:
            for rec in group.files:
                try:
                    self._add_one(zf, rec)
                except FileLockedError as e:
                    artifact.skipped.append(rec)
                    logger.warning("Skipped %s: %s", rec.name, e)
                    continue
                except LockCheckFailedError as e:
                    artifact.unchecked.append(rec)
                    logger.warning("Left %s in place: %s", rec.name, e)
                    continue
                except (OSError, ValueError) as e:
                    artifact.errors.append(f"{rec.name}: {e}")
                    logger.error("Failed to add %s to %s: %s", rec.name, artifact.path.name, e)
                    continue
                artifact.added.append(rec)
                logger.info("Added %s to %s", rec.name, artifact.path.name)

    def archive(self, group: MonthGroup) -> ArchiveArtifact:
        artifact = ArchiveArtifact(
            key=group.key, path=self.archive_path(group.key), sources=group.files
        )

        try:
            self._write(artifact, group)
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            artifact.errors.append(f"{artifact.path.name}: {e}")
            logger.error("Could not write archive %s: %s", artifact.path, e)
        except BaseException:
            self._discard(artifact.path)
            raise

        if artifact.errors:
            artifact.fail(f"{len(artifact.errors)} error(s) while writing archive")
        elif not artifact.added:
            artifact.fail("no files were added")
        else:
            artifact.status = ArchiveStatus.COMPLETE

        if artifact.status is ArchiveStatus.FAILED:
            self._discard(artifact.path)
        return artifact

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove incomplete archive %s: %s", path, e)
