from pathlib import Path
from typing import Optional
import logging
import shutil

from .errors import RelocationFailedError
from .models import ArchiveArtifact
from .utils import unique_path

logger = logging.getLogger(__name__)


class Relocator:
    """Moves finished archives to secondary storage, if one is configured."""

    def __init__(self, destination: Optional[Path] = None):
        self.destination = destination

    @property
    def enabled(self) -> bool:
        return self.destination is not None

    def relocate(self, artifact: ArchiveArtifact) -> Path:
        if not self.enabled:
            return artifact.location

        src = artifact.location
        try:
            self.destination.mkdir(parents=True, exist_ok=True)
            dest_file = unique_path(self.destination / src.name)
            shutil.move(str(src), str(dest_file))
        except OSError as e:
            # The archive stays where it was written.
            raise RelocationFailedError(
                f"Could not move {src.name} to {self.destination}: {e}"
            ) from e

        artifact.location = dest_file
        logger.info("Moved %s to %s", src.name, dest_file)
        return dest_file
