from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from .errors import MissingArgumentError

# Simple, opinionated defaults.
DEFAULT_EXTENSION = ".log"
DEFAULT_AGE_DAYS = 7
DEFAULT_LOG_FILE = "logarchiver.log"


def normalize_extension(ext: str) -> str:
    ext = (ext or "").strip().lower()
    if not ext:
        raise MissingArgumentError("An extension filter is required")
    if not ext.startswith("."):
        # Be kind: auto-fix missing dot
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class RunConfig:
    """Everything a run needs, computed once at startup and passed explicitly."""
    source_dir: Path
    destination: Optional[Path] = None
    extension: str = DEFAULT_EXTENSION
    age_days: int = DEFAULT_AGE_DAYS
    now: datetime = field(default_factory=datetime.now)
    dry_run: bool = False
    log_file: Optional[Path] = None

    @property
    def cutoff(self) -> datetime:
        """Files created strictly before this are candidates."""
        return self.now - timedelta(days=self.age_days)

    @classmethod
    def build(
        cls,
        source: Union[str, Path, None],
        destination: Union[str, Path, None] = None,
        extension: str = DEFAULT_EXTENSION,
        age_days: int = DEFAULT_AGE_DAYS,
        now: Optional[datetime] = None,
        dry_run: bool = False,
        log_file: Union[str, Path, None] = None,
    ) -> "RunConfig":
        if source is None or str(source).strip() == "":
            raise MissingArgumentError("Source directory is required")
        if age_days < 0:
            raise ValueError(f"age_days must not be negative: {age_days}")

        dest_path = None
        if destination is not None and str(destination).strip():
            dest_path = Path(destination).expanduser().absolute()

        return cls(
            source_dir=Path(source).expanduser().absolute(),
            destination=dest_path,
            extension=normalize_extension(extension),
            age_days=age_days,
            now=now or datetime.now(),
            dry_run=dry_run,
            log_file=Path(log_file).expanduser().absolute() if log_file else None,
        )
