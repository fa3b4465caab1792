from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class ArchiveStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


class LockState(str, Enum):
    OPEN = "open"
    LOCKED = "locked"   # held by another process
    ERROR = "error"     # any other I/O failure while probing


class GroupState(str, Enum):
    SCANNED = "scanned"
    ARCHIVING = "archiving"
    VERIFYING = "verifying"
    RELOCATING = "relocating"
    DELETING = "deleting"
    DONE = "done"
    FAILED = "failed"
    PLANNED = "planned"  # dry-run


@dataclass(frozen=True)
class LogFile:
    path: Path
    name: str
    size: int
    created: float   # epoch seconds
    modified: float  # epoch seconds


@dataclass(frozen=True)
class MonthGroup:
    key: str  # "YYYY-MM" of the last-modified time
    files: Tuple[LogFile, ...]


@dataclass
class ArchiveArtifact:
    """One month's zip and what went into it."""
    key: str
    path: Path
    sources: Tuple[LogFile, ...]
    added: List[LogFile] = field(default_factory=list)
    skipped: List[LogFile] = field(default_factory=list)  # locked, retried next run
    unchecked: List[LogFile] = field(default_factory=list)  # lock probe failed, left in place
    errors: List[str] = field(default_factory=list)
    status: ArchiveStatus = ArchiveStatus.PENDING
    location: Optional[Path] = None
    reason: str = ""

    def __post_init__(self):
        if self.location is None:
            self.location = self.path

    @property
    def is_complete(self) -> bool:
        return self.status is ArchiveStatus.COMPLETE

    def fail(self, reason: str) -> None:
        self.status = ArchiveStatus.FAILED
        self.reason = reason


@dataclass
class GroupOutcome:
    key: str
    state: GroupState = GroupState.SCANNED
    artifact: Optional[ArchiveArtifact] = None
    deleted: List[Path] = field(default_factory=list)
    relocation_error: str = ""
    error: str = ""


@dataclass
class RunSummary:
    candidates: int = 0
    outcomes: List[GroupOutcome] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return sum(len(o.deleted) for o in self.outcomes)

    @property
    def archives(self) -> List[Path]:
        return [
            o.artifact.location for o in self.outcomes
            if o.artifact is not None and o.artifact.is_complete
        ]

    @property
    def failed_groups(self) -> List[str]:
        return [o.key for o in self.outcomes if o.state is GroupState.FAILED]
