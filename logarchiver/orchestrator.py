import logging
from typing import List, Optional

from .archiver import ZipArchiver
from .config import RunConfig
from .errors import ArchiveIncompleteError, ArchiverError, RelocationFailedError
from .grouper import MonthGrouper
from .models import GroupOutcome, GroupState, LockState, MonthGroup, RunSummary
from .relocator import Relocator
from .scanner import LogScanner
from .verifier import ArchiveVerifier, require_complete

logger = logging.getLogger(__name__)


class CleanupOrchestrator:
    """
    Runs scan -> group -> archive -> verify -> relocate -> delete.

    Each month-group is its own failure domain. Originals are deleted only
    after the group's archive verified, and only the files that actually
    went into it.
    """

    def __init__(
        self,
        config: RunConfig,
        scanner: Optional[LogScanner] = None,
        grouper: Optional[MonthGrouper] = None,
        archiver: Optional[ZipArchiver] = None,
        verifier: Optional[ArchiveVerifier] = None,
        relocator: Optional[Relocator] = None,
    ):
        self.config = config
        self.scanner = scanner or LogScanner(config)
        self.grouper = grouper or MonthGrouper()
        self.archiver = archiver or ZipArchiver(config.source_dir)
        self.verifier = verifier or ArchiveVerifier()
        self.relocator = relocator or Relocator(config.destination)

    def run(self) -> RunSummary:
        # PathNotFoundError from the scan is the only run-fatal error.
        files = self.scanner.scan()
        summary = RunSummary(candidates=len(files))
        logger.info(
            "Found %d candidate file(s) in %s created before %s",
            len(files), self.config.source_dir, self.config.cutoff.strftime("%Y-%m-%d %H:%M"),
        )

        groups = self.grouper.group(files)
        for group in groups:
            if self.config.dry_run:
                outcome = self.plan_group(group)
            else:
                outcome = self.process_group(group)
            summary.outcomes.append(outcome)

        logger.info(
            "Processed %d group(s): %d archive(s), %d file(s) deleted, %d group(s) failed",
            len(summary.outcomes), len(summary.archives),
            summary.deleted_count, len(summary.failed_groups),
        )
        return summary

    def process_group(self, group: MonthGroup) -> GroupOutcome:
        outcome = GroupOutcome(key=group.key)
        logger.info("Group %s: %d file(s)", group.key, len(group.files))

        try:
            outcome.state = GroupState.ARCHIVING
            artifact = self.archiver.archive(group)
            outcome.artifact = artifact

            outcome.state = GroupState.VERIFYING
            self.verifier.verify(artifact)
            require_complete(artifact)

            if self.relocator.enabled:
                outcome.state = GroupState.RELOCATING
                try:
                    self.relocator.relocate(artifact)
                except RelocationFailedError as e:
                    outcome.relocation_error = str(e)
                    logger.warning("Group %s: %s (archive kept at %s)", group.key, e, artifact.location)

            outcome.state = GroupState.DELETING
            outcome.deleted = self._delete_originals(artifact.added)
            outcome.state = GroupState.DONE
        except ArchiveIncompleteError as e:
            outcome.state = GroupState.FAILED
            outcome.error = str(e)
            logger.error("Group %s: %s; originals kept", group.key, e)
        except Exception as e:
            outcome.state = GroupState.FAILED
            outcome.error = str(e)
            logger.exception("Group %s failed: %s", group.key, e)

        if outcome.artifact is not None and outcome.artifact.skipped:
            logger.info(
                "Group %s: %d locked file(s) left for the next run",
                group.key, len(outcome.artifact.skipped),
            )
        if outcome.artifact is not None and outcome.artifact.unchecked:
            logger.warning(
                "Group %s: %d file(s) could not be checked for locks and were left in place",
                group.key, len(outcome.artifact.unchecked),
            )
        logger.info("Group %s: %s", group.key, outcome.state.value)
        return outcome

    def plan_group(self, group: MonthGroup) -> GroupOutcome:
        outcome = GroupOutcome(key=group.key, state=GroupState.PLANNED)
        target = self.archiver.archive_path(group.key)
        for rec in group.files:
            try:
                state = self.archiver.lock_probe(rec.path)
            except (ArchiverError, OSError) as e:
                logger.warning("[dry run] %s: %s", rec.name, e)
                continue
            if state is LockState.OPEN:
                logger.info("[dry run] would archive %s into %s and delete it", rec.name, target.name)
            else:
                logger.info("[dry run] would skip %s (%s)", rec.name, state.value)
        return outcome

    def _delete_originals(self, files) -> List:
        deleted = []
        for rec in files:
            try:
                rec.path.unlink()
            except OSError as e:
                logger.error("Could not delete %s: %s", rec.path, e)
                continue
            deleted.append(rec.path)
            logger.info("Deleted %s", rec.name)
        return deleted
