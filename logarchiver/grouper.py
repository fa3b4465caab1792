import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List

from .errors import InvalidTimestampError
from .models import LogFile, MonthGroup

logger = logging.getLogger(__name__)


def month_key(rec: LogFile) -> str:
    """Year-month of the last-modified time, e.g. "2024-03"."""
    try:
        return datetime.fromtimestamp(rec.modified).strftime("%Y-%m")
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise InvalidTimestampError(
            f"Bad modification time for {rec.path}: {rec.modified!r}"
        ) from e


class MonthGrouper:
    """Partition LogFile records into month groups, oldest month first."""

    def group(self, files: Iterable[LogFile]) -> List[MonthGroup]:
        buckets: Dict[str, List[LogFile]] = defaultdict(list)
        for rec in files:
            try:
                key = month_key(rec)
            except InvalidTimestampError as e:
                logger.warning("Skipping file: %s", e)
                continue
            buckets[key].append(rec)

        return [
            MonthGroup(key, tuple(sorted(recs, key=lambda r: r.name)))
            for key, recs in sorted(buckets.items())
        ]
