from datetime import datetime
from pathlib import Path

import pytest

from logarchiver.errors import InvalidTimestampError
from logarchiver.grouper import MonthGrouper, month_key
from logarchiver.models import LogFile


def rec(name, modified, created=None):
    if created is None:
        created = modified
    return LogFile(path=Path("/logs") / name, name=name, size=1, created=created, modified=modified)


def ts(*args):
    return datetime(*args).timestamp()


def test_month_key_uses_modification_time():
    r = rec("a.log", modified=ts(2024, 3, 5), created=ts(2023, 12, 31))
    assert month_key(r) == "2024-03"


def test_groups_are_sorted_by_key():
    files = [
        rec("c.log", ts(2024, 5, 1)),
        rec("a.log", ts(2023, 11, 30, 23, 59)),
        rec("b.log", ts(2024, 5, 31)),
        rec("d.log", ts(2024, 1, 15)),
    ]
    groups = MonthGrouper().group(files)
    assert [g.key for g in groups] == ["2023-11", "2024-01", "2024-05"]
    assert [f.name for f in groups[-1].files] == ["b.log", "c.log"]


def test_empty_input():
    assert MonthGrouper().group([]) == []


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "yesterday"])
def test_invalid_timestamp(bad):
    with pytest.raises(InvalidTimestampError):
        month_key(rec("x.log", bad, created=0.0))


def test_invalid_timestamp_is_skipped_not_fatal(caplog):
    files = [rec("good.log", ts(2024, 2, 2)), rec("bad.log", float("nan"), created=0.0)]
    with caplog.at_level("WARNING", logger="logarchiver"):
        groups = MonthGrouper().group(files)
    assert [(g.key, [f.name for f in g.files]) for g in groups] == [("2024-02", ["good.log"])]
    assert "bad.log" in caplog.text
