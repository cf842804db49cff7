from collections import Counter
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional

from .. import config
from ..schemas import TrendBucket


def _as_aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def bucket_by_day(
    timestamps: Iterable[datetime],
    since: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[TrendBucket]:
    """
    Count timestamps per calendar day in the reporting timezone.

    Days without events are left out, so the result is sparse. Buckets come
    back sorted by (year, month, day), each day appearing once. Timestamps
    earlier than ``since`` are ignored.
    """
    tz = tz or config.get_reporting_tz()
    cutoff = _as_aware(since) if since is not None else None

    counts = Counter()
    for ts in timestamps:
        if ts is None:
            continue
        ts = _as_aware(ts)
        if cutoff is not None and ts < cutoff:
            continue
        local = ts.astimezone(tz)
        counts[(local.year, local.month, local.day)] += 1

    return [
        TrendBucket(year=year, month=month, day=day, count=count)
        for (year, month, day), count in sorted(counts.items())
    ]
