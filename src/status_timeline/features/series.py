from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

from status_timeline.features.aggregates import Bucket
from status_timeline.preprocess.fields import StatusCode

ONE_DAY = pd.Timedelta(days=1)
# 0.6 of a day, shared by all codes around each day boundary.
JITTER_SPAN = pd.Timedelta(hours=14, minutes=24)


@dataclass(frozen=True)
class SeriesPoint:
    date: pd.Timestamp
    count: int


Series = tuple[SeriesPoint, ...]


def code_offsets(code_set: Sequence[StatusCode]) -> dict[StatusCode, pd.Timedelta]:
    """Fixed horizontal shift per status code, spread symmetrically over 0.6 days.

    Offsets depend only on each code's rank in ascending order, so they are
    strictly increasing and never shared between two codes.
    """
    ordered = sorted(code_set)
    n = len(ordered)
    if n <= 1:
        return {code: pd.Timedelta(0) for code in ordered}
    center = (n - 1) / 2
    return {
        code: pd.Timedelta(round(JITTER_SPAN.value * (rank - center) / (n + 1)), unit="ns")
        for rank, code in enumerate(ordered)
    }


def build_series(
    buckets: Sequence[Bucket], code_set: Sequence[StatusCode]
) -> dict[StatusCode, Series]:
    offsets = code_offsets(code_set)
    series: dict[StatusCode, Series] = {}
    for code in sorted(code_set):
        offset = offsets[code]
        series[code] = tuple(
            SeriesPoint(date=bucket.date + offset, count=bucket.count(code)) for bucket in buckets
        )
    return series


def _coerce_query(query: pd.Timestamp | datetime | str, tz: Any) -> pd.Timestamp:
    instant = pd.Timestamp(query)
    if instant.tzinfo is None:
        return instant.tz_localize(tz, nonexistent="shift_forward", ambiguous=True)
    return instant.tz_convert(tz)


class BucketLocator:
    """Nearest-bucket index for repeated pointer queries over one bucket list."""

    def __init__(self, buckets: Sequence[Bucket]) -> None:
        self.buckets: tuple[Bucket, ...] = tuple(buckets)
        self._tz = self.buckets[0].date.tz if self.buckets else None
        self._values = np.array([bucket.date.value for bucket in self.buckets], dtype=np.int64)

    def __len__(self) -> int:
        return len(self.buckets)

    def locate(self, query: pd.Timestamp | datetime | str) -> Bucket | None:
        if not self.buckets:
            return None
        value = _coerce_query(query, self._tz).value
        insertion = int(np.searchsorted(self._values, value, side="left"))
        if insertion <= 0:
            return self.buckets[0]
        if insertion >= len(self._values):
            return self.buckets[-1]
        before = value - int(self._values[insertion - 1])
        after = int(self._values[insertion]) - value
        # Equal distances resolve to the earlier bucket.
        return self.buckets[insertion - 1 if before <= after else insertion]


def locate(
    buckets: Sequence[Bucket],
    query: pd.Timestamp | datetime | str,
) -> Bucket | None:
    """Return the bucket whose date is nearest to ``query``.

    ``buckets`` must be sorted by date. Exact ties go to the earlier bucket. Build
    a ``BucketLocator`` once instead when answering many queries.
    """
    return BucketLocator(buckets).locate(query)


def series_table(
    series: Mapping[StatusCode, Series], buckets: Sequence[Bucket]
) -> pd.DataFrame:
    rows = [
        {
            "status_code": code,
            "date": bucket.date,
            "plotted_at": point.date,
            "count": point.count,
        }
        for code, points in series.items()
        for bucket, point in zip(buckets, points)
    ]
    return pd.DataFrame(rows, columns=["status_code", "date", "plotted_at", "count"])
