from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import pandas as pd

from status_timeline.config import AppConfig
from status_timeline.preprocess.fields import (
    LogRecord,
    RecordFields,
    StatusCode,
    build_record_fields,
    matches_discriminator,
    parse_status_code,
)
from status_timeline.preprocess.time import day_range, floor_to_day, resolve_timestamp

LOGGER = logging.getLogger(__name__)

_EMPTY_GROUPS: Mapping[StatusCode, tuple[LogRecord, ...]] = MappingProxyType({})


@dataclass(frozen=True)
class Bucket:
    """Qualifying records for one calendar day, grouped by status code."""

    date: pd.Timestamp
    total: int = 0
    per_code: Mapping[StatusCode, tuple[LogRecord, ...]] = field(
        default_factory=lambda: _EMPTY_GROUPS
    )

    def __post_init__(self) -> None:
        grouped = sum(len(group) for group in self.per_code.values())
        if grouped != self.total:
            raise ValueError(
                f"bucket {self.date} total {self.total} does not match grouped count {grouped}"
            )

    def count(self, code: StatusCode) -> int:
        return len(self.per_code.get(code, ()))


@dataclass(frozen=True)
class AggregateResult:
    buckets: tuple[Bucket, ...]
    code_set: tuple[StatusCode, ...]
    per_code_totals: Mapping[StatusCode, int]
    grand_total: int
    global_max_bucket_total: int
    records_seen: int = 0
    records_skipped: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.buckets


def _qualify(
    record: Any,
    fields: RecordFields,
    timezone_name: str,
) -> tuple[StatusCode, pd.Timestamp] | None:
    if not matches_discriminator(record, fields):
        return None
    code = parse_status_code(fields.status_code.extract(record))
    if code is None:
        return None
    instant = resolve_timestamp(record, fields.timestamps, timezone_name)
    if instant is None:
        return None
    return code, floor_to_day(instant)


def aggregate(records: Iterable[LogRecord], config: AppConfig | None = None) -> AggregateResult:
    """Bucket qualifying HTTP records into dense per-day, per-status-code counts.

    A record qualifies when its discriminator matches, its status code is an
    integer in [100, 600), and one of its timestamp fields parses. Everything
    else is counted as skipped. Every day between the first and last observed
    day gets a bucket, empty or not.
    """
    cfg = config or AppConfig()
    fields = build_record_fields(cfg.records)
    timezone_name = cfg.time.timezone

    groups_by_day: dict[pd.Timestamp, dict[StatusCode, list[LogRecord]]] = {}
    per_code_totals: dict[StatusCode, int] = {}
    seen = 0
    skipped = 0

    for record in records or ():
        seen += 1
        try:
            qualified = _qualify(record, fields, timezone_name)
        except Exception:
            LOGGER.debug("Record could not be inspected; treating as non-qualifying", exc_info=True)
            qualified = None
        if qualified is None:
            skipped += 1
            continue
        code, day = qualified
        groups_by_day.setdefault(day, {}).setdefault(code, []).append(record)
        per_code_totals[code] = per_code_totals.get(code, 0) + 1

    if skipped:
        LOGGER.debug("Skipped %d of %d records that did not qualify", skipped, seen)

    if not groups_by_day:
        return AggregateResult(
            buckets=(),
            code_set=(),
            per_code_totals=MappingProxyType({}),
            grand_total=0,
            global_max_bucket_total=0,
            records_seen=seen,
            records_skipped=skipped,
        )

    buckets: list[Bucket] = []
    for day in day_range(min(groups_by_day), max(groups_by_day)):
        groups = groups_by_day.get(day)
        if not groups:
            buckets.append(Bucket(date=day))
            continue
        frozen = {code: tuple(group) for code, group in groups.items()}
        buckets.append(
            Bucket(
                date=day,
                total=sum(len(group) for group in frozen.values()),
                per_code=MappingProxyType(frozen),
            )
        )

    code_set = tuple(sorted(per_code_totals))
    return AggregateResult(
        buckets=tuple(buckets),
        code_set=code_set,
        per_code_totals=MappingProxyType({code: per_code_totals[code] for code in code_set}),
        grand_total=sum(per_code_totals.values()),
        global_max_bucket_total=max(bucket.total for bucket in buckets),
        records_seen=seen,
        records_skipped=skipped,
    )


def bucket_table(result: AggregateResult) -> pd.DataFrame:
    code_columns = [f"n_{code}" for code in result.code_set]
    rows = [
        {
            "date": bucket.date,
            "total": bucket.total,
            **{f"n_{code}": bucket.count(code) for code in result.code_set},
        }
        for bucket in result.buckets
    ]
    return pd.DataFrame(rows, columns=["date", "total", *code_columns])
