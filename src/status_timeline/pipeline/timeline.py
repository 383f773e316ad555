from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from status_timeline.config import AppConfig
from status_timeline.features.aggregates import AggregateResult, aggregate
from status_timeline.features.series import BucketLocator, Series, build_series
from status_timeline.http_status import status_info
from status_timeline.preprocess.fields import LogRecord, StatusCode


@dataclass(frozen=True)
class Timeline:
    """Everything a renderer needs for one snapshot of the record collection."""

    result: AggregateResult
    series: Mapping[StatusCode, Series]
    locator: BucketLocator


def build_timeline(records: Iterable[LogRecord], config: AppConfig | None = None) -> Timeline:
    result = aggregate(records, config)
    return Timeline(
        result=result,
        series=build_series(result.buckets, result.code_set),
        locator=BucketLocator(result.buckets),
    )


def timeline_summary(timeline: Timeline) -> dict[str, Any]:
    result = timeline.result
    codes = []
    for code in result.code_set:
        info = status_info(code)
        codes.append(
            {
                "status_code": code,
                "phrase": info.phrase,
                "category": info.category,
                "total": result.per_code_totals[code],
            }
        )
    return {
        "has_data": not result.is_empty,
        "status_codes": codes,
        "grand_total": result.grand_total,
        "global_max_bucket_total": result.global_max_bucket_total,
        "bucket_count": len(result.buckets),
        "first_day": result.buckets[0].date.isoformat() if result.buckets else None,
        "last_day": result.buckets[-1].date.isoformat() if result.buckets else None,
        "records_seen": result.records_seen,
        "records_skipped": result.records_skipped,
    }
