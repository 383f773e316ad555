from __future__ import annotations

from status_timeline.features.aggregates import Bucket
from status_timeline.preprocess.fields import record_id


def format_day(bucket: Bucket) -> str:
    return f"{bucket.date:%b} {bucket.date.day}, {bucket.date.year}"


def tooltip_lines(bucket: Bucket, preview_limit: int = 3) -> list[str]:
    lines = [f"Time: {format_day(bucket)}", f"Total: {bucket.total}"]
    for code in sorted(bucket.per_code):
        records = bucket.per_code[code]
        preview = [record_id(record) for record in records[:preview_limit]]
        hidden = len(records) - len(preview)
        if hidden > 0:
            preview.append(f"+{hidden} more")
        lines.append(f"{code}: {len(records)} [{', '.join(preview)}]")
    return lines
