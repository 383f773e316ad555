from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from status_timeline.preprocess.fields import LogRecord

LOGGER = logging.getLogger(__name__)

TOP_LEVEL_TIMESTAMP_FIELDS = ("timestamp", "createdDateTime", "_time")


def _record_from_object(obj: dict[str, Any], fallback_id: str) -> LogRecord:
    id_value = obj.get("id")
    record_id = (
        str(id_value)
        if isinstance(id_value, (str, int, float)) and not isinstance(id_value, bool)
        else fallback_id
    )
    record: dict[str, Any] = {"id": record_id}
    for field in TOP_LEVEL_TIMESTAMP_FIELDS:
        value = obj.get(field)
        record[field] = value if isinstance(value, str) else None
    record["raw"] = obj
    return record


def parse_log_records(content: str | None) -> list[LogRecord]:
    """Parse a JSON array of objects, falling back to NDJSON (one object per line)."""
    if not content:
        return []
    trimmed = content.strip()
    if not trimmed:
        return []

    objects: list[dict[str, Any]] = []
    try:
        parsed = json.loads(trimmed)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        objects = [item for item in parsed if isinstance(item, dict)]
    elif isinstance(parsed, dict):
        objects = [parsed]

    if not objects:
        for line_number, line in enumerate(trimmed.splitlines(), start=1):
            text = line.strip()
            if not text:
                continue
            try:
                item = json.loads(text)
            except json.JSONDecodeError:
                LOGGER.debug("Ignoring malformed log line %d", line_number)
                continue
            if isinstance(item, dict):
                objects.append(item)

    return [_record_from_object(obj, str(index)) for index, obj in enumerate(objects, start=1)]


def load_log_records(path: Path) -> list[LogRecord]:
    # utf-8-sig strips BOM-prefixed exports.
    records = parse_log_records(path.read_text(encoding="utf-8-sig"))
    LOGGER.info("Loaded %d log records from %s", len(records), path)
    return records


def load_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported table file type: {path.suffix}")
