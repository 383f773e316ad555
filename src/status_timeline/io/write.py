from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd


def _isoformat_datetimes(df: pd.DataFrame) -> pd.DataFrame:
    working = df.copy()
    for column in working.columns:
        if pd.api.types.is_datetime64_any_dtype(working[column]):
            working[column] = working[column].map(
                lambda value: value.isoformat() if pd.notna(value) else None
            )
    return working


def write_table(df: pd.DataFrame, path: Path, fmt: str = "parquet") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
    elif fmt == "csv":
        # Keep the UTC offset of each day boundary in the text output.
        _isoformat_datetimes(df).to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported table format: {fmt}")
    return path


def _json_default(value: Any) -> Any:
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, pd.Timedelta):
        return value.total_seconds()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=True, default=_json_default),
        encoding="utf-8",
    )
    return path
