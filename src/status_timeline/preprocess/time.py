from __future__ import annotations

import math
from datetime import datetime
from numbers import Real
from typing import Any, Iterable

import pandas as pd

from status_timeline.preprocess.fields import FieldStrategy

# pandas resolves these against the current clock.
_RELATIVE_KEYWORDS = frozenset({"now", "today"})


def _localize_wall_time(naive: pd.Timestamp, tz: Any) -> pd.Timestamp:
    # Wall times skipped or repeated by a DST change resolve to the first valid
    # instant on or after them.
    return naive.tz_localize(tz, nonexistent="shift_forward", ambiguous=True)


def parse_instant(value: Any, timezone_name: str) -> pd.Timestamp | None:
    """Parse a timestamp-like value into an aware instant in ``timezone_name``.

    Strings are parsed by pandas, numbers are treated as epoch milliseconds, and
    naive values are read as wall time in the reporting timezone. Anything that
    does not resolve to a finite instant returns ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (pd.Timestamp, datetime)):
            parsed = pd.Timestamp(value)
        elif isinstance(value, str):
            text = value.strip()
            if not text or text.lower() in _RELATIVE_KEYWORDS:
                return None
            parsed = pd.to_datetime(text, errors="coerce")
        elif isinstance(value, Real):
            if not math.isfinite(float(value)):
                return None
            parsed = pd.to_datetime(float(value), unit="ms", utc=True, errors="coerce")
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None

    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is None:
        localized = _localize_wall_time(parsed, timezone_name)
    else:
        localized = parsed.tz_convert(timezone_name)
    if pd.isna(localized):
        return None
    return localized


def resolve_timestamp(
    record: Any,
    strategies: Iterable[FieldStrategy],
    timezone_name: str,
) -> pd.Timestamp | None:
    """Return the first candidate field value that parses to an instant."""
    for strategy in strategies:
        instant = parse_instant(strategy.extract(record), timezone_name)
        if instant is not None:
            return instant
    return None


def floor_to_day(instant: pd.Timestamp) -> pd.Timestamp:
    naive_midnight = instant.tz_localize(None).normalize()
    return _localize_wall_time(naive_midnight, instant.tz)


def day_range(first_day: pd.Timestamp, last_day: pd.Timestamp) -> list[pd.Timestamp]:
    """Every calendar day from ``first_day`` to ``last_day`` inclusive.

    Days are stepped on the wall clock, so a 23 or 25 hour day around a DST
    change still contributes exactly one boundary.
    """
    tz = first_day.tz
    wall_days = pd.date_range(
        start=first_day.tz_localize(None).normalize(),
        end=last_day.tz_convert(tz).tz_localize(None).normalize(),
        freq="D",
    )
    return [_localize_wall_time(day, tz) for day in wall_days]
