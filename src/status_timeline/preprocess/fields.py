"""Named field lookups over heterogeneous log record shapes.

Records arrive from mixed sources, so every field the aggregator needs is read
through an explicit, ordered list of ``FieldStrategy`` objects instead of ad-hoc
attribute probing. A strategy either yields a value or ``None``; it never raises
for a missing key or an unexpected intermediate type.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Mapping

from status_timeline.config import RecordsConfig

LogRecord = Mapping[str, Any]
# Integral codes are ints; a finite non-integral code such as 404.5 stays a float.
StatusCode = int | float

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 600


@dataclass(frozen=True)
class FieldStrategy:
    name: str
    path: tuple[str, ...]

    def extract(self, record: Any) -> Any:
        current = record
        for key in self.path:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
            if current is None:
                return None
        return current


@dataclass(frozen=True)
class RecordFields:
    discriminator: FieldStrategy
    discriminator_value: str
    status_code: FieldStrategy
    timestamps: tuple[FieldStrategy, ...]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_value(record: Any, strategies: Iterable[FieldStrategy]) -> Any:
    for strategy in strategies:
        value = strategy.extract(record)
        if not _is_empty(value):
            return value
    return None


def build_record_fields(config: RecordsConfig) -> RecordFields:
    payload = config.payload_field
    primary = tuple(
        FieldStrategy(name=f"record.{field}", path=(field,)) for field in config.timestamp_fields
    )
    fallbacks = tuple(
        FieldStrategy(name=f"{payload}.{field}", path=(payload, field))
        for field in config.payload_timestamp_fields
    )
    return RecordFields(
        discriminator=FieldStrategy(
            name=f"{payload}.{config.discriminator_field}",
            path=(payload, config.discriminator_field),
        ),
        discriminator_value=config.discriminator_value,
        status_code=FieldStrategy(
            name=f"{payload}.{config.status_code_field}",
            path=(payload, config.status_code_field),
        ),
        timestamps=primary + fallbacks,
    )


def parse_status_code(value: Any) -> StatusCode | None:
    """Return a finite status code in [100, 600), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    elif isinstance(value, Real):
        number = float(value)
    else:
        return None
    if not math.isfinite(number):
        return None
    if number < MIN_STATUS_CODE or number >= MAX_STATUS_CODE:
        return None
    return int(number) if number.is_integer() else number


def matches_discriminator(record: Any, fields: RecordFields) -> bool:
    return fields.discriminator.extract(record) == fields.discriminator_value


def record_id(record: Any) -> str:
    value = record.get("id") if isinstance(record, Mapping) else None
    return "" if value is None else str(value)
