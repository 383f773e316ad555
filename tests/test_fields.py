from __future__ import annotations

import math

import pytest

from status_timeline.config import RecordsConfig
from status_timeline.preprocess.fields import (
    FieldStrategy,
    build_record_fields,
    first_value,
    matches_discriminator,
    parse_status_code,
    record_id,
)


def test_field_strategy_walks_nested_mappings() -> None:
    strategy = FieldStrategy(name="raw.app", path=("raw", "app"))

    assert strategy.extract({"raw": {"app": "HTTP-App"}}) == "HTTP-App"
    assert strategy.extract({"raw": {}}) is None
    assert strategy.extract({"raw": "not a mapping"}) is None
    assert strategy.extract({}) is None
    assert strategy.extract(None) is None
    assert strategy.extract(["raw"]) is None


def test_first_value_skips_missing_and_blank_candidates() -> None:
    strategies = [
        FieldStrategy(name="record.timestamp", path=("timestamp",)),
        FieldStrategy(name="record._time", path=("_time",)),
        FieldStrategy(name="raw.time", path=("raw", "time")),
    ]
    record = {"timestamp": "   ", "_time": None, "raw": {"time": "2024-01-10T00:00:00Z"}}

    assert first_value(record, strategies) == "2024-01-10T00:00:00Z"
    assert first_value({}, strategies) is None


def test_build_record_fields_orders_timestamp_strategies_by_priority() -> None:
    fields = build_record_fields(RecordsConfig())

    assert [strategy.name for strategy in fields.timestamps] == [
        "record.timestamp",
        "record.createdDateTime",
        "record._time",
        "raw.timestamp",
        "raw.time",
    ]
    assert fields.discriminator.path == ("raw", "app")
    assert fields.status_code.path == ("raw", "http_status_code")


def test_build_record_fields_respects_custom_names() -> None:
    fields = build_record_fields(
        RecordsConfig(
            payload_field="payload",
            discriminator_field="source",
            discriminator_value="nginx",
            status_code_field="status",
            timestamp_fields=["ts"],
            payload_timestamp_fields=[],
        )
    )
    record = {"ts": "2024-01-10", "payload": {"source": "nginx", "status": 502}}

    assert matches_discriminator(record, fields)
    assert fields.status_code.extract(record) == 502
    assert [strategy.name for strategy in fields.timestamps] == ["record.ts"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (200, 200),
        (404.0, 404),
        ("503", 503),
        (" 301 ", 301),
        (100, 100),
        (599, 599),
        (404.5, 404.5),
        ("200.7", 200.7),
        (599.9, 599.9),
    ],
)
def test_parse_status_code_accepts_numeric_values_in_range(value: object, expected: float) -> None:
    assert parse_status_code(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, True, False, "abc", "", 99, 600, 700, -1, 99.9, math.nan, math.inf, [200], {"c": 1}],
)
def test_parse_status_code_rejects_invalid_values(value: object) -> None:
    assert parse_status_code(value) is None


def test_matches_discriminator_requires_exact_value() -> None:
    fields = build_record_fields(RecordsConfig())

    assert matches_discriminator({"raw": {"app": "HTTP-App"}}, fields)
    assert not matches_discriminator({"raw": {"app": "http-app"}}, fields)
    assert not matches_discriminator({"app": "HTTP-App"}, fields)


def test_record_id_stringifies_identifier() -> None:
    assert record_id({"id": 7}) == "7"
    assert record_id({"id": "abc"}) == "abc"
    assert record_id({}) == ""
    assert record_id("not a record") == ""
