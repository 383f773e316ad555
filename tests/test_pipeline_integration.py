from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from status_timeline.config import AppConfig
from status_timeline.io.read import load_table
from status_timeline.pipeline.run_all import run_all
from status_timeline.pipeline.timeline import build_timeline, timeline_summary


def _http_line(record_id: str, code: object, **fields: str) -> dict[str, object]:
    return {"id": record_id, "app": "HTTP-App", "http_status_code": code, **fields}


def _write_sample_logs(path: Path) -> Path:
    lines = [
        _http_line("r1", 200, timestamp="2024-01-10T08:00:00Z"),
        _http_line("r2", 200, timestamp="2024-01-10T09:00:00Z"),
        _http_line("r3", 404, time="2024-01-10T17:30:00Z"),
        _http_line("r4", 500, _time="2024-01-13T02:00:00Z"),
        {"id": "r5", "app": "Auth-App", "status": "ok", "timestamp": "2024-01-11T02:00:00Z"},
        _http_line("r6", 700, timestamp="2024-01-12T02:00:00Z"),
    ]
    path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")
    return path


def _csv_config() -> AppConfig:
    return AppConfig.model_validate({"outputs": {"tables_format": "csv"}})


def test_run_all_writes_tables_summary_and_figure(tmp_path: Path) -> None:
    logs_path = _write_sample_logs(tmp_path / "logs.ndjson")
    out_dir = tmp_path / "out"

    outputs = run_all(input_path=logs_path, out_dir=out_dir, config=_csv_config())

    assert set(outputs) == {"daily_buckets", "status_series", "summary", "figure"}
    assert all(path.exists() for path in outputs.values())
    assert outputs["figure"] == out_dir / "figures" / "status_codes_per_day.png"

    daily = load_table(outputs["daily_buckets"])
    assert daily["total"].tolist() == [3, 0, 0, 1]
    assert daily["n_200"].tolist() == [2, 0, 0, 0]
    assert daily["n_500"].tolist() == [0, 0, 0, 1]

    series = load_table(outputs["status_series"])
    assert len(series) == 3 * 4
    assert series.groupby("status_code")["count"].sum().to_dict() == {200: 2, 404: 1, 500: 1}

    summary = json.loads(outputs["summary"].read_text(encoding="utf-8"))
    assert summary["has_data"] is True
    assert summary["grand_total"] == 4
    assert summary["global_max_bucket_total"] == 3
    assert summary["bucket_count"] == 4
    assert summary["first_day"] == "2024-01-10T00:00:00+00:00"
    assert summary["last_day"] == "2024-01-13T00:00:00+00:00"
    assert summary["records_seen"] == 6
    assert summary["records_skipped"] == 2
    assert [entry["status_code"] for entry in summary["status_codes"]] == [200, 404, 500]
    assert summary["status_codes"][1]["phrase"] == "Not Found"


def test_run_all_with_parquet_tables(tmp_path: Path) -> None:
    logs_path = _write_sample_logs(tmp_path / "logs.ndjson")

    outputs = run_all(input_path=logs_path, out_dir=tmp_path / "out", config=AppConfig())

    daily = load_table(outputs["daily_buckets"])
    assert outputs["daily_buckets"].suffix == ".parquet"
    assert daily["date"].dt.tz is not None
    assert daily["total"].tolist() == [3, 0, 0, 1]


def test_run_all_without_qualifying_records_reports_no_data(tmp_path: Path) -> None:
    logs_path = tmp_path / "logs.ndjson"
    logs_path.write_text('{"id": "x", "app": "DNS"}\n', encoding="utf-8")

    outputs = run_all(input_path=logs_path, out_dir=tmp_path / "out", config=_csv_config())

    summary = json.loads(outputs["summary"].read_text(encoding="utf-8"))
    assert summary["has_data"] is False
    assert summary["grand_total"] == 0
    assert summary["status_codes"] == []
    assert summary["first_day"] is None
    assert outputs["figure"].exists()


def test_build_timeline_bundles_series_and_locator() -> None:
    records = [
        {"id": "a", "raw": _http_line("a", 503, timestamp="2024-01-10T01:00:00Z")},
        {"id": "b", "raw": _http_line("b", 200, timestamp="2024-01-12T01:00:00Z")},
    ]

    timeline = build_timeline(records)

    assert list(timeline.series) == [200, 503]
    assert len(timeline.locator) == 3
    found = timeline.locator.locate(pd.Timestamp("2024-01-11T23:00:00", tz="UTC"))
    assert found is timeline.result.buckets[2]
    assert timeline_summary(timeline)["bucket_count"] == 3
