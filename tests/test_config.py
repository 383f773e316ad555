from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from status_timeline.config import AppConfig, load_config


def _write_config(tmp_path: Path, data: dict) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return config_path


def test_default_config_file_matches_model_defaults(monkeypatch) -> None:
    monkeypatch.delenv("STATUS_TIMELINE_TIMEZONE", raising=False)
    workspace = Path(__file__).resolve().parents[1]

    cfg = load_config(workspace / "configs" / "default.yaml")

    assert cfg == AppConfig()


def test_load_config_accepts_empty_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("STATUS_TIMELINE_TIMEZONE", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.records.discriminator_value == "HTTP-App"
    assert cfg.time.timezone == "UTC"
    assert cfg.chart.zoom == 1.0


def test_load_config_applies_env_timezone_override(monkeypatch, tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, {"time": {"timezone": "UTC"}})
    monkeypatch.setenv("STATUS_TIMELINE_TIMEZONE", "Europe/Berlin")

    cfg = load_config(config_path)

    assert cfg.time.timezone == "Europe/Berlin"


def test_load_config_rejects_unknown_sections(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, {"report": {"enabled": True}})

    with pytest.raises(ValidationError):
        load_config(config_path)


def test_unknown_timezone_is_rejected() -> None:
    with pytest.raises(ValidationError, match="unknown timezone"):
        AppConfig.model_validate({"time": {"timezone": "Mars/Olympus_Mons"}})


@pytest.mark.parametrize("zoom", [0.5, 10.5])
def test_zoom_must_stay_within_bounds(zoom: float) -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"chart": {"zoom": zoom}})


def test_tables_format_is_restricted() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"outputs": {"tables_format": "xlsx"}})
