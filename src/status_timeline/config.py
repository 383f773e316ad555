from __future__ import annotations

import os
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_ZOOM = 1.0
MAX_ZOOM = 10.0


class RecordsConfig(BaseModel):
    payload_field: str = "raw"
    discriminator_field: str = "app"
    discriminator_value: str = "HTTP-App"
    status_code_field: str = "http_status_code"
    timestamp_fields: list[str] = Field(
        default_factory=lambda: ["timestamp", "createdDateTime", "_time"]
    )
    payload_timestamp_fields: list[str] = Field(default_factory=lambda: ["timestamp", "time"])


class TimeConfig(BaseModel):
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value


class ChartConfig(BaseModel):
    width: int = Field(default=800, ge=1)
    height: int = Field(default=300, ge=1)
    zoom: float = Field(default=1.0, ge=MIN_ZOOM, le=MAX_ZOOM)
    tooltip_preview_ids: int = Field(default=3, ge=0)


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"
    figures_format: str = "png"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    records: RecordsConfig = Field(default_factory=RecordsConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
TIMEZONE_ENV_VAR = "STATUS_TIMELINE_TIMEZONE"


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    timezone_override = os.getenv(TIMEZONE_ENV_VAR)
    if timezone_override:
        data["time"] = {**(data.get("time") or {}), "timezone": timezone_override}
    return AppConfig.model_validate(data)
