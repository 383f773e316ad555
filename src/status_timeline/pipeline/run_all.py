from __future__ import annotations

import logging
from pathlib import Path

from status_timeline.config import AppConfig
from status_timeline.features.aggregates import bucket_table
from status_timeline.features.series import series_table
from status_timeline.io.read import load_log_records
from status_timeline.io.write import write_summary, write_table
from status_timeline.paths import build_output_paths
from status_timeline.pipeline.timeline import Timeline, build_timeline, timeline_summary
from status_timeline.viz.time_series import plot_status_series
from status_timeline.viz.viewport import Viewport

LOGGER = logging.getLogger(__name__)


def _render_figure(timeline: Timeline, output_path: Path, config: AppConfig) -> Path | None:
    viewport = Viewport(
        width=config.chart.width,
        height=config.chart.height,
        zoom=config.chart.zoom,
    )
    try:
        return plot_status_series(
            result=timeline.result,
            series=timeline.series,
            viewport=viewport,
            output_path=output_path,
        )
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering status code figure")
        return None


def run_all(input_path: Path, out_dir: Path, config: AppConfig) -> dict[str, Path]:
    """Load a log export, build the per-day status timeline, and write its artifacts."""
    paths = build_output_paths(out_dir)
    timeline = build_timeline(load_log_records(input_path), config)
    result = timeline.result
    if result.is_empty:
        LOGGER.info("No qualifying HTTP records in %s", input_path)

    fmt = config.outputs.tables_format
    outputs: dict[str, Path] = {
        "daily_buckets": write_table(
            bucket_table(result), paths.tables / f"daily_buckets.{fmt}", fmt=fmt
        ),
        "status_series": write_table(
            series_table(timeline.series, result.buckets),
            paths.tables / f"status_series.{fmt}",
            fmt=fmt,
        ),
        "summary": write_summary(
            timeline_summary(timeline), paths.summary / "timeline_summary.json"
        ),
    }

    figure_path = _render_figure(
        timeline,
        paths.figures / f"status_codes_per_day.{config.outputs.figures_format}",
        config,
    )
    if figure_path is not None:
        outputs["figure"] = figure_path
    return outputs
