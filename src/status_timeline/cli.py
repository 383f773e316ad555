from __future__ import annotations

from pathlib import Path

import pandas as pd
import typer

from status_timeline.config import DEFAULT_CONFIG_PATH, MAX_ZOOM, MIN_ZOOM, AppConfig, load_config
from status_timeline.http_status import legend_label
from status_timeline.io.read import load_log_records
from status_timeline.logging import configure_logging
from status_timeline.pipeline.run_all import run_all
from status_timeline.pipeline.timeline import build_timeline
from status_timeline.viz.tooltip import tooltip_lines

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _parse_query_instant(value: str) -> pd.Timestamp:
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        raise typer.BadParameter(f"Could not parse --at value: {value!r}")
    return parsed


@app.command()
def summarize(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    zoom: float | None = typer.Option(
        None,
        min=MIN_ZOOM,
        max=MAX_ZOOM,
        help="Horizontal zoom of the rendered chart (1 = fit).",
    ),
) -> None:
    """Aggregate HTTP status codes per day and write tables, summary, and chart."""
    configure_logging()
    cfg = _load_app_config(config)
    if zoom is not None:
        cfg.chart.zoom = zoom
    outputs = run_all(input_path=input_path, out_dir=out, config=cfg)
    typer.echo(f"Timeline complete. Outputs: {', '.join(sorted(outputs.keys()))}")


@app.command()
def locate(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    at: str = typer.Option(..., help="Instant to look up, e.g. 2024-01-11T18:00."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print the day nearest to --at with its per-code breakdown."""
    configure_logging()
    cfg = _load_app_config(config)
    query = _parse_query_instant(at)
    timeline = build_timeline(load_log_records(input_path), cfg)
    bucket = timeline.locator.locate(query)
    if bucket is None:
        typer.echo("No data")
        return
    for line in tooltip_lines(bucket, preview_limit=cfg.chart.tooltip_preview_ids):
        typer.echo(line)


@app.command()
def codes(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """List observed status codes with reason phrase, category, and totals."""
    configure_logging()
    cfg = _load_app_config(config)
    result = build_timeline(load_log_records(input_path), cfg).result
    if result.is_empty:
        typer.echo("No data")
        return
    for code in result.code_set:
        typer.echo(legend_label(code, result.per_code_totals[code]))


if __name__ == "__main__":
    app()
