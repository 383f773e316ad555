from __future__ import annotations

from pathlib import Path
from typing import Mapping

import matplotlib
import matplotlib.dates as mdates
import matplotlib.pyplot as plt

from status_timeline.features.aggregates import AggregateResult
from status_timeline.features.series import Series
from status_timeline.http_status import legend_label
from status_timeline.preprocess.fields import StatusCode
from status_timeline.viz.common import figure_size, save_figure
from status_timeline.viz.viewport import Viewport, time_domain

PALETTE = matplotlib.colormaps["tab10"].colors
NO_DATA_MESSAGE = (
    'No HTTP status codes found. Load an HTTP dataset or entries with app type "HTTP-App".'
)


def plot_status_series(
    result: AggregateResult,
    series: Mapping[StatusCode, Series],
    viewport: Viewport,
    output_path: Path,
) -> Path:
    fig, ax = plt.subplots(figsize=figure_size(viewport.canvas_width, viewport.height))

    domain = time_domain(result.buckets)
    if domain is None or result.global_max_bucket_total == 0:
        ax.text(0.5, 0.5, NO_DATA_MESSAGE, ha="center", va="center", transform=ax.transAxes)
        ax.set_axis_off()
        return save_figure(output_path)

    for index, code in enumerate(result.code_set):
        points = series.get(code, ())
        if not points:
            continue
        ax.plot(
            [point.date for point in points],
            [point.count for point in points],
            linewidth=1.5,
            color=PALETTE[index % len(PALETTE)],
            label=legend_label(code, result.per_code_totals.get(code, 0)),
        )

    ax.set_xlim(domain[0], domain[1])
    ax.set_ylim(0, max(result.global_max_bucket_total, 1))
    ax.xaxis.set_major_locator(mdates.AutoDateLocator(maxticks=max(viewport.tick_count, 2)))
    ax.xaxis.set_major_formatter(mdates.DateFormatter(viewport.date_format, tz=domain[0].tz))
    ax.grid(axis="y", color="#2a2a2a", alpha=0.3)
    ax.set_title("HTTP status codes per day")
    ax.set_xlabel("Day")
    ax.set_ylabel("Count")
    ax.legend(loc="upper left", fontsize="x-small")
    return save_figure(output_path)
