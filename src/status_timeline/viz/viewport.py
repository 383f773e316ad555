from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

import pandas as pd

from status_timeline.config import MAX_ZOOM, MIN_ZOOM
from status_timeline.features.aggregates import Bucket
from status_timeline.features.series import ONE_DAY, BucketLocator

ZOOM_STEP = 1.5
DOMAIN_PAD_FRACTION = 0.02


@dataclass(frozen=True)
class Margins:
    top: int = 26
    right: int = 16
    bottom: int = 44
    left: int = 40


def clamp_zoom(zoom: float) -> float:
    return min(MAX_ZOOM, max(MIN_ZOOM, float(zoom)))


@dataclass(frozen=True)
class Viewport:
    """Pixel size and horizontal zoom of the chart area.

    Zoom stretches the time axis only; the count axis always fits the height.
    """

    width: float
    height: float
    zoom: float = 1.0
    margins: Margins = Margins()

    def __post_init__(self) -> None:
        object.__setattr__(self, "zoom", clamp_zoom(self.zoom))

    @property
    def inner_width(self) -> float:
        return max(0.0, self.width - self.margins.left - self.margins.right)

    @property
    def inner_height(self) -> float:
        return max(0.0, self.height - self.margins.top - self.margins.bottom)

    @property
    def scaled_inner_width(self) -> float:
        return self.inner_width * self.zoom

    @property
    def canvas_width(self) -> float:
        return self.scaled_inner_width + self.margins.left + self.margins.right

    @property
    def tick_count(self) -> int:
        return round(6 * self.zoom)

    @property
    def date_format(self) -> str:
        return "%b %d" if self.zoom >= 3 else "%b"

    def zoom_in(self) -> Viewport:
        return replace(self, zoom=clamp_zoom(self.zoom * ZOOM_STEP))

    def zoom_out(self) -> Viewport:
        return replace(self, zoom=clamp_zoom(self.zoom / ZOOM_STEP))


def time_domain(buckets: Sequence[Bucket]) -> tuple[pd.Timestamp, pd.Timestamp] | None:
    """Padded time extent of the buckets; a single day is padded by a day each side."""
    if not buckets:
        return None
    first = min(bucket.date for bucket in buckets)
    last = max(bucket.date for bucket in buckets)
    span = last - first
    pad = min(span * DOMAIN_PAD_FRACTION, ONE_DAY) if span > pd.Timedelta(0) else ONE_DAY
    return first - pad, last + pad


@dataclass(frozen=True)
class TimeScale:
    start: pd.Timestamp
    end: pd.Timestamp
    width: float

    def __call__(self, instant: pd.Timestamp) -> float:
        span = self.end - self.start
        if self.width <= 0 or span <= pd.Timedelta(0):
            return 0.0
        return float((instant - self.start) / span) * self.width

    def invert(self, pixel: float) -> pd.Timestamp:
        if self.width <= 0:
            return self.start
        return self.start + (self.end - self.start) * (float(pixel) / self.width)


def build_time_scale(buckets: Sequence[Bucket], viewport: Viewport) -> TimeScale | None:
    domain = time_domain(buckets)
    if domain is None:
        return None
    return TimeScale(start=domain[0], end=domain[1], width=viewport.scaled_inner_width)


def bucket_at_pixel(pixel: float, locator: BucketLocator, viewport: Viewport) -> Bucket | None:
    """Resolve a horizontal pointer position (relative to the plot area) to a bucket."""
    scale = build_time_scale(locator.buckets, viewport)
    if scale is None:
        return None
    return locator.locate(scale.invert(pixel))
