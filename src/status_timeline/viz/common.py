from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

PIXELS_PER_INCH = 100


def figure_size(width_px: float, height_px: float) -> tuple[float, float]:
    return max(width_px, 1.0) / PIXELS_PER_INCH, max(height_px, 1.0) / PIXELS_PER_INCH


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=PIXELS_PER_INCH)
    plt.close()
    return path
