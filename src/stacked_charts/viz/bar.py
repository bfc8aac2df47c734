from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from stacked_charts.pipeline.engine import StackedChartResult
from stacked_charts.viz.common import (
    apply_dual_axis,
    darker,
    draw_label_marks,
    figure_size,
    plot_fail_message,
    save_figure,
    series_fill_color,
)

BAR_WIDTH_FRACTION = 0.8


def bar_width(times: Sequence[float]) -> float:
    if len(times) < 2:
        return BAR_WIDTH_FRACTION
    spacing = float(np.min(np.diff(np.sort(np.asarray(times, dtype=float)))))
    return BAR_WIDTH_FRACTION * spacing if spacing > 0 else BAR_WIDTH_FRACTION


def plot_stacked_bar(
    result: StackedChartResult,
    output_path: Path,
    *,
    title: str | None = None,
    focused: Sequence[str] = (),
) -> Path:
    if not result.is_renderable:
        return plot_fail_message(result, output_path)

    width = bar_width(result.available_times)
    _, ax = plt.subplots(figsize=figure_size(result))
    for series in result.series:
        color = series_fill_color(series, focused)
        ax.bar(
            [point.x for point in series.points],
            [point.y for point in series.points],
            bottom=[point.y_offset for point in series.points],
            width=width,
            color=color,
            edgecolor=darker(color, 0.5),
            linewidth=0.5,
            hatch="//" if series.is_projection else None,
        )

    apply_dual_axis(ax, result)
    # Bars are centred on their times, so widen the default domain by half a bar.
    low, high = result.dual_axis.horizontal_axis.domain
    ax.set_xlim(low - width / 2.0, high + width / 2.0)
    draw_label_marks(ax, result, focused)
    if title:
        ax.set_title(title)
    return save_figure(output_path)
