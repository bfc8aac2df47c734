from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

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


def plot_stacked_area(
    result: StackedChartResult,
    output_path: Path,
    *,
    title: str | None = None,
    focused: Sequence[str] = (),
) -> Path:
    if not result.is_renderable:
        return plot_fail_message(result, output_path)

    _, ax = plt.subplots(figsize=figure_size(result))
    for series in result.series:
        xs = [point.x for point in series.points]
        lows = [point.y_offset for point in series.points]
        highs = [point.top for point in series.points]
        color = series_fill_color(series, focused)
        ax.fill_between(
            xs,
            lows,
            highs,
            color=color,
            alpha=0.7,
            linewidth=0,
            hatch="//" if series.is_projection else None,
        )
        ax.plot(xs, highs, color=darker(color, 0.5), linewidth=0.5, alpha=0.7)

    apply_dual_axis(ax, result)
    draw_label_marks(ax, result, focused)
    if title:
        ax.set_title(title)
    return save_figure(output_path)
