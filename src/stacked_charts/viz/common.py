from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.colors import to_hex, to_rgb
from matplotlib.ticker import MaxNLocator

from stacked_charts.constants import BLUR_COLOR
from stacked_charts.stacking.hover import series_is_blurred

if TYPE_CHECKING:
    from stacked_charts.pipeline.engine import StackedChartResult
    from stacked_charts.stacking.types import StackedSeries

PIXELS_PER_INCH = 100.0


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=PIXELS_PER_INCH)
    plt.close()
    return path


def darker(color: str, factor: float = 0.7) -> str:
    return to_hex(np.clip(np.asarray(to_rgb(color)) * factor, 0.0, 1.0))


def figure_size(result: StackedChartResult) -> tuple[float, float]:
    bounds = result.dual_axis.bounds
    return bounds.width / PIXELS_PER_INCH, bounds.height / PIXELS_PER_INCH


def series_fill_color(series: StackedSeries, focused: Sequence[str]) -> str:
    return BLUR_COLOR if series_is_blurred(series.series_name, focused) else series.color


def plot_fail_message(result: StackedChartResult, output_path: Path) -> Path:
    _, ax = plt.subplots(figsize=figure_size(result))
    ax.set_axis_off()
    ax.text(0.5, 0.5, result.fail_message, ha="center", va="center", color="#5b5b5b")
    return save_figure(output_path)


def apply_dual_axis(ax: Axes, result: StackedChartResult) -> None:
    dual_axis = result.dual_axis
    horizontal = dual_axis.horizontal_axis
    vertical = dual_axis.vertical_axis
    if horizontal.domain[0] != horizontal.domain[1]:
        ax.set_xlim(*horizontal.domain)
    ax.set_ylim(*vertical.domain)

    if horizontal.hide_fractional_ticks:
        ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.grid(axis="y", color="#eeeeee", linewidth=0.8)
    ax.grid(axis="x", visible=not horizontal.hide_gridlines)
    ax.set_axisbelow(True)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)

    if horizontal.hidden:
        ax.xaxis.set_visible(False)
    elif horizontal.label:
        ax.set_xlabel(horizontal.label)
    if vertical.hidden:
        ax.yaxis.set_visible(False)
    elif vertical.label:
        ax.set_ylabel(vertical.label)
    if result.is_relative_mode:
        ax.yaxis.set_major_formatter(lambda value, _position: f"{value:g}%")


def draw_label_marks(ax: Axes, result: StackedChartResult, focused: Sequence[str]) -> None:
    for mark in result.label_marks:
        color = BLUR_COLOR if series_is_blurred(mark.series_name, focused) else mark.color
        ax.annotate(
            mark.label,
            xy=(1.01, mark.y_value),
            xycoords=("axes fraction", "data"),
            va="center",
            fontsize=9,
            color=darker(color),
        )
