from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from stacked_charts.config import AxisConfig, BoundsConfig, ChartConfig
from stacked_charts.constants import EMPTY_VERTICAL_MAX, RELATIVE_MODE_DOMAIN
from stacked_charts.stacking.types import StackedSeries
from stacked_charts.table import ChartTable

AxisDomain = tuple[float, float]
Orientation = Literal["horizontal", "vertical"]

EMPTY_HORIZONTAL_DOMAIN: AxisDomain = (0.0, 1.0)
HIDDEN_LEGEND_PADDING = 20.0
MAX_LEGEND_WIDTH = 150.0


@dataclass(frozen=True)
class Bounds:
    x: float = 0.0
    y: float = 0.0
    width: float = 640.0
    height: float = 480.0

    @classmethod
    def from_config(cls, config: BoundsConfig) -> Bounds:
        return cls(x=config.x, y=config.y, width=config.width, height=config.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def pad_left(self, amount: float) -> Bounds:
        return replace(self, x=self.x + amount, width=max(0.0, self.width - amount))

    def pad_right(self, amount: float) -> Bounds:
        return replace(self, width=max(0.0, self.width - amount))

    def pad_top(self, amount: float) -> Bounds:
        return replace(self, y=self.y + amount, height=max(0.0, self.height - amount))

    def pad_bottom(self, amount: float) -> Bounds:
        return replace(self, height=max(0.0, self.height - amount))

    def contains(self, point: tuple[float, float]) -> bool:
        px, py = point
        return self.left <= px <= self.right and self.top <= py <= self.bottom


@dataclass(frozen=True)
class Axis:
    orientation: Orientation
    domain: AxisDomain
    range: tuple[float, float] = (0.0, 1.0)
    hidden: bool = False
    label: str = ""
    hide_fractional_ticks: bool = False
    hide_gridlines: bool = False

    def place(self, value: float) -> float:
        low, high = self.domain
        start, end = self.range
        if high == low:
            return (start + end) / 2.0
        return start + (value - low) / (high - low) * (end - start)

    def invert(self, pixel: float) -> float:
        low, high = self.domain
        start, end = self.range
        if end == start:
            return low
        return low + (pixel - start) / (end - start) * (high - low)


@dataclass(frozen=True)
class DualAxis:
    bounds: Bounds
    inner_bounds: Bounds
    horizontal_axis: Axis
    vertical_axis: Axis


def domain_preserving_user_settings(config: AxisConfig, data_domain: AxisDomain) -> AxisDomain:
    """A bound fixed in the axis config overrides the data bound, per bound."""
    low = config.min if config.min is not None else data_domain[0]
    high = config.max if config.max is not None else data_domain[1]
    return float(low), float(high)


def resolve_horizontal_domain(
    table: ChartTable,
    y_column_slugs: list[str],
    axis_config: AxisConfig,
) -> AxisDomain:
    data_domain = table.time_domain_for(y_column_slugs) or EMPTY_HORIZONTAL_DOMAIN
    return domain_preserving_user_settings(axis_config, data_domain)


def resolve_vertical_domain(
    series: list[StackedSeries],
    axis_config: AxisConfig,
    *,
    is_relative_mode: bool,
) -> AxisDomain:
    if is_relative_mode:
        return RELATIVE_MODE_DOMAIN
    tops = [point.top for item in series for point in item.points]
    data_max = max(tops) if tops else EMPTY_VERTICAL_MAX
    return domain_preserving_user_settings(axis_config, (0.0, data_max))


def legend_padding(bounds: Bounds, *, hide_legend: bool) -> float:
    if hide_legend:
        return HIDDEN_LEGEND_PADDING
    return min(MAX_LEGEND_WIDTH, bounds.width / 3.0)


def build_dual_axis(
    horizontal_domain: AxisDomain,
    vertical_domain: AxisDomain,
    chart: ChartConfig,
) -> DualAxis:
    bounds = Bounds.from_config(chart.bounds)
    font_size = float(chart.base_font_size)
    hide_x = chart.hide_x_axis or chart.x_axis.hide_axis
    hide_y = chart.hide_y_axis or chart.y_axis.hide_axis

    label_gutter = font_size * 1.2

    inner = bounds.pad_right(legend_padding(bounds, hide_legend=chart.hide_legend))
    inner = inner.pad_top(font_size / 2.0)
    if not hide_y:
        inner = inner.pad_left(font_size * 3.0 + (label_gutter if chart.y_axis.label else 0.0))
    if not hide_x:
        inner = inner.pad_bottom(font_size * 1.5 + (label_gutter if chart.x_axis.label else 0.0))

    horizontal_axis = Axis(
        orientation="horizontal",
        domain=horizontal_domain,
        range=(inner.left, inner.right),
        hidden=hide_x,
        label=chart.x_axis.label,
        hide_fractional_ticks=True,
        hide_gridlines=True,
    )
    vertical_axis = Axis(
        orientation="vertical",
        domain=vertical_domain,
        range=(inner.bottom, inner.top),
        hidden=hide_y,
        label=chart.y_axis.label,
    )
    return DualAxis(
        bounds=bounds,
        inner_bounds=inner,
        horizontal_axis=horizontal_axis,
        vertical_axis=vertical_axis,
    )
