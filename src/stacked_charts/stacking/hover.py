from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from stacked_charts.stacking.axes import DualAxis
from stacked_charts.stacking.types import SeriesName, StackedSeries
from stacked_charts.table import ChartTable, ColumnDef

Pointer = tuple[float, float]

NO_DATA_LABEL = "No data"
TOTAL_LABEL = "Total"


@dataclass(frozen=True)
class TooltipRow:
    series_name: SeriesName
    label: str
    color: str
    value: float | None
    formatted_value: str
    is_blurred: bool = False


@dataclass(frozen=True)
class Tooltip:
    time: float
    formatted_time: str
    rows: tuple[TooltipRow, ...]
    total: float | None = None
    formatted_total: str | None = None


def _nearest_index(positions: Sequence[float], target: float) -> int | None:
    if not positions:
        return None
    distances = np.abs(np.asarray(positions, dtype=float) - float(target))
    return int(np.argmin(distances))


def find_hover_index(
    series: list[StackedSeries],
    dual_axis: DualAxis,
    mouse: Pointer,
) -> int | None:
    """Index of the shared-grid point plotted nearest the pointer, if inside the plot."""
    if not series or not dual_axis.inner_bounds.contains(mouse):
        return None
    # The horizontal scale is linear, so nearest in pixels is nearest in time.
    time = dual_axis.horizontal_axis.invert(mouse[0])
    return _nearest_index([point.x for point in series[0].points], time)


def find_hover_index_for_time(
    series: list[StackedSeries],
    dual_axis: DualAxis,
    time: float,
) -> int | None:
    """Same lookup as :func:`find_hover_index` with the query given in data space."""
    low, high = sorted(dual_axis.horizontal_axis.domain)
    if not series or not low <= time <= high:
        return None
    return _nearest_index([point.x for point in series[0].points], time)


def focused_series_names(hover_key: SeriesName | None) -> list[SeriesName]:
    return [hover_key] if hover_key else []


def series_is_blurred(series_name: SeriesName, focused: Sequence[SeriesName]) -> bool:
    return len(focused) > 0 and series_name not in focused


def _has_value(series: StackedSeries, index: int) -> bool:
    return index < len(series.points) and math.isfinite(series.points[index].y)


def build_tooltip(
    series: list[StackedSeries],
    hover_index: int | None,
    table: ChartTable,
    value_column: ColumnDef | None = None,
    focused: Sequence[SeriesName] = (),
) -> Tooltip | None:
    """Rows listed top of stack first; the total is left out if any series lacks the point."""
    if hover_index is None or not series or not _has_value(series[0], hover_index):
        return None

    def _format(value: float) -> str:
        if value_column is None:
            return f"{value:g}"
        return value_column.format_value_short(value)

    rows: list[TooltipRow] = []
    for item in reversed(series):
        value = item.points[hover_index].y if _has_value(item, hover_index) else None
        rows.append(
            TooltipRow(
                series_name=item.series_name,
                label=table.get_label_for_entity_name(item.series_name),
                color=item.color,
                value=value,
                formatted_value=NO_DATA_LABEL if value is None else _format(value),
                is_blurred=series_is_blurred(item.series_name, focused),
            )
        )

    reference = series[0].points[hover_index]
    some_missing = any(row.value is None for row in rows)
    total = None if some_missing else float(sum(row.value or 0.0 for row in rows))
    return Tooltip(
        time=reference.x,
        formatted_time=table.format_time_value(reference.x),
        rows=tuple(rows),
        total=total,
        formatted_total=None if total is None else _format(total),
    )
