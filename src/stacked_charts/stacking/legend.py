from __future__ import annotations

from dataclasses import dataclass

from stacked_charts.stacking.types import SeriesName, StackedSeries
from stacked_charts.table import ChartTable


@dataclass(frozen=True)
class LabelMark:
    series_name: SeriesName
    label: str
    color: str
    y_value: float


def series_midpoints(series: list[StackedSeries]) -> list[float]:
    """Vertical centre of each band at its last point, bottom series first."""
    midpoints: list[float] = []
    previous_top = 0.0
    for item in series:
        if not item.points:
            midpoints.append(0.0)
            continue
        top = item.points[-1].top
        midpoints.append(previous_top + (top - previous_top) / 2.0)
        previous_top = top
    return midpoints


def build_label_marks(
    series: list[StackedSeries],
    table: ChartTable,
    *,
    hide_legend: bool = False,
) -> list[LabelMark]:
    if hide_legend:
        return []
    marks = [
        LabelMark(
            series_name=item.series_name,
            label=table.get_label_for_entity_name(item.series_name),
            color=item.color,
            y_value=midpoint,
        )
        for item, midpoint in zip(series, series_midpoints(series))
    ]
    marks.reverse()
    return marks
