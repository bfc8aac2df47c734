from __future__ import annotations

from typing import Mapping

import pandas as pd

from stacked_charts.constants import FALLBACK_SERIES_COLOR
from stacked_charts.stacking.types import RawSeries, SeriesName, StackedPoint, StackedSeries


def stack_offsets(raw_series: list[RawSeries]) -> pd.DataFrame:
    """Offsets per (series, time): the sum of every series below at that time."""
    grid = sorted({time for series in raw_series for time in series.times})
    values = pd.DataFrame(
        [dict(series.rows) for series in raw_series],
        columns=grid,
        dtype=float,
    )
    running = values.fillna(0.0).cumsum(axis=0)
    return running.shift(1, fill_value=0.0)


def stack_series(
    raw_series: list[RawSeries],
    colors: Mapping[SeriesName, str],
) -> list[StackedSeries]:
    """Stack base-first series so each sits on the running total below it."""
    if not raw_series:
        return []
    offsets = stack_offsets(raw_series)

    stacked: list[StackedSeries] = []
    for position, series in enumerate(raw_series):
        row_offsets = offsets.iloc[position]
        stacked.append(
            StackedSeries(
                series_name=series.series_name,
                color=colors.get(series.series_name, FALLBACK_SERIES_COLOR),
                is_projection=series.is_projection,
                points=tuple(
                    StackedPoint(x=time, y=value, y_offset=float(row_offsets[time]))
                    for time, value in series.rows
                ),
            )
        )
    return stacked
