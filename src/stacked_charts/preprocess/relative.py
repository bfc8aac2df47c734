from __future__ import annotations

from stacked_charts.constants import SeriesStrategy
from stacked_charts.table import ChartTable


def normalize_relative(
    table: ChartTable,
    y_column_slugs: list[str],
    series_strategy: SeriesStrategy,
    *,
    is_relative_mode: bool,
) -> ChartTable:
    """Rescale each time slice to percentage shares when relative mode is on.

    Entity series share the first column across entities at each time; column
    series share each entity/time row across the requested columns. A zero sum
    leaves the affected values invalid.
    """
    if not is_relative_mode or not y_column_slugs:
        return table
    if series_strategy == SeriesStrategy.entity:
        return table.to_percentage_from_each_entity_for_each_time(y_column_slugs[0])
    return table.to_percentage_from_each_column_for_each_entity_and_time(y_column_slugs)
