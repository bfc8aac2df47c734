from __future__ import annotations

import logging

from stacked_charts.table import ChartTable

LOGGER = logging.getLogger(__name__)


def interpolate_rows(
    table: ChartTable,
    y_column_slugs: list[str],
    *,
    disable_interpolation: bool = False,
) -> ChartTable:
    """Fill interior gaps per column, then drop rows still invalid in any column.

    Values before the first or after the last valid sample of an entity are not
    extrapolated, so those rows are dropped here.
    """
    working = table
    if not disable_interpolation:
        working = working.complete_time_grid()
        for slug in y_column_slugs:
            working = working.interpolate_column_linearly(slug)

    aligned = working.drop_rows_with_error_values_for_any_column(y_column_slugs)
    dropped = working.num_rows - aligned.num_rows
    if dropped:
        LOGGER.debug("Dropped %d rows with no value after interpolation", dropped)
    return aligned
