from __future__ import annotations

import logging

from stacked_charts.constants import SeriesStrategy
from stacked_charts.stacking.types import RawSeries
from stacked_charts.table import ChartTable, EntityName

LOGGER = logging.getLogger(__name__)


def auto_detect_y_column_slugs(table: ChartTable, y_column_slugs: list[str] | None) -> list[str]:
    """Explicit slugs win, including an explicit empty list; otherwise use numeric columns."""
    if y_column_slugs is not None:
        return list(y_column_slugs)
    return table.numeric_column_slugs


def auto_detect_series_strategy(
    y_column_slugs: list[str],
    series_strategy: SeriesStrategy | None = None,
) -> SeriesStrategy:
    if series_strategy is not None:
        return SeriesStrategy(series_strategy)
    return SeriesStrategy.column if len(y_column_slugs) > 1 else SeriesStrategy.entity


def _entities_as_series(
    table: ChartTable,
    y_column_slugs: list[str],
    selected_entity_names: list[EntityName],
) -> list[RawSeries]:
    column = table.column_def(y_column_slugs[0])
    rows_by_entity = table.rows_by_entity_name(column.slug)
    # First selected entity ends on top of the stack.
    return [
        RawSeries(
            series_name=entity_name,
            is_projection=column.is_projection,
            rows=tuple(rows_by_entity.get(entity_name, ())),
        )
        for entity_name in reversed(selected_entity_names)
    ]


def column_series_entity_name(
    table: ChartTable,
    selected_entity_names: list[EntityName],
) -> EntityName | None:
    """The one entity whose rows column series are drawn from: the first selected present."""
    available = set(table.entity_names)
    for name in selected_entity_names:
        if name in available:
            return name
    return None


def _columns_as_series(
    table: ChartTable,
    y_column_slugs: list[str],
    selected_entity_names: list[EntityName],
) -> list[RawSeries]:
    entity_name = column_series_entity_name(table, selected_entity_names)
    if entity_name is None:
        return []
    ignored = len(set(selected_entity_names) & set(table.entity_names)) - 1
    if ignored:
        LOGGER.warning(
            "Column series use a single entity; using %s and ignoring %d others",
            entity_name,
            ignored,
        )

    series: list[RawSeries] = []
    # First declared column ends on top of the stack.
    for column in reversed(table.get_columns(y_column_slugs)):
        rows = table.rows_by_entity_name(column.slug).get(entity_name, [])
        series.append(
            RawSeries(
                series_name=column.display_name,
                is_projection=column.is_projection,
                rows=tuple(rows),
            )
        )
    return series


def build_raw_series(
    table: ChartTable,
    y_column_slugs: list[str],
    series_strategy: SeriesStrategy,
    selected_entity_names: list[EntityName],
) -> list[RawSeries]:
    """Group rows into per-series point lists in bottom-to-top stack order."""
    if not y_column_slugs:
        return []
    if series_strategy == SeriesStrategy.entity:
        raw_series = _entities_as_series(table, y_column_slugs, selected_entity_names)
    else:
        raw_series = _columns_as_series(table, y_column_slugs, selected_entity_names)

    non_empty = [series for series in raw_series if series.rows]
    if len(non_empty) != len(raw_series):
        LOGGER.debug("Dropped %d series without rows", len(raw_series) - len(non_empty))
    return non_empty


def align_to_shared_grid(raw_series: list[RawSeries]) -> list[RawSeries]:
    """Drop, from every series at once, each time not present in all series."""
    if not raw_series:
        return []
    shared = set(raw_series[0].times)
    for series in raw_series[1:]:
        shared &= set(series.times)

    aligned = [
        RawSeries(
            series_name=series.series_name,
            is_projection=series.is_projection,
            rows=tuple(sorted(row for row in series.rows if row[0] in shared)),
        )
        for series in raw_series
    ]
    dropped = sum(len(series.rows) for series in raw_series) - sum(
        len(series.rows) for series in aligned
    )
    if dropped:
        LOGGER.debug("Dropped %d points outside the shared time grid", dropped)
    return aligned
