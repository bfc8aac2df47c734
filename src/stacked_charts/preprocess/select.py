from __future__ import annotations

import logging
from typing import Iterable

from stacked_charts.table import ChartTable, EntityName

LOGGER = logging.getLogger(__name__)


def select_rows(
    table: ChartTable,
    selected_entity_names: Iterable[EntityName],
    y_column_slugs: list[str],
) -> ChartTable:
    """Keep selected entities and rows with at least one valid value column."""
    selected = table.filter_by_entity_names(selected_entity_names).drop_duplicate_rows()
    validated = selected.replace_non_numeric_cells_with_error_values(y_column_slugs)
    filtered = validated.drop_rows_with_error_values_for_all_columns(y_column_slugs)
    LOGGER.debug(
        "Row selection kept %d of %d rows (%d after entity filter)",
        filtered.num_rows,
        table.num_rows,
        selected.num_rows,
    )
    return filtered
