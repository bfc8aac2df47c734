from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from stacked_charts.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    entity: str = "entity"
    time: str = "time"
    color: str = "color"


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source entity/time/color columns to the canonical names used by the table."""
    rename_map = {
        columns.entity: CanonicalColumns.entity,
        columns.time: CanonicalColumns.time,
    }
    if columns.color:
        rename_map[columns.color] = CanonicalColumns.color
    missing = [source for source in rename_map if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required columns in table: {missing_str}")
    return df.rename(columns=rename_map)
