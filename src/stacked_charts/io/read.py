from __future__ import annotations

from pathlib import Path

import pandas as pd

from stacked_charts.config import AppConfig
from stacked_charts.io.schema import CanonicalColumns, normalize_columns
from stacked_charts.table import ChartTable, ColumnDef

REQUIRED_COLUMNS = [CanonicalColumns.entity, CanonicalColumns.time]


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Normalized data missing column: {column}")
    return df


def _validate_times(df: pd.DataFrame) -> pd.DataFrame:
    times = pd.to_numeric(df[CanonicalColumns.time], errors="coerce")
    if times.isna().any():
        raise ValueError(
            f"Time column has {int(times.isna().sum())} non-numeric values; "
            "expected years or day offsets"
        )
    working = df.copy()
    working[CanonicalColumns.time] = times
    working[CanonicalColumns.entity] = working[CanonicalColumns.entity].astype(str)

    duplicated = working.duplicated(
        subset=[CanonicalColumns.entity, CanonicalColumns.time],
        keep=False,
    )
    if duplicated.any():
        sample = working.loc[duplicated, [CanonicalColumns.entity, CanonicalColumns.time]].head(3)
        pairs = ", ".join(f"{row.entity}@{row.time:g}" for row in sample.itertuples(index=False))
        raise ValueError(f"Duplicate entity/time rows in table: {pairs}")
    return working


def load_table_frame(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        return pd.read_csv(path, encoding="utf-8-sig")
    raise ValueError(f"Unsupported table file type: {path.suffix}")


def build_column_defs(config: AppConfig, value_columns: list[str]) -> dict[str, ColumnDef]:
    column_defs: dict[str, ColumnDef] = {}
    for slug in value_columns:
        variable = config.table.variables.get(slug)
        if variable is None:
            column_defs[slug] = ColumnDef(slug=slug, display_name=slug)
            continue
        column_defs[slug] = ColumnDef(
            slug=slug,
            display_name=variable.display_name or slug,
            color=variable.color,
            is_projection=variable.is_projection,
            short_unit=variable.short_unit,
            num_decimal_places=variable.num_decimal_places,
        )
    return column_defs


def chart_table_from_frame(df: pd.DataFrame, config: AppConfig) -> ChartTable:
    normalized = _validate_times(_validate_required_columns(normalize_columns(df, config.columns)))
    value_columns = [
        str(column)
        for column in normalized.columns
        if column not in (CanonicalColumns.entity, CanonicalColumns.time, CanonicalColumns.color)
    ]
    return ChartTable(
        frame=normalized.reset_index(drop=True),
        column_defs=build_column_defs(config, value_columns),
        entity_colors=dict(config.table.entity_colors),
        time_unit=config.table.time_unit,
        zero_day=config.table.zero_day,
    )


def load_chart_table(config: AppConfig, path: Path | None = None) -> ChartTable:
    """Load the configured table file (or ``path``) into a validated ChartTable."""
    source = path or (Path(config.table.path) if config.table.path else None)
    if source is None:
        raise ValueError("table.path must be set in config or passed explicitly")
    return chart_table_from_frame(load_table_frame(source), config)
