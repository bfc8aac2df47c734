from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from stacked_charts.pipeline.engine import StackedChartResult

STACKED_POINT_COLUMNS = [
    "series_name",
    "stack_position",
    "color",
    "is_projection",
    "x",
    "y",
    "y_offset",
    "is_fake",
]


def stacked_points_frame(result: StackedChartResult) -> pd.DataFrame:
    """Flatten stacked series into one row per point, bottom series first."""
    rows: list[dict[str, Any]] = []
    for position, series in enumerate(result.series):
        for point in series.points:
            rows.append(
                {
                    "series_name": series.series_name,
                    "stack_position": position,
                    "color": series.color,
                    "is_projection": series.is_projection,
                    "x": point.x,
                    "y": point.y,
                    "y_offset": point.y_offset,
                    "is_fake": point.is_fake,
                }
            )
    return pd.DataFrame(rows, columns=STACKED_POINT_COLUMNS)


def build_chart_summary(result: StackedChartResult) -> dict[str, Any]:
    dual_axis = result.dual_axis
    return {
        "fail_message": result.fail_message,
        "series_strategy": result.series_strategy.value,
        "y_column_slugs": list(result.y_column_slugs),
        "is_relative_mode": result.is_relative_mode,
        "series": [
            {
                "series_name": series.series_name,
                "color": series.color,
                "is_projection": series.is_projection,
                "n_points": len(series.points),
            }
            for series in result.series
        ],
        "horizontal_domain": list(dual_axis.horizontal_axis.domain),
        "vertical_domain": list(dual_axis.vertical_axis.domain),
        "available_times": result.available_times,
    }


def write_table(df: pd.DataFrame, path: Path, fmt: str = "parquet") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
        return path
    if fmt == "csv":
        df.to_csv(path, index=False)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    return path
