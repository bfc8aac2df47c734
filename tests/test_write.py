from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from stacked_charts.config import AppConfig, ChartConfig, OutputsConfig
from stacked_charts.io.write import (
    STACKED_POINT_COLUMNS,
    build_chart_summary,
    stacked_points_frame,
    write_table,
)
from stacked_charts.pipeline.engine import StackedChartResult, build_stacked_chart
from stacked_charts.pipeline.run_all import run_all
from stacked_charts.table import ChartTable


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "entity": ["A", "A", "B", "B"],
            "time": [2000, 2001, 2000, 2001],
            "gdp": [10.0, 20.0, 15.0, 25.0],
        }
    )


def _result() -> StackedChartResult:
    return build_stacked_chart(
        ChartTable(frame=_frame()),
        ChartConfig(y_column_slugs=["gdp"], selected_entity_names=["A", "B"]),
    )


def test_stacked_points_frame_has_one_row_per_point() -> None:
    points = stacked_points_frame(_result())

    assert list(points.columns) == STACKED_POINT_COLUMNS
    assert points["series_name"].tolist() == ["B", "B", "A", "A"]
    assert points["stack_position"].tolist() == [0, 0, 1, 1]
    assert points["y_offset"].tolist() == [0.0, 0.0, 15.0, 25.0]
    assert not points["is_fake"].any()


def test_chart_summary_is_json_serializable() -> None:
    summary = build_chart_summary(_result())

    assert summary["fail_message"] == ""
    assert summary["series_strategy"] == "entity"
    assert summary["vertical_domain"] == [0.0, 45.0]
    assert summary["available_times"] == [2000.0, 2001.0]
    assert [item["series_name"] for item in summary["series"]] == ["B", "A"]
    json.dumps(summary)


def test_write_table_rejects_unknown_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported table format"):
        write_table(_frame(), tmp_path / "points.txt", fmt="txt")


def test_run_all_writes_points_summary_and_figure(tmp_path: Path) -> None:
    table_path = tmp_path / "table.parquet"
    _frame().rename(columns={"time": "year"}).to_parquet(table_path, index=False)
    config = AppConfig(
        chart=ChartConfig(y_column_slugs=["gdp"], selected_entity_names=["A", "B"]),
        outputs=OutputsConfig(tables_format="parquet", chart_type="bar"),
    )

    outputs = run_all(config, tmp_path / "out", table_path=table_path)

    assert outputs.points_path == tmp_path / "out" / "tables" / "stacked_points.parquet"
    assert len(pd.read_parquet(outputs.points_path)) == 4
    summary = json.loads(outputs.summary_path.read_text(encoding="utf-8"))
    assert summary["horizontal_domain"] == [2000.0, 2001.0]
    assert outputs.figure_path == tmp_path / "out" / "figures" / "stacked_bar.png"
    assert outputs.figure_path.exists()
