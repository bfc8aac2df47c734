from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from stacked_charts.config import AppConfig
from stacked_charts.constants import ChartType
from stacked_charts.io.read import load_chart_table
from stacked_charts.io.write import (
    build_chart_summary,
    stacked_points_frame,
    write_summary,
    write_table,
)
from stacked_charts.paths import build_output_paths
from stacked_charts.pipeline.engine import StackedChartResult, build_stacked_chart
from stacked_charts.viz.area import plot_stacked_area
from stacked_charts.viz.bar import plot_stacked_bar

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutputs:
    result: StackedChartResult
    points_path: Path
    summary_path: Path
    figure_path: Path | None = None


def write_stack_outputs(
    result: StackedChartResult,
    out_dir: Path,
    config: AppConfig,
) -> tuple[Path, Path]:
    paths = build_output_paths(out_dir)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    points_path = write_table(
        stacked_points_frame(result),
        paths.tables / f"stacked_points.{extension}",
        fmt=config.outputs.tables_format,
    )
    summary_path = write_summary(build_chart_summary(result), paths.summary / "chart.json")
    return points_path, summary_path


def render_chart(
    result: StackedChartResult,
    out_dir: Path,
    config: AppConfig,
    *,
    chart_type: ChartType | None = None,
) -> Path:
    paths = build_output_paths(out_dir)
    resolved_type = ChartType(chart_type or config.outputs.chart_type)
    output_path = paths.figures / f"stacked_{resolved_type.value}.{config.outputs.figures_format}"
    if resolved_type == ChartType.bar:
        return plot_stacked_bar(result, output_path)
    return plot_stacked_area(result, output_path)


def run_all(
    config: AppConfig,
    out_dir: Path,
    *,
    table_path: Path | None = None,
    render: bool = True,
    chart_type: ChartType | None = None,
) -> RunOutputs:
    table = load_chart_table(config, path=table_path)
    result = build_stacked_chart(table, config.chart)
    if result.fail_message:
        LOGGER.warning("Chart is not renderable: %s", result.fail_message)
    else:
        LOGGER.info(
            "Stacked %d series over %d time points",
            len(result.series),
            len(result.available_times),
        )

    points_path, summary_path = write_stack_outputs(result, out_dir, config)
    figure_path = (
        render_chart(result, out_dir, config, chart_type=chart_type) if render else None
    )
    return RunOutputs(
        result=result,
        points_path=points_path,
        summary_path=summary_path,
        figure_path=figure_path,
    )
