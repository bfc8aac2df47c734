from __future__ import annotations

from pathlib import Path

import typer

from stacked_charts.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from stacked_charts.constants import ChartType
from stacked_charts.io.read import load_chart_table
from stacked_charts.logging import configure_logging
from stacked_charts.pipeline.engine import StackEngine
from stacked_charts.pipeline.run_all import run_all
from stacked_charts.stacking.hover import TOTAL_LABEL

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _apply_overrides(
    cfg: AppConfig,
    *,
    table: Path | None,
    relative: bool | None,
    entities: list[str] | None,
) -> AppConfig:
    if table is not None:
        cfg.table.path = str(table)
    if not cfg.table.path:
        raise typer.BadParameter(
            "Missing table. Pass --table or set table.path in the config file."
        )
    if relative is not None:
        cfg.chart.is_relative_mode = relative
    if entities:
        cfg.chart.selected_entity_names = list(entities)
    return cfg


@app.command()
def stack(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    table: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    relative: bool | None = typer.Option(
        None,
        "--relative/--absolute",
        help="Override relative (percentage share) mode from the config.",
    ),
    entity: list[str] | None = typer.Option(
        None,
        help="Entity to select; repeat to select several, first on top.",
    ),
) -> None:
    """Compute stacked series and write the points table and chart summary."""
    configure_logging()
    cfg = _apply_overrides(
        _load_app_config(config), table=table, relative=relative, entities=entity
    )
    outputs = run_all(cfg, out, render=False)
    if outputs.result.fail_message:
        typer.echo(f"Not renderable: {outputs.result.fail_message}")
    else:
        typer.echo(f"Stacked {len(outputs.result.series)} series")
    typer.echo(f"- points: {outputs.points_path}")
    typer.echo(f"- summary: {outputs.summary_path}")


@app.command()
def render(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    table: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    relative: bool | None = typer.Option(
        None,
        "--relative/--absolute",
        help="Override relative (percentage share) mode from the config.",
    ),
    entity: list[str] | None = typer.Option(
        None,
        help="Entity to select; repeat to select several, first on top.",
    ),
    chart_type: ChartType | None = typer.Option(
        None,
        help="Override outputs.chart_type (area or bar).",
    ),
) -> None:
    """Compute stacked series and draw them as a stacked area or bar figure."""
    configure_logging()
    cfg = _apply_overrides(
        _load_app_config(config), table=table, relative=relative, entities=entity
    )
    outputs = run_all(cfg, out, render=True, chart_type=chart_type)
    if outputs.result.fail_message:
        typer.echo(f"Not renderable: {outputs.result.fail_message}")
    typer.echo(f"Figure written to: {outputs.figure_path}")


@app.command()
def hover(
    x: float | None = typer.Option(None, help="Pointer x position in chart pixels."),
    y: float | None = typer.Option(None, help="Pointer y position in chart pixels."),
    time: float | None = typer.Option(None, help="Hover the grid time nearest this value."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    table: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    relative: bool | None = typer.Option(
        None,
        "--relative/--absolute",
        help="Override relative (percentage share) mode from the config.",
    ),
    entity: list[str] | None = typer.Option(
        None,
        help="Entity to select; repeat to select several, first on top.",
    ),
    hover_key: str | None = typer.Option(None, help="Series to focus, as when hovering its label."),
) -> None:
    """Print the tooltip rows shown for a pointer position or a time."""
    configure_logging()
    if time is None and (x is None or y is None):
        raise typer.BadParameter("Pass --x and --y, or --time.")
    cfg = _apply_overrides(
        _load_app_config(config), table=table, relative=relative, entities=entity
    )
    engine = StackEngine(load_chart_table(cfg), cfg.chart)
    result = engine.result()
    if result.fail_message:
        typer.echo(f"Not renderable: {result.fail_message}")
        raise typer.Exit(code=1)

    if time is not None:
        hover_index = result.hover_index_for_time(time)
    else:
        hover_index = result.hover_index((x, y))
    tooltip = result.tooltip(hover_index, hover_key=hover_key)
    if tooltip is None:
        typer.echo("No point under pointer")
        return
    typer.echo(tooltip.formatted_time)
    for row in tooltip.rows:
        marker = " (blurred)" if row.is_blurred else ""
        typer.echo(f"- {row.label}: {row.formatted_value}{marker}")
    if tooltip.formatted_total is not None:
        typer.echo(f"- {TOTAL_LABEL}: {tooltip.formatted_total}")


if __name__ == "__main__":
    app()
