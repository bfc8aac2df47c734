from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stacked_charts.constants import (
    BASE_FONT_SIZE,
    ChartType,
    SeriesStrategy,
    TimeUnit,
)

TABLE_PATH_ENV_VAR = "STACKED_CHARTS_TABLE_PATH"


class ColumnsConfig(BaseModel):
    entity: str = "entity"
    time: str = "year"
    color: str | None = None


class VariableConfig(BaseModel):
    display_name: str | None = None
    color: str | None = None
    is_projection: bool = False
    short_unit: str = ""
    num_decimal_places: int = Field(default=1, ge=0, le=10)


class AxisConfig(BaseModel):
    min: float | None = None
    max: float | None = None
    hide_axis: bool = False
    label: str = ""

    @model_validator(mode="after")
    def _check_bounds(self) -> AxisConfig:
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"axis min ({self.min}) must be <= max ({self.max})")
        return self


class BoundsConfig(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=640.0, gt=0.0)
    height: float = Field(default=480.0, gt=0.0)


class ChartConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    y_column_slugs: list[str] | None = None
    series_strategy: SeriesStrategy | None = None
    selected_entity_names: list[str] = Field(default_factory=list)
    x_axis: AxisConfig = Field(default_factory=AxisConfig)
    y_axis: AxisConfig = Field(default_factory=AxisConfig)
    is_relative_mode: bool = False
    base_color_scheme: str | None = None
    invert_color_scheme: bool = False
    hide_x_axis: bool = False
    hide_y_axis: bool = False
    hide_legend: bool = False
    base_font_size: float = Field(default=BASE_FONT_SIZE, gt=0.0)
    disable_linear_interpolation: bool = False
    bounds: BoundsConfig = Field(default_factory=BoundsConfig)

    @field_validator("selected_entity_names")
    @classmethod
    def _unique_selection(cls, value: list[str]) -> list[str]:
        # The selection is a set; first mention keeps its stacking position.
        return list(dict.fromkeys(value))


class TableConfig(BaseModel):
    path: str | None = None
    time_unit: TimeUnit = TimeUnit.year
    zero_day: str = "2020-01-21"
    entity_colors: dict[str, str] = Field(default_factory=dict)
    variables: dict[str, VariableConfig] = Field(default_factory=dict)


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"
    figures_format: str = "png"
    chart_type: ChartType = ChartType.area


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    table: TableConfig = Field(default_factory=TableConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.table.path = _resolve_optional_path(
        config.table.path or os.getenv(TABLE_PATH_ENV_VAR),
        base_dir,
    )
    return config
