from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable

from stacked_charts.config import ChartConfig
from stacked_charts.constants import SeriesStrategy
from stacked_charts.pipeline.memo import StageCache, config_snapshot
from stacked_charts.preprocess.interpolate import interpolate_rows
from stacked_charts.preprocess.relative import normalize_relative
from stacked_charts.preprocess.select import select_rows
from stacked_charts.stacking.axes import (
    DualAxis,
    build_dual_axis,
    resolve_horizontal_domain,
    resolve_vertical_domain,
)
from stacked_charts.stacking.colors import assign_series_colors
from stacked_charts.stacking.hover import (
    Pointer,
    Tooltip,
    build_tooltip,
    find_hover_index,
    find_hover_index_for_time,
    focused_series_names,
)
from stacked_charts.stacking.legend import LabelMark, build_label_marks
from stacked_charts.stacking.series import (
    align_to_shared_grid,
    auto_detect_series_strategy,
    auto_detect_y_column_slugs,
    build_raw_series,
    column_series_entity_name,
)
from stacked_charts.stacking.stack import stack_series
from stacked_charts.stacking.types import (
    RawSeries,
    SeriesName,
    StackedSeries,
    fail_message_for,
)
from stacked_charts.table import ChartTable, ColumnDef, EntityName

LOGGER = logging.getLogger(__name__)

TRANSFORM_FIELDS = (
    "selected_entity_names",
    "is_relative_mode",
    "disable_linear_interpolation",
)
COLOR_FIELDS = ("base_color_scheme", "invert_color_scheme", "selected_entity_names")
AXIS_FIELDS = (
    "x_axis",
    "y_axis",
    "is_relative_mode",
    "hide_x_axis",
    "hide_y_axis",
    "hide_legend",
    "base_font_size",
    "bounds",
)


def transform_table(
    table: ChartTable,
    y_column_slugs: list[str],
    series_strategy: SeriesStrategy,
    chart: ChartConfig,
) -> ChartTable:
    """Row selection, interpolation and relative normalization, in that order."""
    selected = select_rows(table, chart.selected_entity_names, y_column_slugs)
    interpolated = interpolate_rows(
        selected,
        y_column_slugs,
        disable_interpolation=chart.disable_linear_interpolation,
    )
    return normalize_relative(
        interpolated,
        y_column_slugs,
        series_strategy,
        is_relative_mode=chart.is_relative_mode,
    )


@dataclass(frozen=True, eq=False)
class StackedChartResult:
    series: list[StackedSeries]
    dual_axis: DualAxis
    fail_message: str
    series_colors: dict[SeriesName, str]
    label_marks: list[LabelMark]
    y_column_slugs: list[str]
    series_strategy: SeriesStrategy
    transformed_table: ChartTable
    value_column: ColumnDef | None = None
    is_relative_mode: bool = False
    hide_legend: bool = False

    @property
    def is_renderable(self) -> bool:
        return not self.fail_message

    @property
    def available_times(self) -> list[float]:
        if not self.series:
            return []
        return [point.x for point in self.series[0].points]

    def hover_index(self, mouse: Pointer) -> int | None:
        if not self.is_renderable:
            return None
        return find_hover_index(self.series, self.dual_axis, mouse)

    def hover_index_for_time(self, time: float) -> int | None:
        if not self.is_renderable:
            return None
        return find_hover_index_for_time(self.series, self.dual_axis, time)

    def tooltip(
        self,
        hover_index: int | None,
        hover_key: SeriesName | None = None,
    ) -> Tooltip | None:
        if not self.is_renderable:
            return None
        return build_tooltip(
            self.series,
            hover_index,
            self.transformed_table,
            value_column=self.value_column,
            focused=focused_series_names(hover_key),
        )


class StackEngine:
    """Memoized stacked-chart pipeline over one table and one chart configuration.

    Each derived value is cached under a key built from the table version and
    the configuration fields it reads, so changing an unrelated option does not
    recompute upstream stages.
    """

    def __init__(self, table: ChartTable, config: ChartConfig | None = None) -> None:
        self._table = table
        self._table_version = 0
        self._config = config or ChartConfig()
        self.cache = StageCache()

    @property
    def table(self) -> ChartTable:
        return self._table

    @property
    def table_version(self) -> int:
        return self._table_version

    @property
    def config(self) -> ChartConfig:
        return self._config

    def set_table(self, table: ChartTable) -> None:
        self._table = table
        self._table_version += 1
        # Old entries are keyed on the previous table version.
        self.cache.clear()

    def set_config(self, config: ChartConfig) -> None:
        self._config = config

    def update_config(self, **changes: object) -> None:
        self._config = ChartConfig.model_validate({**self._config.model_dump(), **changes})

    def select_entities(self, entity_names: Iterable[EntityName]) -> None:
        self.update_config(selected_entity_names=list(entity_names))

    def select_all(self) -> None:
        self.select_entities(self._table.entity_names)

    def set_relative_mode(self, is_relative_mode: bool) -> None:
        self.update_config(is_relative_mode=is_relative_mode)

    def _snapshot(self, *fields: str) -> str:
        return config_snapshot(self._config, *fields)

    @property
    def _slugs_key(self) -> Hashable:
        return (self._table_version, self._snapshot("y_column_slugs"))

    @property
    def y_column_slugs(self) -> list[str]:
        return self.cache.get(
            "y_column_slugs",
            self._slugs_key,
            lambda: auto_detect_y_column_slugs(self._table, self._config.y_column_slugs),
        )

    @property
    def series_strategy(self) -> SeriesStrategy:
        return self.cache.get(
            "series_strategy",
            (self._slugs_key, self._snapshot("series_strategy")),
            lambda: auto_detect_series_strategy(
                self.y_column_slugs,
                self._config.series_strategy,
            ),
        )

    @property
    def _transform_key(self) -> Hashable:
        return (
            self._slugs_key,
            self.series_strategy.value,
            self._snapshot(*TRANSFORM_FIELDS),
        )

    @property
    def is_entity_series(self) -> bool:
        return self.series_strategy == SeriesStrategy.entity

    @property
    def transformed_table(self) -> ChartTable:
        return self.cache.get(
            "transformed_table",
            self._transform_key,
            lambda: transform_table(
                self._table,
                self.y_column_slugs,
                self.series_strategy,
                self._config,
            ),
        )

    @property
    def raw_series(self) -> list[RawSeries]:
        return self.cache.get(
            "raw_series",
            self._transform_key,
            lambda: align_to_shared_grid(
                build_raw_series(
                    self.transformed_table,
                    self.y_column_slugs,
                    self.series_strategy,
                    self._config.selected_entity_names,
                )
            ),
        )

    @property
    def _colors_key(self) -> Hashable:
        return (self._transform_key, self._snapshot(*COLOR_FIELDS))

    @property
    def series_colors(self) -> dict[SeriesName, str]:
        def _compute() -> dict[SeriesName, str]:
            series_count = (
                len(self._config.selected_entity_names)
                if self.is_entity_series
                else len(self.y_column_slugs)
            )
            return assign_series_colors(
                [series.series_name for series in self.raw_series],
                self.transformed_table,
                self.series_strategy,
                series_count=series_count,
                base_color_scheme=self._config.base_color_scheme,
                invert_color_scheme=self._config.invert_color_scheme,
            )

        return self.cache.get("series_colors", self._colors_key, _compute)

    @property
    def series(self) -> list[StackedSeries]:
        return self.cache.get(
            "series",
            self._colors_key,
            lambda: stack_series(self.raw_series, self.series_colors),
        )

    @property
    def fail_message(self) -> str:
        return fail_message_for(self.y_column_slugs, self.series)

    @property
    def value_column(self) -> ColumnDef | None:
        slugs = self.y_column_slugs
        return self.transformed_table.column_def(slugs[0]) if slugs else None

    @property
    def plotted_table(self) -> ChartTable:
        """Rows the series are drawn from; column series read a single entity."""
        table = self.transformed_table
        if self.is_entity_series:
            return table
        entity_name = column_series_entity_name(table, self._config.selected_entity_names)
        return table if entity_name is None else table.filter_by_entity_names([entity_name])

    @property
    def dual_axis(self) -> DualAxis:
        def _compute() -> DualAxis:
            horizontal = resolve_horizontal_domain(
                self.plotted_table,
                self.y_column_slugs,
                self._config.x_axis,
            )
            vertical = resolve_vertical_domain(
                self.series,
                self._config.y_axis,
                is_relative_mode=self._config.is_relative_mode,
            )
            return build_dual_axis(horizontal, vertical, self._config)

        return self.cache.get(
            "dual_axis",
            (self._colors_key, self._snapshot(*AXIS_FIELDS)),
            _compute,
        )

    @property
    def label_marks(self) -> list[LabelMark]:
        return build_label_marks(
            self.series,
            self.transformed_table,
            hide_legend=self._config.hide_legend,
        )

    def hover_index(self, mouse: Pointer) -> int | None:
        return self.result().hover_index(mouse)

    def tooltip(
        self,
        hover_index: int | None,
        hover_key: SeriesName | None = None,
    ) -> Tooltip | None:
        return self.result().tooltip(hover_index, hover_key=hover_key)

    def result(self) -> StackedChartResult:
        fail_message = self.fail_message
        if fail_message:
            LOGGER.debug("Stacked chart not renderable: %s", fail_message)
        return StackedChartResult(
            series=self.series,
            dual_axis=self.dual_axis,
            fail_message=fail_message,
            series_colors=dict(self.series_colors),
            label_marks=self.label_marks,
            y_column_slugs=list(self.y_column_slugs),
            series_strategy=self.series_strategy,
            transformed_table=self.transformed_table,
            value_column=self.value_column,
            is_relative_mode=self._config.is_relative_mode,
            hide_legend=self._config.hide_legend,
        )


def build_stacked_chart(
    table: ChartTable,
    config: ChartConfig | None = None,
) -> StackedChartResult:
    """Run the whole pipeline once, without keeping any cache around."""
    return StackEngine(table, config).result()
