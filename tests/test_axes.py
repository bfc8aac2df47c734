from __future__ import annotations

import pandas as pd
import pytest

from stacked_charts.config import AxisConfig, ChartConfig
from stacked_charts.stacking.axes import (
    Axis,
    build_dual_axis,
    domain_preserving_user_settings,
    resolve_horizontal_domain,
    resolve_vertical_domain,
)
from stacked_charts.stacking.types import StackedPoint, StackedSeries
from stacked_charts.table import ChartTable


def _series() -> list[StackedSeries]:
    return [
        StackedSeries("B", "#111111", False, (StackedPoint(x=2000.0, y=50.0),)),
        StackedSeries("A", "#222222", False, (StackedPoint(x=2000.0, y=30.0, y_offset=50.0),)),
    ]


def test_user_bounds_override_data_bounds_independently() -> None:
    assert domain_preserving_user_settings(AxisConfig(max=500), (0.0, 80.0)) == (0.0, 500.0)
    assert domain_preserving_user_settings(AxisConfig(min=10), (0.0, 80.0)) == (10.0, 80.0)
    assert domain_preserving_user_settings(AxisConfig(), (0.0, 80.0)) == (0.0, 80.0)


def test_vertical_domain_uses_stack_top() -> None:
    assert resolve_vertical_domain(_series(), AxisConfig(), is_relative_mode=False) == (0.0, 80.0)
    assert resolve_vertical_domain(
        _series(), AxisConfig(max=500), is_relative_mode=False
    ) == (0.0, 500.0)


def test_relative_mode_forces_percentage_domain() -> None:
    domain = resolve_vertical_domain(_series(), AxisConfig(max=500), is_relative_mode=True)

    assert domain == (0.0, 100.0)


def test_empty_vertical_domain_defaults_to_hundred() -> None:
    assert resolve_vertical_domain([], AxisConfig(), is_relative_mode=False) == (0.0, 100.0)


def test_horizontal_domain_from_table_times() -> None:
    frame = pd.DataFrame({"entity": ["A", "A"], "time": [1990, 2010], "gdp": [1.0, 2.0]})
    table = ChartTable(frame=frame)

    assert resolve_horizontal_domain(table, ["gdp"], AxisConfig()) == (1990.0, 2010.0)
    assert resolve_horizontal_domain(table, ["gdp"], AxisConfig(min=2000)) == (2000.0, 2010.0)
    empty = ChartTable(frame=frame.iloc[0:0])
    assert resolve_horizontal_domain(empty, ["gdp"], AxisConfig()) == (0.0, 1.0)


def test_axis_config_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError, match="must be <="):
        AxisConfig(min=10, max=1)


def test_build_dual_axis_layout() -> None:
    dual_axis = build_dual_axis((2000.0, 2002.0), (0.0, 100.0), ChartConfig())
    inner = dual_axis.inner_bounds

    assert (inner.left, inner.right) == pytest.approx((48.0, 490.0))
    assert (inner.top, inner.bottom) == pytest.approx((8.0, 456.0))
    assert dual_axis.horizontal_axis.hide_fractional_ticks is True
    assert dual_axis.horizontal_axis.hide_gridlines is True
    assert dual_axis.vertical_axis.hide_gridlines is False
    assert dual_axis.vertical_axis.place(0.0) == pytest.approx(456.0)
    assert dual_axis.vertical_axis.place(100.0) == pytest.approx(8.0)


def test_hidden_legend_and_axes_widen_the_plot() -> None:
    chart = ChartConfig(hide_legend=True, hide_x_axis=True, hide_y_axis=True)

    inner = build_dual_axis((0.0, 1.0), (0.0, 1.0), chart).inner_bounds

    assert (inner.left, inner.right) == pytest.approx((0.0, 620.0))
    assert inner.bottom == pytest.approx(480.0)


def test_axis_place_and_invert() -> None:
    axis = Axis(orientation="horizontal", domain=(2000.0, 2010.0), range=(100.0, 200.0))

    assert axis.place(2005.0) == pytest.approx(150.0)
    assert axis.invert(120.0) == pytest.approx(2002.0)
    assert Axis(orientation="horizontal", domain=(5.0, 5.0), range=(0.0, 10.0)).place(5.0) == 5.0
