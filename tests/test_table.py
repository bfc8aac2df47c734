from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from stacked_charts.constants import TimeUnit
from stacked_charts.table import ChartTable, ColumnDef


def _table(**kwargs: object) -> ChartTable:
    frame = pd.DataFrame(
        {
            "entity": ["A", "A", "A", "B", "B"],
            "time": [2000, 2001, 2002, 2000, 2002],
            "gdp": [10, "n/a", 30, 5, 15],
            "pop": [1.0, 2.0, np.inf, np.nan, 4.0],
        }
    )
    return ChartTable(frame=frame, **kwargs)


def test_filter_by_entity_names_returns_new_table_without_touching_original() -> None:
    table = _table()
    filtered = table.filter_by_entity_names(["B"])

    assert filtered.entity_names == ["B"]
    assert filtered.num_rows == 2
    assert table.num_rows == 5


def test_replace_non_numeric_cells_marks_strings_and_infinities_invalid() -> None:
    table = _table().replace_non_numeric_cells_with_error_values(["gdp", "pop", "missing"])

    assert table.frame["gdp"].isna().tolist() == [False, True, False, False, False]
    assert table.frame["pop"].isna().tolist() == [False, False, True, True, False]
    assert table.frame["missing"].isna().all()


def test_drop_rows_for_all_versus_any_invalid_columns() -> None:
    table = _table().replace_non_numeric_cells_with_error_values(["gdp", "pop"])

    assert table.drop_rows_with_error_values_for_all_columns(["gdp", "pop"]).num_rows == 5
    kept = table.drop_rows_with_error_values_for_any_column(["gdp", "pop"])
    assert kept.frame[["entity", "time"]].values.tolist() == [["A", 2000], ["B", 2002]]


def test_complete_time_grid_and_interpolation_fill_interior_gaps() -> None:
    frame = pd.DataFrame(
        {
            "entity": ["A", "A", "A", "B", "B"],
            "time": [2000, 2001, 2002, 2000, 2002],
            "gdp": [10.0, 20.0, 30.0, 10.0, 30.0],
        }
    )
    table = ChartTable(frame=frame).complete_time_grid()
    assert table.num_rows == 6

    interpolated = table.interpolate_column_linearly("gdp")
    b_values = interpolated.frame.loc[interpolated.frame["entity"] == "B", "gdp"].tolist()
    assert b_values == pytest.approx([10.0, 20.0, 30.0])


def test_interpolation_uses_time_spacing_and_does_not_extrapolate() -> None:
    frame = pd.DataFrame(
        {
            "entity": ["A"] * 5,
            "time": [1999, 2000, 2001, 2003, 2004],
            "gdp": [np.nan, 0.0, np.nan, 30.0, np.nan],
        }
    )

    values = ChartTable(frame=frame).interpolate_column_linearly("gdp").frame["gdp"].tolist()

    assert math.isnan(values[0])
    assert values[1] == 0.0
    assert values[2] == pytest.approx(10.0)
    assert values[3] == 30.0
    assert math.isnan(values[4])


def test_percentage_conversions_and_zero_sums() -> None:
    frame = pd.DataFrame(
        {
            "entity": ["A", "B", "A", "B"],
            "time": [2000, 2000, 2001, 2001],
            "gdp": [10.0, 30.0, 0.0, 0.0],
            "pop": [1.0, 1.0, 3.0, 1.0],
        }
    )
    table = ChartTable(frame=frame)

    by_entity = table.to_percentage_from_each_entity_for_each_time("gdp")
    assert by_entity.frame["gdp"].tolist()[:2] == pytest.approx([25.0, 75.0])
    assert by_entity.frame["gdp"].iloc[2:].isna().all()
    assert by_entity.column_def("gdp").short_unit == "%"

    by_column = table.to_percentage_from_each_column_for_each_entity_and_time(["gdp", "pop"])
    sums = by_column.frame["gdp"] + by_column.frame["pop"]
    assert sums.tolist() == pytest.approx([100.0] * 4)
    assert by_column.frame["pop"].tolist()[0] == pytest.approx(100.0 / 11.0)
    assert table.frame["gdp"].tolist() == [10.0, 30.0, 0.0, 0.0]


def test_time_domain_ignores_rows_without_values() -> None:
    frame = pd.DataFrame(
        {
            "entity": ["A", "A", "A"],
            "time": [1990, 2000, 2010],
            "gdp": [np.nan, 1.0, 2.0],
        }
    )
    table = ChartTable(frame=frame)

    assert table.time_domain_for(["gdp"]) == (2000.0, 2010.0)
    assert table.time_domain_for(["nope"]) is None


def test_colors_come_from_overrides_then_color_column() -> None:
    frame = pd.DataFrame(
        {
            "entity": ["A", "B"],
            "time": [2000, 2000],
            "color": [None, "#00ff00"],
            "gdp": [1.0, 2.0],
        }
    )
    table = ChartTable(
        frame=frame,
        column_defs={"gdp": ColumnDef(slug="gdp", display_name="GDP", color="#123456")},
        entity_colors={"A": "#ff0000"},
    )

    assert table.get_color_for_entity_name("A") == "#ff0000"
    assert table.get_color_for_entity_name("B") == "#00ff00"
    assert table.get_color_for_entity_name("C") is None
    assert table.get_color_for_column_by_display_name("GDP") == "#123456"
    assert table.get_color_for_column_by_display_name("gdp") is None
    assert table.numeric_column_slugs == ["gdp"]


def test_format_time_value_for_years_and_days() -> None:
    assert _table().format_time_value(2001.0) == "2001"
    assert _table().format_time_value(-500) == "500 BCE"
    days = _table(time_unit=TimeUnit.day, zero_day="2020-01-21")
    assert days.format_time_value(10) == "Jan 31, 2020"


def test_format_value_short_units_and_abbreviations() -> None:
    percent = ColumnDef(slug="share", display_name="Share", short_unit="%")
    energy = ColumnDef(slug="coal", display_name="Coal", short_unit="TWh")
    money = ColumnDef(slug="gdp", display_name="GDP", short_unit="$", num_decimal_places=0)

    assert percent.format_value_short(25.0) == "25%"
    assert percent.format_value_short(33.333) == "33.3%"
    assert energy.format_value_short(1234.5) == "1,234.5 TWh"
    assert energy.format_value_short(1_234_567) == "1.2M TWh"
    assert money.format_value_short(-5) == "-$5"
    assert money.format_value_short(float("nan")) == ""
