from __future__ import annotations

import pytest

from stacked_charts.constants import FALLBACK_SERIES_COLOR
from stacked_charts.stacking.stack import stack_offsets, stack_series
from stacked_charts.stacking.types import RawSeries, StackedPoint, StackedSeries, fail_message_for


def _raw() -> list[RawSeries]:
    return [
        RawSeries("B", False, ((2000.0, 15.0), (2001.0, 25.0))),
        RawSeries("A", True, ((2000.0, 10.0), (2001.0, 20.0))),
        RawSeries("C", False, ((2000.0, 1.5), (2001.0, 0.0))),
    ]


def test_stack_offsets_are_running_totals_of_series_below() -> None:
    offsets = stack_offsets(_raw())

    assert offsets[2000.0].tolist() == pytest.approx([0.0, 15.0, 25.0])
    assert offsets[2001.0].tolist() == pytest.approx([0.0, 25.0, 45.0])


def test_stack_series_sets_offsets_and_colors() -> None:
    stacked = stack_series(_raw(), {"B": "#111111", "A": "#222222"})

    assert [item.series_name for item in stacked] == ["B", "A", "C"]
    assert [point.y_offset for point in stacked[0].points] == [0.0, 0.0]
    assert [point.y_offset for point in stacked[1].points] == pytest.approx([15.0, 25.0])
    assert stacked[1].is_projection is True
    assert stacked[2].color == FALLBACK_SERIES_COLOR
    assert all(not point.is_fake for item in stacked for point in item.points)


def test_top_of_stack_equals_sum_of_values() -> None:
    raw = _raw()
    stacked = stack_series(raw, {})

    for index in range(2):
        total = sum(series.rows[index][1] for series in raw)
        assert stacked[-1].points[index].top == pytest.approx(total)


def test_stack_series_of_nothing_is_empty() -> None:
    assert stack_series([], {}) == []


def test_fail_message_priority() -> None:
    empty = StackedSeries("A", "#000000", False, ())
    full = StackedSeries("A", "#000000", False, (StackedPoint(x=2000.0, y=1.0),))

    assert fail_message_for([], [full]) == "Missing variable"
    assert fail_message_for(["gdp"], []) == "No matching data"
    assert fail_message_for(["gdp"], [empty]) == "No matching points"
    assert fail_message_for(["gdp"], [full]) == ""
