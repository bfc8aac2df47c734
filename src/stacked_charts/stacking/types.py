from __future__ import annotations

from dataclasses import dataclass, field

from stacked_charts.constants import FailMessage

SeriesName = str


@dataclass(frozen=True)
class RawSeries:
    series_name: SeriesName
    is_projection: bool
    rows: tuple[tuple[float, float], ...]

    @property
    def times(self) -> list[float]:
        return [time for time, _ in self.rows]


@dataclass(frozen=True)
class StackedPoint:
    x: float
    y: float
    y_offset: float = 0.0
    is_fake: bool = False

    @property
    def top(self) -> float:
        return self.y + self.y_offset


@dataclass(frozen=True)
class StackedSeries:
    series_name: SeriesName
    color: str
    is_projection: bool
    points: tuple[StackedPoint, ...] = field(default_factory=tuple)


def fail_message_for(
    y_column_slugs: list[str],
    series: list[StackedSeries],
) -> str:
    if not y_column_slugs:
        return FailMessage.missing_variable.value
    if not series:
        return FailMessage.no_matching_data.value
    if not any(item.points for item in series):
        return FailMessage.no_matching_points.value
    return ""
