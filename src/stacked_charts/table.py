from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from stacked_charts.constants import (
    COLOR_COLUMN,
    ENTITY_COLUMN,
    PERCENT_UNIT,
    TIME_COLUMN,
    TimeUnit,
)

LOGGER = logging.getLogger(__name__)

Time = float
EntityName = str

RESERVED_COLUMNS = (ENTITY_COLUMN, TIME_COLUMN, COLOR_COLUMN)
PREFIX_UNITS = ("$", "£", "€")
SHORT_SUFFIXES = ((1e12, "T"), (1e9, "B"), (1e6, "M"))


def _strip_trailing_zeroes(text: str) -> str:
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


@dataclass(frozen=True)
class ColumnDef:
    slug: str
    display_name: str
    color: str | None = None
    is_projection: bool = False
    short_unit: str = ""
    num_decimal_places: int = 1

    def format_value_short(self, value: float) -> str:
        if value is None or not math.isfinite(float(value)):
            return ""
        number = float(value)
        suffix = ""
        for threshold, label in SHORT_SUFFIXES:
            if abs(number) >= threshold:
                number = number / threshold
                suffix = label
                break
        text = _strip_trailing_zeroes(f"{number:,.{self.num_decimal_places}f}") + suffix
        if text in ("-0", ""):
            text = "0"

        unit = self.short_unit
        if not unit:
            return text
        if unit in PREFIX_UNITS:
            return f"-{unit}{text[1:]}" if text.startswith("-") else f"{unit}{text}"
        if unit == PERCENT_UNIT:
            return f"{text}{unit}"
        return f"{text} {unit}"


@dataclass(frozen=True, eq=False)
class ChartTable:
    """Immutable entity-by-time table; every operation returns a new table.

    Value columns hold floats once validated; ``NaN`` is the invalid marker.
    """

    frame: pd.DataFrame
    column_defs: Mapping[str, ColumnDef] = field(default_factory=dict)
    entity_colors: Mapping[str, str] = field(default_factory=dict)
    time_unit: TimeUnit = TimeUnit.year
    zero_day: str = "2020-01-21"

    def _with_frame(
        self,
        frame: pd.DataFrame,
        column_defs: Mapping[str, ColumnDef] | None = None,
    ) -> ChartTable:
        return replace(
            self,
            frame=frame.reset_index(drop=True),
            column_defs=dict(self.column_defs if column_defs is None else column_defs),
        )

    @property
    def num_rows(self) -> int:
        return int(len(self.frame))

    @property
    def entity_names(self) -> list[EntityName]:
        if self.frame.empty:
            return []
        return [str(name) for name in pd.unique(self.frame[ENTITY_COLUMN])]

    @property
    def value_column_slugs(self) -> list[str]:
        return [str(column) for column in self.frame.columns if column not in RESERVED_COLUMNS]

    @property
    def numeric_column_slugs(self) -> list[str]:
        """Value columns holding at least one number; stray text cells do not disqualify."""
        slugs: list[str] = []
        for slug in self.value_column_slugs:
            column = self.frame[slug]
            if pd.api.types.is_bool_dtype(column):
                continue
            if pd.to_numeric(column, errors="coerce").notna().any():
                slugs.append(slug)
        return slugs

    def column_def(self, slug: str) -> ColumnDef:
        return self.column_defs.get(slug) or ColumnDef(slug=slug, display_name=slug)

    def get_columns(self, slugs: Iterable[str]) -> list[ColumnDef]:
        return [self.column_def(slug) for slug in slugs]

    def filter_by_entity_names(self, names: Iterable[EntityName]) -> ChartTable:
        wanted = set(names)
        mask = self.frame[ENTITY_COLUMN].astype(str).isin(wanted)
        return self._with_frame(self.frame.loc[mask].copy())

    def drop_duplicate_rows(self) -> ChartTable:
        duplicated = self.frame.duplicated(subset=[ENTITY_COLUMN, TIME_COLUMN], keep="first")
        if not duplicated.any():
            return self
        LOGGER.warning(
            "Dropping %d duplicate entity/time rows (keeping first occurrence)",
            int(duplicated.sum()),
        )
        return self._with_frame(self.frame.loc[~duplicated].copy())

    def replace_non_numeric_cells_with_error_values(self, slugs: Iterable[str]) -> ChartTable:
        working = self.frame.copy()
        for slug in slugs:
            if slug not in working.columns:
                LOGGER.warning("Column %s not found in table; treating as invalid", slug)
                working[slug] = np.nan
                continue
            values = pd.to_numeric(working[slug], errors="coerce").astype(float)
            working[slug] = values.where(np.isfinite(values))
        return self._with_frame(working)

    def drop_rows_with_error_values_for_all_columns(self, slugs: list[str]) -> ChartTable:
        valid = self.frame[slugs].notna().any(axis=1)
        return self._with_frame(self.frame.loc[valid].copy())

    def drop_rows_with_error_values_for_any_column(self, slugs: list[str]) -> ChartTable:
        valid = self.frame[slugs].notna().all(axis=1)
        return self._with_frame(self.frame.loc[valid].copy())

    def complete_time_grid(self) -> ChartTable:
        """Insert missing (entity, time) rows so every entity spans every table time."""
        if self.frame.empty:
            return self
        entities = list(pd.unique(self.frame[ENTITY_COLUMN]))
        times = sorted(pd.unique(self.frame[TIME_COLUMN]))
        if len(self.frame) == len(entities) * len(times):
            return self
        full_index = pd.MultiIndex.from_product(
            [entities, times],
            names=[ENTITY_COLUMN, TIME_COLUMN],
        )
        working = self.frame.set_index([ENTITY_COLUMN, TIME_COLUMN]).reindex(full_index)
        working = working.reset_index()
        if COLOR_COLUMN in working.columns:
            grouped_colors = working.groupby(ENTITY_COLUMN, sort=False)[COLOR_COLUMN]
            working[COLOR_COLUMN] = grouped_colors.transform(
                lambda colors: colors.ffill().bfill()
            )
        return self._with_frame(working[list(self.frame.columns)])

    def interpolate_column_linearly(self, slug: str) -> ChartTable:
        working = self.frame.sort_values([ENTITY_COLUMN, TIME_COLUMN], kind="mergesort")
        working = working.reset_index(drop=True)
        values = working[slug].to_numpy(dtype=float)
        times = working[TIME_COLUMN].to_numpy(dtype=float)
        interpolated = values.copy()
        for positions in working.groupby(ENTITY_COLUMN, sort=False).indices.values():
            per_entity = pd.Series(values[positions], index=times[positions])
            interpolated[positions] = per_entity.interpolate(
                method="index",
                limit_area="inside",
            ).to_numpy(dtype=float)
        working[slug] = interpolated
        return self._with_frame(working)

    def _as_percentage(self, slugs: list[str], totals: pd.Series) -> ChartTable:
        working = self.frame.copy()
        nonzero = totals != 0
        for slug in slugs:
            working[slug] = (working[slug] / totals * 100.0).where(nonzero)
        column_defs = dict(self.column_defs)
        for slug in slugs:
            column_defs[slug] = replace(self.column_def(slug), short_unit=PERCENT_UNIT)
        return self._with_frame(working, column_defs=column_defs)

    def to_percentage_from_each_entity_for_each_time(self, slug: str) -> ChartTable:
        totals = self.frame.groupby(TIME_COLUMN)[slug].transform("sum")
        return self._as_percentage([slug], totals)

    def to_percentage_from_each_column_for_each_entity_and_time(
        self, slugs: list[str]
    ) -> ChartTable:
        totals = self.frame[slugs].sum(axis=1)
        return self._as_percentage(slugs, totals)

    def time_domain_for(self, slugs: list[str]) -> tuple[Time, Time] | None:
        present = [slug for slug in slugs if slug in self.frame.columns]
        if not present or self.frame.empty:
            return None
        times = self.frame.loc[self.frame[present].notna().any(axis=1), TIME_COLUMN]
        if times.empty:
            return None
        return float(times.min()), float(times.max())

    def rows_by_entity_name(self, slug: str) -> dict[EntityName, list[tuple[Time, float]]]:
        rows: dict[EntityName, list[tuple[Time, float]]] = {}
        if self.frame.empty or slug not in self.frame.columns:
            return rows
        valid = self.frame.loc[self.frame[slug].notna(), [ENTITY_COLUMN, TIME_COLUMN, slug]]
        valid = valid.sort_values(TIME_COLUMN, kind="mergesort")
        for entity, group in valid.groupby(ENTITY_COLUMN, sort=False):
            rows[str(entity)] = [
                (float(time), float(value))
                for time, value in zip(group[TIME_COLUMN], group[slug])
            ]
        return rows

    def get_color_for_entity_name(self, entity_name: EntityName) -> str | None:
        if entity_name in self.entity_colors:
            return self.entity_colors[entity_name]
        if COLOR_COLUMN not in self.frame.columns:
            return None
        colors = self.frame.loc[
            self.frame[ENTITY_COLUMN].astype(str) == entity_name, COLOR_COLUMN
        ].dropna()
        if colors.empty:
            return None
        return str(colors.iloc[0])

    def get_color_for_column_by_display_name(self, display_name: str) -> str | None:
        for slug in self.value_column_slugs:
            column = self.column_def(slug)
            if column.display_name == display_name:
                return column.color
        return None

    def get_label_for_entity_name(self, entity_name: EntityName) -> str:
        return str(entity_name)

    def format_time_value(self, time: Time) -> str:
        if self.time_unit == TimeUnit.day:
            day = pd.Timestamp(self.zero_day) + pd.Timedelta(days=int(time))
            return f"{day:%b} {day.day}, {day.year}"
        year = int(time)
        if year < 0:
            return f"{abs(year)} BCE"
        return str(year)
