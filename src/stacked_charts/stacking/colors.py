from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import matplotlib
import numpy as np
from matplotlib.colors import to_hex

from stacked_charts.constants import FALLBACK_SERIES_COLOR, SeriesStrategy
from stacked_charts.stacking.types import SeriesName
from stacked_charts.table import ChartTable

LOGGER = logging.getLogger(__name__)

STACKED_AREA_DEFAULT_COLORS = (
    "#3360a9",
    "#ca2628",
    "#2d8587",
    "#be5915",
    "#6d3e91",
    "#00847e",
    "#883039",
    "#578145",
    "#c15065",
    "#18470f",
    "#9a5129",
    "#4c6a9c",
)


class ColorSchemeName(str, Enum):
    stacked_area_default = "stackedAreaDefault"
    tableau = "tab10"
    tableau_wide = "tab20"
    set1 = "Set1"
    set2 = "Set2"
    set3 = "Set3"
    dark2 = "Dark2"
    paired = "Paired"
    pastel1 = "Pastel1"
    accent = "Accent"
    viridis = "viridis"
    magma = "magma"
    blues = "Blues"
    greens = "Greens"
    oranges = "Oranges"
    reds = "Reds"
    purples = "Purples"


DEFAULT_COLOR_SCHEME = ColorSchemeName.stacked_area_default


@dataclass(frozen=True)
class ColorScheme:
    name: ColorSchemeName
    colormap: str | None = None
    colors: tuple[str, ...] = ()

    def get_colors(self, count: int) -> list[str]:
        """Return exactly ``count`` colours (empty for a non-positive count)."""
        if count <= 0:
            return []
        if self.colormap is None:
            return [self.colors[index % len(self.colors)] for index in range(count)]

        cmap = matplotlib.colormaps[self.colormap]
        listed = getattr(cmap, "colors", None)
        if listed is not None and cmap.N <= 20:
            return [to_hex(listed[index % len(listed)]) for index in range(count)]
        # Continuous maps skip the palest end so every band stays visible.
        positions = np.linspace(0.25, 0.95, count) if count > 1 else np.array([0.6])
        return [to_hex(cmap(float(position))) for position in positions]


COLOR_SCHEMES: dict[ColorSchemeName, ColorScheme] = {
    ColorSchemeName.stacked_area_default: ColorScheme(
        name=ColorSchemeName.stacked_area_default,
        colors=STACKED_AREA_DEFAULT_COLORS,
    ),
    **{
        scheme_name: ColorScheme(name=scheme_name, colormap=scheme_name.value)
        for scheme_name in ColorSchemeName
        if scheme_name != ColorSchemeName.stacked_area_default
    },
}


def get_color_scheme(name: str | None) -> ColorScheme:
    if not name:
        return COLOR_SCHEMES[DEFAULT_COLOR_SCHEME]
    try:
        return COLOR_SCHEMES[ColorSchemeName(name)]
    except ValueError:
        LOGGER.warning("Unknown colour scheme %r; using %s", name, DEFAULT_COLOR_SCHEME.value)
        return COLOR_SCHEMES[DEFAULT_COLOR_SCHEME]


class OrdinalColorScale:
    """Hands out range colours to names in first-seen order, cycling when exhausted."""

    def __init__(self, colors: Iterable[str]) -> None:
        self.colors = list(colors)
        self._assigned: dict[str, str] = {}

    def __call__(self, name: str) -> str | None:
        if name in self._assigned:
            return self._assigned[name]
        if not self.colors:
            return None
        color = self.colors[len(self._assigned) % len(self.colors)]
        self._assigned[name] = color
        return color


def assign_series_colors(
    series_names: list[SeriesName],
    table: ChartTable,
    series_strategy: SeriesStrategy,
    *,
    series_count: int,
    base_color_scheme: str | None = None,
    invert_color_scheme: bool = False,
) -> dict[SeriesName, str]:
    """Resolve one colour per series: table overrides first, then the ordinal palette."""
    base_colors = get_color_scheme(base_color_scheme).get_colors(series_count)
    if invert_color_scheme:
        base_colors.reverse()
    scale = OrdinalColorScale(base_colors)

    colors: dict[SeriesName, str] = {}
    for series_name in series_names:
        if series_strategy == SeriesStrategy.entity:
            override = table.get_color_for_entity_name(series_name)
        else:
            override = table.get_color_for_column_by_display_name(series_name)
        colors[series_name] = override or scale(series_name) or FALLBACK_SERIES_COLOR
    return colors
