from __future__ import annotations

from enum import Enum

BASE_FONT_SIZE = 16
BLUR_COLOR = "#ddd"
FALLBACK_SERIES_COLOR = "#ddd"
RELATIVE_MODE_DOMAIN = (0.0, 100.0)
EMPTY_VERTICAL_MAX = 100.0
PERCENT_UNIT = "%"

ENTITY_COLUMN = "entity"
TIME_COLUMN = "time"
COLOR_COLUMN = "color"


class SeriesStrategy(str, Enum):
    entity = "entity"
    column = "column"


class TimeUnit(str, Enum):
    year = "year"
    day = "day"


class ChartType(str, Enum):
    area = "area"
    bar = "bar"


class FailMessage(str, Enum):
    missing_variable = "Missing variable"
    no_matching_data = "No matching data"
    no_matching_points = "No matching points"
