"""Named plot configurations."""

from .profiles import (
    AIRPORT_CITY,
    AIRPORT_CITY_LARGE,
    AIRPORT_CITY_ROW,
    PRESETS,
    PlotPreset,
    get_preset,
    list_presets,
    load_presets,
)

__all__ = [
    "AIRPORT_CITY",
    "AIRPORT_CITY_LARGE",
    "AIRPORT_CITY_ROW",
    "PRESETS",
    "PlotPreset",
    "get_preset",
    "list_presets",
    "load_presets",
]
