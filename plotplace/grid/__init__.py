"""Tile grid and plot model."""

from .abstraction import (
    ROAD_ROW,
    Grid,
    Plot,
    PlotConfiguration,
    Position,
    Size,
    Tile,
    TileType,
    build_grid,
    create_plot,
    plot_has_neighbor,
)

__all__ = [
    "ROAD_ROW",
    "Grid",
    "Plot",
    "PlotConfiguration",
    "Position",
    "Size",
    "Tile",
    "TileType",
    "build_grid",
    "create_plot",
    "plot_has_neighbor",
]
