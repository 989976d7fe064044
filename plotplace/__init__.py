"""
PlotPlace - City Layout Optimizer

Places buildings on a grid of fixed-size plots, checks placement legality
(plot containment, overlap, road access), computes revenue with proximity
bonuses and searches road layouts for the highest total revenue.
"""

__version__ = "0.1.0"
__author__ = "PlotPlace Team"

from .grid.abstraction import Grid, Plot, PlotConfiguration, Position, Size
from .buildings.catalog import BuildingCatalog
from .placement.engine import PlacementEngine
from .placement.optimizer import optimize_layout, search_road_strategies
from .api.planner import LayoutPlanner, LayoutRequest

__all__ = [
    "Grid",
    "Plot",
    "PlotConfiguration",
    "Position",
    "Size",
    "BuildingCatalog",
    "PlacementEngine",
    "optimize_layout",
    "search_road_strategies",
    "LayoutPlanner",
    "LayoutRequest",
]
