"""
Road Strategies

Each strategy is a pure function ``(PlotConfiguration) -> List[Position]``
producing the road tiles to lay before buildings are placed. Positions are
de-duplicated in order and never lie on the infinite road row.

With W = grid width, H = grid height, w/h = plot size:
- no_roads:       nothing beyond the infinite road
- central_cross:  column W // 2 over every row, plus row 1 + (H - 1) // 2
- grid_network:   roads along every interior plot boundary
- plot_borders:   a ring inside each plot, minus edges on the grid boundary
                  and top edges next to the infinite road
- sparse_network: every other tile of the central column, plus connectors
                  through the middle of every other plot row
- plot_centers:   a plus shape around each plot's centre tile
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List

from ..grid.abstraction import ROAD_ROW, PlotConfiguration, Position

logger = logging.getLogger(__name__)


class RoadStrategy(Enum):
    """Road layouts tried by the strategy search."""
    NO_ROADS = "no_roads"
    CENTRAL_CROSS = "central_cross"
    GRID_NETWORK = "grid_network"
    PLOT_BORDERS = "plot_borders"
    SPARSE_NETWORK = "sparse_network"
    PLOT_CENTERS = "plot_centers"


def _dedupe(positions: Iterable[Position], config: PlotConfiguration) -> List[Position]:
    """Drop repeats and tiles outside the buildable rows, keeping order."""
    width, height = config.grid_width, config.grid_height
    seen = set()
    result = []
    for pos in positions:
        if pos in seen:
            continue
        if not (0 <= pos.x < width and ROAD_ROW < pos.y < height):
            continue
        seen.add(pos)
        result.append(pos)
    return result


def _midpoints(config: PlotConfiguration):
    return config.grid_width // 2, 1 + (config.grid_height - 1) // 2


def no_roads(config: PlotConfiguration) -> List[Position]:
    return []


def central_cross(config: PlotConfiguration) -> List[Position]:
    width, height = config.grid_width, config.grid_height
    mid_x, mid_y = _midpoints(config)

    positions = [Position(mid_x, y) for y in range(1, height)]
    positions += [Position(x, mid_y) for x in range(width) if x != mid_x]
    return _dedupe(positions, config)


def grid_network(config: PlotConfiguration) -> List[Position]:
    width, height = config.grid_width, config.grid_height
    w, h = config.plot_size.width, config.plot_size.height

    positions = []
    for k in range(1, config.plots_x):
        positions += [Position(k * w, y) for y in range(1, height)]
    for k in range(1, config.plots_y):
        positions += [Position(x, 1 + k * h) for x in range(width)]
    return _dedupe(positions, config)


def plot_borders(config: PlotConfiguration) -> List[Position]:
    width, height = config.grid_width, config.grid_height
    w, h = config.plot_size.width, config.plot_size.height

    positions = []
    for plot_y in range(config.plots_y):
        for plot_x in range(config.plots_x):
            left = plot_x * w
            top = 1 + plot_y * h
            right = left + w - 1
            bottom = top + h - 1

            # Top row 1 already touches the infinite road
            if top != 1:
                positions += [Position(x, top) for x in range(left, right + 1)]
            if bottom != height - 1:
                positions += [Position(x, bottom) for x in range(left, right + 1)]
            if left != 0:
                positions += [Position(left, y) for y in range(top, bottom + 1)]
            if right != width - 1:
                positions += [Position(right, y) for y in range(top, bottom + 1)]
    return _dedupe(positions, config)


def sparse_network(config: PlotConfiguration) -> List[Position]:
    width, height = config.grid_width, config.grid_height
    h = config.plot_size.height
    mid_x, _ = _midpoints(config)

    positions = [Position(mid_x, y) for y in range(1, height, 2)]
    for plot_y in range(0, config.plots_y, 2):
        y = 1 + plot_y * h + h // 2
        positions += [Position(x, y) for x in range(width) if x != mid_x]
    return _dedupe(positions, config)


def plot_centers(config: PlotConfiguration) -> List[Position]:
    w, h = config.plot_size.width, config.plot_size.height

    positions = []
    for plot_y in range(config.plots_y):
        for plot_x in range(config.plots_x):
            cx = plot_x * w + w // 2
            cy = 1 + plot_y * h + h // 2
            positions.append(Position(cx, cy))
            positions.append(Position(cx, cy - 1))
            positions.append(Position(cx, cy + 1))
            positions.append(Position(cx - 1, cy))
            positions.append(Position(cx + 1, cy))
    return _dedupe(positions, config)


ROAD_GENERATORS: Dict[RoadStrategy, Callable[[PlotConfiguration], List[Position]]] = {
    RoadStrategy.NO_ROADS: no_roads,
    RoadStrategy.CENTRAL_CROSS: central_cross,
    RoadStrategy.GRID_NETWORK: grid_network,
    RoadStrategy.PLOT_BORDERS: plot_borders,
    RoadStrategy.SPARSE_NETWORK: sparse_network,
    RoadStrategy.PLOT_CENTERS: plot_centers,
}

# Order matters: ties in the search go to the earliest strategy
DEFAULT_SEARCH_ORDER = (
    RoadStrategy.NO_ROADS,
    RoadStrategy.CENTRAL_CROSS,
    RoadStrategy.GRID_NETWORK,
    RoadStrategy.PLOT_BORDERS,
    RoadStrategy.SPARSE_NETWORK,
)


def generate_roads(strategy: RoadStrategy, config: PlotConfiguration) -> List[Position]:
    """Generate the road tiles of a strategy for a plot configuration."""
    positions = ROAD_GENERATORS[strategy](config)
    logger.debug("Strategy %s generated %d road tiles", strategy.value, len(positions))
    return positions


def get_strategy(name: str) -> RoadStrategy:
    """
    Get a road strategy by name.

    Args:
        name: Strategy name, e.g. "central_cross" (case and dashes ignored)

    Raises:
        ValueError: If the name is not a known strategy
    """
    key = name.strip().lower().replace("-", "_")
    for strategy in RoadStrategy:
        if strategy.value == key:
            return strategy
    available = ", ".join(s.value for s in RoadStrategy)
    raise ValueError(f"Unknown road strategy '{name}'. Available: {available}")


def list_strategies() -> List[str]:
    """Get all strategy names, search order first."""
    names = [s.value for s in DEFAULT_SEARCH_ORDER]
    names += [s.value for s in RoadStrategy if s not in DEFAULT_SEARCH_ORDER]
    return names
