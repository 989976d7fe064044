"""
Grid Abstraction Layer

Tile grid and plot model shared by the placement engine, the bonus
calculator and the road strategies. A grid is a rectangle of tiles whose
first row (y = 0) is the permanent "infinite road"; the remaining rows are
divided into fixed-size plots. Every building must fit inside exactly one
plot.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..errors import GridConstructionError

# Row reserved for the infinite road
ROAD_ROW = 0


class TileType(Enum):
    """Contents of a single grid tile."""
    EMPTY = "empty"
    ROAD = "road"
    BUILDING = "building"


@dataclass(frozen=True)
class Position:
    """Integer tile coordinates, grid-relative."""
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Position':
        return cls(x=int(data["x"]), y=int(data["y"]))


@dataclass(frozen=True)
class Size:
    """Tile extents of a plot or building."""
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass
class Tile:
    """A single cell on the grid."""
    type: TileType = TileType.EMPTY
    occupied: bool = False
    building_id: Optional[str] = None

    @classmethod
    def empty(cls) -> 'Tile':
        return cls(TileType.EMPTY, False)

    @classmethod
    def road(cls) -> 'Tile':
        return cls(TileType.ROAD, True)

    @classmethod
    def building(cls, building_id: str) -> 'Tile':
        return cls(TileType.BUILDING, True, building_id)


@dataclass
class Plot:
    """A fixed-size rectangular region of the grid.

    ``plot_x``/``plot_y`` address the plot in the grid-of-plots, ``position``
    is its top-left tile. ``tiles`` is a local copy of the plot's
    sub-rectangle, indexed ``tiles[local_y][local_x]``.
    """
    id: str
    position: Position
    size: Size
    plot_x: int = 0
    plot_y: int = 0
    tiles: List[List[Tile]] = field(default_factory=list)

    @property
    def end_x(self) -> int:
        """Last tile column (inclusive)."""
        return self.position.x + self.size.width - 1

    @property
    def end_y(self) -> int:
        """Last tile row (inclusive)."""
        return self.position.y + self.size.height - 1

    def contains(self, position: Position) -> bool:
        return (self.position.x <= position.x <= self.end_x and
                self.position.y <= position.y <= self.end_y)

    def contains_rect(self, position: Position, size: Size) -> bool:
        """Check if a rectangle anchored at ``position`` lies inside the plot."""
        return (position.x >= self.position.x and
                position.y >= self.position.y and
                position.x + size.width - 1 <= self.end_x and
                position.y + size.height - 1 <= self.end_y)

    def to_local(self, position: Position) -> Position:
        return Position(position.x - self.position.x,
                        position.y - self.position.y)

    def local_tile(self, position: Position) -> Tile:
        """Get the plot's own copy of the tile at a grid position."""
        local = self.to_local(position)
        return self.tiles[local.y][local.x]

    def set_local_tile(self, position: Position, tile: Tile):
        local = self.to_local(position)
        self.tiles[local.y][local.x] = tile

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
        }


@dataclass(frozen=True)
class PlotConfiguration:
    """Input describing the grid of plots."""
    plots_x: int
    plots_y: int
    plot_size: Size

    @property
    def grid_width(self) -> int:
        return self.plots_x * self.plot_size.width

    @property
    def grid_height(self) -> int:
        # +1 for the infinite road row
        return self.plots_y * self.plot_size.height + 1

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PlotConfiguration':
        """Build from the wire shape ``{plotsX, plotsY, plotSize: {width, height}}``.

        snake_case keys are accepted as well. Values are not range-checked
        here; see ``validate_plot_configuration``.
        """
        plots_x = data.get("plotsX", data.get("plots_x"))
        plots_y = data.get("plotsY", data.get("plots_y"))
        size = data.get("plotSize", data.get("plot_size"))
        if plots_x is None or plots_y is None or size is None:
            raise ValueError("plot configuration requires plotsX, plotsY and plotSize")
        if isinstance(size, Size):
            plot_size = size
        else:
            plot_size = Size(int(size["width"]), int(size["height"]))
        return cls(plots_x=int(plots_x), plots_y=int(plots_y), plot_size=plot_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plotsX": self.plots_x,
            "plotsY": self.plots_y,
            "plotSize": self.plot_size.to_dict(),
        }


@dataclass
class Grid:
    """The full tile grid with its plots.

    ``tiles`` is indexed ``tiles[y][x]``.
    """
    width: int
    height: int
    tiles: List[List[Tile]] = field(default_factory=list)
    plots: List[Plot] = field(default_factory=list)
    plots_x: int = 0
    plots_y: int = 0

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def tile_at(self, position: Position) -> Tile:
        return self.tiles[position.y][position.x]

    def set_tile(self, position: Position, tile: Tile):
        self.tiles[position.y][position.x] = tile

    def plot_at(self, position: Position) -> Optional[Plot]:
        """Get the first plot (construction order) containing a position."""
        for plot in self.plots:
            if plot.contains(position):
                return plot
        return None

    def get_plot(self, plot_id: str) -> Optional[Plot]:
        for plot in self.plots:
            if plot.id == plot_id:
                return plot
        return None

    def iter_positions(self) -> Iterator[Position]:
        """Row-major iteration over every tile position."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def __repr__(self) -> str:
        return (f"Grid(size={self.width}x{self.height}, "
                f"plots={len(self.plots)})")


def plot_has_neighbor(plot_x: int, plot_y: int, plots_x: int, plots_y: int) -> bool:
    """Check if a plot has another plot to its north, south, east or west."""
    has_north = plot_y > 0
    has_south = plot_y < plots_y - 1
    has_east = plot_x < plots_x - 1
    has_west = plot_x > 0
    return has_north or has_south or has_east or has_west


def _empty_tiles(width: int, height: int) -> List[List[Tile]]:
    return [[Tile.empty() for _ in range(width)] for _ in range(height)]


def create_plot(plot_x: int, plot_y: int, config: PlotConfiguration) -> Plot:
    """Create the plot at grid-of-plots coordinate (plot_x, plot_y).

    Raises:
        GridConstructionError: If the plot has no neighbor in any direction
    """
    if not plot_has_neighbor(plot_x, plot_y, config.plots_x, config.plots_y):
        raise GridConstructionError(
            f"Plot at ({plot_x}, {plot_y}) has no neighbors in any direction"
        )

    size = config.plot_size
    return Plot(
        id=f"plot_{plot_x}_{plot_y}",
        # +1 skips the infinite road row
        position=Position(plot_x * size.width, plot_y * size.height + 1),
        size=size,
        plot_x=plot_x,
        plot_y=plot_y,
        tiles=_empty_tiles(size.width, size.height),
    )


def build_grid(config: PlotConfiguration) -> Grid:
    """
    Build a fully initialized grid for a plot configuration.

    Row 0 is filled with occupied road tiles, every other row with empty
    tiles. Plots are created row by row (plot_y outer, plot_x inner).

    Raises:
        GridConstructionError: If any plot lacks a neighbor
    """
    width = config.grid_width
    height = config.grid_height

    tiles: List[List[Tile]] = []
    for y in range(height):
        if y == ROAD_ROW:
            tiles.append([Tile.road() for _ in range(width)])
        else:
            tiles.append([Tile.empty() for _ in range(width)])

    plots = [
        create_plot(plot_x, plot_y, config)
        for plot_y in range(config.plots_y)
        for plot_x in range(config.plots_x)
    ]

    return Grid(
        width=width,
        height=height,
        tiles=tiles,
        plots=plots,
        plots_x=config.plots_x,
        plots_y=config.plots_y,
    )
