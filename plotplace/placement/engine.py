"""
Placement Engine

Owns a single grid and the set of buildings placed on it. Provides road
placement, legality checks for building placement, placement/removal, grid
consistency validation and an ASCII rendering of the grid.

Placement legality is checked in a fixed order, stopping at the first
failure:
1. Position inside the grid
2. A plot contains the position
3. The building's whole rectangle lies inside that plot
4. No tile of the rectangle is already occupied
5. Road access (one 4-connected border tile is a road), if required

``evaluate_placement`` and ``can_place`` never mutate state;
``place_building`` commits only after every check passed.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..buildings.models import Building, border_positions, building_to_dict, occupied_positions
from ..grid.abstraction import (
    ROAD_ROW,
    Grid,
    Plot,
    PlotConfiguration,
    Position,
    Tile,
    TileType,
    build_grid,
)
from ..validation.layout import LayoutValidator, ValidationReport
from .bonus import BonusCalculator, RevenueOutput

logger = logging.getLogger(__name__)


class RejectionReason(Enum):
    """Why a placement attempt was rejected."""
    DUPLICATE_ID = "duplicate_id"
    INVALID_SIZE = "invalid_size"
    OUT_OF_BOUNDS = "out_of_bounds"
    NO_PLOT = "no_plot"
    OUTSIDE_PLOT = "outside_plot"
    OVERLAP = "overlap"
    NO_ROAD_ACCESS = "no_road_access"


@dataclass
class PlacementOutcome:
    """Result of a single placement attempt.

    ``has_road_access`` is only evaluated once the geometric checks passed;
    it stays False when an earlier check rejected the placement. Buildings
    that do not need a road report True.
    """
    building: Building
    position: Position
    plot_id: str = ""
    is_valid: bool = False
    has_road_access: bool = False
    reason: Optional[RejectionReason] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "building": building_to_dict(self.building),
            "position": self.position.to_dict(),
            "plotId": self.plot_id,
            "isValid": self.is_valid,
            "hasRoadAccess": self.has_road_access,
            "reason": self.reason.value if self.reason else None,
        }


class PlacementEngine:
    """
    Places roads and buildings on a grid built from a plot configuration.

    An engine is built for one optimization attempt and is never shared
    between attempts.
    """

    def __init__(self, config: PlotConfiguration):
        """
        Initialize the engine with a fresh grid.

        Args:
            config: Plot configuration the grid is built from

        Raises:
            GridConstructionError: If a plot has no neighbor
        """
        self.config = config
        self.grid: Grid = build_grid(config)
        self._buildings: Dict[str, Building] = {}
        self._bonus = BonusCalculator(self)

    # --- Accessors ---

    def get_grid(self) -> Grid:
        return self.grid

    def get_plots(self) -> List[Plot]:
        return self.grid.plots

    def get_buildings(self) -> Dict[str, Building]:
        """Get placed buildings keyed by id, in placement order."""
        return self._buildings

    def get_building(self, building_id: str) -> Optional[Building]:
        return self._buildings.get(building_id)

    def get_inventory(self) -> Dict[str, int]:
        """Get the number of placed buildings per building name."""
        return dict(Counter(b.name for b in self._buildings.values()))

    # --- Roads ---

    def place_road(self, position: Position) -> bool:
        """
        Mark a tile as road.

        Returns:
            False without changing anything if the position is outside the
            grid, on the infinite road row, or covered by a building.
            True otherwise (also for tiles that already are road).
        """
        if not self.grid.in_bounds(position) or position.y == ROAD_ROW:
            return False

        plot = self.grid.plot_at(position)
        if plot is None:
            return False

        if self.grid.tile_at(position).type == TileType.BUILDING:
            return False

        self.grid.set_tile(position, Tile.road())
        plot.set_local_tile(position, Tile.road())
        return True

    def place_roads(self, positions: Iterable[Position]) -> int:
        """Place a road at each position, returning how many were accepted."""
        requested = 0
        placed = 0
        for position in positions:
            requested += 1
            if self.place_road(position):
                placed += 1
        logger.debug("Placed %d of %d requested road tiles", placed, requested)
        return placed

    # --- Placement checks ---

    def evaluate_placement(self, building: Building, position: Position) -> PlacementOutcome:
        """Run every placement check without modifying the grid."""
        outcome = PlacementOutcome(building=building, position=position)

        if building.id in self._buildings:
            outcome.reason = RejectionReason.DUPLICATE_ID
            return outcome

        if building.size.width <= 0 or building.size.height <= 0:
            outcome.reason = RejectionReason.INVALID_SIZE
            return outcome

        if not self.grid.in_bounds(position):
            outcome.reason = RejectionReason.OUT_OF_BOUNDS
            return outcome

        plot = self.grid.plot_at(position)
        if plot is None:
            outcome.reason = RejectionReason.NO_PLOT
            return outcome
        outcome.plot_id = plot.id

        if not plot.contains_rect(position, building.size):
            outcome.reason = RejectionReason.OUTSIDE_PLOT
            return outcome

        if self._has_overlap(building, position):
            outcome.reason = RejectionReason.OVERLAP
            return outcome

        if building.requires_road:
            outcome.has_road_access = self.has_road_access(building, position)
            if not outcome.has_road_access:
                outcome.reason = RejectionReason.NO_ROAD_ACCESS
                return outcome
        else:
            outcome.has_road_access = True

        outcome.is_valid = True
        return outcome

    def can_place(self, building: Building, position: Position) -> bool:
        """Check if a building could be placed at a position."""
        return self.evaluate_placement(building, position).is_valid

    def has_road_access(self, building: Building, position: Position) -> bool:
        """Check if any 4-connected border tile of the rectangle is a road."""
        for pos in border_positions(building, position):
            if self.grid.in_bounds(pos) and self.grid.tile_at(pos).type == TileType.ROAD:
                return True
        return False

    def _has_overlap(self, building: Building, position: Position) -> bool:
        # Out-of-bounds tiles count as overlap
        for pos in occupied_positions(building, position):
            if not self.grid.in_bounds(pos):
                return True
            if self.grid.tile_at(pos).occupied:
                return True
        return False

    # --- Placement ---

    def place_building(self, building: Building, position: Position) -> PlacementOutcome:
        """
        Attempt to place a building with its top-left tile at ``position``.

        On success the building's tiles are marked, ``building.position`` is
        set and the building is tracked by the engine. On failure nothing
        changes.
        """
        outcome = self.evaluate_placement(building, position)
        if not outcome.is_valid:
            logger.debug("Rejected %s at (%d, %d): %s", building, position.x,
                         position.y, outcome.reason.value)
            return outcome

        plot = self.grid.get_plot(outcome.plot_id)
        for pos in occupied_positions(building, position):
            self.grid.set_tile(pos, Tile.building(building.id))
            plot.set_local_tile(pos, Tile.building(building.id))

        building.position = position
        self._buildings[building.id] = building
        return outcome

    def remove_building(self, building_id: str) -> bool:
        """
        Remove a placed building and free its tiles.

        Returns:
            True if the building was removed, False if the id is unknown or
            the building has no position
        """
        building = self._buildings.get(building_id)
        if building is None or building.position is None:
            return False

        for pos in occupied_positions(building):
            self.grid.set_tile(pos, Tile.empty())
            plot = self.grid.plot_at(pos)
            if plot is not None:
                plot.set_local_tile(pos, Tile.empty())

        del self._buildings[building_id]
        building.position = None
        return True

    # --- Bonuses and revenue ---

    def calculate_revenue_output(self, building: Building) -> RevenueOutput:
        """Calculate coin and passenger output of a building, with bonuses."""
        return self._bonus.calculate_revenue_output(building)

    def get_buildings_affected_by_bonus(self, building: Building) -> List[Building]:
        """Get placed buildings receiving a bonus from ``building``."""
        return self._bonus.get_buildings_affected_by_bonus(building)

    # --- Validation and output ---

    def validate_grid(self) -> ValidationReport:
        """Check grid-wide consistency of roads, plots and buildings."""
        return LayoutValidator(self).validate()

    def visualize_grid(self) -> str:
        """
        Render the grid as text.

        One line per row, tiles separated by a space. ``.`` is empty, ``R``
        is road and building tiles show the first letter of the building
        name in upper case.
        """
        lines = []
        for row in self.grid.tiles:
            lines.append(" ".join(self._tile_character(tile) for tile in row))
        return "\n".join(lines) + "\n"

    def _tile_character(self, tile: Tile) -> str:
        if tile.type == TileType.EMPTY:
            return "."
        if tile.type == TileType.ROAD:
            return "R"
        if tile.type == TileType.BUILDING:
            building = self._buildings.get(tile.building_id) if tile.building_id else None
            if building and building.name:
                return building.name[0].upper()
            return "B"
        return "?"

    def __repr__(self) -> str:
        return f"PlacementEngine(grid={self.grid!r}, buildings={len(self._buildings)})"
