"""
Sequential Placement

Greedy first-fit placement: buildings are taken in the caller's order and
each one goes to the first legal position found, scanning plots in
construction order and positions row-major inside each plot. There is no
backtracking and no search over building order, so the result depends on
the input order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from ..buildings.models import Building
from ..grid.abstraction import Plot, Position

logger = logging.getLogger(__name__)


@dataclass
class SequentialPlacementResult:
    """Buildings that were placed and buildings that found no position."""
    placed: List[Building] = field(default_factory=list)
    failed: List[Building] = field(default_factory=list)


def candidate_positions(building: Building, plot: Plot) -> Iterator[Position]:
    """Yield top-left positions keeping the building inside the plot (y outer, x inner)."""
    max_x = plot.position.x + plot.size.width - building.size.width
    max_y = plot.position.y + plot.size.height - building.size.height
    for y in range(plot.position.y, max_y + 1):
        for x in range(plot.position.x, max_x + 1):
            yield Position(x, y)


def find_valid_positions(building: Building, plot: Plot, engine) -> List[Position]:
    """Get every position in a plot where the engine would accept the building."""
    return [pos for pos in candidate_positions(building, plot)
            if engine.can_place(building, pos)]


class SequentialPlacer:
    """First-fit placer driving a PlacementEngine."""

    def __init__(self, engine):
        """
        Args:
            engine: PlacementEngine with roads already placed
        """
        self.engine = engine

    def place_all(self, buildings: Sequence[Building]) -> SequentialPlacementResult:
        """
        Place buildings one by one in the given order.

        Returns:
            SequentialPlacementResult; every input building ends up in
            exactly one of ``placed`` or ``failed``
        """
        result = SequentialPlacementResult()

        for building in buildings:
            if self._place_first_fit(building):
                result.placed.append(building)
            else:
                result.failed.append(building)

        logger.info("Sequential placement: %d placed, %d failed",
                    len(result.placed), len(result.failed))
        return result

    def _place_first_fit(self, building: Building) -> bool:
        for plot in self.engine.get_plots():
            for pos in candidate_positions(building, plot):
                if not self.engine.can_place(building, pos):
                    continue
                if self.engine.place_building(building, pos).is_valid:
                    return True
        logger.debug("No position found for %s", building)
        return False


def optimize_placement(buildings: Sequence[Building], engine) -> SequentialPlacementResult:
    """Place buildings on an engine with the sequential first-fit strategy."""
    return SequentialPlacer(engine).place_all(buildings)
