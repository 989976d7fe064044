"""
Layout Planner

Turns a layout request (building names plus a plot configuration) into an
optimization result with request metadata. Requests are validated before
any grid is built; rejected requests raise PlanningError with the list of
problems in ``details``.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from ..buildings.catalog import BuildingCatalog
from ..buildings.models import building_to_dict
from ..errors import PlanningError
from ..grid.abstraction import PlotConfiguration, Position
from ..placement.optimizer import StrategySearch, optimize_layout
from ..placement.roads import RoadStrategy, get_strategy
from ..validation.layout import validate_plot_configuration

logger = logging.getLogger(__name__)


@dataclass
class LayoutRequest:
    """A request to lay out named buildings on a plot configuration."""
    building_names: List[str]
    plot_configuration: Union[PlotConfiguration, Mapping[str, Any]]
    road_positions: Optional[List[Position]] = None
    search: bool = False
    strategy: Optional[RoadStrategy] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LayoutRequest':
        """
        Build a request from its JSON body.

        ``{buildingNames, plotConfiguration, roadPlacements?: {positions},
        search?, roadStrategy?}``

        Raises:
            PlanningError: If required fields are missing or malformed
        """
        names = data.get("buildingNames")
        if not isinstance(names, list) or not names:
            raise PlanningError("buildingNames is required and must be a non-empty array")

        plot_configuration = data.get("plotConfiguration")
        if not isinstance(plot_configuration, Mapping):
            raise PlanningError("plotConfiguration is required")

        road_positions = None
        roads = data.get("roadPlacements")
        if roads:
            positions = roads.get("positions", []) if isinstance(roads, Mapping) else roads
            try:
                road_positions = [Position.from_dict(p) for p in positions]
            except (KeyError, TypeError, ValueError) as e:
                raise PlanningError("roadPlacements must be a list of {x, y} positions",
                                    [str(e)]) from e

        strategy = None
        if data.get("roadStrategy"):
            try:
                strategy = get_strategy(str(data["roadStrategy"]))
            except ValueError as e:
                raise PlanningError("Invalid road strategy", [str(e)]) from e

        return cls(
            building_names=[str(n) for n in names],
            plot_configuration=plot_configuration,
            road_positions=road_positions,
            search=bool(data.get("search", False)),
            strategy=strategy,
        )


class LayoutPlanner:
    """Resolves requests against a building catalog and runs the optimizer."""

    def __init__(self, catalog: Optional[BuildingCatalog] = None):
        self.catalog = catalog or BuildingCatalog()

    def plan(self, request: LayoutRequest) -> Dict[str, Any]:
        """
        Run a layout request.

        Repeated names produce one building instance each. Names missing from
        the catalog are reported in ``metadata.missingBuildings``.

        Returns:
            The optimization result dict with an added ``metadata`` block

        Raises:
            PlanningError: If the plot configuration is invalid or none of the
                           requested buildings exist
        """
        report = validate_plot_configuration(request.plot_configuration)
        if not report.is_valid:
            raise PlanningError("Invalid plot configuration", report.errors)

        config = request.plot_configuration
        if not isinstance(config, PlotConfiguration):
            config = PlotConfiguration.from_dict(config)

        logger.info("Looking up %d buildings in catalog", len(request.building_names))
        lookup = self.catalog.expand_records(request.building_names)
        if not lookup.buildings:
            raise PlanningError("No buildings found in catalog", lookup.missing)

        logger.info("Found %d buildings, generating layout", lookup.found)

        candidates = None
        if request.search:
            search_result = StrategySearch(config).run(lookup.buildings,
                                                       request.road_positions)
            result = search_result.best
            candidates = search_result.to_dict()["candidates"]
        else:
            result = optimize_layout(config, lookup.buildings,
                                     road_positions=request.road_positions,
                                     strategy=request.strategy)

        output = result.to_dict()
        output["metadata"] = {
            "requestedBuildings": len(request.building_names),
            "foundBuildings": lookup.found,
            "missingBuildings": lookup.missing or None,
            "plotConfiguration": config.to_dict(),
            "roadPlacements": (
                {"positions": [p.to_dict() for p in request.road_positions]}
                if request.road_positions else None
            ),
            "strategy": result.strategy.value if result.strategy else None,
        }
        if candidates is not None:
            output["metadata"]["candidates"] = candidates
        return output


def export_layout(engine) -> str:
    """Export an engine's grid, buildings and inventory as JSON."""
    grid = engine.get_grid()
    data = {
        "grid": {
            "width": grid.width,
            "height": grid.height,
            "plots": [plot.to_dict() for plot in grid.plots],
        },
        "buildings": [building_to_dict(b) for b in engine.get_buildings().values()],
        "inventory": [[name, count] for name, count in engine.get_inventory().items()],
        "exportedAt": datetime.now(timezone.utc).isoformat(),
    }
    return json.dumps(data, indent=2)
