"""
Layout Validation

Consistency checks over a placement engine's grid, and up-front validation
of plot configurations.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

from ..buildings.models import occupied_positions
from ..grid.abstraction import ROAD_ROW, PlotConfiguration, Position, TileType, plot_has_neighbor

logger = logging.getLogger(__name__)


@dataclass
class LayoutIssue:
    """An issue found during layout validation."""
    severity: str  # "error", "warning"
    category: str  # "plot", "road", "building", "config"
    message: str
    location: str = ""  # Plot id, building id or tile coordinate


@dataclass
class ValidationReport:
    """Outcome of a validation run."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    issues: List[LayoutIssue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: List[LayoutIssue]) -> 'ValidationReport':
        errors = [i.message for i in issues if i.severity == "error"]
        return cls(is_valid=not errors, errors=errors, issues=list(issues))

    def to_dict(self) -> Dict[str, Any]:
        return {"isValid": self.is_valid, "errors": list(self.errors)}

    def get_summary(self) -> str:
        """Get a readable summary of the validation result."""
        if not self.issues:
            return "Layout validation passed with no issues."

        errors = sum(1 for i in self.issues if i.severity == "error")
        warnings = sum(1 for i in self.issues if i.severity == "warning")
        lines = [f"Layout validation: {errors} errors, {warnings} warnings", ""]

        prefix = {"error": "[ERROR]", "warning": "[WARN]"}
        for issue in self.issues:
            lines.append(f"{prefix.get(issue.severity, '[INFO]')} [{issue.category}] {issue.message}")
            if issue.location:
                lines.append(f"    Location: {issue.location}")
        return "\n".join(lines)


class LayoutValidator:
    """Validates the grid and building set of a placement engine."""

    def __init__(self, engine):
        """
        Args:
            engine: PlacementEngine to validate
        """
        self.engine = engine
        self.grid = engine.get_grid()
        self.issues: List[LayoutIssue] = []

    def validate(self) -> ValidationReport:
        """Run all layout checks."""
        self.issues = []

        self._check_plot_neighbors()
        self._check_infinite_road()
        self._check_road_access()
        self._check_tile_references()
        self._check_building_tiles()
        self._check_plot_mirrors()

        report = ValidationReport.from_issues(self.issues)
        if not report.is_valid:
            logger.debug("Layout validation failed with %d errors", len(report.errors))
        return report

    def _error(self, category: str, message: str, location: str = ""):
        self.issues.append(LayoutIssue("error", category, message, location))

    def _check_plot_neighbors(self):
        """Check that every plot has a neighbor in the grid of plots."""
        for plot in self.grid.plots:
            if not plot_has_neighbor(plot.plot_x, plot.plot_y,
                                     self.grid.plots_x, self.grid.plots_y):
                self._error("plot", f"Plot {plot.id} has no neighbors", plot.id)

    def _check_infinite_road(self):
        """Check that the whole first row is road."""
        row = self.grid.tiles[ROAD_ROW] if self.grid.tiles else []
        if not row or any(tile.type != TileType.ROAD for tile in row):
            self._error("road", "Infinite road at Y = 0 is not properly initialized")

    def _check_road_access(self):
        """Check that buildings requiring a road still touch one."""
        for building in self.engine.get_buildings().values():
            if not building.requires_road or building.position is None:
                continue
            if not self.engine.has_road_access(building, building.position):
                pos = building.position
                self._error(
                    "building",
                    f"Building {building.name} at ({pos.x}, {pos.y}) requires "
                    f"road access but doesn't have it",
                    building.id,
                )

    def _check_tile_references(self):
        """Check that every building tile points at a tracked building."""
        buildings = self.engine.get_buildings()
        for pos in self.grid.iter_positions():
            tile = self.grid.tile_at(pos)
            if tile.type != TileType.BUILDING:
                continue
            if tile.building_id not in buildings:
                self._error(
                    "building",
                    f"Tile ({pos.x}, {pos.y}) references unknown building {tile.building_id}",
                    f"({pos.x}, {pos.y})",
                )

    def _check_building_tiles(self):
        """Check that each building owns every tile of its rectangle."""
        for building in self.engine.get_buildings().values():
            for pos in occupied_positions(building):
                if not self.grid.in_bounds(pos):
                    self._error("building",
                                f"Building {building.name} extends outside the grid",
                                building.id)
                    break
                tile = self.grid.tile_at(pos)
                if tile.type != TileType.BUILDING or tile.building_id != building.id:
                    self._error(
                        "building",
                        f"Building {building.name} ({building.id}) does not own "
                        f"tile ({pos.x}, {pos.y})",
                        building.id,
                    )

    def _check_plot_mirrors(self):
        """Check that plot tile copies match the grid."""
        for plot in self.grid.plots:
            for local_y, row in enumerate(plot.tiles):
                for local_x, tile in enumerate(row):
                    pos = Position(plot.position.x + local_x, plot.position.y + local_y)
                    if not self.grid.in_bounds(pos):
                        continue
                    if self.grid.tile_at(pos) != tile:
                        self._error(
                            "plot",
                            f"Plot {plot.id} tile ({local_x}, {local_y}) is out of "
                            f"sync with the grid",
                            plot.id,
                        )


def validate_plot_configuration(
        config: Union[PlotConfiguration, Mapping[str, Any]]) -> ValidationReport:
    """
    Validate a plot configuration before building a grid.

    Every non-positive value is reported, not just the first one.

    Args:
        config: PlotConfiguration or its wire shape
            ``{plotsX, plotsY, plotSize: {width, height}}``
    """
    if isinstance(config, PlotConfiguration):
        plots_x, plots_y = config.plots_x, config.plots_y
        width, height = config.plot_size.width, config.plot_size.height
    else:
        size = config.get("plotSize", config.get("plot_size")) or {}
        plots_x = config.get("plotsX", config.get("plots_x"))
        plots_y = config.get("plotsY", config.get("plots_y"))
        width = size.get("width") if isinstance(size, Mapping) else None
        height = size.get("height") if isinstance(size, Mapping) else None

    issues: List[LayoutIssue] = []
    checks = (
        (plots_x, "plotsX must be greater than 0"),
        (plots_y, "plotsY must be greater than 0"),
        (width, "plotSize width must be greater than 0"),
        (height, "plotSize height must be greater than 0"),
    )
    for value, message in checks:
        if not _is_positive_int(value):
            issues.append(LayoutIssue("error", "config", message))

    return ValidationReport.from_issues(issues)


def _is_positive_int(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0 and int(value) == value
