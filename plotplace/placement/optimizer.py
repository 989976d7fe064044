"""
Layout Optimizer

Runs one full optimization attempt (fresh grid, roads, sequential placement,
bonus analysis, revenue totals and validation) and searches over road
strategies for the attempt with the highest total revenue.

Every attempt owns its own PlacementEngine and its own copies of the
buildings, so attempts can run on separate threads without locking.
A LayoutError inside an attempt turns that attempt into a failed result
instead of aborting the search.
"""

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..buildings.models import Building, building_from_record, building_to_dict
from ..errors import LayoutError
from ..grid.abstraction import PlotConfiguration, Position
from ..validation.layout import ValidationReport, validate_plot_configuration
from .bonus import RevenueOutput, calculate_total_revenue
from .engine import PlacementEngine
from .roads import DEFAULT_SEARCH_ORDER, RoadStrategy, generate_roads
from .sequential import SequentialPlacer

logger = logging.getLogger(__name__)

BuildingInput = Union[Building, Mapping[str, Any]]
PositionInput = Union[Position, Mapping[str, Any]]

__all__ = [
    "BonusAnalysisEntry",
    "LayoutOptimizationResult",
    "SearchConfig",
    "StrategySearch",
    "StrategySearchResult",
    "optimize_layout",
    "search_road_strategies",
    "select_best",
    "validate_plot_configuration",
]


def _serialize_building(building: BuildingInput) -> Dict[str, Any]:
    if isinstance(building, Building):
        return building_to_dict(building)
    return dict(building)


@dataclass
class BonusAnalysisEntry:
    """Output of one placed building and the buildings its bonus reaches."""
    building: Building
    revenue: RevenueOutput
    affected_buildings: List[Building] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "building": building_to_dict(self.building),
            "revenueResult": self.revenue.to_dict(),
            "affectedBuildings": [building_to_dict(b) for b in self.affected_buildings],
        }


@dataclass
class LayoutOptimizationResult:
    """Outcome of a single optimization attempt."""
    success: bool
    placed_buildings: List[Building] = field(default_factory=list)
    failed_buildings: List[BuildingInput] = field(default_factory=list)
    total_coins_revenue: int = 0
    total_passengers_revenue: int = 0
    coins_revenue_per_hour: float = 0.0
    passengers_revenue_per_hour: float = 0.0
    bonus_analysis: List[BonusAnalysisEntry] = field(default_factory=list)
    grid_visualization: str = ""
    validation: ValidationReport = field(default_factory=ValidationReport)
    strategy: Optional[RoadStrategy] = None
    road_positions: List[Position] = field(default_factory=list)
    engine: Optional[PlacementEngine] = field(default=None, repr=False, compare=False)

    @property
    def total_revenue(self) -> int:
        return self.total_coins_revenue + self.total_passengers_revenue

    @classmethod
    def failed_result(cls, buildings: Sequence[BuildingInput], message: str,
                      strategy: Optional[RoadStrategy] = None) -> 'LayoutOptimizationResult':
        """Build the result of an attempt that aborted: everything failed."""
        return cls(
            success=False,
            failed_buildings=list(buildings),
            validation=ValidationReport(is_valid=False, errors=[message]),
            strategy=strategy,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "placedBuildings": [building_to_dict(b) for b in self.placed_buildings],
            "failedBuildings": [_serialize_building(b) for b in self.failed_buildings],
            "totalCoinsRevenue": self.total_coins_revenue,
            "totalPassengersRevenue": self.total_passengers_revenue,
            "coinsRevenuePerHour": self.coins_revenue_per_hour,
            "passengersRevenuePerHour": self.passengers_revenue_per_hour,
            "bonusAnalysis": [entry.to_dict() for entry in self.bonus_analysis],
            "gridVisualization": self.grid_visualization,
            "validation": self.validation.to_dict(),
        }

    def __repr__(self) -> str:
        name = self.strategy.value if self.strategy else "custom"
        return (f"LayoutOptimizationResult(strategy={name}, success={self.success}, "
                f"placed={len(self.placed_buildings)}, failed={len(self.failed_buildings)}, "
                f"revenue={self.total_revenue})")


def _to_position(value: PositionInput) -> Position:
    if isinstance(value, Position):
        return value
    return Position.from_dict(value)


def _prepare_buildings(buildings: Sequence[BuildingInput]) -> List[Building]:
    """Get attempt-private building instances from instances or records."""
    prepared = []
    for building in buildings:
        if isinstance(building, Building):
            instance = copy.deepcopy(building)
            instance.position = None
            prepared.append(instance)
        else:
            prepared.append(building_from_record(building))
    return prepared


def optimize_layout(
        config: Union[PlotConfiguration, Mapping[str, Any]],
        buildings: Sequence[BuildingInput],
        road_positions: Optional[Sequence[PositionInput]] = None,
        strategy: Optional[RoadStrategy] = None,
) -> LayoutOptimizationResult:
    """
    Run one optimization attempt.

    Args:
        config: Plot configuration (or its wire shape)
        buildings: Building instances or flat building records, in the order
                   they should be placed. The caller's instances are not
                   modified.
        road_positions: Road tiles to lay before placing buildings
        strategy: Road strategy whose tiles are laid after ``road_positions``

    Returns:
        LayoutOptimizationResult; ``success`` is False if the grid could not
        be built or a record could not be converted
    """
    if not isinstance(config, PlotConfiguration):
        config = PlotConfiguration.from_dict(config)
    inputs = list(buildings)

    try:
        instances = _prepare_buildings(inputs)
        engine = PlacementEngine(config)

        roads = [_to_position(p) for p in road_positions or []]
        if strategy is not None:
            roads.extend(generate_roads(strategy, config))
        engine.place_roads(roads)

        placement = SequentialPlacer(engine).place_all(instances)

        bonus_analysis = [
            BonusAnalysisEntry(
                building=building,
                revenue=engine.calculate_revenue_output(building),
                affected_buildings=engine.get_buildings_affected_by_bonus(building),
            )
            for building in placement.placed
        ]

        summary = calculate_total_revenue(engine)
        validation = engine.validate_grid()
    except LayoutError as e:
        logger.warning("Layout optimization failed: %s", e)
        return LayoutOptimizationResult.failed_result(inputs, str(e), strategy=strategy)

    return LayoutOptimizationResult(
        success=True,
        placed_buildings=placement.placed,
        failed_buildings=placement.failed,
        total_coins_revenue=summary.total_coins_revenue,
        total_passengers_revenue=summary.total_passengers_revenue,
        coins_revenue_per_hour=summary.coins_revenue_per_hour,
        passengers_revenue_per_hour=summary.passengers_revenue_per_hour,
        bonus_analysis=bonus_analysis,
        grid_visualization=engine.visualize_grid(),
        validation=validation,
        strategy=strategy,
        road_positions=roads,
        engine=engine,
    )


# =============================================================================
# Strategy search
# =============================================================================

@dataclass
class SearchConfig:
    """Configuration for the road strategy search."""
    strategies: Tuple[RoadStrategy, ...] = DEFAULT_SEARCH_ORDER
    parallel: bool = False
    max_workers: Optional[int] = None  # None lets the executor decide


@dataclass
class StrategySearchResult:
    """Best attempt plus every candidate, in strategy order."""
    best: LayoutOptimizationResult
    candidates: List[LayoutOptimizationResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.best.strategy.value if self.best.strategy else None,
            "candidates": [
                {
                    "strategy": c.strategy.value if c.strategy else None,
                    "success": c.success,
                    "totalRevenue": c.total_revenue,
                    "placed": len(c.placed_buildings),
                    "failed": len(c.failed_buildings),
                }
                for c in self.candidates
            ],
        }


def select_best(candidates: Sequence[LayoutOptimizationResult],
                buildings: Sequence[BuildingInput] = ()) -> LayoutOptimizationResult:
    """
    Pick the successful candidate with the highest total revenue.

    Ties go to the earliest candidate. If no candidate succeeded the first
    one is returned; with no candidates at all an all-failed placeholder.
    """
    if not candidates:
        return LayoutOptimizationResult.failed_result(buildings, "No road strategies were evaluated")

    best: Optional[LayoutOptimizationResult] = None
    for candidate in candidates:
        if not candidate.success:
            continue
        if best is None or candidate.total_revenue > best.total_revenue:
            best = candidate

    return best if best is not None else candidates[0]


class StrategySearch:
    """Runs one optimization attempt per road strategy and keeps the best."""

    def __init__(self, config: Union[PlotConfiguration, Mapping[str, Any]],
                 search_config: Optional[SearchConfig] = None):
        """
        Args:
            config: Plot configuration shared by every attempt
            search_config: Strategies to try and whether to run them in parallel
        """
        if not isinstance(config, PlotConfiguration):
            config = PlotConfiguration.from_dict(config)
        self.config = config
        self.search_config = search_config or SearchConfig()

    def run(self, buildings: Sequence[BuildingInput],
            road_positions: Optional[Sequence[PositionInput]] = None) -> StrategySearchResult:
        """
        Evaluate every configured strategy on the same building list.

        ``road_positions`` are laid in every attempt, before the strategy's
        own road tiles.
        """
        buildings = list(buildings)
        roads = list(road_positions or [])
        strategies = list(self.search_config.strategies)

        if self.search_config.parallel and len(strategies) > 1:
            candidates = self._run_parallel(strategies, buildings, roads)
        else:
            candidates = [optimize_layout(self.config, buildings, roads, s)
                          for s in strategies]

        best = select_best(candidates, buildings)

        if logger.isEnabledFor(logging.DEBUG):
            for candidate in candidates:
                logger.debug("  %r", candidate)
        logger.info("Best road strategy: %s (revenue %d)",
                    best.strategy.value if best.strategy else "none", best.total_revenue)

        return StrategySearchResult(best=best, candidates=candidates)

    def _run_parallel(self, strategies: List[RoadStrategy],
                      buildings: List[BuildingInput],
                      roads: List[PositionInput]) -> List[LayoutOptimizationResult]:
        """Run attempts on a thread pool, returning them in strategy order."""
        results: List[Optional[LayoutOptimizationResult]] = [None] * len(strategies)

        with ThreadPoolExecutor(max_workers=self.search_config.max_workers) as executor:
            futures = {
                executor.submit(optimize_layout, self.config, buildings, roads, strategy): index
                for index, strategy in enumerate(strategies)
            }
            for future, index in futures.items():
                results[index] = future.result()

        return results


def search_road_strategies(
        config: Union[PlotConfiguration, Mapping[str, Any]],
        buildings: Sequence[BuildingInput],
        search_config: Optional[SearchConfig] = None,
        road_positions: Optional[Sequence[PositionInput]] = None,
) -> LayoutOptimizationResult:
    """Search the road strategies and return the best attempt."""
    return StrategySearch(config, search_config).run(buildings, road_positions).best
