"""Placement engine, bonus calculation, road strategies and layout search."""

from .engine import PlacementEngine, PlacementOutcome, RejectionReason
from .bonus import (
    AppliedBonus,
    BonusCalculator,
    BuildingRevenueBreakdown,
    ChannelOutput,
    RevenueOutput,
    RevenueSummary,
    apply_bonus,
    calculate_total_revenue,
    revenue_per_hour,
)
from .sequential import (
    SequentialPlacementResult,
    SequentialPlacer,
    candidate_positions,
    find_valid_positions,
    optimize_placement,
)
from .roads import (
    DEFAULT_SEARCH_ORDER,
    ROAD_GENERATORS,
    RoadStrategy,
    generate_roads,
    get_strategy,
    list_strategies,
)
from .optimizer import (
    BonusAnalysisEntry,
    LayoutOptimizationResult,
    SearchConfig,
    StrategySearch,
    StrategySearchResult,
    optimize_layout,
    search_road_strategies,
    select_best,
    validate_plot_configuration,
)

__all__ = [
    # Engine
    "PlacementEngine",
    "PlacementOutcome",
    "RejectionReason",
    # Bonus and revenue
    "AppliedBonus",
    "BonusCalculator",
    "BuildingRevenueBreakdown",
    "ChannelOutput",
    "RevenueOutput",
    "RevenueSummary",
    "apply_bonus",
    "calculate_total_revenue",
    "revenue_per_hour",
    # Sequential placement
    "SequentialPlacementResult",
    "SequentialPlacer",
    "candidate_positions",
    "find_valid_positions",
    "optimize_placement",
    # Roads
    "DEFAULT_SEARCH_ORDER",
    "ROAD_GENERATORS",
    "RoadStrategy",
    "generate_roads",
    "get_strategy",
    "list_strategies",
    # Optimizer
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
