"""
Bonus and Revenue Calculation

Computes the output of placed buildings on two independent channels (coins
and passengers). Decorations carrying a bonus raise the output of nearby
producers on the bonus channel:

- A source applies when its channel matches the target's production channel
  and any tile of the target lies within the bonus radius of any tile of the
  source (Chebyshev distance for "moore", taxicab distance for "manhattan").
- Percentages of all applying sources are added together; there is no cap
  and no distance decay.
- final = ceil(base * (1 + total% / 100)), and 0 whenever base is 0.

The calculator works on any object exposing ``get_buildings()`` (normally a
PlacementEngine).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..buildings.models import (
    BonusChannel,
    Building,
    NeighborhoodShape,
    base_output,
    bonus_of,
    building_to_dict,
    cycle_time,
    occupied_positions,
    production_channel,
)
from ..grid.abstraction import Position

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


@dataclass
class AppliedBonus:
    """A bonus source contributing to a building's output."""
    source: Building
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceBuilding": building_to_dict(self.source),
            "bonusPercentage": self.percentage,
        }


@dataclass
class ChannelOutput:
    """Output of one building on one channel."""
    base_output: int = 0
    total_bonus_percentage: int = 0
    final_output: int = 0
    applied_bonuses: List[AppliedBonus] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseOutput": self.base_output,
            "totalBonusPercentage": self.total_bonus_percentage,
            "finalOutput": self.final_output,
            "appliedBonuses": [b.to_dict() for b in self.applied_bonuses],
        }


@dataclass
class RevenueOutput:
    """Output of one building on both channels."""
    coins: ChannelOutput = field(default_factory=ChannelOutput)
    passengers: ChannelOutput = field(default_factory=ChannelOutput)

    def for_channel(self, channel: BonusChannel) -> ChannelOutput:
        if channel == BonusChannel.COINS:
            return self.coins
        return self.passengers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coins": self.coins.to_dict(),
            "passengers": self.passengers.to_dict(),
        }


@dataclass
class BuildingRevenueBreakdown:
    """Revenue of all placed buildings sharing a name."""
    name: str
    count: int = 0
    coins_revenue: int = 0
    passengers_revenue: int = 0
    bonused_coins_revenue: int = 0
    bonused_passengers_revenue: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "coinsRevenue": self.coins_revenue,
            "passengersRevenue": self.passengers_revenue,
            "bonusedCoinsRevenue": self.bonused_coins_revenue,
            "bonusedPassengersRevenue": self.bonused_passengers_revenue,
        }


@dataclass
class RevenueSummary:
    """Totals over every placed building."""
    total_coins_revenue: int = 0
    total_passengers_revenue: int = 0
    coins_revenue_per_hour: float = 0.0
    passengers_revenue_per_hour: float = 0.0
    breakdown: List[BuildingRevenueBreakdown] = field(default_factory=list)

    @property
    def total_revenue(self) -> int:
        return self.total_coins_revenue + self.total_passengers_revenue


def apply_bonus(base: int, total_percentage: int) -> int:
    """Get ``ceil(base * (1 + total_percentage / 100))``, or 0 for a zero base.

    Integer inputs use integer arithmetic; floats such as 100 * 1.1 would
    otherwise round up past the exact result.
    """
    if base == 0:
        return 0
    if isinstance(base, int) and isinstance(total_percentage, int):
        return -((-base * (100 + total_percentage)) // 100)
    return math.ceil(base * (1 + total_percentage / 100))


def within_radius(a: Position, b: Position, radius: int,
                  shape: NeighborhoodShape) -> bool:
    """Check if two tiles are within ``radius`` under a neighborhood shape."""
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    if shape == NeighborhoodShape.MOORE:
        return max(dx, dy) <= radius
    return dx + dy <= radius


def buildings_within_radius(target: Building, source: Building, radius: int,
                            shape: NeighborhoodShape) -> bool:
    """Check if any tile of ``target`` is within radius of any tile of ``source``."""
    if target.position is None or source.position is None:
        return False

    source_tiles = occupied_positions(source)
    for target_pos in occupied_positions(target):
        for source_pos in source_tiles:
            if within_radius(target_pos, source_pos, radius, shape):
                return True
    return False


class BonusCalculator:
    """Bonus and revenue calculation over an engine's placed buildings."""

    def __init__(self, engine):
        """
        Args:
            engine: Object exposing ``get_buildings() -> Dict[str, Building]``
        """
        self.engine = engine

    def _bonuses_for(self, building: Building, channel: BonusChannel) -> List[AppliedBonus]:
        """Collect every placed bonus source applying to ``building`` on a channel."""
        bonuses: List[AppliedBonus] = []
        if production_channel(building) != channel:
            return bonuses

        for source in self.engine.get_buildings().values():
            if source.id == building.id or source.position is None:
                continue
            bonus = bonus_of(source)
            if bonus is None or bonus.channel != channel:
                continue
            if buildings_within_radius(building, source, bonus.radius, bonus.neighborhood):
                bonuses.append(AppliedBonus(source=source, percentage=bonus.percentage))
        return bonuses

    def calculate_revenue_output(self, building: Building) -> RevenueOutput:
        """
        Calculate a building's output on both channels.

        Only the building's own production channel can be non-zero. Unplaced
        buildings report their base output without bonuses.
        """
        channel = production_channel(building)
        base = base_output(building)
        result = RevenueOutput()

        if building.position is None:
            result.for_channel(channel).base_output = base
            result.for_channel(channel).final_output = base
            return result

        bonuses = self._bonuses_for(building, channel)
        total = sum(b.percentage for b in bonuses)
        output = result.for_channel(channel)
        output.base_output = base
        output.total_bonus_percentage = total
        output.final_output = apply_bonus(base, total)
        output.applied_bonuses = bonuses

        return result

    def get_buildings_affected_by_bonus(self, source: Building) -> List[Building]:
        """Get placed buildings that receive the bonus of ``source``."""
        bonus = bonus_of(source)
        if bonus is None or source.position is None:
            return []

        affected = []
        for building in self.engine.get_buildings().values():
            if building.id == source.id or building.position is None:
                continue
            if production_channel(building) != bonus.channel:
                continue
            if buildings_within_radius(building, source, bonus.radius, bonus.neighborhood):
                affected.append(building)
        return affected


def revenue_per_hour(building: Building, engine=None) -> float:
    """
    Calculate the hourly revenue of a building.

    Args:
        building: The building to calculate revenue for
        engine: Optional PlacementEngine; when given and the building is
                placed, the bonused output is used

    Returns:
        Revenue per hour, or 0 for buildings without a revenue cycle
    """
    time = cycle_time(building)
    if not time:
        return 0.0

    revenue = base_output(building)
    if engine is not None and building.position is not None:
        output = engine.calculate_revenue_output(building)
        revenue = output.for_channel(production_channel(building)).final_output

    return (revenue / time) * SECONDS_PER_HOUR


def calculate_total_revenue(engine) -> RevenueSummary:
    """Sum bonused output and hourly revenue over every placed building."""
    summary = RevenueSummary()
    breakdown: Dict[str, BuildingRevenueBreakdown] = {}

    for building in engine.get_buildings().values():
        output = engine.calculate_revenue_output(building)
        summary.total_coins_revenue += output.coins.final_output
        summary.total_passengers_revenue += output.passengers.final_output

        hourly = revenue_per_hour(building, engine)
        if production_channel(building) == BonusChannel.PASSENGERS:
            summary.passengers_revenue_per_hour += hourly
        else:
            summary.coins_revenue_per_hour += hourly

        entry = breakdown.get(building.name)
        if entry is None:
            entry = BuildingRevenueBreakdown(name=building.name)
            breakdown[building.name] = entry
        entry.count += 1
        entry.coins_revenue += output.coins.base_output
        entry.passengers_revenue += output.passengers.base_output
        entry.bonused_coins_revenue += output.coins.final_output
        entry.bonused_passengers_revenue += output.passengers.final_output

    summary.breakdown = list(breakdown.values())

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Revenue totals: coins=%d passengers=%d coins/h=%.1f passengers/h=%.1f",
            summary.total_coins_revenue,
            summary.total_passengers_revenue,
            summary.coins_revenue_per_hour,
            summary.passengers_revenue_per_hour,
        )
    return summary
