"""
Building Models

Buildings are a closed set of variants: residential buildings produce
passengers, commercial buildings produce coins, and decorations may produce
coins (when they sit on a road) and may carry a proximity bonus for
neighbouring producers. Code that reads variant-specific fields goes through
the dispatch helpers in this module, which fail loudly on an unknown variant.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidBuildingRecordError, UnknownBuildingTypeError
from ..grid.abstraction import Position, Size


class BuildingType(Enum):
    """Building variants."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    DECORATION = "decoration"


class BonusChannel(Enum):
    """Revenue streams that bonuses apply to independently."""
    COINS = "coins"
    PASSENGERS = "passengers"


class NeighborhoodShape(Enum):
    """Distance metric used for a bonus radius."""
    MOORE = "moore"          # Chebyshev distance, includes diagonals
    MANHATTAN = "manhattan"  # taxicab distance


@dataclass(frozen=True)
class BuildingBonus:
    """Percentage bonus a decoration grants to nearby producers."""
    channel: BonusChannel
    percentage: int  # e.g. 5 for 5%
    radius: int
    neighborhood: NeighborhoodShape = NeighborhoodShape.MOORE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.channel.value,
            "percentage": self.percentage,
            "radius": self.radius,
            "neighborhoodType": self.neighborhood.value,
        }


@dataclass
class Building:
    """Base class for all building variants.

    ``position`` is the top-left tile and is only set while the building is
    placed on a grid.
    """
    id: str = ""
    name: str = ""
    size: Size = field(default_factory=lambda: Size(1, 1))
    position: Optional[Position] = None
    building_type: BuildingType = BuildingType.DECORATION  # overridden by subclasses
    requires_road: bool = True

    def with_id(self, new_id: str) -> 'Building':
        """Create an unplaced copy of this building with another id."""
        return dataclasses.replace(self, id=new_id, position=None)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass
class ResidentialBuilding(Building):
    """Produces passengers. Always requires road access."""
    revenue: int = 0
    time_to_revenue: int = 0

    def __post_init__(self):
        self.building_type = BuildingType.RESIDENTIAL
        self.requires_road = True


@dataclass
class CommercialBuilding(Building):
    """Produces coins. Always requires road access."""
    revenue: int = 0
    time_to_revenue: int = 0

    def __post_init__(self):
        self.building_type = BuildingType.COMMERCIAL
        self.requires_road = True


@dataclass
class DecorationBuilding(Building):
    """Decoration, optionally revenue-producing and optionally a bonus source.

    ``revenue``/``time_to_revenue`` only count when ``requires_road`` is set.
    """
    revenue: Optional[int] = None
    time_to_revenue: Optional[int] = None
    bonus: Optional[BuildingBonus] = None

    def __post_init__(self):
        self.building_type = BuildingType.DECORATION


# =============================================================================
# Variant dispatch
# =============================================================================

def production_channel(building: Building) -> BonusChannel:
    """Get the channel a building produces on (and can be boosted on)."""
    if isinstance(building, ResidentialBuilding):
        return BonusChannel.PASSENGERS
    if isinstance(building, (CommercialBuilding, DecorationBuilding)):
        return BonusChannel.COINS
    raise TypeError(f"Unknown building variant: {type(building).__name__}")


def base_output(building: Building) -> int:
    """Get the unmodified revenue a building produces per cycle."""
    if isinstance(building, (ResidentialBuilding, CommercialBuilding)):
        return building.revenue
    if isinstance(building, DecorationBuilding):
        if building.requires_road:
            return building.revenue or 0
        return 0
    raise TypeError(f"Unknown building variant: {type(building).__name__}")


def cycle_time(building: Building) -> int:
    """Get the seconds a building needs to realize its revenue once.

    Returns 0 for buildings that never produce revenue.
    """
    if isinstance(building, (ResidentialBuilding, CommercialBuilding)):
        return building.time_to_revenue or 0
    if isinstance(building, DecorationBuilding):
        if building.requires_road:
            return building.time_to_revenue or 0
        return 0
    raise TypeError(f"Unknown building variant: {type(building).__name__}")


def bonus_of(building: Building) -> Optional[BuildingBonus]:
    """Get the bonus a building grants, if it is a bonus source."""
    if isinstance(building, DecorationBuilding):
        return building.bonus
    if isinstance(building, (ResidentialBuilding, CommercialBuilding)):
        return None
    raise TypeError(f"Unknown building variant: {type(building).__name__}")


def occupied_positions(building: Building,
                       position: Optional[Position] = None) -> List[Position]:
    """Get every tile a building covers, row-major.

    Uses ``position`` when given, otherwise the building's own position.
    Unplaced buildings cover nothing.
    """
    origin = position if position is not None else building.position
    if origin is None:
        return []
    return [
        Position(x, y)
        for y in range(origin.y, origin.y + building.size.height)
        for x in range(origin.x, origin.x + building.size.width)
    ]


def border_positions(building: Building, position: Position) -> List[Position]:
    """Get the 4-connected border of a building's rectangle.

    Tiles directly above, below, left and right of the rectangle; corners
    are not included. Positions may lie outside the grid.
    """
    width, height = building.size.width, building.size.height
    border = []
    for x in range(position.x, position.x + width):
        border.append(Position(x, position.y - 1))
    for x in range(position.x, position.x + width):
        border.append(Position(x, position.y + height))
    for y in range(position.y, position.y + height):
        border.append(Position(position.x - 1, y))
    for y in range(position.y, position.y + height):
        border.append(Position(position.x + width, y))
    return border


# =============================================================================
# Record conversion
# =============================================================================

def _field(record: Mapping[str, Any], camel: str, snake: str, default=None):
    if camel in record:
        return record[camel]
    return record.get(snake, default)


def _parse_bonus(record: Mapping[str, Any]) -> Optional[BuildingBonus]:
    # Nested form: {"bonus": {"type", "percentage", "radius", "neighborhoodType"}}
    nested = record.get("bonus")
    if isinstance(nested, Mapping):
        bonus_type = nested.get("type")
        percentage = nested.get("percentage")
        radius = nested.get("radius")
        neighborhood = _field(nested, "neighborhoodType", "neighborhood_type")
    else:
        bonus_type = _field(record, "bonusType", "bonus_type")
        percentage = _field(record, "bonusPercentage", "bonus_percentage")
        radius = _field(record, "bonusRadius", "bonus_radius")
        neighborhood = _field(record, "neighborhoodType", "neighborhood_type")

    # Partial bonus data (including zero percentage/radius) means no bonus
    if not (bonus_type and percentage and radius and neighborhood):
        return None

    try:
        channel = BonusChannel(bonus_type)
    except ValueError as e:
        raise InvalidBuildingRecordError(f"Unknown bonus type: {bonus_type}") from e
    try:
        shape = NeighborhoodShape(neighborhood)
    except ValueError as e:
        raise InvalidBuildingRecordError(f"Unknown neighborhood type: {neighborhood}") from e

    return BuildingBonus(
        channel=channel,
        percentage=_to_int(percentage, "bonusPercentage"),
        radius=_to_int(radius, "bonusRadius"),
        neighborhood=shape,
    )


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError) as e:
        raise InvalidBuildingRecordError(f"Invalid {name}: {value!r}") from e


def building_from_record(record: Mapping[str, Any]) -> Building:
    """
    Convert a flat building record into a building variant.

    Accepts the catalog/database shape ``{id, name, width, height, type,
    requiresRoad, revenue?, timeToRevenue?, bonusType?, bonusPercentage?,
    bonusRadius?, neighborhoodType?}``; snake_case keys and a nested
    ``size``/``bonus`` mapping are accepted too.

    Raises:
        UnknownBuildingTypeError: If ``type`` is not a known variant
        InvalidBuildingRecordError: If a numeric field is not a number, or the
                                    bonus type or neighborhood is unknown
    """
    size = record.get("size")
    if isinstance(size, Mapping):
        width, height = size.get("width"), size.get("height")
    else:
        width, height = record.get("width"), record.get("height")

    common = dict(
        id=str(record.get("id") or ""),
        name=str(record.get("name") or ""),
        size=Size(_to_int(width, "width"), _to_int(height, "height")),
    )
    revenue = _to_int(_field(record, "revenue", "revenue"), "revenue")
    time_to_revenue = _to_int(_field(record, "timeToRevenue", "time_to_revenue"),
                              "timeToRevenue")
    building_type = record.get("type")

    if building_type == BuildingType.RESIDENTIAL.value:
        return ResidentialBuilding(revenue=revenue, time_to_revenue=time_to_revenue, **common)

    if building_type == BuildingType.COMMERCIAL.value:
        return CommercialBuilding(revenue=revenue, time_to_revenue=time_to_revenue, **common)

    if building_type == BuildingType.DECORATION.value:
        requires_road = bool(_field(record, "requiresRoad", "requires_road", False))
        return DecorationBuilding(
            requires_road=requires_road,
            revenue=revenue if requires_road else None,
            time_to_revenue=time_to_revenue if requires_road else None,
            bonus=_parse_bonus(record),
            **common,
        )

    raise UnknownBuildingTypeError(f"Unknown building type: {building_type}")


def building_to_record(building: Building) -> Dict[str, Any]:
    """Convert a building back into the flat record shape."""
    record: Dict[str, Any] = {
        "id": building.id,
        "name": building.name,
        "width": building.size.width,
        "height": building.size.height,
        "type": building.building_type.value,
        "requiresRoad": building.requires_road,
    }

    if isinstance(building, (ResidentialBuilding, CommercialBuilding)):
        record["revenue"] = building.revenue
        record["timeToRevenue"] = building.time_to_revenue
    elif isinstance(building, DecorationBuilding):
        if building.requires_road:
            record["revenue"] = building.revenue or 0
            record["timeToRevenue"] = building.time_to_revenue or 0
        if building.bonus:
            record["bonusType"] = building.bonus.channel.value
            record["bonusPercentage"] = building.bonus.percentage
            record["bonusRadius"] = building.bonus.radius
            record["neighborhoodType"] = building.bonus.neighborhood.value
    else:
        raise TypeError(f"Unknown building variant: {type(building).__name__}")

    return record


def building_to_dict(building: Building) -> Dict[str, Any]:
    """Serialize a building in the nested output shape."""
    data: Dict[str, Any] = {
        "id": building.id,
        "name": building.name,
        "size": building.size.to_dict(),
        "type": building.building_type.value,
        "requiresRoad": building.requires_road,
    }
    if building.position is not None:
        data["position"] = building.position.to_dict()

    time = cycle_time(building)
    if building.requires_road:
        data["revenue"] = base_output(building)
        data["timeToRevenue"] = time

    bonus = bonus_of(building)
    if bonus:
        data["bonus"] = bonus.to_dict()
    return data

