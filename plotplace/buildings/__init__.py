"""Building variants and the building catalog."""

from .models import (
    Building,
    BuildingBonus,
    BuildingType,
    BonusChannel,
    CommercialBuilding,
    DecorationBuilding,
    NeighborhoodShape,
    ResidentialBuilding,
    base_output,
    bonus_of,
    border_positions,
    building_from_record,
    building_to_dict,
    building_to_record,
    cycle_time,
    occupied_positions,
    production_channel,
)
from .catalog import BuildingCatalog, BuildingLookup, parse_building_spec

__all__ = [
    # Variants
    "Building",
    "BuildingBonus",
    "BuildingType",
    "BonusChannel",
    "CommercialBuilding",
    "DecorationBuilding",
    "NeighborhoodShape",
    "ResidentialBuilding",
    # Dispatch helpers
    "base_output",
    "bonus_of",
    "border_positions",
    "cycle_time",
    "occupied_positions",
    "production_channel",
    # Record conversion
    "building_from_record",
    "building_to_dict",
    "building_to_record",
    # Catalog
    "BuildingCatalog",
    "BuildingLookup",
    "parse_building_spec",
]
