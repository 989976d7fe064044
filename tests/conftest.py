"""
Shared test fixtures for PlotPlace tests.

Provides plot configurations, engines and building fixtures for the
grid, placement, bonus and optimizer tests.
"""

import pytest

from plotplace.buildings.models import (
    BonusChannel,
    BuildingBonus,
    CommercialBuilding,
    DecorationBuilding,
    NeighborhoodShape,
    ResidentialBuilding,
)
from plotplace.buildings.catalog import BuildingCatalog
from plotplace.grid.abstraction import PlotConfiguration, Size
from plotplace.placement.engine import PlacementEngine


@pytest.fixture
def row_config() -> PlotConfiguration:
    """Two 4x4 plots side by side: an 8x5 grid."""
    return PlotConfiguration(plots_x=2, plots_y=1, plot_size=Size(4, 4))


@pytest.fixture
def square_config() -> PlotConfiguration:
    """2x2 plots of 4x4 tiles: an 8x9 grid."""
    return PlotConfiguration(plots_x=2, plots_y=2, plot_size=Size(4, 4))


@pytest.fixture
def engine(row_config) -> PlacementEngine:
    """A fresh engine on the 8x5 grid."""
    return PlacementEngine(row_config)


@pytest.fixture
def house() -> ResidentialBuilding:
    """A 2x2 residential building producing 100 passengers per hour."""
    return ResidentialBuilding(
        id="house_1",
        name="House",
        size=Size(2, 2),
        revenue=100,
        time_to_revenue=3600,
    )


@pytest.fixture
def cottage() -> ResidentialBuilding:
    """A 1x1 residential building with base revenue 50."""
    return ResidentialBuilding(
        id="cottage_1",
        name="Cottage",
        size=Size(1, 1),
        revenue=50,
        time_to_revenue=1800,
    )


@pytest.fixture
def shop() -> CommercialBuilding:
    """A 2x2 commercial building."""
    return CommercialBuilding(
        id="shop_1",
        name="Shop",
        size=Size(2, 2),
        revenue=200,
        time_to_revenue=1800,
    )


@pytest.fixture
def statue() -> DecorationBuilding:
    """A 1x1 decoration without road requirement or bonus."""
    return DecorationBuilding(id="statue_1", name="Statue", size=Size(1, 1),
                              requires_road=False)


@pytest.fixture
def passenger_bonus() -> DecorationBuilding:
    """A 1x1 roadless decoration granting +15% passengers within radius 1."""
    return DecorationBuilding(
        id="terminal_1",
        name="Terminal",
        size=Size(1, 1),
        requires_road=False,
        bonus=BuildingBonus(
            channel=BonusChannel.PASSENGERS,
            percentage=15,
            radius=1,
            neighborhood=NeighborhoodShape.MOORE,
        ),
    )


@pytest.fixture
def coin_bonus() -> DecorationBuilding:
    """A 1x1 roadless decoration granting +10% coins within radius 1."""
    return DecorationBuilding(
        id="lake_1",
        name="Lake",
        size=Size(1, 1),
        requires_road=False,
        bonus=BuildingBonus(
            channel=BonusChannel.COINS,
            percentage=10,
            radius=1,
            neighborhood=NeighborhoodShape.MOORE,
        ),
    )


@pytest.fixture(scope="session")
def catalog() -> BuildingCatalog:
    """The bundled building catalog."""
    return BuildingCatalog()
