"""Tests for road and building placement on the engine."""

import copy

from plotplace.grid.abstraction import Position, Size, Tile, TileType
from plotplace.buildings.models import ResidentialBuilding
from plotplace.placement.engine import RejectionReason


class TestRoadPlacement:
    """Tests for place_road."""

    def test_place_road_marks_grid_and_plot(self, engine):
        pos = Position(2, 2)
        assert engine.place_road(pos)
        assert engine.grid.tile_at(pos).type == TileType.ROAD
        assert engine.grid.tile_at(pos).occupied
        assert engine.grid.plot_at(pos).local_tile(pos).type == TileType.ROAD

    def test_place_road_idempotent(self, engine):
        assert engine.place_road(Position(2, 2))
        assert engine.place_road(Position(2, 2))

    def test_road_row_rejected(self, engine):
        assert not engine.place_road(Position(3, 0))

    def test_out_of_bounds_rejected(self, engine):
        assert not engine.place_road(Position(8, 1))
        assert not engine.place_road(Position(0, 5))
        assert not engine.place_road(Position(-1, 2))

    def test_building_tile_rejected(self, engine, house):
        engine.place_building(house, Position(0, 1))
        assert not engine.place_road(Position(1, 2))
        assert engine.grid.tile_at(Position(1, 2)).type == TileType.BUILDING

    def test_place_roads_counts_accepted(self, engine):
        placed = engine.place_roads([Position(1, 1), Position(1, 0), Position(9, 9)])
        assert placed == 1


class TestPlacementChecks:
    """Tests for placement legality and rejection reasons."""

    def test_valid_next_to_infinite_road(self, engine, house):
        outcome = engine.place_building(house, Position(0, 1))
        assert outcome.is_valid
        assert outcome.has_road_access
        assert outcome.plot_id == "plot_0_0"
        assert outcome.reason is None
        assert house.position == Position(0, 1)

    def test_no_road_access(self, engine, house):
        """A producer away from every road fails with has_road_access=False."""
        outcome = engine.place_building(house, Position(0, 3))
        assert not outcome.is_valid
        assert not outcome.has_road_access
        assert outcome.reason == RejectionReason.NO_ROAD_ACCESS
        assert house.position is None

    def test_placed_road_grants_access(self, engine, house):
        engine.place_road(Position(0, 2))
        assert engine.place_building(house, Position(0, 3)).is_valid

    def test_diagonal_road_does_not_count(self, engine, house):
        engine.place_road(Position(2, 2))
        outcome = engine.evaluate_placement(house, Position(0, 3))
        assert outcome.reason == RejectionReason.NO_ROAD_ACCESS

    def test_out_of_bounds(self, engine, house):
        outcome = engine.evaluate_placement(house, Position(8, 1))
        assert outcome.reason == RejectionReason.OUT_OF_BOUNDS

    def test_road_row_has_no_plot(self, engine, house):
        outcome = engine.evaluate_placement(house, Position(0, 0))
        assert outcome.reason == RejectionReason.NO_PLOT

    def test_spanning_plots(self, engine, house):
        """Geometric failures leave has_road_access unset."""
        outcome = engine.evaluate_placement(house, Position(3, 1))
        assert not outcome.is_valid
        assert not outcome.has_road_access
        assert outcome.reason == RejectionReason.OUTSIDE_PLOT
        assert outcome.plot_id == "plot_0_0"

    def test_past_plot_bottom(self, engine, house):
        outcome = engine.evaluate_placement(house, Position(0, 4))
        assert outcome.reason == RejectionReason.OUTSIDE_PLOT

    def test_overlap(self, engine, house, shop):
        engine.place_building(house, Position(0, 1))
        outcome = engine.evaluate_placement(shop, Position(1, 1))
        assert outcome.reason == RejectionReason.OVERLAP

    def test_overlap_with_road(self, engine, cottage):
        engine.place_road(Position(1, 1))
        assert engine.evaluate_placement(cottage, Position(1, 1)).reason == RejectionReason.OVERLAP

    def test_duplicate_id(self, engine, house):
        engine.place_building(house, Position(0, 1))
        twin = copy.deepcopy(house)
        twin.position = None
        outcome = engine.evaluate_placement(twin, Position(4, 1))
        assert outcome.reason == RejectionReason.DUPLICATE_ID

    def test_invalid_size(self, engine):
        flat = ResidentialBuilding(id="flat", name="Flat", size=Size(0, 1), revenue=1)
        assert engine.evaluate_placement(flat, Position(0, 1)).reason == RejectionReason.INVALID_SIZE

    def test_roadless_decoration(self, engine, statue):
        outcome = engine.place_building(statue, Position(0, 4))
        assert outcome.is_valid
        assert outcome.has_road_access

    def test_can_place_does_not_mutate(self, engine, house):
        before = copy.deepcopy(engine.grid.tiles)
        assert engine.can_place(house, Position(0, 1))
        assert engine.grid.tiles == before
        assert engine.get_buildings() == {}
        assert house.position is None

    def test_outcome_to_dict(self, engine, house):
        data = engine.evaluate_placement(house, Position(0, 3)).to_dict()
        assert data["isValid"] is False
        assert data["hasRoadAccess"] is False
        assert data["reason"] == "no_road_access"
        assert data["position"] == {"x": 0, "y": 3}


class TestPlaceAndRemove:
    """Tests for committing and removing buildings."""

    def test_place_marks_tiles(self, engine, house):
        engine.place_building(house, Position(0, 1))
        for pos in (Position(0, 1), Position(1, 1), Position(0, 2), Position(1, 2)):
            tile = engine.grid.tile_at(pos)
            assert tile == Tile.building("house_1")
            assert engine.grid.plot_at(pos).local_tile(pos) == tile
        assert engine.get_building("house_1") is house
        assert engine.get_inventory() == {"House": 1}

    def test_round_trip_restores_state(self, engine, house, shop):
        """Placing then removing a building restores tiles, buildings and inventory."""
        engine.place_building(shop, Position(4, 1))
        tiles_before = copy.deepcopy(engine.grid.tiles)
        plots_before = copy.deepcopy([p.tiles for p in engine.grid.plots])
        buildings_before = dict(engine.get_buildings())
        inventory_before = engine.get_inventory()

        engine.place_building(house, Position(0, 1))
        assert engine.get_inventory() == {"Shop": 1, "House": 1}
        assert engine.remove_building("house_1")

        assert engine.grid.tiles == tiles_before
        assert [p.tiles for p in engine.grid.plots] == plots_before
        assert engine.get_buildings() == buildings_before
        assert engine.get_inventory() == inventory_before
        assert house.position is None

    def test_remove_decrements_inventory(self, engine, cottage):
        second = cottage.with_id("cottage_2")
        engine.place_building(cottage, Position(0, 1))
        engine.place_building(second, Position(1, 1))
        assert engine.get_inventory() == {"Cottage": 2}

        engine.remove_building("cottage_1")
        assert engine.get_inventory() == {"Cottage": 1}
        engine.remove_building("cottage_2")
        assert engine.get_inventory() == {}

    def test_remove_unknown(self, engine):
        assert not engine.remove_building("nothing")

    def test_remove_twice(self, engine, house):
        engine.place_building(house, Position(0, 1))
        assert engine.remove_building("house_1")
        assert not engine.remove_building("house_1")


class TestVisualization:
    """Tests for the ASCII grid rendering."""

    def test_empty_grid(self, engine):
        text = engine.visualize_grid()
        lines = text.split("\n")
        assert text.endswith("\n")
        assert lines[0] == "R R R R R R R R"
        assert lines[1] == ". . . . . . . ."
        assert len(lines) == 6  # 5 rows plus the trailing newline

    def test_buildings_and_roads(self, engine, house):
        engine.place_building(house, Position(0, 1))
        engine.place_road(Position(2, 2))
        lines = engine.visualize_grid().splitlines()
        assert lines[1] == "H H . . . . . ."
        assert lines[2] == "H H R . . . . ."

    def test_no_trailing_space(self, engine):
        for line in engine.visualize_grid().splitlines():
            assert not line.endswith(" ")


class TestEngineValidation:
    """Tests for validate_grid on consistent engines."""

    def test_fresh_engine_valid(self, engine):
        report = engine.validate_grid()
        assert report.is_valid
        assert report.errors == []

    def test_valid_after_placements(self, engine, house, statue):
        engine.place_building(house, Position(0, 1))
        engine.place_building(statue, Position(3, 4))
        engine.place_road(Position(5, 2))
        assert engine.validate_grid().is_valid
