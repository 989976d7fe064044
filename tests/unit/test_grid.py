"""Tests for grid and plot construction."""

import pytest

from plotplace.errors import GridConstructionError, LayoutError
from plotplace.grid.abstraction import (
    ROAD_ROW,
    PlotConfiguration,
    Position,
    Size,
    TileType,
    build_grid,
    create_plot,
    plot_has_neighbor,
)


class TestPlotConfiguration:
    """Tests for plot configuration dimensions and parsing."""

    def test_grid_dimensions(self, square_config):
        """Grid height includes the infinite road row."""
        assert square_config.grid_width == 8
        assert square_config.grid_height == 9

    def test_from_camel_case(self):
        config = PlotConfiguration.from_dict(
            {"plotsX": 3, "plotsY": 2, "plotSize": {"width": 5, "height": 4}}
        )
        assert config == PlotConfiguration(3, 2, Size(5, 4))

    def test_from_snake_case(self):
        config = PlotConfiguration.from_dict(
            {"plots_x": 2, "plots_y": 1, "plot_size": {"width": 4, "height": 4}}
        )
        assert config.plots_x == 2
        assert config.plot_size == Size(4, 4)

    def test_missing_fields_rejected(self):
        with pytest.raises(ValueError):
            PlotConfiguration.from_dict({"plotsX": 2})

    def test_to_dict(self, row_config):
        assert row_config.to_dict() == {
            "plotsX": 2,
            "plotsY": 1,
            "plotSize": {"width": 4, "height": 4},
        }


class TestPlotNeighbors:
    """Tests for the plot neighbor rule."""

    def test_single_plot_has_no_neighbor(self):
        assert not plot_has_neighbor(0, 0, 1, 1)

    def test_row_and_column_neighbors(self):
        assert plot_has_neighbor(0, 0, 2, 1)
        assert plot_has_neighbor(0, 0, 1, 2)
        assert plot_has_neighbor(1, 1, 2, 2)

    def test_create_plot_without_neighbor_fails(self):
        """A lone plot cannot be created."""
        config = PlotConfiguration(1, 1, Size(4, 4))
        with pytest.raises(GridConstructionError, match="no neighbors"):
            create_plot(0, 0, config)

    def test_create_plot_position(self, square_config):
        """Plot positions skip the infinite road row."""
        plot = create_plot(1, 1, square_config)
        assert plot.id == "plot_1_1"
        assert plot.position == Position(4, 5)
        assert plot.end_x == 7
        assert plot.end_y == 8
        assert len(plot.tiles) == 4
        assert all(len(row) == 4 for row in plot.tiles)


class TestBuildGrid:
    """Tests for full grid construction."""

    def test_one_by_one_configuration_fails(self):
        """A 1x1 configuration cannot be built."""
        with pytest.raises(GridConstructionError) as exc_info:
            build_grid(PlotConfiguration(1, 1, Size(4, 4)))
        assert str(exc_info.value) == "Plot at (0, 0) has no neighbors in any direction"

    def test_construction_error_is_layout_error(self):
        with pytest.raises(LayoutError):
            build_grid(PlotConfiguration(1, 1, Size(2, 2)))

    def test_road_row_initialized(self, row_config):
        """Row 0 is occupied road, every other tile empty."""
        grid = build_grid(row_config)

        assert all(t.type == TileType.ROAD and t.occupied for t in grid.tiles[ROAD_ROW])
        for row in grid.tiles[1:]:
            assert all(t.type == TileType.EMPTY and not t.occupied for t in row)

    def test_plots_in_construction_order(self, square_config):
        grid = build_grid(square_config)
        assert [p.id for p in grid.plots] == [
            "plot_0_0", "plot_1_0", "plot_0_1", "plot_1_1",
        ]

    def test_every_plot_has_neighbor(self):
        """Every plot of every buildable configuration has a neighbor."""
        for plots_x in range(1, 4):
            for plots_y in range(1, 4):
                if plots_x == plots_y == 1:
                    continue
                grid = build_grid(PlotConfiguration(plots_x, plots_y, Size(3, 2)))
                assert len(grid.plots) == plots_x * plots_y
                for plot in grid.plots:
                    assert plot_has_neighbor(plot.plot_x, plot.plot_y, plots_x, plots_y)

    def test_plot_at(self, row_config):
        grid = build_grid(row_config)
        assert grid.plot_at(Position(0, 1)).id == "plot_0_0"
        assert grid.plot_at(Position(5, 4)).id == "plot_1_0"
        assert grid.plot_at(Position(0, ROAD_ROW)) is None

    def test_in_bounds(self, row_config):
        grid = build_grid(row_config)
        assert grid.in_bounds(Position(7, 4))
        assert not grid.in_bounds(Position(8, 0))
        assert not grid.in_bounds(Position(0, 5))
        assert not grid.in_bounds(Position(-1, 1))

    def test_get_plot(self, row_config):
        grid = build_grid(row_config)
        assert grid.get_plot("plot_1_0").position == Position(4, 1)
        assert grid.get_plot("plot_9_9") is None
