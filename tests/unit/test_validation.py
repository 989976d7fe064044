"""Tests for layout validation and plot configuration checks."""

import pytest

from plotplace.grid.abstraction import PlotConfiguration, Position, Size, Tile
from plotplace.validation.layout import (
    LayoutIssue,
    LayoutValidator,
    ValidationReport,
    validate_plot_configuration,
)


class TestLayoutValidator:
    """Tests for grid consistency checks."""

    def test_fresh_grid_is_valid(self, engine):
        report = engine.validate_grid()
        assert report.is_valid
        assert report.errors == []
        assert report.to_dict() == {"isValid": True, "errors": []}

    def test_placed_layout_is_valid(self, engine, house, statue):
        engine.place_building(house, Position(0, 1))
        engine.place_building(statue, Position(5, 3))
        assert LayoutValidator(engine).validate().is_valid

    def test_broken_infinite_road(self, engine):
        engine.grid.set_tile(Position(3, 0), Tile.empty())
        report = engine.validate_grid()
        assert not report.is_valid
        assert report.errors == ["Infinite road at Y = 0 is not properly initialized"]

    def test_plot_without_neighbor(self, engine):
        engine.grid.plots_x = 1
        report = engine.validate_grid()
        assert report.errors == ["Plot plot_0_0 has no neighbors"]
        assert report.issues[0].location == "plot_0_0"

    def test_lost_road_access(self, engine, house):
        engine.place_road(Position(0, 2))
        assert engine.place_building(house, Position(0, 3)).is_valid

        engine.grid.set_tile(Position(0, 2), Tile.empty())
        report = engine.validate_grid()

        assert not report.is_valid
        assert ("Building House at (0, 3) requires road access but doesn't have it"
                in report.errors)

    def test_unknown_building_reference(self, engine):
        engine.grid.set_tile(Position(5, 2), Tile.building("ghost"))
        report = engine.validate_grid()
        assert "Tile (5, 2) references unknown building ghost" in report.errors

    def test_building_missing_tile(self, engine, house):
        engine.place_building(house, Position(0, 1))
        engine.grid.set_tile(Position(1, 2), Tile.empty())
        report = engine.validate_grid()
        assert "Building House (house_1) does not own tile (1, 2)" in report.errors

    def test_plot_copy_out_of_sync(self, engine):
        plot = engine.grid.get_plot("plot_1_0")
        plot.set_local_tile(Position(6, 3), Tile.road())
        report = engine.validate_grid()
        assert report.errors == ["Plot plot_1_0 tile (2, 2) is out of sync with the grid"]

    def test_checks_are_repeatable(self, engine):
        engine.grid.set_tile(Position(0, 0), Tile.empty())
        validator = LayoutValidator(engine)
        assert len(validator.validate().errors) == 1
        assert len(validator.validate().errors) == 1


class TestValidationReport:
    """Tests for report construction and summaries."""

    def test_from_issues_keeps_warnings_out_of_errors(self):
        report = ValidationReport.from_issues([
            LayoutIssue("warning", "road", "Road is isolated"),
        ])
        assert report.is_valid
        assert report.errors == []

    def test_summary_without_issues(self):
        assert ValidationReport().get_summary() == "Layout validation passed with no issues."

    def test_summary_lists_issues(self):
        report = ValidationReport.from_issues([
            LayoutIssue("error", "plot", "Plot plot_0_0 has no neighbors", "plot_0_0"),
            LayoutIssue("warning", "road", "Road is isolated"),
        ])
        lines = report.get_summary().splitlines()
        assert lines[0] == "Layout validation: 1 errors, 1 warnings"
        assert "[ERROR] [plot] Plot plot_0_0 has no neighbors" in lines
        assert "    Location: plot_0_0" in lines
        assert "[WARN] [road] Road is isolated" in lines


class TestPlotConfigurationValidation:
    """Tests for up-front plot configuration checks."""

    def test_valid_wire_shape(self):
        report = validate_plot_configuration(
            {"plotsX": 2, "plotsY": 1, "plotSize": {"width": 4, "height": 4}}
        )
        assert report.is_valid

    def test_valid_dataclass(self):
        assert validate_plot_configuration(PlotConfiguration(2, 2, Size(3, 3))).is_valid

    def test_snake_case_keys(self):
        report = validate_plot_configuration(
            {"plots_x": 2, "plots_y": 1, "plot_size": {"width": 4, "height": 4}}
        )
        assert report.is_valid

    def test_every_problem_reported(self):
        report = validate_plot_configuration(
            {"plotsX": 0, "plotsY": -1, "plotSize": {"width": 0, "height": 0}}
        )
        assert report.errors == [
            "plotsX must be greater than 0",
            "plotsY must be greater than 0",
            "plotSize width must be greater than 0",
            "plotSize height must be greater than 0",
        ]

    def test_missing_plot_size(self):
        report = validate_plot_configuration({"plotsX": 2, "plotsY": 1})
        assert report.errors == [
            "plotSize width must be greater than 0",
            "plotSize height must be greater than 0",
        ]

    @pytest.mark.parametrize("value", [True, None, "2", 1.5])
    def test_non_integer_values_rejected(self, value):
        report = validate_plot_configuration(
            {"plotsX": value, "plotsY": 1, "plotSize": {"width": 4, "height": 4}}
        )
        assert report.errors == ["plotsX must be greater than 0"]
