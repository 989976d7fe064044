"""Layout and configuration validation."""

from .layout import LayoutIssue, LayoutValidator, ValidationReport, validate_plot_configuration

__all__ = [
    "LayoutIssue",
    "LayoutValidator",
    "ValidationReport",
    "validate_plot_configuration",
]
