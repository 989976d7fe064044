"""Request-level entry points for layout planning."""

from .planner import LayoutPlanner, LayoutRequest, export_layout

__all__ = [
    "LayoutPlanner",
    "LayoutRequest",
    "export_layout",
]
