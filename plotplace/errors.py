"""Exception types raised by the layout engine."""

from typing import List, Optional


class LayoutError(ValueError):
    """Base class for errors that abort a single optimization attempt."""


class GridConstructionError(LayoutError):
    """A plot configuration cannot be turned into a grid."""


class UnknownBuildingTypeError(LayoutError):
    """A building record names a type the engine does not know."""


class InvalidBuildingRecordError(LayoutError):
    """A building record has a field that cannot be converted."""


class PlanningError(Exception):
    """A layout request was rejected before any optimization ran."""

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []
