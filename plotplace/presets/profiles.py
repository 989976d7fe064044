"""
Plot Presets

Named plot configurations for common city layouts. Additional presets can be
loaded from a YAML file:

```yaml
presets:
  my_layout:
    description: Two wide plots
    plotsX: 2
    plotsY: 1
    plotSize: {width: 6, height: 4}
```
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..grid.abstraction import PlotConfiguration, Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotPreset:
    """A named plot configuration."""

    name: str
    description: str
    config: PlotConfiguration

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "description": self.description}
        data.update(self.config.to_dict())
        return data


# =============================================================================
# Predefined Presets
# =============================================================================

AIRPORT_CITY = PlotPreset(
    name="airport_city",
    description="2x2 plots of 4x4 tiles",
    config=PlotConfiguration(plots_x=2, plots_y=2, plot_size=Size(4, 4)),
)

AIRPORT_CITY_ROW = PlotPreset(
    name="airport_city_row",
    description="A single row of four 4x4 plots along the infinite road",
    config=PlotConfiguration(plots_x=4, plots_y=1, plot_size=Size(4, 4)),
)

AIRPORT_CITY_LARGE = PlotPreset(
    name="airport_city_large",
    description="3x3 plots of 4x4 tiles",
    config=PlotConfiguration(plots_x=3, plots_y=3, plot_size=Size(4, 4)),
)

PRESETS: Dict[str, PlotPreset] = {
    "airport_city": AIRPORT_CITY,
    "airport_city_row": AIRPORT_CITY_ROW,
    "airport_city_large": AIRPORT_CITY_LARGE,
}


def get_preset(name: str, presets: Optional[Dict[str, PlotPreset]] = None) -> PlotPreset:
    """
    Get a plot preset by name.

    Args:
        name: Preset identifier (e.g., "airport_city")
        presets: Presets to search instead of the predefined ones

    Returns:
        PlotPreset instance

    Raises:
        ValueError: If preset name is not found
    """
    available_presets = PRESETS if presets is None else presets
    if name not in available_presets:
        available = ", ".join(sorted(available_presets.keys()))
        raise ValueError(f"Unknown plot preset '{name}'. Available: {available}")
    return available_presets[name]


def list_presets() -> List[str]:
    """List all predefined preset names."""
    return sorted(PRESETS.keys())


def load_presets(path: Union[str, Path]) -> Dict[str, PlotPreset]:
    """
    Load presets from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is a symlink or has no ``presets`` mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Preset file not found: {path}")

    # Security: Check for symlinks to prevent reading unintended files
    if path.is_symlink():
        raise ValueError(f"Preset file cannot be a symlink: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("presets") if isinstance(data, dict) else None
    if not isinstance(entries, dict):
        raise ValueError(f"Preset file {path} must contain a 'presets' mapping")

    presets: Dict[str, PlotPreset] = {}
    for name, entry in entries.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Preset '{name}' must be a mapping")
        presets[str(name)] = PlotPreset(
            name=str(name),
            description=str(entry.get("description", "")),
            config=PlotConfiguration.from_dict(entry),
        )

    logger.debug("Loaded %d presets from %s", len(presets), path)
    return presets
