"""
Building Catalog

Lookup-by-name source of building records. Loads records from
building_catalog.yaml by default, but allows users to provide a custom
catalog file.

File Format (YAML):
```yaml
buildings:
  - id: house
    name: House
    width: 2
    height: 2
    type: residential
    requiresRoad: true
    revenue: 100
    timeToRevenue: 3600
```
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from .models import Building, building_from_record

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "building_catalog.yaml"

BuildingRequest = Union[Iterable[str], Mapping[str, int]]


@dataclass
class BuildingLookup:
    """Result of resolving requested building names against the catalog."""
    buildings: List[Any] = field(default_factory=list)  # instances or records
    missing: List[str] = field(default_factory=list)
    requested: int = 0

    @property
    def found(self) -> int:
        return len(self.buildings)


class BuildingCatalog:
    """
    Manager for building records.

    Records stay in their flat dictionary form until a caller asks for
    building instances, so a malformed record only affects the requests
    that use it.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the catalog.

        Args:
            path: Optional path to a custom catalog YAML file.
                  If None, uses the bundled building_catalog.yaml.
        """
        self.path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
        self._records: Dict[str, Dict[str, Any]] = {}
        self._load()

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> 'BuildingCatalog':
        """Create an in-memory catalog without touching the filesystem."""
        catalog = cls.__new__(cls)
        catalog.path = None
        catalog._records = {}
        for record in records:
            catalog._add_record(record)
        return catalog

    def _load(self):
        """Load records from the YAML catalog file."""
        if not self.path.exists():
            raise FileNotFoundError(f"Building catalog not found: {self.path}")

        # Security: Check for symlinks to prevent reading unintended files
        if self.path.is_symlink():
            raise ValueError(f"Building catalog cannot be a symlink: {self.path}")

        with open(self.path, 'r') as f:
            data = yaml.safe_load(f) or {}

        records = data.get("buildings") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise ValueError(f"Building catalog {self.path} must contain a 'buildings' list")

        for record in records:
            self._add_record(record)

        logger.debug("Loaded %d building records from %s", len(self._records), self.path)

    def _add_record(self, record: Mapping[str, Any]):
        if not isinstance(record, Mapping) or not record.get("name"):
            raise ValueError(f"Building record without a name: {record!r}")
        name = str(record["name"])
        if name in self._records:
            logger.warning("Duplicate building record '%s', keeping the last one", name)
        entry = dict(record)
        entry.setdefault("id", name.lower().replace(" ", "_"))
        self._records[name] = entry

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def names(self) -> List[str]:
        """Get all building names, sorted."""
        return sorted(self._records)

    def get_record(self, name: str) -> Optional[Dict[str, Any]]:
        record = self._records.get(name)
        return dict(record) if record is not None else None

    def get_template(self, name: str) -> Optional[Building]:
        """Get an unplaced building built from the named record.

        Raises:
            UnknownBuildingTypeError: If the record has an unknown type
        """
        record = self._records.get(name)
        if record is None:
            return None
        return building_from_record(record)

    def find(self, names: Iterable[str]) -> Tuple[List[Dict[str, Any]], List[str]]:
        """
        Look up records by name.

        Each distinct name is returned at most once, in first-request order.

        Returns:
            (records, missing_names)
        """
        records: List[Dict[str, Any]] = []
        missing: List[str] = []
        seen = set()
        for name in names:
            if name in seen:
                continue
            seen.add(name)
            if name in self._records:
                records.append(dict(self._records[name]))
            else:
                missing.append(name)
        return records, missing

    def expand_records(self, request: BuildingRequest) -> BuildingLookup:
        """
        Expand a request into one record per building instance.

        Args:
            request: A list of names (repeats allowed) or a {name: count} mapping

        Returns:
            BuildingLookup whose ``buildings`` are records with unique ids
            ``{template_id}_{n}``
        """
        lookup = BuildingLookup()
        counters: Counter = Counter()

        for name in _iter_requested(request):
            lookup.requested += 1
            record = self._records.get(name)
            if record is None:
                if name not in lookup.missing:
                    lookup.missing.append(name)
                continue
            template_id = record["id"]
            counters[template_id] += 1
            instance = dict(record)
            instance["id"] = f"{template_id}_{counters[template_id]}"
            lookup.buildings.append(instance)

        if lookup.missing:
            logger.warning("Buildings not found in catalog: %s", ", ".join(lookup.missing))
        return lookup

    def expand(self, request: BuildingRequest) -> BuildingLookup:
        """Like expand_records, but returns building instances.

        Raises:
            UnknownBuildingTypeError: If a requested record has an unknown type
        """
        lookup = self.expand_records(request)
        lookup.buildings = [building_from_record(r) for r in lookup.buildings]
        return lookup


def _iter_requested(request: BuildingRequest) -> Iterable[str]:
    if isinstance(request, Mapping):
        for name, count in request.items():
            for _ in range(int(count)):
                yield name
    else:
        for name in request:
            yield name


def parse_building_spec(spec: str) -> Tuple[str, int]:
    """Parse a ``Name[:count]`` command-line building spec."""
    name, sep, count = spec.rpartition(":")
    if not sep:
        return spec.strip(), 1
    try:
        value = int(count)
    except ValueError:
        # Colon is part of the name
        return spec.strip(), 1
    if value < 0:
        raise ValueError(f"Building count must not be negative: {spec}")
    return name.strip(), value
