"""Tests for the YAML building catalog."""

import pytest

from plotplace.buildings.catalog import BuildingCatalog, parse_building_spec
from plotplace.buildings.models import ResidentialBuilding


CUSTOM_CATALOG = """
buildings:
  - name: Hut
    width: 1
    height: 1
    type: residential
    requiresRoad: true
    revenue: 10
    timeToRevenue: 60
  - id: big_tree
    name: Big Tree
    width: 2
    height: 2
    type: decoration
    requiresRoad: false
"""


@pytest.fixture
def custom_catalog_path(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(CUSTOM_CATALOG)
    return path


class TestBundledCatalog:
    """Tests against the bundled catalog."""

    def test_loads_all_buildings(self, catalog):
        assert len(catalog) == 13
        assert "House" in catalog
        assert "Passenger Terminal" in catalog

    def test_names_sorted(self, catalog):
        names = catalog.names()
        assert names == sorted(names)

    def test_template(self, catalog):
        house = catalog.get_template("House")
        assert isinstance(house, ResidentialBuilding)
        assert house.id == "house"
        assert catalog.get_template("Castle") is None

    def test_every_record_converts(self, catalog):
        for name in catalog.names():
            assert catalog.get_template(name).name == name


class TestLookup:
    """Tests for resolving requested names."""

    def test_find_distinct(self, catalog):
        records, missing = catalog.find(["House", "Shop", "House", "Castle"])
        assert [r["name"] for r in records] == ["House", "Shop"]
        assert missing == ["Castle"]

    def test_expand_records_unique_ids(self, catalog):
        lookup = catalog.expand_records(["House", "Shop", "House", "Castle", "Castle"])
        assert [b["id"] for b in lookup.buildings] == ["house_1", "shop_1", "house_2"]
        assert lookup.missing == ["Castle"]
        assert lookup.requested == 5
        assert lookup.found == 3

    def test_expand_mapping(self, catalog):
        lookup = catalog.expand({"Cottage": 2, "Fountain": 1})
        assert [b.id for b in lookup.buildings] == ["cottage_1", "cottage_2", "fountain_1"]
        assert all(b.position is None for b in lookup.buildings)

    def test_returned_records_are_copies(self, catalog):
        lookup = catalog.expand_records(["House"])
        lookup.buildings[0]["revenue"] = 0
        assert catalog.get_record("House")["revenue"] == 100


class TestCustomCatalog:
    """Tests for loading user catalog files."""

    def test_load_custom_file(self, custom_catalog_path):
        catalog = BuildingCatalog(custom_catalog_path)
        assert catalog.names() == ["Big Tree", "Hut"]
        assert catalog.get_record("Hut")["id"] == "hut"
        assert catalog.get_record("Big Tree")["id"] == "big_tree"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            BuildingCatalog(tmp_path / "missing.yaml")

    def test_symlink_rejected(self, custom_catalog_path, tmp_path):
        link = tmp_path / "link.yaml"
        link.symlink_to(custom_catalog_path)
        with pytest.raises(ValueError, match="symlink"):
            BuildingCatalog(link)

    def test_missing_buildings_list(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("presets: {}\n")
        with pytest.raises(ValueError, match="buildings"):
            BuildingCatalog(path)

    def test_from_records(self):
        catalog = BuildingCatalog.from_records([
            {"name": "Hut", "width": 1, "height": 1, "type": "residential"},
        ])
        assert len(catalog) == 1
        assert catalog.path is None


class TestParseBuildingSpec:
    """Tests for NAME[:COUNT] parsing."""

    def test_name_only(self):
        assert parse_building_spec("House") == ("House", 1)

    def test_with_count(self):
        assert parse_building_spec("Town Hall:3") == ("Town Hall", 3)

    def test_negative_count(self):
        with pytest.raises(ValueError):
            parse_building_spec("House:-1")
