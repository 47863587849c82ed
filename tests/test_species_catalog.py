"""
Tests for SpeciesCatalog - loading, seeding and lookups.
"""

import pytest

from snaptheplant.catalog.records import CareTip, SpeciesRecord
from snaptheplant.catalog.seed import SEED_SPECIES
from snaptheplant.catalog.species_catalog import IMAGE_CACHE_PREFIX, SpeciesCatalog, species_key
from snaptheplant.storage.store import InMemoryStore, StoreError


class BrokenStore(InMemoryStore):
    """Store whose reads always fail."""

    def keys(self, prefix=""):
        raise StoreError("connection refused")


class TestCatalogLoading:
    """Test fetching and seeding."""

    def test_empty_store_is_seeded(self, store):
        catalog = SpeciesCatalog.from_store(store)

        assert len(catalog) == len(SEED_SPECIES)
        assert len(store.keys("species:")) == len(SEED_SPECIES)

    def test_catalog_order_is_ascending_id(self, catalog):
        ids = [r.id for r in catalog.get_all()]
        assert ids == sorted(ids)

    def test_get_all_is_repeatable(self, catalog):
        assert catalog.get_all() == catalog.get_all()

    def test_existing_store_not_reseeded(self):
        store = InMemoryStore()
        store.put(species_key(42), SpeciesRecord(id=42, category="Bird", name="Blue Jay").to_dict())

        catalog = SpeciesCatalog.from_store(store)

        assert [r.name for r in catalog.get_all()] == ["Blue Jay"]
        assert catalog.seed() is False

    def test_store_failure_yields_empty_catalog(self):
        catalog = SpeciesCatalog.from_store(BrokenStore())
        assert len(catalog) == 0
        assert catalog.get_all() == ()

    def test_reload_picks_up_changes(self, store, catalog):
        store.put(species_key(99), SpeciesRecord(id=99, category="Bird", name="Blue Jay").to_dict())
        assert catalog.get(99) is None

        catalog.reload()

        assert catalog.get(99).name == "Blue Jay"

    def test_records_round_trip_through_store(self, store, catalog):
        monstera = catalog.get(1)
        assert monstera.is_poisonous
        assert isinstance(monstera.care_tips[0], CareTip)
        assert SpeciesRecord.from_dict(store.get(species_key(1))) == monstera


class TestFindByName:
    """Test exact name lookups."""

    def test_common_and_scientific_name_resolve_to_same_record(self, catalog):
        by_name = catalog.find_by_name("Honey Bee")
        by_scientific = catalog.find_by_name("Apis mellifera")

        assert by_name is not None
        assert by_name == by_scientific
        assert by_name.id == 9

    def test_case_and_whitespace_ignored(self, catalog):
        assert catalog.find_by_name("  honey bee ").id == 9
        assert catalog.find_by_name("APIS MELLIFERA").id == 9

    def test_unknown_name(self, catalog):
        assert catalog.find_by_name("Nonexistent Species") is None

    def test_no_substring_matches(self, catalog):
        assert catalog.find_by_name("Honey") is None

    def test_blank_name(self, catalog):
        assert catalog.find_by_name("") is None
        assert catalog.find_by_name("   ") is None


class TestSearchByText:
    """Test substring and id search."""

    def test_substring_on_name(self, catalog):
        names = [r.name for r in catalog.search_by_text("tree")]
        assert names == ["Oak Tree", "Pine Tree"]

    def test_substring_on_scientific_name(self, catalog):
        assert [r.id for r in catalog.search_by_text("quercus")] == [4]

    def test_exact_id_match(self, catalog):
        assert [r.id for r in catalog.search_by_text("9")] == [9]
        assert [r.id for r in catalog.search_by_text("19")] == [19]

    def test_category_filter(self, catalog):
        assert catalog.search_by_text("a", category="Bird") == catalog.by_category("Bird")

    def test_empty_query(self, catalog):
        assert catalog.search_by_text("") == []
        assert catalog.search_by_text("   ") == []

    def test_no_match(self, catalog):
        assert catalog.search_by_text("zzzz") == []


class TestDeleteSpecies:
    """Test species removal."""

    def test_delete_removes_record_and_cached_image(self, store, catalog):
        store.put(f"{IMAGE_CACHE_PREFIX}9", {"image_data_uri": "data:image/png;base64,AAAA"})

        assert catalog.delete_species(9) is True

        assert catalog.get(9) is None
        assert store.get(species_key(9)) is None
        assert store.get(f"{IMAGE_CACHE_PREFIX}9") is None
        assert len(catalog) == len(SEED_SPECIES) - 1

    def test_delete_unknown(self, catalog):
        assert catalog.delete_species(12345) is False


class TestSpeciesRecord:
    """Test record behaviour."""

    def test_toxicity_warning_dropped_when_not_poisonous(self):
        record = SpeciesRecord(id=1, category="Plant", name="Fern", toxicity_warning="Careful")
        assert record.toxicity_warning is None

    def test_with_safety(self):
        record = SpeciesRecord(id=1, category="Plant", name="Fern")
        updated = record.with_safety(True, "Mildly toxic")

        assert updated.is_poisonous
        assert updated.toxicity_warning == "Mildly toxic"
        assert not record.is_poisonous

    def test_with_safety_clears_warning(self):
        record = SpeciesRecord(id=1, category="Plant", name="Fern", is_poisonous=True, toxicity_warning="x")
        assert record.with_safety(False, "x").toxicity_warning is None

    def test_attributes_copied(self):
        attrs = {"color": "green"}
        record = SpeciesRecord(id=1, category="Plant", name="Fern", attributes=attrs)
        attrs["color"] = "red"
        assert record.attributes["color"] == "green"

    @pytest.mark.parametrize("record", SEED_SPECIES, ids=lambda r: r.name)
    def test_seed_attributes_use_category_vocabulary(self, record):
        from snaptheplant.core.config import category_vocabulary

        vocabulary = category_vocabulary(record.category)
        for key, value in record.attributes.items():
            assert key in vocabulary
            assert value in vocabulary[key]
