"""
Species Catalog

Holds the ordered list of species records fetched once from the
persistent store. An empty store is seeded from the built-in catalog.

Lookups:
- find_by_name: exact, case-insensitive match on common or scientific name
- search_by_text: substring match on names or exact id match
"""

import logging
from typing import Iterable, List, Optional, Tuple

from snaptheplant.catalog.records import SpeciesRecord
from snaptheplant.catalog.seed import SEED_SPECIES
from snaptheplant.storage.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

SPECIES_PREFIX = "species:"
IMAGE_CACHE_PREFIX = "image_cache:"


def species_key(species_id: int) -> str:
    return f"{SPECIES_PREFIX}{species_id}"


class SpeciesCatalog:
    """
    Ordered, immutable snapshot of species records.

    Usage:
        catalog = SpeciesCatalog.from_store(store)
        bee = catalog.find_by_name("apis mellifera")
        hits = catalog.search_by_text("maple", category="Tree")

    An empty catalog means the source was unavailable; callers should
    present it as "try again later", not as "no species exist".
    """

    def __init__(
        self,
        records: Iterable[SpeciesRecord] = (),
        store: Optional[KeyValueStore] = None,
    ):
        self.store = store
        self._records: Tuple[SpeciesRecord, ...] = tuple(sorted(records, key=lambda r: r.id))

    @classmethod
    def from_store(cls, store: KeyValueStore) -> "SpeciesCatalog":
        """Create a catalog and load it from the store."""
        catalog = cls(store=store)
        catalog.reload()
        return catalog

    def reload(self) -> int:
        """
        (Re)fetch all records from the store, seeding it when empty.

        Returns:
            Number of records loaded (0 when the store is unavailable)
        """
        if self.store is None:
            return len(self._records)

        try:
            keys = self.store.keys(SPECIES_PREFIX)
            if not keys:
                logger.warning("Species collection is empty. Running the seeder.")
                self.seed()
                keys = self.store.keys(SPECIES_PREFIX)
                if not keys:
                    logger.error("Seeding seems to have failed. Still no data.")

            records = [SpeciesRecord.from_dict(self.store.get(key)) for key in keys]
        except (StoreError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error fetching species from store: {e}")
            self._records = ()
            return 0

        self._records = tuple(sorted(records, key=lambda r: r.id))
        logger.info(f"Loaded {len(self._records)} species into catalog")
        return len(self._records)

    def seed(self, records: Iterable[SpeciesRecord] = SEED_SPECIES) -> bool:
        """
        Write records to an empty store.

        Returns:
            True if the store was seeded, False if it already held data
        """
        if self.store is None:
            raise StoreError("Catalog has no backing store")

        if self.store.keys(SPECIES_PREFIX):
            logger.info("Store already contains species. Skipping seed.")
            return False

        for record in records:
            self.store.put(species_key(record.id), record.to_dict())
        logger.info("Species store seeded successfully")
        return True

    # === Lookups ===

    def get_all(self) -> Tuple[SpeciesRecord, ...]:
        """Get the full catalog in catalog order."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, species_id: int) -> Optional[SpeciesRecord]:
        for record in self._records:
            if record.id == species_id:
                return record
        return None

    def by_category(self, category: str) -> List[SpeciesRecord]:
        category = str(category)
        return [r for r in self._records if r.category == category]

    def find_by_name(self, name: str) -> Optional[SpeciesRecord]:
        """
        Find a species by exact common or scientific name, ignoring case.

        A miss means the species is new to us; callers must not reuse a
        catalog stock photo for it.
        """
        if not name or not name.strip():
            return None

        needle = name.strip().lower()
        for record in self._records:
            if record.name.lower() == needle:
                return record
            if record.scientific_name and record.scientific_name.lower() == needle:
                return record
        return None

    def search_by_text(self, query: str, category: Optional[str] = None) -> List[SpeciesRecord]:
        """
        Substring search on name / scientific name, or exact id match.

        Results keep catalog order; there is no ranking.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []

        candidates = self.by_category(category) if category else list(self._records)
        results = []
        for record in candidates:
            if (
                needle in record.name.lower()
                or needle in record.scientific_name.lower()
                or str(record.id) == needle
            ):
                results.append(record)
        return results

    # === Mutation ===

    def delete_species(self, species_id: int) -> bool:
        """
        Delete a species and its cached generated image.

        Returns:
            True if the species existed
        """
        if self.get(species_id) is None:
            return False

        if self.store is not None:
            try:
                self.store.delete(species_key(species_id))
                self.store.delete(f"{IMAGE_CACHE_PREFIX}{species_id}")
            except StoreError as e:
                logger.error(f"Error deleting species {species_id}: {e}")
                return False

        self._records = tuple(r for r in self._records if r.id != species_id)
        logger.info(f"Deleted species and cached image with ID: {species_id}")
        return True
