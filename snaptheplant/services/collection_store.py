"""
Per-user collection of saved identifications.

Items are keyed by a generated instance id, so one species can be saved
many times with different photos. Saving the same (species, photo) pair
again returns the existing item instead of duplicating it.
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from snaptheplant.catalog.records import SpeciesRecord
from snaptheplant.core.errors import NotFoundError
from snaptheplant.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

COLLECTION_PREFIX = "collection:"


@dataclass(frozen=True)
class CollectionItem:
    """A saved identification: species display fields plus the user's photo."""
    instance_id: str
    species_id: int
    category: str
    name: str
    scientific_name: str
    saved_image: str
    is_poisonous: bool = False
    toxicity_warning: Optional[str] = None
    key_information: str = ""
    further_reading: str = ""
    care_tips: List[Dict[str, str]] = field(default_factory=list)
    notes: str = ""
    saved_at: str = ""

    @classmethod
    def from_species(cls, species: SpeciesRecord, saved_image: str) -> "CollectionItem":
        return cls(
            instance_id=uuid.uuid4().hex,
            species_id=species.id,
            category=species.category,
            name=species.name,
            scientific_name=species.scientific_name,
            saved_image=saved_image,
            is_poisonous=species.is_poisonous,
            toxicity_warning=species.toxicity_warning,
            key_information=species.key_information,
            further_reading=species.further_reading,
            care_tips=[tip.to_dict() for tip in species.care_tips],
            saved_at=datetime.now(timezone.utc).isoformat(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "species_id": self.species_id,
            "category": self.category,
            "name": self.name,
            "scientific_name": self.scientific_name,
            "saved_image": self.saved_image,
            "is_poisonous": self.is_poisonous,
            "toxicity_warning": self.toxicity_warning,
            "key_information": self.key_information,
            "further_reading": self.further_reading,
            "care_tips": list(self.care_tips),
            "notes": self.notes,
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CollectionItem":
        return cls(**{k: data[k] for k in data if k in cls.__dataclass_fields__})


class CollectionStore:
    """
    Saved-collection storage, one list per user.

    Concurrent writers for the same user may race (last write wins);
    different users never contend.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _key(self, user_id: str) -> str:
        return f"{COLLECTION_PREFIX}{user_id}"

    def _load(self, user_id: str) -> List[CollectionItem]:
        raw = self.store.get(self._key(user_id), [])
        return [CollectionItem.from_dict(item) for item in raw or []]

    def _save(self, user_id: str, items: List[CollectionItem]) -> None:
        self.store.put(self._key(user_id), [item.to_dict() for item in items])

    def list_items(self, user_id: str) -> List[CollectionItem]:
        return self._load(user_id)

    def get_item(self, user_id: str, instance_id: str) -> CollectionItem:
        for item in self._load(user_id):
            if item.instance_id == instance_id:
                return item
        raise NotFoundError(f"Collection item {instance_id} not found")

    def add_item(self, user_id: str, species: SpeciesRecord, saved_image: str) -> CollectionItem:
        """Save a species with the user's photo (idempotent per species/photo pair)."""
        items = self._load(user_id)
        for item in items:
            if item.species_id == species.id and item.saved_image == saved_image:
                logger.debug(f"{species.name} with this photo already saved for {user_id}")
                return item

        new_item = CollectionItem.from_species(species, saved_image)
        items.append(new_item)
        self._save(user_id, items)
        logger.info(f"Saved {species.name} to collection of {user_id} as {new_item.instance_id}")
        return new_item

    def remove_item(self, user_id: str, instance_id: str) -> bool:
        """Remove exactly one saved item. Returns False if it was not there."""
        items = self._load(user_id)
        remaining = [item for item in items if item.instance_id != instance_id]
        if len(remaining) == len(items):
            return False
        self._save(user_id, remaining)
        logger.info(f"Removed {instance_id} from collection of {user_id}")
        return True

    def update_notes(self, user_id: str, instance_id: str, notes: str) -> CollectionItem:
        """Replace the free-text notes of a saved item."""
        items = self._load(user_id)
        for index, item in enumerate(items):
            if item.instance_id == instance_id:
                updated = replace(item, notes=notes)
                items[index] = updated
                self._save(user_id, items)
                return updated
        raise NotFoundError(f"Collection item {instance_id} not found")
