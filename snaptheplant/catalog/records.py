"""
Catalog data structures.

Provides:
- CareTip: A single (title, description) care instruction
- SpeciesRecord: Immutable species entry shared by catalog, matcher and sessions
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, Tuple


@dataclass(frozen=True)
class CareTip:
    """Care instruction such as Watering or Sunlight."""
    title: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True)
class SpeciesRecord:
    """
    Immutable species record.

    `attributes` maps a category-scoped attribute key (e.g. "wings") to a
    single string value. Records may omit keys of their category but never
    use keys outside its vocabulary.
    """
    id: int
    category: str
    name: str
    scientific_name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    is_poisonous: bool = False
    toxicity_warning: Optional[str] = None
    care_tips: Tuple[CareTip, ...] = ()

    # Display metadata, opaque to matching
    image: str = ""
    further_reading: str = ""
    key_information: str = ""

    # Set on transient records synthesized from an AI identification
    is_new: bool = False

    def __post_init__(self):
        if not self.is_poisonous and self.toxicity_warning is not None:
            object.__setattr__(self, "toxicity_warning", None)
        object.__setattr__(self, "attributes", dict(self.attributes))
        object.__setattr__(self, "care_tips", tuple(self.care_tips))

    def with_safety(self, is_poisonous: bool, toxicity_warning: Optional[str]) -> "SpeciesRecord":
        """Copy with poison/toxicity fields replaced."""
        return replace(
            self,
            is_poisonous=is_poisonous,
            toxicity_warning=toxicity_warning if is_poisonous else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization and storage."""
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "scientific_name": self.scientific_name,
            "attributes": dict(self.attributes),
            "is_poisonous": self.is_poisonous,
            "toxicity_warning": self.toxicity_warning,
            "care_tips": [tip.to_dict() for tip in self.care_tips],
            "image": self.image,
            "further_reading": self.further_reading,
            "key_information": self.key_information,
            "is_new": self.is_new,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpeciesRecord":
        """Build a record from a stored document."""
        return cls(
            id=int(data["id"]),
            category=data["category"],
            name=data["name"],
            scientific_name=data.get("scientific_name", ""),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
            is_poisonous=bool(data.get("is_poisonous", False)),
            toxicity_warning=data.get("toxicity_warning"),
            care_tips=tuple(
                CareTip(title=tip["title"], description=tip["description"])
                for tip in data.get("care_tips") or []
            ),
            image=data.get("image", ""),
            further_reading=data.get("further_reading", ""),
            key_information=data.get("key_information", ""),
            is_new=bool(data.get("is_new", False)),
        )
