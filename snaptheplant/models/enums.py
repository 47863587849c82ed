"""
Enumerations for the species identification system.

These enums provide type safety and clear documentation of valid values.
"""

from enum import Enum


class Category(str, Enum):
    """Top-level bucket that partitions the catalog and selects the quiz."""
    PLANT = "Plant"
    TREE = "Tree"
    WEED = "Weed"
    INSECT = "Insect"
    CACTUS = "Cactus"
    SUCCULENT = "Succulent"
    BIRD = "Bird"

    def __str__(self) -> str:
        return self.value


class SessionState(str, Enum):
    """Lifecycle of a single identification attempt."""
    IDLE = "idle"
    ANALYZING = "analyzing"
    MATCHES_READY = "matches_ready"
    RESULT_CONFIRMED = "result_confirmed"


class SubscriptionTier(str, Enum):
    """Subscription tier supplied by the auth provider."""
    FREE = "free"
    PAID = "paid"
    BETA = "beta"

    @property
    def is_rate_limited(self) -> bool:
        return self is SubscriptionTier.FREE


class ConfidenceLevel(str, Enum):
    """Human-readable confidence levels for match percentages."""
    EXACT = "exact"          # == 100
    HIGH = "high"            # >= 66
    PARTIAL = "partial"      # >= 33
    LOW = "low"              # > 0
    NONE = "none"            # 0

    @classmethod
    def from_score(cls, confidence: int) -> "ConfidenceLevel":
        """Convert a 0-100 confidence percentage to a level."""
        if confidence >= 100:
            return cls.EXACT
        elif confidence >= 66:
            return cls.HIGH
        elif confidence >= 33:
            return cls.PARTIAL
        elif confidence > 0:
            return cls.LOW
        else:
            return cls.NONE
