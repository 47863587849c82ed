# Data models module
from snaptheplant.models.schemas import (
    SpeciesSchema,
    ScoredCandidateSchema,
    MatchRequest,
    MatchResponse,
    AnalyzeRequest,
    SessionResponse,
    CollectionItemSchema,
    ErrorResponse,
)
from snaptheplant.models.enums import Category, SessionState, SubscriptionTier, ConfidenceLevel
from snaptheplant.models.identity import UserIdentity

__all__ = [
    "SpeciesSchema",
    "ScoredCandidateSchema",
    "MatchRequest",
    "MatchResponse",
    "AnalyzeRequest",
    "SessionResponse",
    "CollectionItemSchema",
    "ErrorResponse",
    "Category",
    "SessionState",
    "SubscriptionTier",
    "ConfidenceLevel",
    "UserIdentity",
]
