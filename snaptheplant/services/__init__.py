# Services module
from snaptheplant.services.analysis import HttpVisionAnalyzer, VisionAnalyzer
from snaptheplant.services.collection_store import CollectionItem, CollectionStore
from snaptheplant.services.generators import EnrichmentService
from snaptheplant.services.identification_session import IdentificationSession, SessionContext
from snaptheplant.services.rate_limiter import RateLimiter
from snaptheplant.services.session_registry import SessionRegistry

__all__ = [
    "HttpVisionAnalyzer",
    "VisionAnalyzer",
    "CollectionItem",
    "CollectionStore",
    "EnrichmentService",
    "IdentificationSession",
    "SessionContext",
    "RateLimiter",
    "SessionRegistry",
]
