"""
FastAPI dependency injection.

Provides dependency injection for services and components,
enabling easy testing and component swapping.
"""

import logging
from functools import lru_cache

from snaptheplant.catalog.species_catalog import SpeciesCatalog
from snaptheplant.core.config import get_settings
from snaptheplant.services.analysis import HttpVisionAnalyzer, UnconfiguredAnalyzer, VisionAnalyzer
from snaptheplant.services.collection_store import CollectionStore
from snaptheplant.services.generators import EnrichmentService, HttpImageGenerator, HttpStoryGenerator
from snaptheplant.services.identification_session import SessionContext
from snaptheplant.services.rate_limiter import RateLimiter
from snaptheplant.services.session_registry import SessionRegistry
from snaptheplant.storage.store import KeyValueStore, create_store

logger = logging.getLogger(__name__)


@lru_cache()
def get_store() -> KeyValueStore:
    """Get cached persistent store."""
    settings = get_settings()
    logger.info(f"Using {settings.store_backend} store")
    return create_store(settings.store_backend, settings.store_path)


@lru_cache()
def get_catalog() -> SpeciesCatalog:
    """Get cached species catalog, loaded (and seeded if empty) from the store."""
    return SpeciesCatalog.from_store(get_store())


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """Get cached daily rate limiter."""
    return RateLimiter(get_store(), daily_limit=get_settings().daily_limit)


@lru_cache()
def get_collection_store() -> CollectionStore:
    """Get cached collection store."""
    return CollectionStore(get_store())


@lru_cache()
def get_analyzer() -> VisionAnalyzer:
    """Get cached vision analyzer; unconfigured endpoints fail every analysis."""
    settings = get_settings()
    if not settings.vision_api_url:
        logger.warning("No vision endpoint configured; photo analysis is disabled")
        return UnconfiguredAnalyzer()
    return HttpVisionAnalyzer(
        api_url=settings.vision_api_url,
        api_key=settings.ai_api_key,
        mode=settings.analysis_mode,
        timeout=settings.analysis_timeout_seconds,
    )


@lru_cache()
def get_enrichment_service() -> EnrichmentService:
    """Get cached image/story enrichment service."""
    settings = get_settings()
    return EnrichmentService(
        image_generator=HttpImageGenerator(
            settings.image_api_url,
            api_key=settings.ai_api_key,
            timeout=settings.generation_timeout_seconds,
        ),
        story_generator=HttpStoryGenerator(
            settings.story_api_url,
            api_key=settings.ai_api_key,
            timeout=settings.generation_timeout_seconds,
        ),
        store=get_store(),
        placeholder_image=settings.placeholder_image,
    )


@lru_cache()
def get_session_context() -> SessionContext:
    """Get cached collaborators shared by identification sessions."""
    settings = get_settings()
    return SessionContext(
        catalog=get_catalog(),
        analyzer=get_analyzer(),
        rate_limiter=get_rate_limiter(),
        collection=get_collection_store(),
        analysis_timeout=settings.analysis_timeout_seconds,
        max_image_size_mb=settings.max_image_size_mb,
        strict_matching=settings.strict_matching,
    )


@lru_cache()
def get_session_registry() -> SessionRegistry:
    """Get cached session registry."""
    return SessionRegistry(get_session_context(), max_sessions=get_settings().max_sessions)


__all__ = [
    "get_store",
    "get_catalog",
    "get_rate_limiter",
    "get_collection_store",
    "get_analyzer",
    "get_enrichment_service",
    "get_session_context",
    "get_session_registry",
]
