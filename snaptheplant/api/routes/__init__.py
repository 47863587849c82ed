# API routes module
from snaptheplant.api.routes.collection import router as collection_router
from snaptheplant.api.routes.enrich import router as enrich_router
from snaptheplant.api.routes.health import router as health_router
from snaptheplant.api.routes.identify import router as identify_router
from snaptheplant.api.routes.species import router as species_router

__all__ = [
    "collection_router",
    "enrich_router",
    "health_router",
    "identify_router",
    "species_router",
]
