"""
SnapThePlant Identification API

FastAPI application that identifies plants, trees, weeds, cacti,
succulents, insects and birds from a photo, keeps a per-user collection
of saved identifications, and generates illustrations and stories.

This is the main entry point for the application.

Usage:
    uvicorn snaptheplant.main:app --reload
    uvicorn snaptheplant.main:app --host 0.0.0.0 --port 8000

Production:
    gunicorn snaptheplant.main:app -k uvicorn.workers.UvicornWorker -w 4
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi

from snaptheplant.core.config import get_settings
from snaptheplant.core.errors import IdentificationError
from snaptheplant.api.errors import status_code_for
from snaptheplant.api.routes import (
    collection_router,
    enrich_router,
    health_router,
    identify_router,
    species_router,
)
from snaptheplant.api.routes.health import set_startup_time
from snaptheplant.core.dependencies import get_catalog

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup:
    - Load the species catalog (seeding an empty store)

    Runs on shutdown:
    - Clean up resources
    """
    logger.info("Starting SnapThePlant Identification API...")

    # Record startup time
    set_startup_time()

    try:
        catalog = get_catalog()
        logger.info(f"Species catalog ready with {len(catalog)} species")
    except Exception as e:
        logger.error(f"Failed to load species catalog: {e}")
        # Continue startup - the readiness check retries the load

    logger.info("Application startup complete")

    yield

    # Cleanup on shutdown
    logger.info("Shutting down SnapThePlant Identification API...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## SnapThePlant Identification API

Backend for identifying living things from a photo and keeping a
personal collection of them.

### Features

- **Photo Identification**: A vision model identifies the subject, which is matched against the species catalog
- **Quiz Matching**: Rank species by answers to a short per-category quiz, no photo needed
- **Safety Information**: Poison flags and toxicity warnings on every result
- **Collection**: Save identifications with your own photo and notes
- **Enrichment**: Generated illustrations and short stories for any species

### Getting Started

1. `POST /api/v1/sessions` to start an identification session
2. `POST /api/v1/sessions/{id}/analyze` with a category and a photo data URI
3. `POST /api/v1/sessions/{id}/select` to confirm one of the candidates
4. `POST /api/v1/sessions/{id}/save` to keep it in your collection

### Categories

Plant, Tree, Weed, Insect, Cactus, Succulent, Bird

### Usage Limits

Free accounts get 15 photo analyses per day (UTC date of the server).
Paid and beta accounts are unlimited. Quiz matching is always free.
Photo analysis and the collection need a signed-in user (`X-User-Id`).
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IdentificationError)
async def identification_exception_handler(request: Request, exc: IdentificationError):
    """Handle expected identification failures that escaped a router."""
    logger.warning(f"{exc.error_type}: {exc}")
    return JSONResponse(
        status_code=status_code_for(exc),
        content={
            "error": exc.error_type,
            "message": exc.user_message,
            "details": {"reason": str(exc)} if settings.debug else None
        }
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
            "details": {"reason": str(exc)} if settings.debug else None
        }
    )


# Include routers
app.include_router(health_router, prefix=settings.api_prefix)
app.include_router(species_router, prefix=settings.api_prefix)
app.include_router(identify_router, prefix=settings.api_prefix)
app.include_router(collection_router, prefix=settings.api_prefix)
app.include_router(enrich_router, prefix=settings.api_prefix)


def _api_info() -> dict:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "documentation": "/docs",
        "health_check": f"{settings.api_prefix}/health",
        "sessions_endpoint": f"{settings.api_prefix}/sessions",
        "species_endpoint": f"{settings.api_prefix}/species",
    }


@app.get("/", tags=["Root"])
async def root():
    """API root."""
    return _api_info()


# API info endpoint
@app.get("/api", tags=["Root"])
async def api_info():
    """API information endpoint."""
    return _api_info()


# Custom OpenAPI schema
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.app_name,
        version=settings.app_version,
        description=app.description,
        routes=app.routes,
    )

    # Add custom tags
    openapi_schema["tags"] = [
        {
            "name": "Identification",
            "description": "Identification sessions and daily limits"
        },
        {
            "name": "Species",
            "description": "Species catalog, quizzes and matching"
        },
        {
            "name": "Collection",
            "description": "Saved identifications"
        },
        {
            "name": "Enrichment",
            "description": "Generated images and stories"
        },
        {
            "name": "Health",
            "description": "Health check and system status endpoints"
        },
        {
            "name": "Root",
            "description": "API root and information"
        }
    ]

    # Add example request/response
    openapi_schema["info"]["x-example-request"] = {
        "category": "Insect",
        "image": "data:image/jpeg;base64,<base64_encoded_image>"
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


# Entry point for running with Python
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "snaptheplant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers
    )
