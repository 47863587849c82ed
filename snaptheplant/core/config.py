"""
Application configuration with environment-based settings.

Configuration is centralized here to allow easy swapping between
development, staging, and production environments.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    app_name: str = "SnapThePlant Identification API"
    app_version: str = "0.1.0"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Usage limits
    daily_limit: int = 15
    analysis_timeout_seconds: float = 30.0
    generation_timeout_seconds: float = 60.0

    # Matching and sessions
    strict_matching: bool = False
    max_sessions: int = 1000

    # Generative endpoints (vision analysis, image and story generation)
    analysis_mode: str = "identify"  # "identify" or "attributes"
    vision_api_url: Optional[str] = None
    image_api_url: Optional[str] = None
    story_api_url: Optional[str] = None
    ai_api_key: Optional[str] = None

    # Persistent store
    store_backend: str = "memory"  # "memory" or "json"
    store_path: str = "./data/store"

    # Image shown when generation fails or a record has no photo
    placeholder_image: str = "https://placehold.co/600x400.png"
    max_image_size_mb: float = 10.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "SNAPTHEPLANT_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Quiz vocabulary per category: attribute key -> allowed options.
# The number of keys is the maximum attainable match score for the category.
CATEGORY_VOCABULARY = {
    "Plant": {
        "color": ["red", "green", "yellow", "blue", "white", "other"],
        "shape": ["simple", "lobed", "needle", "compound"],
        "size": ["small", "medium", "large"],
    },
    "Tree": {
        "bark": ["smooth", "rough", "peeling"],
        "leaf_shape": ["simple", "lobed", "needle"],
        "has_fruit": ["yes", "no"],
    },
    "Weed": {
        "flower_color": ["red", "green", "yellow", "blue", "white", "other"],
        "location": ["lawn", "garden", "pavement"],
        "leaf_type": ["broad", "grassy", "toothed"],
    },
    "Insect": {
        "color": ["red", "green", "yellow", "blue", "white", "other"],
        "wings": ["yes", "no"],
        "legs": ["6", "8", "more"],
    },
    "Cactus": {
        "shape": ["columnar", "globular", "paddles"],
        "flowers": ["yes", "no"],
        "color": ["green", "blue-green", "grey-green"],
    },
    "Succulent": {
        "color": ["green", "blue-green", "purple", "other"],
        "leaf_shape": ["rosette", "paddle", "cylindrical"],
        "size": ["small", "medium", "large"],
    },
    "Bird": {
        "color": ["red", "brown", "black", "blue", "yellow", "other"],
        "size": ["small", "medium", "large"],
        "beak_shape": ["short", "long", "hooked"],
    },
}

# Categories that receive care tips
PLANT_CATEGORIES = {"Plant", "Tree", "Weed", "Cactus", "Succulent"}


def category_vocabulary(category: str) -> dict[str, list[str]]:
    """Get the attribute vocabulary for a category (empty if unknown)."""
    return CATEGORY_VOCABULARY.get(str(category), {})
