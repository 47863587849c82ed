"""
Image and story generation.

Generation is cosmetic: generators report failure as `Err` instead of
raising, and EnrichmentService maps every `Err` to a placeholder image or
a canned story so the identification flow is never blocked.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from snaptheplant.services.prompts import IMAGE_PROMPT, STORY_PROMPT, FALLBACK_STORY
from snaptheplant.services.result import Err, Ok, Result
from snaptheplant.catalog.species_catalog import IMAGE_CACHE_PREFIX
from snaptheplant.storage.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Generator returning a single string (image data URI or story)."""

    @abstractmethod
    async def generate(self, name: str, category: str) -> Result:
        pass


class _HttpPromptGenerator(TextGenerator):
    """Posts a rendered prompt to a JSON endpoint and reads one field back."""

    prompt_template: str = ""
    response_field: str = ""

    def __init__(
        self,
        api_url: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def generate(self, name: str, category: str) -> Result:
        if not self.api_url:
            return Err("endpoint not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {
            "prompt": self.prompt_template.format(name=name, category=category),
            "name": name,
            "category": category,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
            data: Dict[str, Any] = response.json()
        except httpx.TimeoutException:
            return Err("timeout")
        except (httpx.HTTPError, ValueError) as e:
            return Err(str(e) or type(e).__name__)

        if isinstance(data, dict) and isinstance(data.get("output"), dict):
            data = data["output"]
        value = data.get(self.response_field) if isinstance(data, dict) else None
        if not isinstance(value, str) or not value.strip():
            return Err(f"response has no {self.response_field}")
        return Ok(value)


class HttpImageGenerator(_HttpPromptGenerator):
    """Generates an illustrative image; replies with `imageDataUri`."""

    prompt_template = IMAGE_PROMPT
    response_field = "imageDataUri"


class HttpStoryGenerator(_HttpPromptGenerator):
    """Generates a short children's story; replies with `story`."""

    prompt_template = STORY_PROMPT
    response_field = "story"


class EnrichmentService:
    """
    Applies the fallback policy around generators.

    Usage:
        enrichment = EnrichmentService(image_gen, story_gen, store, placeholder)
        image_uri = await enrichment.illustrate("Honey Bee", "Insect", species_id=9)
        story = await enrichment.tell_story("Honey Bee", "Insect")
    """

    def __init__(
        self,
        image_generator: TextGenerator,
        story_generator: TextGenerator,
        store: Optional[KeyValueStore] = None,
        placeholder_image: str = "https://placehold.co/600x400.png",
    ):
        self.image_generator = image_generator
        self.story_generator = story_generator
        self.store = store
        self.placeholder_image = placeholder_image

    def _cached_image(self, species_id: Optional[int]) -> Optional[str]:
        if self.store is None or species_id is None or species_id < 0:
            return None
        try:
            cached = self.store.get(f"{IMAGE_CACHE_PREFIX}{species_id}")
        except StoreError as e:
            logger.error(f"Error retrieving cached image for species ID {species_id}: {e}")
            return None
        return cached.get("image_data_uri") if isinstance(cached, dict) else None

    def _cache_image(self, species_id: Optional[int], image_data_uri: str) -> None:
        if self.store is None or species_id is None or species_id < 0:
            return
        try:
            self.store.put(f"{IMAGE_CACHE_PREFIX}{species_id}", {"image_data_uri": image_data_uri})
        except StoreError as e:
            logger.error(f"Error caching image for species ID {species_id}: {e}")

    async def illustrate(self, name: str, category: str, species_id: Optional[int] = None) -> str:
        """Get a generated image for a species, or the placeholder on failure."""
        cached = self._cached_image(species_id)
        if cached:
            return cached

        result = await self.image_generator.generate(name, category)
        if not result.is_ok:
            logger.warning(f"Image generation failed for {name!r}: {result.error}")
            return self.placeholder_image

        self._cache_image(species_id, result.value)
        return result.value

    async def tell_story(self, name: str, category: str) -> str:
        """Get a generated story, or a canned sentence on failure."""
        result = await self.story_generator.generate(name, category)
        if not result.is_ok:
            logger.warning(f"Story generation failed for {name!r}: {result.error}")
        return result.unwrap_or(FALLBACK_STORY.format(name=name, category=category))
