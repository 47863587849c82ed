"""
Enrichment endpoints.

Generated illustrations and short stories for a species. Generation
failures are never errors: the placeholder image or a canned story is
returned instead.
"""

import logging

from fastapi import APIRouter, Depends

from snaptheplant.core.dependencies import get_enrichment_service
from snaptheplant.models.schemas import EnrichRequest, ImageResponse, StoryResponse
from snaptheplant.services.generators import EnrichmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/enrich", tags=["Enrichment"])


@router.post("/image", response_model=ImageResponse, summary="Illustrate a species")
async def generate_image(
    request: EnrichRequest,
    enrichment: EnrichmentService = Depends(get_enrichment_service),
) -> ImageResponse:
    """
    Get a generated image for a species.

    With a catalog `species_id` the image is cached and reused on later
    requests.
    """
    image = await enrichment.illustrate(request.name, request.category, request.species_id)
    return ImageResponse(
        image_data_uri=image,
        is_placeholder=image == enrichment.placeholder_image,
    )


@router.post("/story", response_model=StoryResponse, summary="Tell a story about a species")
async def generate_story(
    request: EnrichRequest,
    enrichment: EnrichmentService = Depends(get_enrichment_service),
) -> StoryResponse:
    story = await enrichment.tell_story(request.name, request.category)
    return StoryResponse(story=story)
