"""
Species catalog endpoints.

Provides endpoints for:
- Browsing and searching the catalog
- Barcode / QR lookups
- Category quizzes and attribute matching
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from snaptheplant.api.errors import to_http_exception
from snaptheplant.catalog.species_catalog import SpeciesCatalog
from snaptheplant.core.config import CATEGORY_VOCABULARY, Settings, get_settings
from snaptheplant.core.dependencies import get_catalog
from snaptheplant.core.errors import IdentificationError, NotFoundError
from snaptheplant.matching.candidate_matcher import CandidateMatcher, validate_answers
from snaptheplant.models.schemas import (
    ErrorResponse,
    MatchRequest,
    MatchResponse,
    QuizQuestion,
    QuizResponse,
    SpeciesListResponse,
    SpeciesSchema,
)
from snaptheplant.services.identification_session import parse_category

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/species", tags=["Species"])


def _list_response(records) -> SpeciesListResponse:
    return SpeciesListResponse(
        results=[SpeciesSchema(**r.to_dict()) for r in records],
        count=len(records),
    )


@router.get("", response_model=SpeciesListResponse, summary="List species")
async def list_species(
    category: Optional[str] = Query(default=None, description="Only species of this category"),
    catalog: SpeciesCatalog = Depends(get_catalog),
) -> SpeciesListResponse:
    """List the catalog, optionally restricted to one category."""
    try:
        if category:
            records = catalog.by_category(parse_category(category).value)
        else:
            records = list(catalog.get_all())
    except IdentificationError as e:
        raise to_http_exception(e)

    return _list_response(records)


@router.get("/search", response_model=SpeciesListResponse, summary="Search species by text")
async def search_species(
    q: str = Query(..., description="Name, scientific name or species id"),
    category: Optional[str] = Query(default=None),
    catalog: SpeciesCatalog = Depends(get_catalog),
) -> SpeciesListResponse:
    """Case-insensitive substring search on names, or exact id match."""
    try:
        category_value = parse_category(category).value if category else None
    except IdentificationError as e:
        raise to_http_exception(e)

    return _list_response(catalog.search_by_text(q, category_value))


@router.get(
    "/barcode/{code}",
    response_model=SpeciesListResponse,
    summary="Look up a scanned code",
    description="A decoded barcode or QR payload is matched like a text search.",
)
async def lookup_barcode(
    code: str,
    catalog: SpeciesCatalog = Depends(get_catalog),
) -> SpeciesListResponse:
    results = catalog.search_by_text(code)
    logger.info(f"Barcode {code!r} matched {len(results)} species")
    return _list_response(results)


@router.get("/categories", summary="List categories")
async def list_categories() -> dict:
    """Categories and their attribute vocabularies."""
    return {
        "categories": [
            {"name": name, "attributes": vocabulary}
            for name, vocabulary in CATEGORY_VOCABULARY.items()
        ]
    }


@router.get(
    "/categories/{category}/quiz",
    response_model=QuizResponse,
    responses={400: {"model": ErrorResponse, "description": "Unknown category"}},
    summary="Get a category quiz",
)
async def get_quiz(category: str) -> QuizResponse:
    """Disambiguating questions for a category, one per attribute."""
    try:
        parsed = parse_category(category)
    except IdentificationError as e:
        raise to_http_exception(e)

    vocabulary = CATEGORY_VOCABULARY.get(parsed.value, {})
    return QuizResponse(
        category=parsed.value,
        questions=[QuizQuestion(key=key, options=list(options)) for key, options in vocabulary.items()],
    )


@router.post(
    "/match",
    response_model=MatchResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid category or answers"}},
    summary="Rank species by quiz answers",
)
async def match_species(
    request: MatchRequest,
    catalog: SpeciesCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> MatchResponse:
    """
    Rank a category's species by agreement with the given answers.

    An empty answer set lists the whole category at confidence 0; an empty
    result means nothing matched.
    """
    try:
        category = parse_category(request.category).value
        answers = validate_answers(category, request.attributes)
    except IdentificationError as e:
        logger.warning(f"Rejected match request: {e}")
        raise to_http_exception(e)

    matcher = CandidateMatcher(catalog.get_all(), strict=settings.strict_matching)
    candidates = [c.to_dict() for c in matcher.match(category, answers)]
    return MatchResponse(category=category, candidates=candidates, count=len(candidates))


@router.get(
    "/{species_id}",
    response_model=SpeciesSchema,
    responses={404: {"model": ErrorResponse, "description": "Unknown species"}},
    summary="Get one species",
)
async def get_species(
    species_id: int,
    catalog: SpeciesCatalog = Depends(get_catalog),
) -> SpeciesSchema:
    record = catalog.get(species_id)
    if record is None:
        raise to_http_exception(NotFoundError(f"Species {species_id} not found"))
    return SpeciesSchema(**record.to_dict())


@router.delete(
    "/{species_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse, "description": "Unknown species"}},
    summary="Delete a species",
)
async def delete_species(
    species_id: int,
    catalog: SpeciesCatalog = Depends(get_catalog),
) -> None:
    """Remove a species from the catalog along with its cached image."""
    try:
        deleted = catalog.delete_species(species_id)
    except Exception as e:
        logger.exception(f"Deleting species {species_id} failed: {e}")
        raise HTTPException(status_code=500, detail=f"Delete failed: {str(e)}")

    if not deleted:
        raise to_http_exception(NotFoundError(f"Species {species_id} not found"))
    logger.info(f"Deleted species {species_id}")
