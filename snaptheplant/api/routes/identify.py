"""
Identification session endpoints.

Main endpoints for identifying a photo:
- Create a session and analyze a captured photo
- Answer the category quiz instead of (or after) analysis
- Confirm a candidate and save it to the collection
- Check today's remaining identifications
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from snaptheplant.api.auth import get_current_user, require_signed_in_user
from snaptheplant.api.errors import to_http_exception
from snaptheplant.core.dependencies import get_rate_limiter, get_session_registry
from snaptheplant.core.errors import IdentificationError
from snaptheplant.models.identity import UserIdentity
from snaptheplant.models.schemas import (
    AnalyzeRequest,
    AnswersRequest,
    CollectionItemSchema,
    ErrorResponse,
    RateLimitResponse,
    SaveResultRequest,
    SelectRequest,
    SessionResponse,
)
from snaptheplant.services.identification_session import IdentificationSession
from snaptheplant.services.rate_limiter import RateLimiter
from snaptheplant.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Identification"])

SESSION_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Unknown session"},
    409: {"model": ErrorResponse, "description": "Not allowed in the current state"},
}


def _session_for(
    session_id: str,
    registry: SessionRegistry,
    user: UserIdentity,
) -> IdentificationSession:
    try:
        session = registry.get(session_id, user)
    except IdentificationError as e:
        raise to_http_exception(e)
    # Pick up the caller's current tier
    session.user = user
    return session


@router.post("/sessions", response_model=SessionResponse, status_code=201, summary="Start a session")
async def create_session(
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> SessionResponse:
    session = registry.create(user)
    logger.info(f"Created session {session.session_id} for {user.user_id}")
    return SessionResponse(**session.snapshot())


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses=SESSION_ERRORS,
    summary="Get session state",
)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> SessionResponse:
    return SessionResponse(**_session_for(session_id, registry, user).snapshot())


@router.post(
    "/sessions/{session_id}/analyze",
    response_model=SessionResponse,
    responses={
        **SESSION_ERRORS,
        401: {"model": ErrorResponse, "description": "Sign-in required"},
        429: {"model": ErrorResponse, "description": "Daily limit reached"},
        502: {"model": ErrorResponse, "description": "Analysis failed"},
    },
    summary="Analyze a photo",
    description="""
    Identify the subject of a photo within the selected category.

    The photo is sent to the vision analyzer and the result is matched
    against the species catalog. Free accounts are limited to a number of
    analyses per day; the count is charged before the analyzer is called.

    **Image Requirements:**
    - Data URI (data:image/jpeg;base64,... or PNG/WebP)
    - Clear view of the subject
    """
)
async def analyze_photo(
    session_id: str,
    request: AnalyzeRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(require_signed_in_user),
) -> SessionResponse:
    """
    Run an analysis in the session.

    If a newer analysis or a reset overtook this one, the returned state is
    whatever the session holds now.
    """
    session = _session_for(session_id, registry, user)
    try:
        logger.info(f"Received analysis request (session={session_id}, category={request.category})")
        await session.begin_analysis(request.category, request.image)
    except IdentificationError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Analysis failed: {e}")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")

    return SessionResponse(**session.snapshot())


@router.post(
    "/sessions/{session_id}/answers",
    response_model=SessionResponse,
    responses=SESSION_ERRORS,
    summary="Rank species by quiz answers",
)
async def submit_answers(
    session_id: str,
    request: AnswersRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> SessionResponse:
    """Match quiz answers in the session; does not count against the daily limit."""
    session = _session_for(session_id, registry, user)
    try:
        session.apply_answers(request.category, request.answers)
    except IdentificationError as e:
        raise to_http_exception(e)
    return SessionResponse(**session.snapshot())


@router.post(
    "/sessions/{session_id}/select",
    response_model=SessionResponse,
    responses=SESSION_ERRORS,
    summary="Confirm a candidate",
)
async def select_candidate(
    session_id: str,
    request: SelectRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> SessionResponse:
    session = _session_for(session_id, registry, user)
    try:
        session.select(request.species_id)
    except IdentificationError as e:
        raise to_http_exception(e)
    return SessionResponse(**session.snapshot())


@router.post(
    "/sessions/{session_id}/save",
    response_model=CollectionItemSchema,
    status_code=201,
    responses={
        **SESSION_ERRORS,
        401: {"model": ErrorResponse, "description": "Sign-in required"},
    },
    summary="Save the confirmed result",
)
async def save_result(
    session_id: str,
    request: SaveResultRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(require_signed_in_user),
) -> CollectionItemSchema:
    """Save the confirmed species with the user's photo to their collection."""
    session = _session_for(session_id, registry, user)
    try:
        item = session.save_result(request.notes)
    except IdentificationError as e:
        raise to_http_exception(e)
    return CollectionItemSchema(**item.to_dict())


@router.post(
    "/sessions/{session_id}/reset",
    response_model=SessionResponse,
    responses=SESSION_ERRORS,
    summary="Start over",
)
async def reset_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> SessionResponse:
    """Return to idle; any analysis still in flight is discarded."""
    session = _session_for(session_id, registry, user)
    session.reset()
    session.last_error = None
    return SessionResponse(**session.snapshot())


@router.delete(
    "/sessions/{session_id}",
    status_code=204,
    responses=SESSION_ERRORS,
    summary="Discard a session",
)
async def discard_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    user: UserIdentity = Depends(get_current_user),
) -> None:
    _session_for(session_id, registry, user)
    registry.discard(session_id)


@router.get("/rate-limit", response_model=RateLimitResponse, summary="Today's identification budget")
async def get_rate_limit(
    limiter: RateLimiter = Depends(get_rate_limiter),
    user: UserIdentity = Depends(get_current_user),
) -> RateLimitResponse:
    record = limiter.status(user.user_id)
    unlimited = not user.tier.is_rate_limited
    return RateLimitResponse(
        count=record.count,
        date=record.date,
        limit=limiter.daily_limit,
        remaining=limiter.daily_limit if unlimited else max(0, limiter.daily_limit - record.count),
        unlimited=unlimited,
    )
