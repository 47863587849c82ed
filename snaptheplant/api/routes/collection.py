"""
Collection endpoints.

A user's saved identifications, each with the user's own photo.
"""

import logging

from fastapi import APIRouter, Depends

from snaptheplant.api.auth import require_signed_in_user
from snaptheplant.api.errors import to_http_exception
from snaptheplant.catalog.species_catalog import SpeciesCatalog
from snaptheplant.core.dependencies import get_catalog, get_collection_store
from snaptheplant.core.errors import IdentificationError, NotFoundError
from snaptheplant.models.identity import UserIdentity
from snaptheplant.models.schemas import (
    CollectionItemSchema,
    ErrorResponse,
    NotesRequest,
    SaveItemRequest,
)
from snaptheplant.services.collection_store import CollectionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/collection",
    tags=["Collection"],
    responses={401: {"model": ErrorResponse, "description": "Sign-in required"}},
)


@router.get("", response_model=list[CollectionItemSchema], summary="List saved items")
async def list_collection(
    collection: CollectionStore = Depends(get_collection_store),
    user: UserIdentity = Depends(require_signed_in_user),
) -> list[CollectionItemSchema]:
    return [CollectionItemSchema(**item.to_dict()) for item in collection.list_items(user.user_id)]


@router.post(
    "",
    response_model=CollectionItemSchema,
    status_code=201,
    responses={404: {"model": ErrorResponse, "description": "Unknown species"}},
    summary="Save a catalog species",
)
async def add_to_collection(
    request: SaveItemRequest,
    collection: CollectionStore = Depends(get_collection_store),
    catalog: SpeciesCatalog = Depends(get_catalog),
    user: UserIdentity = Depends(require_signed_in_user),
) -> CollectionItemSchema:
    """
    Save a species with the user's photo.

    Saving the same species with the same photo again returns the existing
    item.
    """
    species = catalog.get(request.species_id)
    if species is None:
        raise to_http_exception(NotFoundError(f"Species {request.species_id} not found"))

    item = collection.add_item(user.user_id, species, request.saved_image)
    return CollectionItemSchema(**item.to_dict())


@router.delete(
    "/{instance_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse, "description": "Unknown item"}},
    summary="Remove a saved item",
)
async def remove_from_collection(
    instance_id: str,
    collection: CollectionStore = Depends(get_collection_store),
    user: UserIdentity = Depends(require_signed_in_user),
) -> None:
    if not collection.remove_item(user.user_id, instance_id):
        raise to_http_exception(NotFoundError(f"Collection item {instance_id} not found"))


@router.patch(
    "/{instance_id}/notes",
    response_model=CollectionItemSchema,
    responses={404: {"model": ErrorResponse, "description": "Unknown item"}},
    summary="Update notes",
)
async def update_notes(
    instance_id: str,
    request: NotesRequest,
    collection: CollectionStore = Depends(get_collection_store),
    user: UserIdentity = Depends(require_signed_in_user),
) -> CollectionItemSchema:
    try:
        item = collection.update_notes(user.user_id, instance_id, request.notes)
    except IdentificationError as e:
        raise to_http_exception(e)
    return CollectionItemSchema(**item.to_dict())
