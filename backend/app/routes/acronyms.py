"""
TIL Backend — Acronym Route Handlers
=====================================

What:  HTTP endpoints under /api/acronyms/.
How:   Extracts path/query/body, delegates to the services, returns JSON.
       Mutations depend on `require_user`; reads are public.

Route order matters: /first and /sorted are declared before /{acronym_id}
so they are not captured as ids.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.acronym import AcronymCreate, AcronymResponse
from app.schemas.category import CategoryResponse
from app.schemas.common import ErrorResponse, ResourceId
from app.schemas.user import UserPublic
from app.security import require_user
from app.services.acronym_service import acronym_service
from app.services.relationship_service import relationship_service
from app.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/acronyms", tags=["Acronyms"])

_AUTH_ERRORS = {
    400: {"description": "Invalid body or path", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
}
_NOT_FOUND = {404: {"description": "Acronym not found", "model": ErrorResponse}}


# ── Collection ────────────────────────────────────────────────────────────

@router.get(
    "/",
    response_model=List[AcronymResponse],
    summary="List acronyms, optionally filtered by a search term",
)
async def list_acronyms(
    term: str | None = Query(
        default=None,
        description="Case-insensitive substring matched against short and long forms",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[AcronymResponse]:
    """
    Without `term`: every acronym in insertion order.
    With `term`: acronyms whose short or long form contains it.
    """
    if term is not None:
        return await search_service.search(db, term)
    return await search_service.list_all(db)


@router.post(
    "/",
    response_model=AcronymResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_AUTH_ERRORS, 404: {"description": "Owner not found", "model": ErrorResponse}},
    summary="Create an acronym",
)
async def create_acronym(
    data: AcronymCreate,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> AcronymResponse:
    logger.debug("User %s creating acronym '%s'", caller.id, data.short)
    return await acronym_service.create_acronym(db, data)


@router.get(
    "/first",
    response_model=AcronymResponse,
    responses={404: {"description": "No acronyms exist", "model": ErrorResponse}},
    summary="Get the earliest-created acronym",
)
async def first_acronym(db: AsyncSession = Depends(get_db_session)) -> AcronymResponse:
    return await search_service.first(db)


@router.get(
    "/sorted",
    response_model=List[AcronymResponse],
    summary="List acronyms sorted by short form",
)
async def sorted_acronyms(db: AsyncSession = Depends(get_db_session)) -> List[AcronymResponse]:
    return await search_service.sorted(db)


# ── Single acronym ────────────────────────────────────────────────────────

@router.get(
    "/{acronym_id}",
    response_model=AcronymResponse,
    responses=_NOT_FOUND,
    summary="Get an acronym by ID",
)
async def get_acronym(
    acronym_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> AcronymResponse:
    return await acronym_service.get_acronym(db, acronym_id)


@router.put(
    "/{acronym_id}",
    response_model=AcronymResponse,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Replace an acronym",
    description="Full replacement: short, long and userID are all required.",
)
async def update_acronym(
    acronym_id: ResourceId,
    data: AcronymCreate,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> AcronymResponse:
    logger.debug("User %s updating acronym %s", caller.id, acronym_id)
    return await acronym_service.update_acronym(db, acronym_id, data)


@router.delete(
    "/{acronym_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Delete an acronym and its category links",
)
async def delete_acronym(
    acronym_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> Response:
    logger.debug("User %s deleting acronym %s", caller.id, acronym_id)
    await acronym_service.delete_acronym(db, acronym_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Relationships ─────────────────────────────────────────────────────────

@router.get(
    "/{acronym_id}/user",
    response_model=UserPublic,
    responses=_NOT_FOUND,
    summary="Get the user who owns an acronym",
)
async def get_acronym_user(
    acronym_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> UserPublic:
    return await relationship_service.get_owner(db, acronym_id)


@router.get(
    "/{acronym_id}/categories",
    response_model=List[CategoryResponse],
    responses=_NOT_FOUND,
    summary="List an acronym's categories in attachment order",
)
async def get_acronym_categories(
    acronym_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> List[CategoryResponse]:
    return await relationship_service.list_categories(db, acronym_id)


@router.post(
    "/{acronym_id}/categories/{category_id}",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={**_AUTH_ERRORS, 404: {"description": "Acronym or category not found", "model": ErrorResponse}},
    summary="Attach a category to an acronym",
    description="Attaching an already-attached category succeeds without creating a duplicate link.",
)
async def attach_category(
    acronym_id: ResourceId,
    category_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> Response:
    await relationship_service.attach_category(db, acronym_id, category_id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete(
    "/{acronym_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_AUTH_ERRORS, 404: {"description": "Acronym or category not found", "model": ErrorResponse}},
    summary="Detach a category from an acronym",
)
async def detach_category(
    acronym_id: ResourceId,
    category_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> Response:
    await relationship_service.detach_category(db, acronym_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
