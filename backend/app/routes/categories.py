"""
TIL Backend — Category Route Handlers
======================================

What:  Category creation (authenticated) and public reads.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.acronym import AcronymResponse
from app.schemas.category import CategoryCreate, CategoryResponse
from app.schemas.common import ErrorResponse, ResourceId
from app.security import require_user
from app.services.category_service import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])

_NOT_FOUND = {404: {"description": "Category not found", "model": ErrorResponse}}


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        409: {"description": "Name already used", "model": ErrorResponse},
    },
    summary="Create a category",
)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db_session),
    caller: User = Depends(require_user),
) -> CategoryResponse:
    return await category_service.create_category(db, data)


@router.get("/", response_model=List[CategoryResponse], summary="List categories")
async def list_categories(db: AsyncSession = Depends(get_db_session)) -> List[CategoryResponse]:
    return await category_service.list_categories(db)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses=_NOT_FOUND,
    summary="Get a category by ID",
)
async def get_category(
    category_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.get_category(db, category_id)


@router.get(
    "/{category_id}/acronyms",
    response_model=List[AcronymResponse],
    responses=_NOT_FOUND,
    summary="List acronyms tagged with a category",
)
async def get_category_acronyms(
    category_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> List[AcronymResponse]:
    return await category_service.list_category_acronyms(db, category_id)
