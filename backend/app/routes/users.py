"""
TIL Backend — User Route Handlers
==================================

What:  Registration, public reads, owned acronyms, and login.
Auth:  Registration and reads are open. Login takes HTTP Basic credentials
       and returns a bearer token for the protected endpoints.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.acronym import AcronymResponse
from app.schemas.common import ErrorResponse
from app.schemas.user import TokenResponse, UserCreate, UserPublic
from app.security import basic_credentials
from app.services.auth_service import auth_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.post(
    "/",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username taken", "model": ErrorResponse}},
    summary="Register a user",
)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserPublic:
    return await user_service.create_user(db, data)


@router.get("/", response_model=List[UserPublic], summary="List users")
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserPublic]:
    return await user_service.list_users(db)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Bad credentials", "model": ErrorResponse}},
    summary="Exchange Basic credentials for a bearer token",
)
async def login(
    credentials: HTTPBasicCredentials = Depends(basic_credentials),
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.login(db, credentials.username, credentials.password)


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    responses=_NOT_FOUND,
    summary="Get a user by ID",
)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db_session)) -> UserPublic:
    return await user_service.get_user(db, user_id)


@router.get(
    "/{user_id}/acronyms",
    response_model=List[AcronymResponse],
    responses=_NOT_FOUND,
    summary="List the acronyms a user owns",
)
async def get_user_acronyms(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[AcronymResponse]:
    return await user_service.list_user_acronyms(db, user_id)
