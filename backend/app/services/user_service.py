"""
TIL Backend — User Service
===========================

What:  Create and read users, and list the acronyms a user owns.
Who:   Users routes; AcronymService and RelationshipService use load_user()
       to resolve owner ids.

Design Decision:
    Registration returns the public projection only. The password hash is
    written once here and never leaves the service layer.
"""

import asyncio
import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, NotFoundError
from app.models.acronym import Acronym
from app.models.user import User
from app.schemas.acronym import AcronymResponse
from app.schemas.user import UserCreate, UserPublic
from app.services.auth_service import hash_password

logger = logging.getLogger(__name__)


async def load_user(db: AsyncSession, user_id: UUID) -> User:
    """
    Fetch a User row by id.

    Raises:
        NotFoundError: No such user (→ 404)
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError(resource="user", resource_id=str(user_id))
    return user


class UserService:
    """Business logic for users."""

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserPublic:
        """
        Register a user.

        Raises:
            ConflictError: Username already taken (→ 409)
            DatabaseError: Insert failed (→ 500)
        """
        try:
            existing = await db.execute(select(User.id).where(User.username == data.username))
            if existing.first() is not None:
                raise ConflictError(
                    message=f"Username '{data.username}' is already taken",
                    field="username",
                )

            password_hash = await asyncio.to_thread(hash_password, data.password)
            user = User(name=data.name, username=data.username, password_hash=password_hash)
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same username
            raise ConflictError(
                message=f"Username '{data.username}' is already taken",
                field="username",
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating user '%s': %s", data.username, str(e))
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User created: %s (%s)", user.id, user.username)
        return UserPublic.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserPublic:
        try:
            user = await load_user(db, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            )
        return UserPublic.model_validate(user)

    async def list_users(self, db: AsyncSession) -> List[UserPublic]:
        try:
            result = await db.execute(select(User).order_by(User.username))
            users = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [UserPublic.model_validate(user) for user in users]

    async def list_user_acronyms(self, db: AsyncSession, user_id: UUID) -> List[AcronymResponse]:
        """
        Acronyms owned by a user, in insertion order.

        Raises:
            NotFoundError: No such user (→ 404)
        """
        try:
            await load_user(db, user_id)
            result = await db.execute(
                select(Acronym).where(Acronym.user_id == user_id).order_by(Acronym.id)
            )
            acronyms = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing acronyms of user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user's acronyms. Please try again.",
                context={"user_id": str(user_id)},
            )
        return [AcronymResponse.model_validate(a) for a in acronyms]


user_service = UserService()
