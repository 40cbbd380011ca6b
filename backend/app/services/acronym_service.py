"""
TIL Backend — Acronym Service (Resource Store)
===============================================

What:  Create, read, update and delete acronyms.
How:   Each method works inside the request's session; writes are flushed
       here and committed by get_db_session when the handler returns.
Who:   Acronyms routes; RelationshipService uses load_acronym().

Rules:
    - Update is a full replacement of short, long and owner.
    - The owner id must resolve to a user on both create and update.
    - Delete sweeps the acronym's pivot rows in the same transaction, so no
      category association outlives its acronym.

Reads over the whole collection (list, search, first, sorted) live in
SearchService.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.acronym import Acronym
from app.models.category import AcronymCategoryPivot
from app.schemas.acronym import AcronymCreate, AcronymResponse
from app.services.user_service import load_user

logger = logging.getLogger(__name__)


async def load_acronym(db: AsyncSession, acronym_id: int) -> Acronym:
    """
    Fetch an Acronym row by id.

    Query plan:
        SELECT * FROM acronyms WHERE id = :id → primary key lookup

    Raises:
        NotFoundError: No such acronym (→ 404)
    """
    acronym = await db.get(Acronym, acronym_id)
    if acronym is None:
        raise NotFoundError(resource="acronym", resource_id=str(acronym_id))
    return acronym


class AcronymService:
    """
    Business logic for single-acronym operations.

    Error Handling Strategy:
        SQLAlchemy errors are wrapped in DatabaseError (hides internals).
        NotFoundError from the load helpers propagates unchanged.
    """

    async def create_acronym(self, db: AsyncSession, data: AcronymCreate) -> AcronymResponse:
        """
        Insert a new acronym owned by `data.user_id`.

        Returns:
            The stored acronym, including its generated id.

        Raises:
            NotFoundError: Owner does not exist (→ 404)
            DatabaseError: Insert failed (→ 500)
        """
        try:
            await load_user(db, data.user_id)
            acronym = Acronym(short=data.short, long=data.long, user_id=data.user_id)
            db.add(acronym)
            await db.flush()  # Assigns the id without committing
        except SQLAlchemyError as e:
            logger.error("Database error creating acronym '%s': %s", data.short, str(e))
            raise DatabaseError(
                message="Could not create the acronym. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Acronym created: %s (%s)", acronym.id, acronym.short)
        return AcronymResponse.model_validate(acronym)

    async def get_acronym(self, db: AsyncSession, acronym_id: int) -> AcronymResponse:
        try:
            acronym = await load_acronym(db, acronym_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching acronym %s: %s", acronym_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the acronym. Please try again.",
                context={"acronym_id": acronym_id},
            )
        return AcronymResponse.model_validate(acronym)

    async def update_acronym(
        self, db: AsyncSession, acronym_id: int, data: AcronymCreate
    ) -> AcronymResponse:
        """
        Replace short, long and owner of an existing acronym.

        Raises:
            NotFoundError: Acronym or new owner does not exist (→ 404)
            DatabaseError: Update failed (→ 500)
        """
        try:
            acronym = await load_acronym(db, acronym_id)
            await load_user(db, data.user_id)

            acronym.short = data.short
            acronym.long = data.long
            acronym.user_id = data.user_id
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating acronym %s: %s", acronym_id, str(e))
            raise DatabaseError(
                message="Could not update the acronym. Please try again.",
                context={"acronym_id": acronym_id},
            )

        logger.info("Acronym updated: %s", acronym_id)
        return AcronymResponse.model_validate(acronym)

    async def delete_acronym(self, db: AsyncSession, acronym_id: int) -> None:
        """
        Delete an acronym and its category associations.

        Raises:
            NotFoundError: No such acronym (→ 404)
            DatabaseError: Delete failed (→ 500)
        """
        try:
            acronym = await load_acronym(db, acronym_id)
            swept = await db.execute(
                delete(AcronymCategoryPivot).where(
                    AcronymCategoryPivot.acronym_id == acronym_id
                )
            )
            await db.delete(acronym)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting acronym %s: %s", acronym_id, str(e))
            raise DatabaseError(
                message="Could not delete the acronym. Please try again.",
                context={"acronym_id": acronym_id},
            )

        logger.info(
            "Acronym deleted: %s (%d category links removed)", acronym_id, swept.rowcount
        )


acronym_service = AcronymService()
