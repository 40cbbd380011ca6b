"""
TIL Backend — Relationship Service
===================================

What:  Maintains the acronym ↔ category many-to-many links and resolves the
       user ↔ acronym ownership link.
Who:   Acronym sub-resource routes (/api/acronyms/{id}/categories, /user).

Pivot Semantics:
    attach:  Inserts one (acronym_id, category_id) row. Re-attaching an
             existing pair writes nothing and still succeeds. The insert
             runs in a savepoint; a unique-constraint clash from a concurrent
             attach of the same pair is treated as already attached.
    detach:  Deletes the pair if present; absent pairs are a no-op.
    list:    Categories in attachment order (pivot id ascending).
    Both ids must resolve before any write, otherwise NotFoundError.
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.category import AcronymCategoryPivot, Category
from app.models.user import User
from app.schemas.category import CategoryResponse
from app.schemas.user import UserPublic
from app.services.acronym_service import load_acronym
from app.services.category_service import load_category

logger = logging.getLogger(__name__)


class RelationshipService:
    """Business logic for acronym relationships."""

    async def attach_category(
        self, db: AsyncSession, acronym_id: int, category_id: int
    ) -> bool:
        """
        Link a category to an acronym.

        Returns:
            True if a new link was written, False if it already existed.

        Raises:
            NotFoundError: Acronym or category does not exist (→ 404)
            DatabaseError: Insert failed (→ 500)
        """
        try:
            await load_acronym(db, acronym_id)
            await load_category(db, category_id)

            existing = await db.execute(
                select(AcronymCategoryPivot.id).where(
                    AcronymCategoryPivot.acronym_id == acronym_id,
                    AcronymCategoryPivot.category_id == category_id,
                )
            )
            if existing.first() is not None:
                logger.debug(
                    "Category %s already attached to acronym %s", category_id, acronym_id
                )
                return False

            try:
                async with db.begin_nested():
                    db.add(AcronymCategoryPivot(acronym_id=acronym_id, category_id=category_id))
                    await db.flush()
            except IntegrityError:
                # Lost a race with a concurrent attach of the same pair
                logger.debug(
                    "Category %s attached to acronym %s concurrently", category_id, acronym_id
                )
                return False
        except SQLAlchemyError as e:
            logger.error(
                "Database error attaching category %s to acronym %s: %s",
                category_id, acronym_id, str(e),
            )
            raise DatabaseError(
                message="Could not attach the category. Please try again.",
                context={"acronym_id": acronym_id, "category_id": category_id},
            )

        logger.info("Category %s attached to acronym %s", category_id, acronym_id)
        return True

    async def detach_category(
        self, db: AsyncSession, acronym_id: int, category_id: int
    ) -> bool:
        """
        Remove a category link from an acronym.

        Returns:
            True if a link was removed, False if none existed.
        """
        try:
            await load_acronym(db, acronym_id)
            await load_category(db, category_id)
            result = await db.execute(
                delete(AcronymCategoryPivot).where(
                    AcronymCategoryPivot.acronym_id == acronym_id,
                    AcronymCategoryPivot.category_id == category_id,
                )
            )
        except SQLAlchemyError as e:
            logger.error(
                "Database error detaching category %s from acronym %s: %s",
                category_id, acronym_id, str(e),
            )
            raise DatabaseError(
                message="Could not detach the category. Please try again.",
                context={"acronym_id": acronym_id, "category_id": category_id},
            )

        removed = result.rowcount > 0
        if removed:
            logger.info("Category %s detached from acronym %s", category_id, acronym_id)
        return removed

    async def list_categories(self, db: AsyncSession, acronym_id: int) -> List[CategoryResponse]:
        """
        Categories attached to an acronym, in attachment order.

        Query plan:
            SELECT categories.* FROM categories
            JOIN acronym_category_pivot ON pivot.category_id = categories.id
            WHERE pivot.acronym_id = :id ORDER BY pivot.id

        Raises:
            NotFoundError: No such acronym (→ 404)
        """
        try:
            await load_acronym(db, acronym_id)
            result = await db.execute(
                select(Category)
                .join(AcronymCategoryPivot, AcronymCategoryPivot.category_id == Category.id)
                .where(AcronymCategoryPivot.acronym_id == acronym_id)
                .order_by(AcronymCategoryPivot.id)
            )
            categories = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing categories of acronym %s: %s", acronym_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the acronym's categories. Please try again.",
                context={"acronym_id": acronym_id},
            )
        return [CategoryResponse.model_validate(c) for c in categories]

    async def get_owner(self, db: AsyncSession, acronym_id: int) -> UserPublic:
        """
        The user owning an acronym, as the public projection.

        Raises:
            NotFoundError: No such acronym, or its user_id no longer resolves (→ 404)
        """
        try:
            acronym = await load_acronym(db, acronym_id)
            owner = await db.get(User, acronym.user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching owner of acronym %s: %s", acronym_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the acronym's user. Please try again.",
                context={"acronym_id": acronym_id},
            )

        if owner is None:
            # Users have no delete endpoint, but the FK is not cascaded either
            logger.warning("Acronym %s references missing user %s", acronym_id, acronym.user_id)
            raise NotFoundError(resource="user", resource_id=str(acronym.user_id))
        return UserPublic.model_validate(owner)


relationship_service = RelationshipService()
