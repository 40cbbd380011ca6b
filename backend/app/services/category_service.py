"""
TIL Backend — Category Service
===============================

What:  Create and read categories, and list the acronyms tagged with one.
Who:   Categories routes; RelationshipService uses load_category().
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, NotFoundError
from app.models.acronym import Acronym
from app.models.category import AcronymCategoryPivot, Category
from app.schemas.acronym import AcronymResponse
from app.schemas.category import CategoryCreate, CategoryResponse

logger = logging.getLogger(__name__)


async def load_category(db: AsyncSession, category_id: int) -> Category:
    """
    Fetch a Category row by id.

    Raises:
        NotFoundError: No such category (→ 404)
    """
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError(resource="category", resource_id=str(category_id))
    return category


class CategoryService:
    """Business logic for categories."""

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> CategoryResponse:
        """
        Create a category with a unique name.

        Raises:
            ConflictError: Name already used (→ 409)
            DatabaseError: Insert failed (→ 500)
        """
        try:
            existing = await db.execute(select(Category.id).where(Category.name == data.name))
            if existing.first() is not None:
                raise ConflictError(
                    message=f"Category '{data.name}' already exists",
                    field="name",
                )
            category = Category(name=data.name)
            db.add(category)
            await db.flush()
        except IntegrityError:
            raise ConflictError(message=f"Category '{data.name}' already exists", field="name")
        except SQLAlchemyError as e:
            logger.error("Database error creating category '%s': %s", data.name, str(e))
            raise DatabaseError(
                message="Could not create the category. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Category created: %s (%s)", category.id, category.name)
        return CategoryResponse.model_validate(category)

    async def get_category(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        try:
            category = await load_category(db, category_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching category %s: %s", category_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the category. Please try again.",
                context={"category_id": category_id},
            )
        return CategoryResponse.model_validate(category)

    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        """All categories in creation order."""
        try:
            result = await db.execute(select(Category).order_by(Category.id))
            categories = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve categories. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [CategoryResponse.model_validate(c) for c in categories]

    async def list_category_acronyms(
        self, db: AsyncSession, category_id: int
    ) -> List[AcronymResponse]:
        """
        Acronyms tagged with a category, in the order they were attached.

        Raises:
            NotFoundError: No such category (→ 404)
        """
        try:
            await load_category(db, category_id)
            result = await db.execute(
                select(Acronym)
                .join(AcronymCategoryPivot, AcronymCategoryPivot.acronym_id == Acronym.id)
                .where(AcronymCategoryPivot.category_id == category_id)
                .order_by(AcronymCategoryPivot.id)
            )
            acronyms = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Database error listing acronyms of category %s: %s", category_id, str(e)
            )
            raise DatabaseError(
                message="Could not retrieve the category's acronyms. Please try again.",
                context={"category_id": category_id},
            )
        return [AcronymResponse.model_validate(a) for a in acronyms]


category_service = CategoryService()
