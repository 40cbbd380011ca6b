"""
TIL Backend — Search Service (Collection Queries)
==================================================

What:  Read-only queries over the whole acronym collection.
Who:   GET /api/acronyms/, /api/acronyms/?term=, /first, /sorted.

Operations:
    list_all()   → every acronym, insertion order (id ascending)
    search(term) → short OR long contains term, case-insensitive, insertion order
    first()      → lowest id, NotFoundError when the collection is empty
    sorted()     → short ascending, id as tiebreak

Search matching:
    `icontains(..., autoescape=True)` renders as a case-insensitive LIKE with
    `%` and `_` in the term escaped, so "100%" only matches a literal "100%".
    Case folding is whatever the database's lower() does: Postgres folds
    Unicode, SQLite folds ASCII only, so on SQLite "été" does not match "Été".
"""

import logging
from typing import List

from sqlalchemy import Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.acronym import Acronym
from app.schemas.acronym import AcronymResponse

logger = logging.getLogger(__name__)


class SearchService:
    """Collection-level acronym queries."""

    async def _fetch(self, db: AsyncSession, query: Select, action: str) -> List[AcronymResponse]:
        try:
            result = await db.execute(query)
            acronyms = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve acronyms. Please try again.",
                context={"action": action, "error_type": type(e).__name__},
            )
        return [AcronymResponse.model_validate(a) for a in acronyms]

    async def list_all(self, db: AsyncSession) -> List[AcronymResponse]:
        return await self._fetch(db, select(Acronym).order_by(Acronym.id), "list_all")

    async def search(self, db: AsyncSession, term: str) -> List[AcronymResponse]:
        """
        Acronyms whose short or long form contains `term`.

        An empty result is a valid answer, not an error.

        Raises:
            ValidationError: `term` is empty or whitespace only (→ 400)
        """
        if not term.strip():
            raise ValidationError(message="Search term must not be blank", field="term")

        query = (
            select(Acronym)
            .where(
                or_(
                    Acronym.short.icontains(term, autoescape=True),
                    Acronym.long.icontains(term, autoescape=True),
                )
            )
            .order_by(Acronym.id)
        )
        results = await self._fetch(db, query, "search")
        logger.debug("Search '%s' matched %d acronyms", term, len(results))
        return results

    async def first(self, db: AsyncSession) -> AcronymResponse:
        """
        The earliest-inserted acronym.

        Raises:
            NotFoundError: The collection is empty (→ 404)
        """
        results = await self._fetch(
            db, select(Acronym).order_by(Acronym.id).limit(1), "first"
        )
        if not results:
            raise NotFoundError(resource="acronym")
        return results[0]

    async def sorted(self, db: AsyncSession) -> List[AcronymResponse]:
        return await self._fetch(
            db, select(Acronym).order_by(Acronym.short.asc(), Acronym.id.asc()), "sorted"
        )


search_service = SearchService()
