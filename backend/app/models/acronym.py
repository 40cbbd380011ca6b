"""
TIL Backend — Acronym SQLAlchemy Model
=======================================

What:  ORM model representing the `acronyms` table.
Who:   AcronymService (CRUD), SearchService (queries), RelationshipService.

Table Design:
    - Integer auto-increment primary key: id order is insertion order, which
      `first()` and `list_all()` rely on
    - user_id: required owner, mutable through full-replacement update
    - Index on short: `sorted()` orders by it
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Acronym(Base):
    """
    A short form paired with its long form, owned by one User.

    Query Patterns:
        - List / first: ORDER BY id
        - Sorted: ORDER BY short, id
        - Search: short ILIKE %term% OR long ILIKE %term%
    """

    __tablename__ = "acronyms"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Unique identifier, increasing with insertion order",
    )

    short: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Short form, e.g. OMG",
    )

    long: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Expanded form, e.g. Oh My God",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        comment="Owning user",
    )

    __table_args__ = (
        Index("idx_acronyms_short", "short"),
        Index("idx_acronyms_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Acronym(id={self.id}, short='{self.short}', user_id={self.user_id})>"
