"""
TIL Backend — Category and Pivot SQLAlchemy Models
===================================================

What:  ORM models for the `categories` table and the `acronym_category_pivot`
       join table.
Who:   CategoryService (create/read), RelationshipService (attach, detach,
       list).

Pivot Design:
    - Integer auto-increment id: records attachment order, which
      list_categories() returns
    - UNIQUE (acronym_id, category_id): one row per pair; the service checks
      for an existing row first so re-attaching is a no-op
    - ON DELETE CASCADE on both foreign keys; AcronymService also deletes the
      rows explicitly since SQLite does not enforce foreign keys by default
"""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Category(Base):
    """A tag that can be applied to many acronyms."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Category name, unique",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class AcronymCategoryPivot(Base):
    """One acronym–category association."""

    __tablename__ = "acronym_category_pivot"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Increases with attachment order",
    )

    acronym_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acronyms.id", ondelete="CASCADE"),
        nullable=False,
    )

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("acronym_id", "category_id", name="uq_acronym_category"),
    )

    def __repr__(self) -> str:
        return (
            f"<AcronymCategoryPivot(acronym_id={self.acronym_id}, "
            f"category_id={self.category_id})>"
        )
