"""
TIL Backend — Token SQLAlchemy Model
=====================================

What:  ORM model for the `tokens` table holding issued bearer tokens.
Who:   AuthService writes a row on login and resolves bearer tokens to users.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Token(Base):
    """An opaque bearer credential belonging to one user."""

    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        comment="Base64 of random bytes; sent as 'Authorization: Bearer <token>'",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Token(id={self.id}, user_id={self.user_id})>"
