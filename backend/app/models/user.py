"""
TIL Backend — User SQLAlchemy Model
====================================

What:  ORM model representing the `users` table.
Who:   UserService (create/read), AuthService (login, token lookup),
       RelationshipService (acronym owner).

Table Design:
    - UUID primary key, generated in Python so it exists before flush
    - username: unique; it is the login name for HTTP Basic
    - password_hash: PBKDF2 "salt$hash" string, never serialized to clients
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """
    An account that owns acronyms.

    Lifecycle:
        Created by POST /api/users. There is no delete endpoint; acronyms keep
        their user_id even if a row were removed out of band.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login name, unique across users",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="PBKDF2-HMAC-SHA256 salt and digest, hex, '$'-separated",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
