"""
TIL Backend — User and Token Schemas
=====================================

What:  Registration body, public projection, and login token.

Public projection:
    `UserPublic` has no password field at all, so a User row passed through
    it cannot leak the hash.
"""

import uuid

from pydantic import AliasChoices, BaseModel, Field


class UserCreate(BaseModel):
    """Body of POST /api/users."""
    name: str = Field(min_length=1, max_length=255)
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class UserPublic(BaseModel):
    """
    What:  User without sensitive fields.
    Who:   GET /api/users*, GET /api/acronyms/{id}/user, POST /api/users.
    """
    id: uuid.UUID
    name: str
    username: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """
    What:  Returned by POST /api/users/login.
    How:   Clients send `token` back as `Authorization: Bearer <token>`.
    """
    id: int
    token: str
    user_id: uuid.UUID = Field(
        validation_alias=AliasChoices("userID", "user_id"),
        serialization_alias="userID",
    )

    model_config = {"from_attributes": True}
