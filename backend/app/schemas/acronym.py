"""
TIL Backend — Acronym Request/Response Schemas
===============================================

What:  Pydantic models for the acronym JSON shape `{id, short, long, userID}`.
How:   The owner field is `user_id` in Python and `userID` on the wire.
       Both spellings are accepted on input; responses always use `userID`.
"""

import uuid

from pydantic import AliasChoices, BaseModel, Field, field_validator


class AcronymCreate(BaseModel):
    """
    What:  Body of POST /api/acronyms and PUT /api/acronyms/{id}.
    Why:   Update is a full replacement, so create and update share one
           schema with every field required.
    """
    short: str = Field(min_length=1, max_length=255, description="Short form, e.g. OMG")
    long: str = Field(min_length=1, max_length=1024, description="Long form, e.g. Oh My God")
    user_id: uuid.UUID = Field(
        validation_alias=AliasChoices("userID", "user_id"),
        serialization_alias="userID",
        description="ID of the owning user",
    )

    @field_validator("short", "long")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class AcronymResponse(BaseModel):
    """Full acronym as returned by every acronym-producing endpoint."""
    id: int = Field(description="Acronym identifier")
    short: str
    long: str
    user_id: uuid.UUID = Field(
        validation_alias=AliasChoices("userID", "user_id"),
        serialization_alias="userID",
        description="ID of the owning user",
    )

    model_config = {"from_attributes": True}
