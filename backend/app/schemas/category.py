"""
TIL Backend — Category Schemas
===============================
"""

from pydantic import BaseModel, Field, field_validator


class CategoryCreate(BaseModel):
    """Body of POST /api/categories."""
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class CategoryResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}
