"""
Pydantic models for category data.

A category groups accounts of the same ``type`` (e.g. ``"expense"``
or ``"income"``) for one user.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    user_id: int = Field(..., gt=0, examples=[1])
    title: str = Field(..., min_length=1, examples=["Rent"])
    type: str = Field(..., min_length=1, examples=["expense"])
    description: str = Field(..., min_length=1, examples=["Monthly apartment rent"])


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""
    pass


class CategoryRead(CategoryBase):
    """Schema for reading a category from the API."""

    id: int
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class CategoryUpdate(BaseModel):
    """Schema for updating a category.

    Only provided fields are updated.
    """
    title: str | None = None
    description: str | None = None
