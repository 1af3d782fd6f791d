"""
Pydantic models for user data.

``UserCreate`` is the signup body, ``UserLogin`` the login body and
``UserRead`` what the API returns.  The stored password hash is never
part of a response model.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, examples=["alice"])


class UserCreate(UserBase):
    """Schema for signing up a user."""

    password: str = Field(..., min_length=1, examples=["hunter2"])
    email: str = Field(..., min_length=1, examples=["alice@example.com"])


class UserLogin(UserBase):
    """Schema for the login request."""

    password: str = Field(..., min_length=1, examples=["hunter2"])


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    email: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
