"""
Pydantic models for account (ledger entry) data.

An account records one movement of money: ``value`` is an integer
amount in the smallest currency unit and ``date`` the day it applies
to.  Its ``type`` must equal the type of its category.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


class AccountBase(BaseModel):
    user_id: int = Field(..., gt=0, examples=[1])
    category_id: int = Field(..., gt=0, examples=[3])
    title: str = Field(..., min_length=1, examples=["Bonus"])
    type: str = Field(..., min_length=1, examples=["income"])
    description: str = Field(..., min_length=1, examples=["Q1"])
    value: int = Field(..., examples=[1500])
    date: dt.date = Field(..., examples=["2024-01-01"])


class AccountCreate(AccountBase):
    """Schema for creating an account."""
    pass


class AccountRead(AccountBase):
    """Schema for reading an account from the API."""

    id: int
    category_title: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }


class AccountUpdate(BaseModel):
    """Schema for updating an account.

    Only provided fields are updated.
    """
    title: str | None = None
    description: str | None = None
    value: int | None = None


class AccountsReport(BaseModel):
    """Sum of account values for one user and type."""

    user_id: int
    type: str
    sum: int


class AccountsGraph(BaseModel):
    """Number of accounts for one user and type."""

    user_id: int
    type: str
    count: int
