"""
User endpoints for API v1.

Signup and public lookups.  These routes are not behind the token
gate; login lives in ``auth``.
"""

from fastapi import APIRouter

from finance_ledger_api.app.schemas.user import UserCreate, UserRead
from finance_ledger_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=UserRead)
async def create_user(user: UserCreate) -> UserRead:
    """Sign up a new user.

    The password is digested and bcrypt-hashed before it is stored.
    """
    return await UserService.create_user(user)


@router.get("/id/{user_id}", response_model=UserRead)
async def get_user_by_id(user_id: int) -> UserRead:
    """Retrieve a user by numeric ID.  Raises 404 if absent."""
    return await UserService.get_user_by_id(user_id)


@router.get("/{username}", response_model=UserRead)
async def get_user(username: str) -> UserRead:
    """Retrieve a user by username.  Raises 404 if absent."""
    return await UserService.get_user_by_username(username)
