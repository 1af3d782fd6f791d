"""
Login endpoint for API v1.

Exchanges a username and password for a short-lived bearer token.
"""

from fastapi import APIRouter

from finance_ledger_api.app.core.config import settings
from finance_ledger_api.app.core.security import issue_token
from finance_ledger_api.app.schemas.user import Token, UserLogin
from finance_ledger_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin) -> Token:
    """Authenticate a user and return a token.

    Unknown usernames yield 404 and wrong passwords 401.  The token
    expires after ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    user = await UserService.authenticate(credentials.username, credentials.password)
    token = issue_token(
        user.username,
        settings.secret_key,
        settings.access_token_expire_minutes * 60,
    )
    return Token(access_token=token)
