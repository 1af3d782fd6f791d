"""
Top‑level router for version 1 of the API.

User signup/lookup and login are public.  Category and account
routers sit behind ``require_token``: a request without a valid bearer
token is rejected before any handler code runs.
"""

from fastapi import APIRouter, Depends

from finance_ledger_api.app.core.security import require_token

from .endpoints import accounts, auth, categories, users


router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(auth.router, tags=["auth"])
router.include_router(
    categories.router,
    prefix="/categories",
    tags=["categories"],
    dependencies=[Depends(require_token)],
)
router.include_router(
    accounts.router,
    prefix="/accounts",
    tags=["accounts"],
    dependencies=[Depends(require_token)],
)
