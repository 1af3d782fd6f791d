"""
Error taxonomy and FastAPI exception handlers.

Every failure a request can hit is raised as a ``LedgerError``
subclass carrying its HTTP status and a short machine-readable code.
Handlers raise; nothing writes an error response and keeps going.
``register_exception_handlers`` turns these exceptions (plus request
binding failures and stray ``sqlite3`` errors) into JSON responses of
the form ``{"detail": ..., "code": ...}``.
"""

import logging
import sqlite3
from enum import Enum
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, detail: str = "", headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(detail or self.code)
        self.detail = detail or self.code
        self.headers = headers


class ValidationError(LedgerError):
    """A required request field is missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFoundError(LedgerError):
    """No row matched the requested identifier."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InternalError(LedgerError):
    """Unexpected persistence failure."""


class AuthErrorKind(str, Enum):
    MISSING_HEADER = "missing_header"
    MALFORMED_SCHEME = "malformed_scheme"
    MALFORMED = "malformed"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    UNAUTHORIZED = "unauthorized"


# Header shape problems are client request errors; anything about the
# token or the password itself is an authentication failure.
_AUTH_STATUS = {
    AuthErrorKind.MISSING_HEADER: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.MALFORMED_SCHEME: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.MALFORMED: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.SIGNATURE_INVALID: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.EXPIRED: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
}


class AuthError(LedgerError):
    """Authentication failed; ``kind`` says how."""

    def __init__(self, kind: AuthErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.code = kind.value
        self.status_code = _AUTH_STATUS[kind]
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        super().__init__(detail or kind.value.replace("_", " "), headers=headers)


def _render(exc: LedgerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers,
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return _render(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-binding failures as 400 instead of FastAPI's 422."""
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    error = ValidationError("Invalid request fields: " + ", ".join(fields))
    return _render(error)


async def sqlite_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error(
        "Persistence failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return _render(InternalError("Persistence failure"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the ledger exception handlers to ``app``."""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(sqlite3.Error, sqlite_error_handler)
