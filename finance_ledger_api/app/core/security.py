"""
Security helpers for bearer tokens and password hashing.

Tokens are compact JSON Web Tokens signed with HMAC‑SHA256 and
base64url encoded (``header.payload.signature``).  The payload carries
the ``username`` plus the registered ``iat``/``exp`` time claims.  The
signing secret is passed in explicitly; request handling reads it from
``settings.secret_key``.

Passwords go through a two-step pipeline: a SHA‑512 digest whose
leading and trailing zero bytes are trimmed, then bcrypt.  The trim is
lossy but every stored credential was produced that way, so signup and
login both run the exact same ``prepare`` step.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

import bcrypt
from fastapi import Header

from .config import settings
from .errors import AuthError, AuthErrorKind


logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class IdentityClaim:
    """Decoded token payload."""

    username: str
    issued_at: int
    expires_at: int


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def _decode_segment(segment: str) -> dict:
    try:
        value = json.loads(_b64_url_decode(segment).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise AuthError(AuthErrorKind.MALFORMED, "Token segment cannot be decoded") from exc
    if not isinstance(value, dict):
        raise AuthError(AuthErrorKind.MALFORMED, "Token segment is not an object")
    return value


def issue_token(username: str, secret: str, ttl: int, now: Optional[float] = None) -> str:
    """Create a signed token for ``username`` valid for ``ttl`` seconds.

    Parameters
    ----------
    username : str
        Identity to embed in the token.
    secret : str
        HMAC signing secret.
    ttl : int
        Lifetime of the token in seconds.
    now : Optional[float]
        Issue time as a UNIX timestamp; defaults to the current time.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    issued_at = int(time.time() if now is None else now)
    payload = {"username": username, "iat": issued_at, "exp": issued_at + int(ttl)}
    header_b64 = _b64_url_encode(json.dumps(_HEADER, separators=(',', ':')).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(',', ':')).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def parse_token(token: str, secret: str, now: Optional[float] = None) -> IdentityClaim:
    """Verify ``token`` under ``secret`` and return its claim.

    Raises
    ------
    AuthError
        ``MALFORMED`` if the token cannot be decoded,
        ``SIGNATURE_INVALID`` if the HMAC does not verify and
        ``EXPIRED`` once ``now >= exp``.
    """
    parts = token.split('.')
    if len(parts) != 3:
        raise AuthError(AuthErrorKind.MALFORMED, "Token must have three segments")
    header_b64, payload_b64, signature_b64 = parts

    header = _decode_segment(header_b64)
    if header.get("alg") != _HEADER["alg"]:
        raise AuthError(AuthErrorKind.MALFORMED, "Unsupported token algorithm")

    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (binascii.Error, ValueError) as exc:
        raise AuthError(AuthErrorKind.MALFORMED, "Token signature cannot be decoded") from exc
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    # Constant‑time comparison to prevent timing attacks
    if not hmac.compare_digest(_sign(signing_input, secret), actual_sig):
        raise AuthError(AuthErrorKind.SIGNATURE_INVALID, "Token signature is invalid")

    payload = _decode_segment(payload_b64)
    try:
        claim = IdentityClaim(
            username=str(payload["username"]),
            issued_at=int(payload.get("iat", 0)),
            expires_at=int(payload["exp"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthError(AuthErrorKind.MALFORMED, "Token claims are incomplete") from exc

    current = time.time() if now is None else now
    if current >= claim.expires_at:
        raise AuthError(AuthErrorKind.EXPIRED, "Token has expired")
    return claim


# ---------------------------------------------------------------------------
# Authorization header gate
# ---------------------------------------------------------------------------

def extract_bearer_token(header_value: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` value."""
    if header_value is None or not header_value.strip():
        raise AuthError(AuthErrorKind.MISSING_HEADER, "Authorization header is missing")
    fields = header_value.split()
    if len(fields) != 2 or fields[0] != BEARER_SCHEME:
        raise AuthError(AuthErrorKind.MALFORMED_SCHEME, "Invalid authorization format")
    return fields[1]


def require_token(authorization: Optional[str] = Header(None)) -> IdentityClaim:
    """Dependency guarding protected routers.

    Any valid, unexpired token grants access.  The claim is returned so
    FastAPI can cache it for the request, but no route uses it for
    authorization.
    """
    try:
        token = extract_bearer_token(authorization)
        return parse_token(token, settings.secret_key)
    except AuthError as exc:
        logger.warning("Rejected request: %s", exc.kind.value)
        raise


# ---------------------------------------------------------------------------
# Credential hashing
# ---------------------------------------------------------------------------

class CredentialHasher:
    """Derive and check stored password hashes.

    ``prepare`` must run on both sides: its output, not the plaintext,
    is what bcrypt sees.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    @staticmethod
    def prepare(plain_password: str) -> bytes:
        digest = hashlib.sha512(plain_password.encode("utf-8")).digest()
        return digest.strip(b"\x00")

    def hash(self, derived: bytes) -> str:
        return bcrypt.hashpw(derived, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    @staticmethod
    def verify(derived: bytes, stored_hash: str) -> bool:
        try:
            return bcrypt.checkpw(derived, stored_hash.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash at all.
            return False


def get_hasher() -> CredentialHasher:
    """Hasher configured with the deployment's bcrypt cost."""
    return CredentialHasher(rounds=settings.bcrypt_rounds)
