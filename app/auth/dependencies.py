# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Every protected request carries a Supabase access token which is verified
# here; nothing about the signed-in user is kept between requests.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret), accepted only when the secret is set
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.post("/artworks")
#   async def create(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

HS256 = "HS256"


class SigningKeys:
    """
    Public keys published by Supabase Auth (JWKS), cached per process.

    Keys are re-read after `ttl_seconds`, or sooner when a token names a
    key id that is not cached (rotation), at most once per
    `miss_refresh_seconds`. A failed fetch keeps serving the last good set.
    """

    def __init__(self, ttl_seconds: float = 3600, miss_refresh_seconds: float = 60):
        self.ttl_seconds = ttl_seconds
        self.miss_refresh_seconds = miss_refresh_seconds
        self._keys: dict[str, dict] = {}
        self._fetched_at: float = 0.0

    @property
    def url(self) -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    def _age(self) -> float:
        return time.monotonic() - self._fetched_at if self._fetched_at else float("inf")

    def _refresh(self) -> None:
        try:
            response = httpx.get(self.url, timeout=10)
            response.raise_for_status()
            keys = response.json().get("keys", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not fetch signing keys from {self.url}: {e}")
            return
        self._keys = {key["kid"]: key for key in keys if key.get("kid")}
        self._fetched_at = time.monotonic()
        logger.debug(f"Loaded {len(self._keys)} signing keys")

    def get(self, kid: str) -> dict | None:
        if self._age() > self.ttl_seconds:
            self._refresh()
        if kid not in self._keys and self._age() > self.miss_refresh_seconds:
            self._refresh()
        return self._keys.get(kid)

    def clear(self) -> None:
        self._keys = {}
        self._fetched_at = 0.0


signing_keys = SigningKeys()


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Pick the verification key for a token from its header.

    HS256 tokens use the project JWT secret; asymmetric ones (ES256, RS256)
    use the published key with the matching `kid`.

    Raises:
        HTTPException: 401 if no usable key exists for the token
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise _unauthorized("Invalid token")

    alg = header.get("alg", HS256)
    kid = header.get("kid")
    if alg == HS256:
        if not settings.SUPABASE_JWT_SECRET:
            logger.warning("HS256 token rejected: SUPABASE_JWT_SECRET is not set")
            raise _unauthorized("Invalid token")
        return settings.SUPABASE_JWT_SECRET, HS256

    key = signing_keys.get(kid) if kid else None
    if key is None:
        logger.warning(f"No signing key for alg={alg}, kid={kid}")
        raise _unauthorized("Invalid token")
    return key, alg


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the AuthUser it describes.

    Raises:
        HTTPException: 401 if the token is invalid, expired or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)

        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")

    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    metadata = payload.get("user_metadata") or {}
    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(
        id=user_uuid,
        email=payload.get("email"),
        name=metadata.get("name"),
        avatar_url=metadata.get("avatar_url"),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from the Supabase JWT in the Authorization header.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    return decode_access_token(credentials.credentials)


async def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """Raw bearer token, verified first."""
    decode_access_token(credentials.credentials)
    return credentials.credentials
