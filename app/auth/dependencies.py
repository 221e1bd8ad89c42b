# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and the per-request
# context.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_request_context, require_trainer
#
#   @router.post("/tasks")
#   async def create(ctx: RequestContext = Depends(require_trainer)):
#       return TaskService.create_task(ctx, ...)
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID
import httpx

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import RoleRequiredError, UnauthenticatedError
from core.models.context import RequestContext
from core.models.user import UserRole
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return the identity it carries.

    Raises:
        UnauthenticatedError: If the token is invalid, expired or has no subject
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
        raise UnauthenticatedError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise UnauthenticatedError(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise UnauthenticatedError("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise UnauthenticatedError("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the caller's identity from the Bearer token.

    Returns:
        AuthUser: The authenticated identity

    Raises:
        UnauthenticatedError: 401 if the header is missing or the token is invalid
    """
    if credentials is None:
        raise UnauthenticatedError()

    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_request_context(
    auth: AuthUser = Depends(get_current_user)
) -> RequestContext:
    """
    Resolve the caller to their users row, creating it on first sign-in.

    The returned context is immutable and passed explicitly into every
    service call for this request.
    """
    user = UserService.get_or_create_user(auth.id, auth.email)
    return RequestContext(user=user)


async def require_trainer(
    ctx: RequestContext = Depends(get_request_context)
) -> RequestContext:
    """
    Raises:
        RoleRequiredError: 403 unless the caller is a TRAINER or ADMIN
    """
    if ctx.role not in (UserRole.TRAINER, UserRole.ADMIN):
        raise RoleRequiredError("TRAINER")
    return ctx


async def require_owner(
    ctx: RequestContext = Depends(get_request_context)
) -> RequestContext:
    """
    Raises:
        RoleRequiredError: 403 unless the caller is an OWNER or ADMIN
    """
    if ctx.role not in (UserRole.OWNER, UserRole.ADMIN):
        raise RoleRequiredError("OWNER")
    return ctx
