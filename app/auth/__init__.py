# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, and the explicit
# per-request context built from it.
#
# Usage:
#   from app.auth import get_request_context, RequestContext
#
#   @router.get("/protected")
#   async def protected(ctx: RequestContext = Depends(get_request_context)):
#       return {"user_id": ctx.user_id}
# =============================================================================

from app.auth.dependencies import (
    get_current_user,
    get_request_context,
    require_owner,
    require_trainer,
)
from app.auth.models import AuthUser, UserResponse
from core.models.context import RequestContext

__all__ = [
    "get_current_user",
    "get_request_context",
    "require_owner",
    "require_trainer",
    "AuthUser",
    "RequestContext",
    "UserResponse",
]
