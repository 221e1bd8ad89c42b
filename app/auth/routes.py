# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for the signed-in user.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes return the users row behind the token and let a new user
# pick a role.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_request_context
from app.auth.models import UserResponse
from app.exceptions import ValidationError
from core.models.context import RequestContext
from core.models.user import RoleUpdateRequest, UserRole
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    ctx: RequestContext = Depends(get_request_context)
) -> UserResponse:
    """
    Get the current user with their onboarding state.

    The users row is created on the first call after sign-in.

    Raises:
        401: If not authenticated
    """
    return UserResponse.from_user(ctx.user)


@router.post("/role", response_model=UserResponse)
async def set_role(
    request: RoleUpdateRequest,
    ctx: RequestContext = Depends(get_request_context)
) -> UserResponse:
    """
    Choose TRAINER or OWNER from the onboarding screen.

    Raises:
        400: If the role is ADMIN
        401: If not authenticated
    """
    if request.role == UserRole.ADMIN:
        raise ValidationError("Invalid role", code="INVALID_ROLE", details={"role": request.role.value})

    user = UserService.set_role(ctx.user_id, request.role)
    logger.info(f"User {ctx.user_id} chose role {request.role.value}")
    return UserResponse.from_user(user)
