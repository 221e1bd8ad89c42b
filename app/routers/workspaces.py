# =============================================================================
# app/routers/workspaces.py - Workspace & Invite Endpoints
# =============================================================================
# Trainer profile setup, invite links and joining a trainer's workspace.
# Only /validate/{token} is public, so the join page can show who invited
# the visitor before they sign in.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, status
from fastapi.responses import JSONResponse

from app.auth.models import UserResponse
from app.dependencies import ContextDep
from app.exceptions import InvalidTokenError
from core.models.workspace import (
    InviteResponse,
    InviteValidation,
    JoinRequest,
    JoinResult,
    TrainerProfileRequest,
    WorkspaceDetail,
)
from core.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create", response_model=WorkspaceDetail)
async def create_workspace(ctx: ContextDep):
    """
    Create the caller's workspace, or return the one they already have.

    Returns 201 when a workspace was created, 200 otherwise.
    """
    workspace, created = WorkspaceService.create_workspace(ctx)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=workspace.model_dump(mode="json"),
    )


@router.post("/trainer-profile", response_model=UserResponse)
async def set_trainer_profile(request: TrainerProfileRequest, ctx: ContextDep):
    """
    Save the trainer profile and create the trainer's workspace.

    The caller becomes an onboarded TRAINER.

    Example:
        POST /api/workspaces/trainer-profile
        {"display_name": "Sarah Johnson", "business_name": "Good Dog Academy"}
    """
    user = WorkspaceService.set_trainer_profile(ctx, request)
    return UserResponse.from_user(user)


@router.get("/invite", response_model=InviteResponse)
async def get_invite(ctx: ContextDep):
    """
    The caller's invite token and the client path that redeems it.

    Raises:
        404: If the caller has no workspace
    """
    return WorkspaceService.get_invite(ctx)


@router.get("/validate/{token}", response_model=InviteValidation)
async def validate_invite(
    token: Annotated[str, Path(description="Invite token from the shared link")],
):
    """
    Check an invite token without signing in.

    Raises:
        404: If the token matches no workspace
    """
    result = WorkspaceService.validate_token(token)
    if result is None:
        raise InvalidTokenError()
    return result


@router.post("/join", response_model=JoinResult)
async def join_workspace(request: JoinRequest, ctx: ContextDep):
    """
    Join a trainer's workspace as an OWNER.

    Returns 201 with the new membership, or 200 with already_member=true
    when the caller was already a member.

    Raises:
        400: If the caller is the workspace's trainer
        404: If the token matches no workspace
    """
    result = WorkspaceService.join_workspace(ctx, request.token)
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.already_member else status.HTTP_201_CREATED,
        content=result.model_dump(mode="json"),
    )


@router.get("/my", response_model=list[WorkspaceDetail])
async def list_my_workspaces(ctx: ContextDep):
    """A trainer's own workspace, or the workspaces an owner has joined."""
    return WorkspaceService.list_my_workspaces(ctx)
