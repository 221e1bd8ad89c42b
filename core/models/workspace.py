# =============================================================================
# core/models/workspace.py - Workspace & Invite Schemas
# =============================================================================
# A workspace is a trainer's namespace. It is created once per trainer and
# carries a single invite token that provisions owners into it:
#   - WorkspaceRecord / WorkspaceMemberRecord: table rows
#   - WorkspaceDetail: workspace joined with trainer and members
#   - InviteValidation / JoinResult: results of the invite flow
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .user import UserRecord, UserRole


class WorkspaceRecord(BaseModel):
    """A row from the workspaces table."""
    id: str
    trainer_user_id: str
    invite_token: str
    business_name: str | None = None
    bio: str | None = None
    created_at: datetime | None = None


class WorkspaceMemberRecord(BaseModel):
    """A row from workspace_members. Unique per (workspace_id, user_id)."""
    id: str
    workspace_id: str
    user_id: str
    role: UserRole
    created_at: datetime | None = None


class WorkspaceMemberDetail(WorkspaceMemberRecord):
    user: UserRecord | None = None


class WorkspaceDetail(WorkspaceRecord):
    """Workspace with its trainer and member list."""
    trainer: UserRecord | None = None
    members: list[WorkspaceMemberDetail] = Field(default_factory=list)


class InviteResponse(BaseModel):
    """Body of GET /api/workspaces/invite."""
    invite_token: str
    invite_path: str
    workspace_id: str
    business_name: str | None = None


class InviteValidation(BaseModel):
    """
    Result of looking up an invite token.

    Example:
        {
            "workspace_id": "3f1c...",
            "trainer_name": "Sarah Johnson",
            "business_name": "Good Dog Academy"
        }
    """
    workspace_id: str
    trainer_name: str
    business_name: str | None = None


class JoinResult(BaseModel):
    """
    Result of redeeming an invite token.

    already_member is true when the caller was already in the workspace;
    membership is only set when a new row was inserted.
    """
    workspace_id: str
    already_member: bool = False
    membership: WorkspaceMemberRecord | None = None


class JoinRequest(BaseModel):
    """Body of POST /api/workspaces/join."""
    token: str = Field(..., min_length=1, description="Invite token from the shared link")


class TrainerProfileRequest(BaseModel):
    """
    Body of POST /api/workspaces/trainer-profile.

    Example:
        {
            "display_name": "Sarah Johnson",
            "business_name": "Good Dog Academy",
            "bio": "Positive reinforcement since 2012",
            "profile_photo": "/uploads/1729250000000-1234.jpg"
        }
    """
    display_name: str = Field(..., max_length=200, description="Shown to owners")
    business_name: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=2000)
    profile_photo: str | None = Field(default=None, description="Uploaded photo path")

    @field_validator("display_name")
    @classmethod
    def _display_name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Display name is required")
        return value
