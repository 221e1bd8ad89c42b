# =============================================================================
# core/services/workspace_service.py - Workspace & Invite Business Logic
# =============================================================================
# A trainer owns exactly one workspace, created with a single invite token.
# Redeeming the token makes the caller an OWNER member of that workspace and
# sends them back through owner onboarding (add a pet).
#
# Tokens are stable: they are generated once at workspace creation and never
# expire or rotate.
# =============================================================================

import logging

from app.config import settings
from app.exceptions import (
    InvalidTokenError,
    SelfJoinError,
    WorkspaceNotFoundError,
)
from core.models.context import RequestContext
from core.models.user import UserRecord, UserRole
from core.models.workspace import (
    InviteResponse,
    InviteValidation,
    JoinResult,
    TrainerProfileRequest,
    WorkspaceDetail,
    WorkspaceMemberDetail,
    WorkspaceMemberRecord,
    WorkspaceRecord,
)
from core.services.user_service import UserService
from lib.onboarding import OnboardingEvent
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.tokens import create_invite_token, invite_path
from lib.utils import split_display_name

logger = logging.getLogger(__name__)

WORKSPACES_TABLE = "workspaces"
MEMBERS_TABLE = "workspace_members"


class WorkspaceService:
    """
    Service for workspaces, memberships and the invite flow.

    Example:
        invite = WorkspaceService.get_invite(ctx)
        WorkspaceService.join_workspace(owner_ctx, invite.invite_token)
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def _detail(row: dict) -> WorkspaceDetail:
        """Join a workspace row with its trainer and members."""
        workspace = WorkspaceRecord(**row)
        return WorkspaceDetail(
            **workspace.model_dump(),
            trainer=UserService.get_user(workspace.trainer_user_id),
            members=WorkspaceService.get_members(workspace.id),
        )

    @staticmethod
    def get_workspace(workspace_id: str) -> WorkspaceDetail | None:
        row = SupabaseClient.fetch_one(WORKSPACES_TABLE, "id", workspace_id)
        return WorkspaceService._detail(row) if row else None

    @staticmethod
    def get_workspace_by_token(token: str) -> WorkspaceDetail | None:
        """Exact-match lookup; blank tokens match nothing."""
        if not token:
            return None
        row = SupabaseClient.fetch_one(WORKSPACES_TABLE, "invite_token", token)
        return WorkspaceService._detail(row) if row else None

    @staticmethod
    def get_workspace_by_trainer(trainer_id: str) -> WorkspaceDetail | None:
        row = SupabaseClient.fetch_one(WORKSPACES_TABLE, "trainer_user_id", trainer_id)
        return WorkspaceService._detail(row) if row else None

    @staticmethod
    def get_members(workspace_id: str) -> list[WorkspaceMemberDetail]:
        rows = SupabaseClient.fetch_many(
            MEMBERS_TABLE,
            filters={"workspace_id": workspace_id},
            order_by="created_at",
        )
        users = UserService.get_users([row["user_id"] for row in rows])
        return [
            WorkspaceMemberDetail(**row, user=users.get(row["user_id"]))
            for row in rows
        ]

    @staticmethod
    def get_user_memberships(user_id: str) -> list[WorkspaceMemberRecord]:
        rows = SupabaseClient.fetch_many(MEMBERS_TABLE, filters={"user_id": user_id})
        return [WorkspaceMemberRecord(**row) for row in rows]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def add_member(workspace_id: str, user_id: str, role: UserRole) -> WorkspaceMemberRecord:
        """
        Insert a membership row.

        Raises:
            SupabaseClientError: is_unique_violation when the pair already exists
        """
        row = SupabaseClient.insert_row(
            MEMBERS_TABLE,
            {"workspace_id": workspace_id, "user_id": user_id, "role": role.value},
        )
        logger.info(f"Added {role.value} {user_id} to workspace {workspace_id}")
        return WorkspaceMemberRecord(**row)

    @staticmethod
    def _create_for_trainer(
        trainer_id: str,
        business_name: str | None = None,
        bio: str | None = None,
    ) -> WorkspaceRecord:
        """New workspace with a fresh token; the trainer joins as TRAINER."""
        row = SupabaseClient.insert_row(
            WORKSPACES_TABLE,
            {
                "trainer_user_id": trainer_id,
                "invite_token": create_invite_token(settings.INVITE_TOKEN_BYTES),
                "business_name": business_name,
                "bio": bio,
            },
        )
        workspace = WorkspaceRecord(**row)
        WorkspaceService.add_member(workspace.id, trainer_id, UserRole.TRAINER)
        logger.info(f"Created workspace {workspace.id} for trainer {trainer_id}")
        return workspace

    @staticmethod
    def create_workspace(ctx: RequestContext) -> tuple[WorkspaceDetail, bool]:
        """
        Create the caller's workspace if they don't have one yet.

        Also sets the caller's role to TRAINER.

        Returns:
            (workspace, created) where created is False for an existing one
        """
        existing = WorkspaceService.get_workspace_by_trainer(ctx.user_id)
        if existing:
            return existing, False

        workspace = WorkspaceService._create_for_trainer(ctx.user_id)
        UserService.update_user(ctx.user_id, role=UserRole.TRAINER)
        return WorkspaceService.get_workspace(workspace.id), True

    @staticmethod
    def set_trainer_profile(ctx: RequestContext, profile: TrainerProfileRequest) -> UserRecord:
        """
        Save the trainer's profile and make sure their workspace exists.

        The display name is split into first/last name, the user becomes an
        onboarded TRAINER, and the workspace is created (with its one invite
        token) or has its business name and bio replaced.

        Returns:
            The updated user record
        """
        first_name, last_name = split_display_name(profile.display_name)

        updates = {"first_name": first_name, "last_name": last_name}
        if profile.profile_photo:
            updates["profile_image_url"] = profile.profile_photo
        user = UserService.update_user(ctx.user_id, **updates)
        user = UserService.apply_onboarding_event(user, OnboardingEvent.SUBMITTED_TRAINER_PROFILE)

        business_name = profile.business_name or None
        bio = profile.bio or None

        workspace = WorkspaceService.get_workspace_by_trainer(ctx.user_id)
        if workspace is None:
            WorkspaceService._create_for_trainer(ctx.user_id, business_name, bio)
        else:
            SupabaseClient.update_rows(
                WORKSPACES_TABLE,
                {"business_name": business_name, "bio": bio},
                "id",
                workspace.id,
            )
            logger.info(f"Updated workspace {workspace.id} profile")

        return user

    # -------------------------------------------------------------------------
    # Invite flow
    # -------------------------------------------------------------------------

    @staticmethod
    def get_invite(ctx: RequestContext) -> InviteResponse:
        """
        Raises:
            WorkspaceNotFoundError: If the caller has no workspace
        """
        workspace = WorkspaceService.get_workspace_by_trainer(ctx.user_id)
        if workspace is None:
            raise WorkspaceNotFoundError()
        return InviteResponse(
            invite_token=workspace.invite_token,
            invite_path=invite_path(workspace.invite_token),
            workspace_id=workspace.id,
            business_name=workspace.business_name,
        )

    @staticmethod
    def validate_token(token: str) -> InviteValidation | None:
        """
        Look up an invite token.

        Returns:
            Workspace id, trainer display name and business name, or None
            when the token matches no workspace
        """
        workspace = WorkspaceService.get_workspace_by_token(token)
        if workspace is None:
            return None
        return InviteValidation(
            workspace_id=workspace.id,
            trainer_name=workspace.trainer.display_name if workspace.trainer else "",
            business_name=workspace.business_name,
        )

    @staticmethod
    def join_workspace(ctx: RequestContext, token: str) -> JoinResult:
        """
        Redeem an invite token as an OWNER.

        Idempotent: a caller who is already a member gets already_member=True
        and no second membership row. Either way the caller's role becomes
        OWNER and onboarding is reset so they add a pet next.

        Raises:
            InvalidTokenError: If no workspace matches the token
            SelfJoinError: If the caller is the workspace's trainer
        """
        workspace = WorkspaceService.get_workspace_by_token(token)
        if workspace is None:
            raise InvalidTokenError()

        if workspace.trainer_user_id == ctx.user_id:
            raise SelfJoinError()

        already_member = any(m.user_id == ctx.user_id for m in workspace.members)
        membership = None

        if not already_member:
            try:
                membership = WorkspaceService.add_member(workspace.id, ctx.user_id, UserRole.OWNER)
            except SupabaseClientError as e:
                # A concurrent join inserted the row first
                if not e.is_unique_violation:
                    raise
                already_member = True

        UserService.apply_onboarding_event(ctx.user, OnboardingEvent.JOINED_WORKSPACE)

        logger.info(
            f"User {ctx.user_id} joined workspace {workspace.id} "
            f"(already_member={already_member})"
        )
        return JoinResult(
            workspace_id=workspace.id,
            already_member=already_member,
            membership=membership,
        )

    @staticmethod
    def list_my_workspaces(ctx: RequestContext) -> list[WorkspaceDetail]:
        """A trainer's own workspace, or every workspace the caller is a member of."""
        if ctx.is_trainer:
            workspace = WorkspaceService.get_workspace_by_trainer(ctx.user_id)
            return [workspace] if workspace else []

        results = []
        for membership in WorkspaceService.get_user_memberships(ctx.user_id):
            workspace = WorkspaceService.get_workspace(membership.workspace_id)
            if workspace:
                results.append(workspace)
        return results
