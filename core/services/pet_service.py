# =============================================================================
# core/services/pet_service.py - Pet Business Logic
# =============================================================================
# Pets, their owner/trainer joins, and the access checks every pet-scoped
# route shares:
#   - view: the pet's owner, its assigned trainer, or an admin
#   - trainer actions: the assigned trainer or an admin
#   - owner actions: the pet's owner (admins may edit details)
# =============================================================================

import logging

from app.exceptions import (
    ForbiddenError,
    InvalidTrainerError,
    NotAssignedTrainerError,
    NotPetOwnerError,
    PetNotFoundError,
    WorkspaceNotFoundError,
)
from core.models.context import RequestContext
from core.models.pet import PetCreate, PetDetail, PetRecord, PetUpdate
from core.models.task import HomeworkTaskRecord
from core.models.user import UserRecord, UserRole
from core.services.user_service import UserService
from core.services.workspace_service import WorkspaceService
from lib.onboarding import OnboardingEvent
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

PETS_TABLE = "pets"
TASKS_TABLE = "homework_tasks"


class PetService:
    """Service for pets and pet-scoped authorization."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def get_pet_record(pet_id: str) -> PetRecord:
        """
        Raises:
            PetNotFoundError: If the pet doesn't exist
        """
        row = SupabaseClient.fetch_one(PETS_TABLE, "id", pet_id)
        if not row:
            raise PetNotFoundError(pet_id)
        return PetRecord(**row)

    @staticmethod
    def _details(rows: list[dict], include_tasks: bool = False) -> list[PetDetail]:
        pets = [PetRecord(**row) for row in rows]
        user_ids = [p.owner_id for p in pets] + [p.trainer_id for p in pets if p.trainer_id]
        users = UserService.get_users(user_ids)

        details = []
        for pet in pets:
            tasks = None
            if include_tasks:
                tasks = [
                    HomeworkTaskRecord(**row)
                    for row in SupabaseClient.fetch_many(
                        TASKS_TABLE,
                        filters={"pet_id": pet.id},
                        order_by="created_at",
                        desc=True,
                    )
                ]
            details.append(
                PetDetail(
                    **pet.model_dump(),
                    owner=users.get(pet.owner_id),
                    trainer=users.get(pet.trainer_id) if pet.trainer_id else None,
                    tasks=tasks,
                )
            )
        return details

    @staticmethod
    def get_pet(ctx: RequestContext, pet_id: str) -> PetDetail:
        """
        Pet with owner, trainer and tasks.

        Raises:
            PetNotFoundError: If the pet doesn't exist
            ForbiddenError: If the caller can't view it
        """
        pet = PetService.ensure_can_view(ctx, pet_id)
        return PetService._details([pet.model_dump()], include_tasks=True)[0]

    @staticmethod
    def list_pets(ctx: RequestContext) -> list[PetDetail]:
        """Admins see every pet, trainers their assigned pets, others their own."""
        if ctx.is_admin:
            filters = None
        elif ctx.is_trainer:
            filters = {"trainer_id": ctx.user_id}
        else:
            filters = {"owner_id": ctx.user_id}

        rows = SupabaseClient.fetch_many(
            PETS_TABLE,
            filters=filters,
            order_by="created_at",
            desc=True,
        )
        return PetService._details(rows)

    # -------------------------------------------------------------------------
    # Access checks
    # -------------------------------------------------------------------------

    @staticmethod
    def can_view(ctx: RequestContext, pet: PetRecord) -> bool:
        return ctx.is_admin or pet.owner_id == ctx.user_id or pet.trainer_id == ctx.user_id

    @staticmethod
    def ensure_can_view(ctx: RequestContext, pet_id: str) -> PetRecord:
        pet = PetService.get_pet_record(pet_id)
        if not PetService.can_view(ctx, pet):
            raise ForbiddenError()
        return pet

    @staticmethod
    def ensure_assigned_trainer(ctx: RequestContext, pet_id: str) -> PetRecord:
        """
        Raises:
            PetNotFoundError: If the pet doesn't exist
            NotAssignedTrainerError: Unless the caller is the pet's trainer or an admin
        """
        pet = PetService.get_pet_record(pet_id)
        if pet.trainer_id != ctx.user_id and not ctx.is_admin:
            raise NotAssignedTrainerError(pet_id)
        return pet

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_trainer(email: str) -> UserRecord:
        """
        Raises:
            InvalidTrainerError: If no user has the email or they aren't a trainer
        """
        trainer = UserService.get_user_by_email(email)
        if trainer is None:
            raise InvalidTrainerError("No user found with that email address", email)
        if trainer.role != UserRole.TRAINER:
            raise InvalidTrainerError("The specified user is not a trainer", email)
        return trainer

    @staticmethod
    def create_pet(ctx: RequestContext, data: PetCreate) -> PetRecord:
        """
        Create a pet owned by the caller.

        The trainer is resolved in order:
          1. workspace_id -> that workspace's trainer
          2. trainer_email -> that trainer, plus their workspace if any
          3. the caller's first OWNER membership -> its workspace and trainer

        Creating a pet completes owner onboarding.

        Raises:
            InvalidTrainerError: If trainer_email doesn't resolve to a trainer
            WorkspaceNotFoundError: If workspace_id matches no workspace
        """
        trainer_id = None
        workspace_id = normalize_uuid(data.workspace_id) if data.workspace_id else None

        if workspace_id:
            workspace = WorkspaceService.get_workspace(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError("Workspace not found")
            trainer_id = workspace.trainer_user_id
        elif data.trainer_email:
            trainer = PetService.resolve_trainer(data.trainer_email)
            trainer_id = trainer.id
            workspace = WorkspaceService.get_workspace_by_trainer(trainer.id)
            if workspace:
                workspace_id = workspace.id
        else:
            memberships = WorkspaceService.get_user_memberships(ctx.user_id)
            owner_membership = next((m for m in memberships if m.role == UserRole.OWNER), None)
            if owner_membership:
                workspace_id = owner_membership.workspace_id
                workspace = WorkspaceService.get_workspace(workspace_id)
                if workspace:
                    trainer_id = workspace.trainer_user_id

        row = SupabaseClient.insert_row(
            PETS_TABLE,
            {
                "name": data.name,
                "species": data.species or None,
                "owner_id": ctx.user_id,
                "trainer_id": trainer_id,
                "workspace_id": workspace_id,
                "image_url": None,
            },
        )
        pet = PetRecord(**row)
        logger.info(f"Created pet {pet.id} for owner {ctx.user_id} (trainer={trainer_id})")

        if not ctx.user.onboarding_complete:
            UserService.apply_onboarding_event(ctx.user, OnboardingEvent.CREATED_PET)

        return pet

    @staticmethod
    def update_pet(ctx: RequestContext, pet_id: str, updates: PetUpdate) -> PetRecord:
        """
        Change the fields that were sent.

        Raises:
            PetNotFoundError: If the pet doesn't exist
            NotPetOwnerError: Unless the caller owns the pet or is an admin
        """
        pet = PetService.get_pet_record(pet_id)
        if pet.owner_id != ctx.user_id and not ctx.is_admin:
            raise NotPetOwnerError("Only the pet owner can edit pet details")

        data = updates.model_dump(exclude_unset=True)
        if not data:
            return pet

        rows = SupabaseClient.update_rows(PETS_TABLE, data, "id", pet_id)
        logger.info(f"Updated pet {pet_id}: {sorted(data)}")
        return PetRecord(**rows[0]) if rows else pet

    @staticmethod
    def assign_trainer(ctx: RequestContext, pet_id: str, trainer_email: str) -> PetRecord:
        """
        Assign a trainer to the caller's pet by email.

        Independent of workspace membership: the pet's workspace is left as is.

        Raises:
            PetNotFoundError: If the pet doesn't exist
            NotPetOwnerError: If the caller doesn't own the pet
            InvalidTrainerError: If the email doesn't resolve to a trainer
        """
        pet = PetService.get_pet_record(pet_id)
        if pet.owner_id != ctx.user_id:
            raise NotPetOwnerError()

        trainer = PetService.resolve_trainer(trainer_email)
        rows = SupabaseClient.update_rows(PETS_TABLE, {"trainer_id": trainer.id}, "id", pet_id)
        logger.info(f"Assigned trainer {trainer.id} to pet {pet_id}")
        return PetRecord(**rows[0]) if rows else pet
