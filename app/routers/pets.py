# =============================================================================
# app/routers/pets.py - Pet Endpoints
# =============================================================================
# Listing, creating and editing pets, and assigning a trainer by email.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from app.dependencies import ContextDep, OwnerDep
from core.models.pet import AssignTrainerRequest, PetCreate, PetDetail, PetRecord, PetUpdate
from core.services.pet_service import PetService

logger = logging.getLogger(__name__)

router = APIRouter()

PetId = Annotated[UUID, Path(description="Pet UUID")]


@router.get("", response_model=list[PetDetail])
async def list_pets(ctx: ContextDep):
    """
    Pets visible to the caller.

    Admins see all pets, trainers the pets assigned to them, owners their own.
    """
    return PetService.list_pets(ctx)


@router.post("", response_model=PetRecord, status_code=status.HTTP_201_CREATED)
async def create_pet(request: PetCreate, ctx: OwnerDep):
    """
    Add a pet owned by the caller.

    The trainer comes from workspace_id, then trainer_email, then the
    workspace the caller joined. Completes owner onboarding.

    Raises:
        400: If trainer_email doesn't belong to a trainer
        403: If the caller isn't an owner
    """
    return PetService.create_pet(ctx, request)


@router.get("/{pet_id}", response_model=PetDetail)
async def get_pet(pet_id: PetId, ctx: ContextDep):
    """
    Pet with owner, trainer and tasks.

    Raises:
        403: Unless the caller is the owner, the assigned trainer or an admin
        404: If the pet doesn't exist
    """
    return PetService.get_pet(ctx, str(pet_id))


@router.patch("/{pet_id}", response_model=PetRecord)
async def update_pet(pet_id: PetId, request: PetUpdate, ctx: ContextDep):
    """Edit pet details. Only the pet's owner or an admin may do this."""
    return PetService.update_pet(ctx, str(pet_id), request)


@router.post("/{pet_id}/trainer", response_model=PetRecord)
async def assign_trainer(pet_id: PetId, request: AssignTrainerRequest, ctx: OwnerDep):
    """
    Assign a trainer to the caller's pet by email.

    Raises:
        400: If the email doesn't belong to a trainer
        403: If the caller doesn't own the pet
        404: If the pet doesn't exist
    """
    return PetService.assign_trainer(ctx, str(pet_id), request.trainer_email)
