# =============================================================================
# core/models/pet.py - Pet Schemas
# =============================================================================
# A pet belongs to exactly one owner and optionally one trainer. The trainer
# assignment is independent from workspace membership: owners can still add
# a trainer by email directly.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .task import HomeworkTaskRecord
from .user import UserRecord


class PetRecord(BaseModel):
    """A row from the pets table."""
    id: str
    name: str
    species: str | None = None
    breed: str | None = None
    age: str | None = None
    owner_phone: str | None = None
    image_url: str | None = None
    owner_id: str
    trainer_id: str | None = None
    workspace_id: str | None = None
    created_at: datetime | None = None


class PetDetail(PetRecord):
    """Pet joined with owner, trainer and (when requested) its tasks."""
    owner: UserRecord | None = None
    trainer: UserRecord | None = None
    tasks: list[HomeworkTaskRecord] | None = None


class PetCreate(BaseModel):
    """
    Body of POST /api/pets.

    The trainer is resolved in order: workspace_id, trainer_email, then the
    caller's own OWNER membership.
    """
    name: str = Field(..., min_length=1, max_length=100)
    species: str | None = Field(default=None, max_length=50)
    trainer_email: str | None = Field(default=None, max_length=254)
    workspace_id: UUID | None = None


class PetUpdate(BaseModel):
    """Body of PATCH /api/pets/{id}. Only fields that are sent are changed."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    species: str | None = None
    breed: str | None = None
    age: str | None = None
    owner_phone: str | None = None
    image_url: str | None = None


class AssignTrainerRequest(BaseModel):
    """Body of POST /api/pets/{id}/trainer."""
    trainer_email: str = Field(..., min_length=3, max_length=254)
