# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# A user row is created on first sign-in with no role. The role and the
# onboarding flag are then set by the workspace flow:
#   - submitting a trainer profile  -> TRAINER, onboarding complete
#   - joining a workspace by invite -> OWNER, onboarding pending
# ADMIN is assigned out-of-band.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Roles a user (or a workspace membership) can hold."""
    TRAINER = "TRAINER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class UserRecord(BaseModel):
    """
    A row from the users table.

    Example:
        {
            "id": "0b9e7c1e-...",
            "email": "sarah.trainer@pawsync.demo",
            "first_name": "Sarah",
            "last_name": "Johnson",
            "role": "TRAINER",
            "onboarding_complete": true
        }
    """
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    role: UserRole | None = None
    onboarding_complete: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """First and last name joined, blank parts dropped."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class RoleUpdateRequest(BaseModel):
    """Body of POST /api/auth/role. ADMIN cannot be self-assigned."""
    role: UserRole = Field(..., description="TRAINER or OWNER")
