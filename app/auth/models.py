# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import datetime
from typing import Optional

from core.models.user import UserRecord, UserRole
from lib.onboarding import OnboardingState, onboarding_state


class AuthUser(BaseModel):
    """
    Authenticated identity extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class UserResponse(BaseModel):
    """
    Body of GET /api/auth/me and POST /api/auth/role.

    onboarding_state lets the client route without combining role and
    onboarding_complete itself.
    """
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Optional[UserRole] = None
    onboarding_complete: bool = False
    onboarding_state: OnboardingState
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: UserRecord) -> "UserResponse":
        return cls(
            **user.model_dump(),
            onboarding_state=onboarding_state(user.role, user.onboarding_complete),
        )
