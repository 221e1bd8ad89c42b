# =============================================================================
# lib/onboarding.py - Onboarding State Machine
# =============================================================================
# A user's place in onboarding is stored as two columns, role and
# onboarding_complete. This module names the states those columns encode and
# the events that move between them, so routing and services never test flag
# combinations directly.
#
#   UNSET --(SUBMITTED_TRAINER_PROFILE)--> ACTIVE (TRAINER)
#   UNSET --(JOINED_WORKSPACE)-----------> OWNER_ONBOARDING
#   OWNER_ONBOARDING --(CREATED_PET)-----> ACTIVE (OWNER)
#
# ADMIN is assigned out-of-band and is always ACTIVE.
# =============================================================================

from dataclasses import dataclass
from enum import Enum

from core.models.user import UserRole


class OnboardingState(str, Enum):
    UNSET = "UNSET"
    TRAINER_ONBOARDING = "TRAINER_ONBOARDING"
    OWNER_ONBOARDING = "OWNER_ONBOARDING"
    ACTIVE = "ACTIVE"


class OnboardingEvent(str, Enum):
    JOINED_WORKSPACE = "JOINED_WORKSPACE"
    SUBMITTED_TRAINER_PROFILE = "SUBMITTED_TRAINER_PROFILE"
    CREATED_PET = "CREATED_PET"


@dataclass(frozen=True)
class OnboardingFlags:
    """The persisted pair of columns."""
    role: UserRole | None
    onboarding_complete: bool

    @property
    def state(self) -> OnboardingState:
        return onboarding_state(self.role, self.onboarding_complete)

    def as_update(self) -> dict:
        """Column values for a users update."""
        return {
            "role": self.role.value if self.role else None,
            "onboarding_complete": self.onboarding_complete,
        }


def onboarding_state(role: UserRole | None, onboarding_complete: bool) -> OnboardingState:
    """Derive the onboarding state from the stored columns."""
    if role == UserRole.ADMIN:
        return OnboardingState.ACTIVE
    if onboarding_complete:
        return OnboardingState.ACTIVE
    if role == UserRole.TRAINER:
        return OnboardingState.TRAINER_ONBOARDING
    if role == UserRole.OWNER:
        return OnboardingState.OWNER_ONBOARDING
    return OnboardingState.UNSET


def transition(
    role: UserRole | None,
    onboarding_complete: bool,
    event: OnboardingEvent,
) -> OnboardingFlags:
    """
    Apply an onboarding event to the stored columns.

    - JOINED_WORKSPACE: becomes an OWNER and must add a pet before the
      dashboard, so onboarding is reset even for returning members.
    - SUBMITTED_TRAINER_PROFILE: becomes a TRAINER, onboarding done.
    - CREATED_PET: completes onboarding, role unchanged.
    """
    if event == OnboardingEvent.JOINED_WORKSPACE:
        return OnboardingFlags(role=UserRole.OWNER, onboarding_complete=False)
    if event == OnboardingEvent.SUBMITTED_TRAINER_PROFILE:
        return OnboardingFlags(role=UserRole.TRAINER, onboarding_complete=True)
    if event == OnboardingEvent.CREATED_PET:
        return OnboardingFlags(role=role, onboarding_complete=True)
    raise ValueError(f"Unknown onboarding event: {event}")
