# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Reads and writes rows in the users table. A row is created the first time
# an authenticated identity calls the API, with no role and onboarding
# pending.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.onboarding import OnboardingEvent, transition
from lib.utils import utc_now_iso
from core.models.user import UserRecord, UserRole
from app.exceptions import EmailInUseError, UserNotFoundError

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

# Columns a caller may change through update_user
UPDATABLE_FIELDS = {
    "first_name",
    "last_name",
    "profile_image_url",
    "role",
    "onboarding_complete",
}


class UserService:
    """Service for user records."""

    @staticmethod
    def get_user(user_id: str | UUID) -> UserRecord | None:
        row = SupabaseClient.fetch_one(USERS_TABLE, "id", user_id)
        return UserRecord(**row) if row else None

    @staticmethod
    def get_user_by_email(email: str) -> UserRecord | None:
        """Exact lookup, case-insensitive on the email address."""
        row = SupabaseClient.fetch_one(USERS_TABLE, "email", email.strip().lower())
        return UserRecord(**row) if row else None

    @staticmethod
    def get_users(user_ids: list[str]) -> dict[str, UserRecord]:
        """Batch lookup keyed by id; unknown ids are skipped."""
        ids = sorted({uid for uid in user_ids if uid})
        rows = SupabaseClient.fetch_many(USERS_TABLE, in_filter=("id", ids))
        return {row["id"]: UserRecord(**row) for row in rows}

    @staticmethod
    def get_or_create_user(user_id: str | UUID, email: str | None = None) -> UserRecord:
        """
        Return the caller's users row, creating it on first sign-in.

        A concurrent first request may win the insert; the duplicate-key
        failure then falls back to reading the row it created.

        Raises:
            EmailInUseError: If the email is stored under a different user id
        """
        existing = UserService.get_user(user_id)
        if existing:
            return existing

        data = {
            "id": str(user_id),
            "email": email.strip().lower() if email else None,
            "role": None,
            "onboarding_complete": False,
        }

        try:
            row = SupabaseClient.insert_row(USERS_TABLE, data)
            logger.info(f"Created user on first sign-in: {user_id}")
            return UserRecord(**row)
        except SupabaseClientError as e:
            if e.is_unique_violation:
                user = UserService.get_user(user_id)
                if user:
                    return user
                if data["email"] and UserService.get_user_by_email(data["email"]):
                    logger.warning(f"Sign-in {user_id} uses an email owned by another user")
                    raise EmailInUseError(data["email"]) from e
            logger.error(f"Failed to create user {user_id}: {e}")
            raise

    @staticmethod
    def update_user(user_id: str | UUID, **updates: Any) -> UserRecord:
        """
        Update profile/role columns and bump updated_at.

        Raises:
            ValueError: If an unknown column is passed
            UserNotFoundError: If the user doesn't exist
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        data = {
            key: value.value if isinstance(value, UserRole) else value
            for key, value in updates.items()
        }
        data["updated_at"] = utc_now_iso()

        rows = SupabaseClient.update_rows(USERS_TABLE, data, "id", user_id)
        if not rows:
            raise UserNotFoundError(str(user_id))

        logger.info(f"Updated user {user_id}: {sorted(updates)}")
        return UserRecord(**rows[0])

    @staticmethod
    def set_role(user_id: str | UUID, role: UserRole) -> UserRecord:
        """Self-selected role from the onboarding screen (TRAINER or OWNER)."""
        return UserService.update_user(user_id, role=role)

    @staticmethod
    def apply_onboarding_event(user: UserRecord, event: OnboardingEvent) -> UserRecord:
        """Persist the role/onboarding columns produced by an onboarding event."""
        flags = transition(user.role, user.onboarding_complete, event)
        if flags.role == user.role and flags.onboarding_complete == user.onboarding_complete:
            return user
        return UserService.update_user(user.id, **flags.as_update())
