# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        pet_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        pet_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string, the format stored in rows."""
    return utc_now().isoformat()


# =============================================================================
# Name Utilities
# =============================================================================

def split_display_name(display_name: str) -> tuple[str, str | None]:
    """
    Split a display name into (first_name, last_name).

    The first whitespace-separated token is the first name; the rest, joined
    by single spaces, is the last name (None when there is no rest).

    Example:
        split_display_name("Sarah Johnson")       # ("Sarah", "Johnson")
        split_display_name("Mary Ann van Dyke")   # ("Mary", "Ann van Dyke")
        split_display_name("Cher")                # ("Cher", None)
    """
    parts = display_name.split()
    if not parts:
        raise ValueError("Display name is required")
    return parts[0], " ".join(parts[1:]) or None
