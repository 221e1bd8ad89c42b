# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - tokens.py: Workspace invite token generation
# - onboarding.py: Onboarding state machine over (role, onboarding_complete)
# - schedule.py: Calendar scheduling and per-day completion status
# - timeline.py: Pet activity feed and weekly grouping
# - utils.py: Shared utilities (UUID normalization, time, names)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.tokens import create_invite_token
from lib.onboarding import (
    OnboardingEvent,
    OnboardingFlags,
    OnboardingState,
    onboarding_state,
    transition,
)
from lib.schedule import build_month_calendar, classify_day, scheduled_days, tasks_for_day
from lib.timeline import build_timeline, group_by_week
from lib.utils import normalize_uuid, split_display_name, utc_now

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Invites
    "create_invite_token",
    # Onboarding
    "OnboardingEvent",
    "OnboardingFlags",
    "OnboardingState",
    "onboarding_state",
    "transition",
    # Calendar
    "build_month_calendar",
    "classify_day",
    "scheduled_days",
    "tasks_for_day",
    # Timeline
    "build_timeline",
    "group_by_week",
    # Utils
    "normalize_uuid",
    "split_display_name",
    "utc_now",
]
