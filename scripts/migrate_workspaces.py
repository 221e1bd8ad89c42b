#!/usr/bin/env python3
# =============================================================================
# scripts/migrate_workspaces.py - Backfill Trainer Workspaces
# =============================================================================
# One-off migration for databases created before workspaces existed:
#   1. Every TRAINER/ADMIN user gets a workspace with a fresh invite token
#      and a TRAINER membership
#   2. Their pets are linked to that workspace and the pets' owners become
#      OWNER members
#   3. Every user holding a role is marked as onboarded
#
# Does nothing when any workspace already exists.
#
# Usage:
#   python scripts/migrate_workspaces.py
# =============================================================================

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import settings
from core.models.user import UserRole
from lib.supabase_client import SupabaseClient
from lib.tokens import create_invite_token

logger = logging.getLogger(__name__)

TRAINER_ROLES = [UserRole.TRAINER.value, UserRole.ADMIN.value]
ONBOARDED_ROLES = [role.value for role in UserRole]


def migrate_workspaces() -> int:
    """
    Create one workspace per trainer and attach their pets and owners.

    Returns:
        Number of workspaces created (0 when skipped)
    """
    if SupabaseClient.fetch_many("workspaces", columns="id", limit=1):
        logger.info("Workspaces already exist, skipping migration")
        return 0

    logger.info("Starting workspace migration...")

    trainers = SupabaseClient.fetch_many("users", in_filter=("role", TRAINER_ROLES))

    for trainer in trainers:
        workspace = SupabaseClient.insert_row(
            "workspaces",
            {
                "trainer_user_id": trainer["id"],
                "invite_token": create_invite_token(settings.INVITE_TOKEN_BYTES),
            },
        )
        SupabaseClient.insert_row(
            "workspace_members",
            {"workspace_id": workspace["id"], "user_id": trainer["id"], "role": UserRole.TRAINER.value},
        )
        logger.info(f"Created workspace for trainer {trainer.get('email')} ({workspace['id']})")

        owner_ids: list[str] = []
        for pet in SupabaseClient.fetch_many("pets", filters={"trainer_id": trainer["id"]}):
            SupabaseClient.update_rows("pets", {"workspace_id": workspace["id"]}, "id", pet["id"])
            if pet["owner_id"] not in owner_ids:
                owner_ids.append(pet["owner_id"])

        for owner_id in owner_ids:
            if owner_id == trainer["id"]:
                continue
            existing = SupabaseClient.fetch_many(
                "workspace_members",
                filters={"workspace_id": workspace["id"], "user_id": owner_id},
            )
            if not existing:
                SupabaseClient.insert_row(
                    "workspace_members",
                    {"workspace_id": workspace["id"], "user_id": owner_id, "role": UserRole.OWNER.value},
                )
                logger.info(f"Added owner {owner_id} to workspace {workspace['id']}")

    for role in ONBOARDED_ROLES:
        SupabaseClient.update_rows("users", {"onboarding_complete": True}, "role", role)

    logger.info("Workspace migration complete!")
    return len(trainers)


def main():
    """Run the migration against the configured Supabase project."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    print("=" * 60)
    print("PawSync Workspace Migration")
    print("=" * 60)

    created = migrate_workspaces()
    print(f"Created {created} workspace(s)")


if __name__ == "__main__":
    main()
