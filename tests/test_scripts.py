# =============================================================================
# tests/test_scripts.py - Seed & Migration Script Tests
# =============================================================================
# Runs scripts/seed_demo_data.py and scripts/migrate_workspaces.py against
# the in-memory Supabase.
#
# Run with: pytest tests/test_scripts.py -v
# =============================================================================

from core.models.user import UserRole
from scripts.migrate_workspaces import migrate_workspaces
from scripts.seed_demo_data import PETS, SUBMISSIONS, TASKS, USERS, seed_demo_data


class TestSeedDemoData:
    """Tests for seed_demo_data()."""

    def test_seeds_empty_database(self, fake_db):
        counts = seed_demo_data()

        assert counts["users"] == len(USERS) == len(fake_db.rows("users"))
        assert len(fake_db.rows("pets")) == len(PETS)
        assert len(fake_db.rows("homework_tasks")) == len(TASKS)
        assert len(fake_db.rows("homework_submissions")) == len(SUBMISSIONS)
        assert len(fake_db.rows("trainer_comments")) == len(SUBMISSIONS)

    def test_pets_link_owner_and_trainer(self, fake_db):
        seed_demo_data()
        sarah = fake_db.rows("users", email="sarah.trainer@pawsync.demo")[0]
        emily = fake_db.rows("users", email="emily.owner@pawsync.demo")[0]

        buddy = fake_db.rows("pets", name="Buddy")[0]
        luna = fake_db.rows("pets", name="Luna")[0]

        assert (buddy["owner_id"], buddy["trainer_id"]) == (emily["id"], sarah["id"])
        assert luna["trainer_id"] is None

    def test_skips_when_users_exist(self, fake_db, owner):
        assert seed_demo_data() == {}
        assert len(fake_db.rows("users")) == 1


class TestMigrateWorkspaces:
    """Tests for migrate_workspaces()."""

    def test_one_workspace_per_trainer(self, fake_db):
        seed_demo_data()
        created = migrate_workspaces()

        trainers = fake_db.rows("users", role="TRAINER")
        assert created == len(trainers) == 2
        assert {w["trainer_user_id"] for w in fake_db.rows("workspaces")} == {t["id"] for t in trainers}
        assert len({w["invite_token"] for w in fake_db.rows("workspaces")}) == 2

    def test_owners_become_members(self, fake_db):
        seed_demo_data()
        migrate_workspaces()

        sarah = fake_db.rows("users", email="sarah.trainer@pawsync.demo")[0]
        workspace = fake_db.rows("workspaces", trainer_user_id=sarah["id"])[0]
        members = fake_db.rows("workspace_members", workspace_id=workspace["id"])

        # Sarah trains pets of Emily, James, Lisa and David
        assert sorted(m["role"] for m in members) == ["OWNER"] * 4 + ["TRAINER"]
        assert all(p["workspace_id"] == workspace["id"] for p in fake_db.rows("pets", trainer_id=sarah["id"]))

    def test_marks_users_onboarded(self, fake_db):
        seed_demo_data()
        migrate_workspaces()
        assert all(user["onboarding_complete"] for user in fake_db.rows("users"))

    def test_runs_once(self, fake_db):
        seed_demo_data()
        migrate_workspaces()
        assert migrate_workspaces() == 0
        assert len(fake_db.rows("workspaces")) == 2

    def test_admin_gets_workspace_and_roles_are_stored_plainly(self, fake_db, admin, make_user):
        """ADMIN users are backfilled like trainers; rows hold the plain role strings."""
        unset = make_user()
        migrate_workspaces()

        workspace = fake_db.rows("workspaces", trainer_user_id=admin.id)[0]
        member = fake_db.rows("workspace_members", workspace_id=workspace["id"])[0]
        assert member["role"] == UserRole.TRAINER.value == "TRAINER"
        assert fake_db.rows("users", id=admin.id)[0]["onboarding_complete"] is True
        assert fake_db.rows("users", id=unset.id)[0]["onboarding_complete"] is False
        assert {row["role"] for row in fake_db.rows("users") if row["role"]} == {"ADMIN"}
