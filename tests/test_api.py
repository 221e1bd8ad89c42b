# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# End-to-end tests through FastAPI's TestClient. Authentication is replaced
# by a dependency override (see the `api` fixture in conftest); everything
# below it runs for real against the in-memory Supabase.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import time
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt

from app.auth import dependencies as auth_dependencies
from app.auth.dependencies import decode_token
from app.config import settings
from app.exceptions import UnauthenticatedError


# =============================================================================
# Authentication
# =============================================================================

class TestAuthentication:
    """Tests for bearer-token handling."""

    def test_missing_token_is_401(self, api):
        response = api().get("/api/pets")
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    def test_invalid_token_is_401(self, api):
        response = api().get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_decode_valid_hs256_token(self):
        user_id = str(uuid4())
        token = jwt.encode(
            {"sub": user_id, "email": "a@pawsync.test", "aud": "authenticated", "exp": int(time.time()) + 60},
            settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        user = decode_token(token)
        assert str(user.id) == user_id
        assert user.email == "a@pawsync.test"

    def test_decode_expired_token(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "aud": "authenticated", "exp": int(time.time()) - 60},
            settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthenticatedError, match="expired"):
            decode_token(token)

    def test_decode_token_without_subject(self):
        token = jwt.encode(
            {"aud": "authenticated", "exp": int(time.time()) + 60},
            settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthenticatedError):
            decode_token(token)

    def test_bearer_token_end_to_end(self, api, fake_db):
        """A real token creates the users row on first call to /me."""
        user_id = str(uuid4())
        token = jwt.encode(
            {"sub": user_id, "email": "first@pawsync.test", "aud": "authenticated", "exp": int(time.time()) + 60},
            settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        response = api().get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == user_id
        assert body["role"] is None
        assert body["onboarding_state"] == "UNSET"
        assert len(fake_db.rows("users", id=user_id)) == 1

    def test_new_identity_with_taken_email_is_400(self, api, trainer):
        """A seeded demo email signed in under a fresh auth id is rejected cleanly."""
        token = jwt.encode(
            {"sub": str(uuid4()), "email": trainer.email, "aud": "authenticated", "exp": int(time.time()) + 60},
            settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        response = api().get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 400
        assert response.json()["code"] == "EMAIL_IN_USE"


class TestJwks:
    """Tests for the JWKS cache used by asymmetric tokens."""

    @pytest.fixture(autouse=True)
    def empty_cache(self, monkeypatch):
        monkeypatch.setattr(auth_dependencies, "_jwks_cache", {})
        monkeypatch.setattr(auth_dependencies, "_jwks_cache_time", 0)

    def test_fetch_is_cached(self):
        response = MagicMock()
        response.json.return_value = {"keys": [{"kid": "k1", "kty": "EC"}]}
        with patch("app.auth.dependencies.httpx.get", return_value=response) as mock_get:
            first = auth_dependencies._fetch_jwks()
            second = auth_dependencies._fetch_jwks()

        assert first == second == {"keys": [{"kid": "k1", "kty": "EC"}]}
        mock_get.assert_called_once_with(
            "https://test-project.supabase.co/auth/v1/.well-known/jwks.json",
            timeout=10,
        )

    def test_fetch_failure_returns_no_keys(self):
        with patch("app.auth.dependencies.httpx.get", side_effect=httpx.ConnectError("down")):
            assert auth_dependencies._fetch_jwks() == {"keys": []}

    def test_fetch_failure_keeps_stale_keys(self, monkeypatch):
        monkeypatch.setattr(auth_dependencies, "_jwks_cache", {"keys": [{"kid": "old"}]})
        with patch("app.auth.dependencies.httpx.get", side_effect=httpx.ConnectError("down")):
            assert auth_dependencies._fetch_jwks() == {"keys": [{"kid": "old"}]}


class TestAuthRoutes:
    """Tests for /api/auth."""

    def test_me_reports_onboarding_state(self, api, make_user):
        user = make_user(role="OWNER", onboarding_complete=False)
        body = api(user).get("/api/auth/me").json()
        assert body["role"] == "OWNER"
        assert body["onboarding_state"] == "OWNER_ONBOARDING"

    def test_choose_role(self, api, make_user):
        user = make_user()
        response = api(user).post("/api/auth/role", json={"role": "TRAINER"})
        assert response.status_code == 200
        assert response.json()["onboarding_state"] == "TRAINER_ONBOARDING"

    def test_cannot_self_assign_admin(self, api, fake_db, make_user):
        user = make_user()
        response = api(user).post("/api/auth/role", json={"role": "ADMIN"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ROLE"
        assert fake_db.rows("users", id=user.id)[0]["role"] is None

    def test_unknown_role_is_validation_error(self, api, make_user):
        response = api(make_user()).post("/api/auth/role", json={"role": "WIZARD"})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


# =============================================================================
# Workspaces
# =============================================================================

class TestWorkspaceRoutes:
    """Tests for /api/workspaces."""

    def test_trainer_profile_then_invite(self, api, make_user):
        client = api(make_user())

        profile = client.post(
            "/api/workspaces/trainer-profile",
            json={"display_name": "Sarah Johnson", "business_name": "Good Dog Academy"},
        )
        assert profile.status_code == 200
        assert profile.json()["role"] == "TRAINER"
        assert profile.json()["onboarding_state"] == "ACTIVE"

        invite = client.get("/api/workspaces/invite").json()
        assert invite["invite_path"] == f"/join?token={invite['invite_token']}"

        validated = api().get(f"/api/workspaces/validate/{invite['invite_token']}")
        assert validated.status_code == 200
        assert validated.json()["trainer_name"] == "Sarah Johnson"

    def test_blank_display_name(self, api, make_user):
        response = api(make_user()).post("/api/workspaces/trainer-profile", json={"display_name": "  "})
        assert response.status_code == 400

    def test_create_returns_201_then_200(self, api, make_user):
        client = api(make_user())
        first = client.post("/api/workspaces/create")
        second = client.post("/api/workspaces/create")
        assert (first.status_code, second.status_code) == (201, 200)
        assert first.json()["invite_token"] == second.json()["invite_token"]

    def test_validate_unknown_token_is_public_404(self, api, workspace):
        response = api().get("/api/workspaces/validate/does-not-exist")
        assert response.status_code == 404
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_join_201_then_200(self, api, workspace, make_user):
        client = api(make_user())
        first = client.post("/api/workspaces/join", json={"token": workspace["invite_token"]})
        second = client.post("/api/workspaces/join", json={"token": workspace["invite_token"]})

        assert first.status_code == 201
        assert first.json()["already_member"] is False
        assert second.status_code == 200
        assert second.json()["already_member"] is True

    def test_join_unknown_token_404(self, api, make_user):
        response = api(make_user()).post("/api/workspaces/join", json={"token": "nope"})
        assert response.status_code == 404

    def test_self_join_400(self, api, trainer, workspace):
        response = api(trainer).post("/api/workspaces/join", json={"token": workspace["invite_token"]})
        assert response.status_code == 400
        assert response.json()["code"] == "SELF_JOIN"

    def test_invite_without_workspace_404(self, api, trainer):
        assert api(trainer).get("/api/workspaces/invite").status_code == 404

    def test_my_workspaces(self, api, trainer, workspace):
        body = api(trainer).get("/api/workspaces/my").json()
        assert [w["id"] for w in body] == [workspace["id"]]


# =============================================================================
# Pets
# =============================================================================

class TestPetRoutes:
    """Tests for /api/pets."""

    def test_owner_creates_pet(self, api, owner, trainer):
        response = api(owner).post(
            "/api/pets",
            json={"name": "Luna", "species": "Cat", "trainer_email": "sarah.trainer@pawsync.demo"},
        )
        assert response.status_code == 201
        assert response.json()["trainer_id"] == trainer.id

    def test_trainer_cannot_create_pet(self, api, trainer):
        response = api(trainer).post("/api/pets", json={"name": "Luna"})
        assert response.status_code == 403
        assert response.json()["code"] == "ROLE_REQUIRED"

    def test_missing_name(self, api, owner):
        response = api(owner).post("/api/pets", json={"species": "Dog"})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_trainer_email_400(self, api, owner):
        response = api(owner).post("/api/pets", json={"name": "Rex", "trainer_email": "ghost@pawsync.test"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TRAINER"

    def test_list_and_get(self, api, owner, pet):
        client = api(owner)
        assert [p["name"] for p in client.get("/api/pets").json()] == ["Buddy"]
        detail = client.get(f"/api/pets/{pet['id']}").json()
        assert detail["trainer"]["first_name"] == "Sarah"
        assert detail["tasks"] == []

    def test_get_forbidden_and_missing(self, api, pet, make_user):
        client = api(make_user(role="OWNER"))
        assert client.get(f"/api/pets/{pet['id']}").status_code == 403
        assert client.get(f"/api/pets/{uuid4()}").status_code == 404

    def test_patch(self, api, owner, pet):
        response = api(owner).patch(f"/api/pets/{pet['id']}", json={"breed": "Golden"})
        assert response.status_code == 200
        assert response.json()["breed"] == "Golden"

    def test_assign_trainer(self, api, owner, pet, make_user):
        make_user(role="TRAINER", email="mike.trainer@pawsync.demo")
        response = api(owner).post(f"/api/pets/{pet['id']}/trainer", json={"trainer_email": "mike.trainer@pawsync.demo"})
        assert response.status_code == 200


# =============================================================================
# Tasks
# =============================================================================

class TestTaskRoutes:
    """Tests for /api/tasks."""

    def test_trainer_creates_task(self, api, trainer, pet):
        response = api(trainer).post(
            "/api/tasks",
            json={"pet_id": pet["id"], "title": "Sit", "instructions": "10 reps", "frequency": "3x/week"},
        )
        assert response.status_code == 201
        assert response.json()["frequency"] == "3x/week"

    def test_unknown_frequency_400(self, api, trainer, pet):
        response = api(trainer).post(
            "/api/tasks",
            json={"pet_id": pet["id"], "title": "Sit", "instructions": "10 reps", "frequency": "fortnightly"},
        )
        assert response.status_code == 400

    def test_owner_cannot_create_task(self, api, owner, pet):
        response = api(owner).post(
            "/api/tasks",
            json={"pet_id": pet["id"], "title": "Sit", "instructions": "10 reps", "frequency": "daily"},
        )
        assert response.status_code == 403

    def test_unassigned_trainer_403(self, api, pet, make_user):
        response = api(make_user(role="TRAINER")).post(
            "/api/tasks",
            json={"pet_id": pet["id"], "title": "Sit", "instructions": "10 reps", "frequency": "daily"},
        )
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_ASSIGNED_TRAINER"

    def test_list_for_pet(self, api, owner, pet, task):
        body = api(owner).get(f"/api/tasks/{pet['id']}").json()
        assert [t["id"] for t in body] == [task["id"]]

    def test_close_task(self, api, trainer, task):
        response = api(trainer).patch(f"/api/tasks/{task['id']}", json={"is_active": False})
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_preferred_days(self, api, owner, task):
        client = api(owner)
        ok = client.patch(f"/api/tasks/{task['id']}/preferred-days", json={"preferred_days": ["Mon", "Wed"]})
        bad = client.patch(f"/api/tasks/{task['id']}/preferred-days", json={"preferred_days": ["Someday"]})

        assert ok.status_code == 200
        assert ok.json()["preferred_days"] == ["Mon", "Wed"]
        assert bad.status_code == 400
        assert bad.json()["code"] == "INVALID_PREFERRED_DAYS"

    def test_trainer_cannot_set_preferred_days(self, api, trainer, task):
        response = api(trainer).patch(f"/api/tasks/{task['id']}/preferred-days", json={"preferred_days": ["Mon"]})
        assert response.status_code == 403


# =============================================================================
# Submissions
# =============================================================================

class TestSubmissionRoutes:
    """Tests for /api/submissions."""

    def test_submit_and_comment(self, api, owner, trainer, task):
        created = api(owner).post("/api/submissions", json={"task_id": task["id"], "note": "Went well"})
        assert created.status_code == 201
        submission_id = created.json()["id"]

        comment = api(trainer).post(f"/api/submissions/{submission_id}/comment", data={"comment": "Great job!"})
        assert comment.status_code == 201
        assert [c["comment"] for c in comment.json()["comments"]] == ["Great job!"]

        fetched = api(owner).get(f"/api/submissions/{submission_id}")
        assert fetched.status_code == 200
        assert fetched.json()["comments"][0]["trainer"]["first_name"] == "Sarah"

    def test_closed_task_400(self, api, fake_db, owner, trainer, task):
        api(trainer).patch(f"/api/tasks/{task['id']}", json={"is_active": False})
        response = api(owner).post("/api/submissions", json={"task_id": task["id"]})
        assert response.status_code == 400
        assert response.json()["code"] == "TASK_CLOSED"
        assert fake_db.rows("homework_submissions") == []

    def test_trainer_cannot_submit(self, api, trainer, task):
        response = api(trainer).post("/api/submissions", json={"task_id": task["id"]})
        assert response.status_code == 403

    def test_empty_comment_400(self, api, owner, trainer, task):
        submission_id = api(owner).post("/api/submissions", json={"task_id": task["id"]}).json()["id"]
        response = api(trainer).post(f"/api/submissions/{submission_id}/comment", data={"comment": " "})
        assert response.status_code == 400
        assert response.json()["code"] == "COMMENT_REQUIRED"

    def test_missing_submission_404(self, api, owner):
        assert api(owner).get(f"/api/submissions/{uuid4()}").status_code == 404


# =============================================================================
# Malformed IDs
# =============================================================================

class TestMalformedIds:
    """Ids that aren't UUIDs are rejected before reaching the database."""

    @pytest.mark.parametrize(
        "path",
        [
            "/api/pets/not-a-uuid",
            "/api/tasks/not-a-uuid",
            "/api/tasks/not-a-uuid/media",
            "/api/submissions/not-a-uuid",
            "/api/timeline/not-a-uuid",
            "/api/timeline/not-a-uuid/weeks",
            "/api/calendar/not-a-uuid",
        ],
    )
    def test_path_id_400(self, api, fake_db, owner, path):
        response = api(owner).get(path)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert not any(table != "users" for table, _ in fake_db.calls)

    def test_task_media_id_400(self, api, trainer, task):
        response = api(trainer).delete(f"/api/tasks/{task['id']}/media/42")
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "url, body",
        [
            ("/api/tasks", {"pet_id": "p1", "title": "Sit", "instructions": "10 reps", "frequency": "daily"}),
            ("/api/submissions", {"task_id": "t1"}),
            ("/api/pets", {"name": "Rex", "workspace_id": "w1"}),
        ],
    )
    def test_body_id_400(self, api, make_user, url, body):
        role = "TRAINER" if url == "/api/tasks" else "OWNER"
        response = api(make_user(role=role)).post(url, json=body)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_workspace_id_404(self, api, fake_db, owner):
        response = api(owner).post("/api/pets", json={"name": "Rex", "workspace_id": str(uuid4())})
        assert response.status_code == 404
        assert response.json()["code"] == "WORKSPACE_NOT_FOUND"
        assert fake_db.rows("pets") == []


# =============================================================================
# Timeline & Calendar
# =============================================================================

class TestTimelineRoutes:
    """Tests for /api/timeline and /api/calendar."""

    def test_timeline(self, api, owner, pet, task):
        api(owner).post("/api/submissions", json={"task_id": task["id"]})
        body = api(owner).get(f"/api/timeline/{pet['id']}").json()
        assert [item["type"] for item in body] == ["submission", "task"]

    def test_weeks(self, api, owner, pet, task):
        body = api(owner).get(f"/api/timeline/{pet['id']}/weeks").json()
        assert len(body) == 1
        assert body[0]["label"].startswith("This Week")

    def test_calendar_month_param(self, api, owner, pet, task):
        body = api(owner).get(f"/api/calendar/{pet['id']}", params={"month": "2024-02"}).json()
        assert (body["year"], body["month"]) == (2024, 2)
        assert len(body["days"]) == 29
        assert {day["status"] for day in body["days"]} == {"missed"}

    @pytest.mark.parametrize("tz, expected", [(None, 10), ("Asia/Tokyo", 11), ("America/New_York", 10)])
    def test_calendar_default_month_follows_timezone(self, api, owner, pet, tz, expected):
        """23:30 UTC on Oct 31 is already November in Tokyo."""
        late_october = datetime(2024, 10, 31, 23, 30, tzinfo=timezone.utc)
        params = {"tz": tz} if tz else {}
        with patch("app.routers.timeline.utc_now", return_value=late_october):
            body = api(owner).get(f"/api/calendar/{pet['id']}", params=params).json()
        assert (body["year"], body["month"]) == (2024, expected)

    @pytest.mark.parametrize("month", ["2024-13", "October", "2024-1", "0000-05"])
    def test_calendar_invalid_month(self, api, owner, pet, month):
        response = api(owner).get(f"/api/calendar/{pet['id']}", params={"month": month})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_MONTH"

    def test_calendar_invalid_timezone(self, api, owner, pet):
        response = api(owner).get(f"/api/calendar/{pet['id']}", params={"tz": "Mars/Olympus"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TIMEZONE"

    def test_calendar_forbidden(self, api, pet, make_user):
        response = api(make_user(role="OWNER")).get(f"/api/calendar/{pet['id']}")
        assert response.status_code == 403


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    def test_health(self, api):
        body = api().get("/api/health").json()
        assert body["status"] == "healthy"

    def test_ready(self, api):
        response = api().get("/api/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_live(self, api):
        assert api().get("/api/health/live").status_code == 200

    def test_ready_reports_database_failure(self, api):
        with patch("app.routers.health.SupabaseClient") as mock_client:
            mock_client.fetch_many.side_effect = RuntimeError("connection refused")
            body = api().get("/api/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")
        assert body["checks"]["uploads"] == "healthy"
