# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the PawSync API:
# - conftest.py: Environment setup, in-memory Supabase, user/pet fixtures
# - test_models.py, test_tokens.py, test_onboarding.py: models and helpers
# - test_schedule.py, test_timeline.py: calendar and feed derivations
# - test_workspace_service.py, test_services.py: business rules
# - test_api.py, test_uploads.py: HTTP endpoints through TestClient
# - test_scripts.py: demo seed and workspace migration
#
# Run tests with: pytest
# =============================================================================
