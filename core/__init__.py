# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the PawSync business logic:
# - models/: Pydantic schemas for rows, request bodies and derived views
# - services/: One service class per entity, taking an explicit
#   RequestContext wherever "who is asking" matters
#
# Routers stay thin and delegate everything here.
# =============================================================================
