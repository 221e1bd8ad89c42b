# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection aliases shared by the routers.
# These are injected into route handlers as annotated parameters.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import get_request_context, require_owner, require_trainer
from core.models.context import RequestContext


# Any signed-in user
ContextDep = Annotated[RequestContext, Depends(get_request_context)]

# TRAINER or ADMIN
TrainerDep = Annotated[RequestContext, Depends(require_trainer)]

# OWNER or ADMIN
OwnerDep = Annotated[RequestContext, Depends(require_owner)]
