# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService
from .workspace_service import WorkspaceService
from .pet_service import PetService
from .task_service import TaskService
from .submission_service import SubmissionService
from .timeline_service import TimelineService
from .media_service import MediaService

__all__ = [
    "UserService",
    "WorkspaceService",
    "PetService",
    "TaskService",
    "SubmissionService",
    "TimelineService",
    "MediaService",
]
