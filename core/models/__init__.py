# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Users and roles
# - context.py: Per-request caller context
# - workspace.py: Workspaces, memberships, invite flow
# - pet.py: Pets
# - task.py: Homework tasks, weekdays, frequencies
# - media.py: Uploaded media attachments
# - submission.py: Submissions and trainer comments
# - timeline.py: Derived timeline and calendar views
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import RoleUpdateRequest, UserRecord, UserRole
from .context import RequestContext
from .media import (
    CommentMediaRecord,
    MediaAttachment,
    MediaRecord,
    MediaType,
    StoredFile,
    SubmissionMediaRecord,
    TaskMediaRecord,
)
from .task import (
    Frequency,
    HomeworkTaskDetail,
    HomeworkTaskRecord,
    PreferredDaysUpdate,
    TaskCreate,
    TaskUpdate,
    Weekday,
)
from .pet import AssignTrainerRequest, PetCreate, PetDetail, PetRecord, PetUpdate
from .workspace import (
    InviteResponse,
    InviteValidation,
    JoinRequest,
    JoinResult,
    TrainerProfileRequest,
    WorkspaceDetail,
    WorkspaceMemberDetail,
    WorkspaceMemberRecord,
    WorkspaceRecord,
)
from .submission import (
    HomeworkSubmissionDetail,
    HomeworkSubmissionRecord,
    SubmissionCreate,
    SubmissionStatus,
    TrainerCommentDetail,
    TrainerCommentRecord,
)
from .timeline import (
    CalendarDay,
    DayStatus,
    MonthCalendar,
    TimelineItem,
    TimelineItemType,
    TimelineWeek,
)

__all__ = [
    # User
    "RoleUpdateRequest",
    "UserRecord",
    "UserRole",
    "RequestContext",
    # Media
    "CommentMediaRecord",
    "MediaAttachment",
    "MediaRecord",
    "MediaType",
    "StoredFile",
    "SubmissionMediaRecord",
    "TaskMediaRecord",
    # Task
    "Frequency",
    "HomeworkTaskDetail",
    "HomeworkTaskRecord",
    "PreferredDaysUpdate",
    "TaskCreate",
    "TaskUpdate",
    "Weekday",
    # Pet
    "AssignTrainerRequest",
    "PetCreate",
    "PetDetail",
    "PetRecord",
    "PetUpdate",
    # Workspace
    "InviteResponse",
    "InviteValidation",
    "JoinRequest",
    "JoinResult",
    "TrainerProfileRequest",
    "WorkspaceDetail",
    "WorkspaceMemberDetail",
    "WorkspaceMemberRecord",
    "WorkspaceRecord",
    # Submission
    "HomeworkSubmissionDetail",
    "HomeworkSubmissionRecord",
    "SubmissionCreate",
    "SubmissionStatus",
    "TrainerCommentDetail",
    "TrainerCommentRecord",
    # Timeline / Calendar
    "CalendarDay",
    "DayStatus",
    "MonthCalendar",
    "TimelineItem",
    "TimelineItemType",
    "TimelineWeek",
]
