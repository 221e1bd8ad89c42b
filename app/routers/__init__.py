# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - workspaces.py: Trainer profile, invite links and joining
# - pets.py: Pet management and trainer assignment
# - tasks.py: Homework tasks, preferred days and task media
# - submissions.py: Homework submissions and trainer comments
# - timeline.py: Activity timeline and completion calendar
# - upload.py: Photo/video uploads
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import workspaces
from . import pets
from . import tasks
from . import submissions
from . import timeline
from . import upload

__all__ = [
    "health",
    "workspaces",
    "pets",
    "tasks",
    "submissions",
    "timeline",
    "upload",
]
