# =============================================================================
# app/routers/tasks.py - Homework Task Endpoints
# =============================================================================
# Trainers create, edit and close tasks and attach reference media; owners
# choose preferred weekdays for their calendar.
#
# GET /{pet_id} and GET /{task_id}/media share the first path segment; they
# differ by the trailing /media.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Path, UploadFile, status

from app.dependencies import ContextDep, TrainerDep
from core.models.media import TaskMediaRecord
from core.models.task import (
    HomeworkTaskDetail,
    HomeworkTaskRecord,
    PreferredDaysUpdate,
    TaskCreate,
    TaskUpdate,
)
from core.services.media_service import MediaService
from core.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()

TaskId = Annotated[UUID, Path(description="Task UUID")]


@router.get("/{pet_id}", response_model=list[HomeworkTaskDetail])
async def list_tasks(
    pet_id: Annotated[UUID, Path(description="Pet UUID")],
    ctx: ContextDep,
):
    """
    All tasks for a pet, newest first.

    Raises:
        403: Unless the caller is the owner, the assigned trainer or an admin
        404: If the pet doesn't exist
    """
    return TaskService.list_tasks(ctx, str(pet_id))


@router.post("", response_model=HomeworkTaskRecord, status_code=status.HTTP_201_CREATED)
async def create_task(request: TaskCreate, ctx: TrainerDep):
    """
    Assign a new homework task.

    Raises:
        400: If frequency isn't one of the supported values
        403: Unless the caller is the pet's trainer or an admin
        404: If the pet doesn't exist
    """
    return TaskService.create_task(ctx, request)


@router.patch("/{task_id}", response_model=HomeworkTaskRecord)
async def update_task(task_id: TaskId, request: TaskUpdate, ctx: TrainerDep):
    """Edit a task. Send is_active=false to close it."""
    return TaskService.update_task(ctx, str(task_id), request)


@router.patch("/{task_id}/preferred-days", response_model=HomeworkTaskRecord)
async def set_preferred_days(task_id: TaskId, request: PreferredDaysUpdate, ctx: ContextDep):
    """
    Set the weekdays a task appears on the calendar.

    null or [] goes back to the frequency's default days.

    Raises:
        400: If a value isn't Mon..Sun
        403: Unless the caller owns the pet or is an admin
    """
    return TaskService.set_preferred_days(ctx, str(task_id), request.preferred_days)


# =============================================================================
# Task Media
# =============================================================================

@router.get("/{task_id}/media", response_model=list[TaskMediaRecord])
async def list_task_media(task_id: TaskId, ctx: ContextDep):
    """Reference photos/videos attached to a task."""
    return TaskService.list_media(str(task_id))


@router.post(
    "/{task_id}/media",
    response_model=TaskMediaRecord,
    status_code=status.HTTP_201_CREATED,
)
async def upload_task_media(
    task_id: TaskId,
    ctx: TrainerDep,
    file: Annotated[UploadFile | None, File(description="Image or video")] = None,
):
    """
    Attach a photo or video to a task.

    Raises:
        400: If no file was sent, or it's too large or not an image/video
        403: Unless the caller is the pet's trainer or an admin
        404: If the task doesn't exist
    """
    TaskService.ensure_can_manage_media(ctx, str(task_id))
    stored = await MediaService.save_upload(file)
    return TaskService.add_media(str(task_id), stored)


@router.delete("/{task_id}/media/{media_id}")
async def delete_task_media(
    task_id: TaskId,
    media_id: Annotated[UUID, Path(description="Media UUID")],
    ctx: TrainerDep,
):
    """Remove a media attachment from a task. The file itself is kept."""
    TaskService.delete_media(ctx, str(task_id), str(media_id))
    return {"success": True}
