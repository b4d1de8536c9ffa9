"""
Task API routes.

Tasks are scoped to the caller's family; a task in another family is
reported as not found. Completing a task awards its points to the
assignee (children only).
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from src.api.dependencies import get_now, require_family
from src.api.models import (
    CreateTaskRequest,
    MessageResponse,
    TaskMatrixResponse,
    TaskResponse,
    TodayTasksResponse,
    UpdateTaskRequest,
)
from src.api.response_builder import build_task_matrix, build_today_tasks
from src.database import get_db
from src.models import NotificationType, Task, TaskStatus, User
from src.services import (
    FamilyHubError,
    complete_task,
    create_notification,
    create_task,
    delete_task,
    get_family_tasks,
    get_task,
    get_tasks_by_quadrant,
    get_user,
    get_user_tasks,
    update_task,
)
from src.services.display import tasks_due_today, today_progress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _resolve_assignee(assignee: Optional[str], user: User) -> Optional[str]:
    if assignee == "me":
        return user.id
    return assignee


def _check_assignee(db: Session, assignee_id: Optional[str], user: User) -> None:
    if assignee_id is None:
        return
    assignee = get_user(db, assignee_id)
    if assignee is None or assignee.family_id != user.family_id:
        raise FamilyHubError("Assignee must be a member of your family")


def _get_family_task(db: Session, task_id: int, user: User) -> Task:
    task = get_task(db, task_id)
    if task is None or task.family_id != user.family_id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _notify_assignee(db: Session, task: Task, user: User) -> None:
    """Tell the assignee about a task someone else gave them."""
    if task.assignee_id is None or task.assignee_id == user.id:
        return
    create_notification(
        db,
        {
            "user_id": task.assignee_id,
            "title": "New task",
            "message": f"{user.display_name} assigned you '{task.title}'",
            "type": NotificationType.TASK,
            "action_url": f"/tasks/{task.id}",
        },
    )


def _load_tasks(
    db: Session,
    user: User,
    quadrant: Optional[int] = None,
    assignee_id: Optional[str] = None,
) -> list[Task]:
    if quadrant is not None:
        tasks = get_tasks_by_quadrant(db, user.family_id, quadrant)
    elif assignee_id is not None:
        tasks = get_user_tasks(db, assignee_id)
    else:
        tasks = get_family_tasks(db, user.family_id)

    return [
        t for t in tasks
        if t.family_id == user.family_id
        and (assignee_id is None or t.assignee_id == assignee_id)
    ]


@router.post("", response_model=TaskResponse, status_code=201)
def create_new_task(
    request: CreateTaskRequest,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Create a task in the caller's family. Assignee defaults to the caller."""
    data = request.model_dump()
    data["assignee_id"] = data.get("assignee_id") or user.id
    _check_assignee(db, data["assignee_id"], user)

    task = create_task(db, {**data, "created_by": user.id, "family_id": user.family_id})
    _notify_assignee(db, task, user)
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    quadrant: Optional[int] = Query(None, ge=1, le=4, description="Eisenhower quadrant"),
    status: Optional[TaskStatus] = Query(None),
    assignee: Optional[str] = Query(None, description="User id, or 'me'"),
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> list[TaskResponse]:
    """Family tasks, newest first, optionally filtered."""
    tasks = _load_tasks(db, user, quadrant, _resolve_assignee(assignee, user))
    if status is not None:
        tasks = [t for t in tasks if t.status == status]
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/matrix", response_model=TaskMatrixResponse)
def task_matrix(
    assignee: Optional[str] = Query(None, description="User id, or 'me'"),
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> TaskMatrixResponse:
    """Tasks bucketed into the four Eisenhower quadrants."""
    tasks = _load_tasks(db, user, assignee_id=_resolve_assignee(assignee, user))
    return build_task_matrix(tasks)


@router.get("/today", response_model=TodayTasksResponse)
def todays_tasks(
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TodayTasksResponse:
    """The caller's tasks due today or undated, with today's progress."""
    tasks = _load_tasks(db, user, assignee_id=user.id)
    return build_today_tasks(tasks_due_today(tasks, now), today_progress(tasks, now))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task_detail(
    task_id: int,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> TaskResponse:
    return TaskResponse.model_validate(_get_family_task(db, task_id, user))


@router.put("/{task_id}", response_model=TaskResponse)
def update_existing_task(
    task_id: int,
    request: UpdateTaskRequest,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """
    Partially update a task.

    Setting status to completed behaves like the complete endpoint.
    Reassigning to someone else notifies the new assignee.
    """
    previous_assignee = _get_family_task(db, task_id, user).assignee_id
    updates = request.model_dump(exclude_unset=True)
    if "assignee_id" in updates:
        _check_assignee(db, updates["assignee_id"], user)

    task = update_task(db, task_id, updates, acting_user_id=user.id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.assignee_id != previous_assignee:
        _notify_assignee(db, task, user)
    return TaskResponse.model_validate(task)


@router.api_route("/{task_id}/complete", methods=["POST", "PUT"], response_model=TaskResponse)
def complete_existing_task(
    task_id: int,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Complete a task and award its points. Repeating is a no-op."""
    _get_family_task(db, task_id, user)
    task = complete_task(db, task_id, user.id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_existing_task(
    task_id: int,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> MessageResponse:
    _get_family_task(db, task_id, user)
    if not delete_task(db, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return MessageResponse(message="Task deleted")
