"""Task API routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskhub.api.deps import require_caller
from taskhub.db.session import get_db
from taskhub.schemas.task import (
    TaskCreate,
    TaskDeleteResponse,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from taskhub.services.access import personal_workspace_id
from taskhub.services.task_service import (
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)
from taskhub.services.task_view import SORT_KEYS, TaskFilters, derive_view

router = APIRouter()


@router.get("", response_model=list[TaskRead])
def api_list_tasks(
    workspace_id: str | None = Query(None, alias="workspaceId"),
    search: str | None = Query(None),
    status: list[TaskStatus] | None = Query(None),
    priority: list[TaskPriority] | None = Query(None),
    assignee: list[str] | None = Query(None),
    tag: list[str] | None = Query(None),
    due_from: date | None = Query(None),
    due_to: date | None = Query(None),
    sort: str = Query("created_at", pattern="^(" + "|".join(SORT_KEYS) + ")$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> list[TaskRead]:
    """Top-level tasks of a workspace (default: the caller's personal one), searched, filtered and sorted."""
    tasks = list_tasks(db, workspace_id or personal_workspace_id(caller_id), caller_id)
    filters = TaskFilters(
        status={s.value for s in status or ()},
        priority={p.value for p in priority or ()},
        assignee=set(assignee or ()),
        tags=set(tag or ()),
        due_from=due_from,
        due_to=due_to,
    )
    return derive_view(tasks, search, filters, sort, descending=order == "desc")


@router.post("", response_model=TaskRead, status_code=201)
def api_create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TaskRead:
    return create_task(db, data, caller_id)


@router.get("/{task_id}", response_model=TaskRead)
def api_get_task(
    task_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TaskRead:
    return get_task(db, task_id, caller_id)


@router.put("/{task_id}", response_model=TaskRead)
@router.patch("/{task_id}", response_model=TaskRead)
def api_update_task(
    task_id: str,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TaskRead:
    """Partial update; PUT and PATCH behave the same."""
    return update_task(db, task_id, caller_id, data)


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
def api_delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TaskDeleteResponse:
    delete_task(db, task_id, caller_id)
    return TaskDeleteResponse()
