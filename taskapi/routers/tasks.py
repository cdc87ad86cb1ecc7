import logging
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import InvalidTaskIdError, TaskNotFoundError
from ..models import Category, Priority
from ..schemas.task import DeletedTask, TaskCreate, TaskDeleteResponse, TaskResponse, TaskStats, TaskUpdate
from ..services.query_builder import build_task_query
from ..services.stats import compute_task_stats
from ..services.task_store import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter()

SortField = Literal[
    "createdAt", "updatedAt", "deadline", "priority", "title", "category", "completed", "description",
]


def get_task_store(db: Session = Depends(get_db)) -> TaskStore:
    return TaskStore(db)


def _ensure_task_id(task_id: str) -> str:
    try:
        UUID(task_id)
    except ValueError:
        raise InvalidTaskIdError(task_id) from None
    return task_id


def _get_update_data(task_update: TaskUpdate) -> dict:
    return task_update.model_dump(exclude_unset=True)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    store: TaskStore = Depends(get_task_store),
):
    """Create a new task."""
    return store.create(task.model_dump())


@router.get("", response_model=List[TaskResponse])
def get_tasks(
    category: Optional[str] = Query(None, description="One of: " + ", ".join(c.value for c in Category)),
    priority: Optional[str] = Query(None, description="One of: " + ", ".join(p.value for p in Priority)),
    completed: Optional[str] = Query(None, description='"true" selects completed tasks; any other value selects pending ones'),
    deadline_from: Optional[str] = Query(None, alias="deadlineFrom", description="Inclusive lower bound (ISO-8601 date or datetime)"),
    deadline_to: Optional[str] = Query(None, alias="deadlineTo", description="Inclusive upper bound; a date covers the whole day"),
    sort_by: Optional[SortField] = Query(None, alias="sortBy"),
    sort_order: Optional[Literal["asc", "desc"]] = Query(None, alias="sortOrder"),
    store: TaskStore = Depends(get_task_store),
):
    """List tasks with optional filtering and a single sort key (default createdAt, desc).

    Tasks with equal sort values come back in database order.
    """
    filter_spec, sort_spec = build_task_query(
        category=category,
        priority=priority,
        completed=completed,
        deadline_from=deadline_from,
        deadline_to=deadline_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    logger.debug("Listing tasks filtered on %s sorted by %s", filter_spec.fields(), sort_spec)
    return store.find(filter_spec, sort_spec)


@router.get("/stats", response_model=TaskStats)
def get_task_stats(store: TaskStore = Depends(get_task_store)):
    """Counts by status, overdue, category and priority."""
    return compute_task_stats(store.find_all())


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
):
    task = store.find_by_id(_ensure_task_id(task_id))
    if not task:
        raise TaskNotFoundError(task_id)
    return task


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    store: TaskStore = Depends(get_task_store),
):
    """Update any subset of a task's fields."""
    task = store.update_by_id(_ensure_task_id(task_id), _get_update_data(task_update))
    if not task:
        raise TaskNotFoundError(task_id)
    return task


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
def delete_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
):
    """Delete a task permanently."""
    task = store.delete_by_id(_ensure_task_id(task_id))
    if not task:
        raise TaskNotFoundError(task_id)
    return TaskDeleteResponse(deleted_task=DeletedTask.model_validate(task))
