"""Record store for tasks, backed by the SQL database."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Task
from ..utils.time import utc_now
from .query_builder import Equals, FilterSpec, Predicate, Range, SortSpec

logger = logging.getLogger(__name__)


def _column(field: str):
    column = getattr(Task, field, None)
    if column is None:
        raise ValueError(f"Task has no field {field!r}")
    return column


def _predicate_clauses(predicate: Predicate) -> list:
    column = _column(predicate.field)
    if isinstance(predicate, Equals):
        return [column == predicate.value]
    if isinstance(predicate, Range):
        clauses = [column.is_not(None)]
        if predicate.lower is not None:
            clauses.append(column >= predicate.lower)
        if predicate.upper is not None:
            clauses.append(column <= predicate.upper)
        return clauses
    raise TypeError(f"Unsupported predicate: {predicate!r}")


class TaskStore:
    """CRUD and query primitives over the tasks table.

    By-id lookups return ``None`` for unknown ids. Database errors are not
    caught here.
    """

    def __init__(self, db: Session):
        self.db = db

    def find(self, filter_spec: Optional[FilterSpec] = None, sort_spec: Optional[SortSpec] = None) -> List[Task]:
        query = self.db.query(Task)

        if filter_spec is not None:
            for predicate in filter_spec.predicates:
                query = query.filter(*_predicate_clauses(predicate))

        if sort_spec is not None:
            column = _column(sort_spec.field)
            query = query.order_by(column.desc() if sort_spec.descending else column.asc())

        return query.all()

    def find_all(self) -> List[Task]:
        return self.find()

    def find_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def create(self, data: dict) -> Task:
        now = utc_now()
        task = Task(**data, created_at=now, updated_at=now)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info("Created task %s", task.id)
        return task

    def update_by_id(self, task_id: str, data: dict) -> Optional[Task]:
        task = self.find_by_id(task_id)
        if task is None:
            return None

        for field, value in data.items():
            if field in ("id", "created_at", "updated_at"):
                continue
            setattr(task, field, value)

        task.updated_at = max(utc_now(), task.created_at)

        self.db.commit()
        self.db.refresh(task)
        logger.info("Updated task %s (%s)", task.id, ", ".join(sorted(data)) or "no fields")
        return task

    def delete_by_id(self, task_id: str) -> Optional[Task]:
        task = self.find_by_id(task_id)
        if task is None:
            return None

        # Detached copy so callers can still read the removed record
        removed = Task(**task.model_dump())
        self.db.delete(task)
        self.db.commit()
        logger.info("Deleted task %s", task_id)
        return removed
