from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Dict, Optional

from ..models import Category, Priority
from ..utils.time import to_naive_utc, utc_now


def _future_deadline(value: Optional[datetime]) -> Optional[datetime]:
    value = to_naive_utc(value)
    if value is not None and value <= utc_now():
        raise ValueError("Deadline must be in the future")
    return value


class TaskCreate(BaseModel):
    """Schema for creating new tasks."""
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    category: Category
    priority: Priority
    deadline: Optional[datetime] = None

    class Config:
        extra = "forbid"

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, value):
        return _future_deadline(value)


class TaskUpdate(BaseModel):
    """Schema for updating existing tasks. Only the fields sent are applied."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None
    completed: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("title", "description", "category", "priority", "completed")
    @classmethod
    def not_null(cls, value, info):
        # Only deadline may be cleared with an explicit null
        if value is None:
            raise ValueError(f"{info.field_name} may not be null")
        return value

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, value):
        return _future_deadline(value)


class _CamelModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class Task(_CamelModel):
    """Complete task schema with all fields."""
    id: str
    title: str
    description: str = ""
    category: Category
    priority: Priority
    deadline: Optional[datetime] = None
    completed: bool = False
    created_at: datetime
    updated_at: datetime

    @field_serializer("deadline", "created_at", "updated_at")
    def serialize_utc(self, value: Optional[datetime]):
        # Stored values are naive UTC; make that explicit on the wire
        if value is None or value.tzinfo is not None:
            return value
        return value.replace(tzinfo=timezone.utc)


class TaskResponse(Task):
    """Task response schema for API responses."""
    pass


class DeletedTask(_CamelModel):
    id: str
    title: str
    category: Category
    priority: Priority
    completed: bool


class TaskDeleteResponse(_CamelModel):
    message: str = "Task deleted successfully"
    deleted_task: DeletedTask


class TaskStats(_CamelModel):
    """Aggregate counts over every stored task."""
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)
