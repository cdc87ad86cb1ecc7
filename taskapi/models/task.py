from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
from uuid import uuid4
import enum

from ..utils.time import utc_now


class Category(str, enum.Enum):
    WORK = "Work"
    PERSONAL = "Personal"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"


class Priority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Task(SQLModel, table=True):
    """Task record.

    ``id`` is assigned once on creation and never changes. Timestamps are
    naive UTC; ``updated_at`` is refreshed by every update. Columns use a
    plain ``DateTime`` so naive values are stored as-is.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=1000)
    category: Category = Field(index=True)
    priority: Priority = Field(index=True)
    deadline: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    completed: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
