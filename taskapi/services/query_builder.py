"""Turn list-query parameters into a filter specification and a sort specification.

Filters are a conjunction of predicates. Absent parameters add nothing, so
an empty call matches every record. Invalid values are rejected with
``InvalidQueryError``; nothing falls back to a default silently.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional, Tuple, Union

from ..errors import InvalidQueryError
from ..models import Category, Priority
from ..utils.time import to_naive_utc

DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER = "desc"

# API field name -> record attribute
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "deadline": "deadline",
    "priority": "priority",
    "title": "title",
    "category": "category",
    "completed": "completed",
    "description": "description",
}

SORT_ORDERS = ("asc", "desc")

BoundValue = Union[str, date, datetime, None]


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any

    def matches(self, record) -> bool:
        return getattr(record, self.field) == self.value


@dataclass(frozen=True)
class Range:
    """Inclusive range; either bound may be open. A missing value never matches."""

    field: str
    lower: Optional[datetime] = None
    upper: Optional[datetime] = None

    def matches(self, record) -> bool:
        value = to_naive_utc(getattr(record, self.field))
        if value is None:
            return False
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value > self.upper:
            return False
        return True


Predicate = Union[Equals, Range]


@dataclass(frozen=True)
class FilterSpec:
    predicates: Tuple[Predicate, ...] = ()

    def matches(self, record) -> bool:
        return all(predicate.matches(record) for predicate in self.predicates)

    def fields(self) -> Tuple[str, ...]:
        return tuple(predicate.field for predicate in self.predicates)


@dataclass(frozen=True)
class SortSpec:
    """Single-key ordering. Ties keep whatever order the store returns."""

    field: str = SORTABLE_FIELDS[DEFAULT_SORT_FIELD]
    descending: bool = True


def _coerce_enum(enum_cls, name: str, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidQueryError(f"{name} must be one of: {allowed}") from None


def coerce_completed(value: Union[str, bool]) -> bool:
    """Only the literal "true" (or True) means completed; anything else means not completed."""
    if isinstance(value, bool):
        return value
    return value == "true"


def parse_deadline_bound(name: str, value: BoundValue, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a deadline bound given as an ISO-8601 date or datetime.

    A date-only value expands to the start of the day, or to its last
    microsecond when ``end_of_day`` is set, so that an upper bound of
    "2024-12-31" includes everything due that day.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min)

    text = str(value).strip()
    try:
        day = date.fromisoformat(text)
    except ValueError:
        pass
    else:
        return datetime.combine(day, time.max if end_of_day else time.min)

    try:
        return to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        raise InvalidQueryError(f"{name} must be an ISO-8601 date or datetime, got {value!r}") from None


def build_filter(
    category: Optional[Union[str, Category]] = None,
    priority: Optional[Union[str, Priority]] = None,
    completed: Optional[Union[str, bool]] = None,
    deadline_from: BoundValue = None,
    deadline_to: BoundValue = None,
) -> FilterSpec:
    predicates = []

    if category:
        predicates.append(Equals("category", _coerce_enum(Category, "category", category)))
    if priority:
        predicates.append(Equals("priority", _coerce_enum(Priority, "priority", priority)))
    if completed is not None:
        predicates.append(Equals("completed", coerce_completed(completed)))

    lower = parse_deadline_bound("deadlineFrom", deadline_from)
    upper = parse_deadline_bound("deadlineTo", deadline_to, end_of_day=True)
    if lower is not None or upper is not None:
        predicates.append(Range("deadline", lower, upper))

    return FilterSpec(tuple(predicates))


def build_sort(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> SortSpec:
    sort_by = sort_by or DEFAULT_SORT_FIELD
    sort_order = sort_order or DEFAULT_SORT_ORDER

    if sort_by not in SORTABLE_FIELDS:
        allowed = ", ".join(SORTABLE_FIELDS)
        raise InvalidQueryError(f"sortBy must be one of: {allowed}")
    if sort_order not in SORT_ORDERS:
        raise InvalidQueryError("sortOrder must be one of: asc, desc")

    return SortSpec(field=SORTABLE_FIELDS[sort_by], descending=sort_order != "asc")


def build_task_query(
    category: Optional[Union[str, Category]] = None,
    priority: Optional[Union[str, Priority]] = None,
    completed: Optional[Union[str, bool]] = None,
    deadline_from: BoundValue = None,
    deadline_to: BoundValue = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Tuple[FilterSpec, SortSpec]:
    """Build the (filter, sort) pair for a task list query."""
    filter_spec = build_filter(
        category=category,
        priority=priority,
        completed=completed,
        deadline_from=deadline_from,
        deadline_to=deadline_to,
    )
    return filter_spec, build_sort(sort_by, sort_order)
