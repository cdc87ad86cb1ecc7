"""Seed the database with a few sample tasks for local development."""
from datetime import timedelta

from taskapi.database import create_tables, get_session
from taskapi.models import Category, Priority
from taskapi.services.task_store import TaskStore
from taskapi.utils.time import utc_now


def sample_tasks():
    now = utc_now()
    return [
        {
            "title": "Complete project proposal",
            "description": "Write a comprehensive project proposal for the new client",
            "category": Category.WORK,
            "priority": Priority.HIGH,
            "deadline": now + timedelta(days=7),
        },
        {
            "title": "Buy groceries",
            "description": "Weekly grocery shopping",
            "category": Category.SHOPPING,
            "priority": Priority.MEDIUM,
            "deadline": now + timedelta(days=1),
        },
        {
            "title": "Book dentist appointment",
            "category": Category.HEALTH,
            "priority": Priority.LOW,
        },
    ]


def seed(store: TaskStore) -> int:
    """Insert the sample tasks unless the store already has data. Returns the number inserted."""
    if store.find_all():
        return 0
    for data in sample_tasks():
        store.create(data)
    return len(sample_tasks())


if __name__ == "__main__":
    create_tables()
    with get_session() as session:
        created = seed(TaskStore(session))
    if created:
        print(f"Created {created} sample tasks")
    else:
        print("Tasks already exist, nothing to seed")
