from datetime import timedelta

import pytest

from taskapi.models import Category, Priority
from taskapi.utils.time import utc_now

FUTURE = (utc_now() + timedelta(days=30)).replace(microsecond=0).isoformat() + "Z"
PAST = (utc_now() - timedelta(days=1)).replace(microsecond=0).isoformat() + "Z"
MISSING_ID = "00000000-0000-4000-8000-000000000000"


def _post(client, **fields):
    payload = {"title": "Complete project proposal", "category": "Work", "priority": "High"}
    payload.update(fields)
    response = client.post("/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_task_returns_camel_case_record(client):
    body = _post(client, description="For the new client", deadline=FUTURE)

    assert set(body) == {
        "id", "title", "description", "category", "priority",
        "deadline", "completed", "createdAt", "updatedAt",
    }
    assert body["category"] == "Work"
    assert body["priority"] == "High"
    assert body["completed"] is False
    assert body["description"] == "For the new client"
    assert body["deadline"] is not None
    assert body["createdAt"] == body["updatedAt"]


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"category": "Work", "priority": "High"}, "title"),
        ({"title": "", "category": "Work", "priority": "High"}, "title"),
        ({"title": "x" * 201, "category": "Work", "priority": "High"}, "title"),
        ({"title": "t", "description": "d" * 1001, "category": "Work", "priority": "High"}, "description"),
        ({"title": "t", "category": "Hobby", "priority": "High"}, "category"),
        ({"title": "t", "category": "Work", "priority": "Urgent"}, "priority"),
        ({"title": "t", "category": "Work", "priority": "High", "deadline": PAST}, "deadline"),
        ({"title": "t", "category": "Work", "priority": "High", "owner": "me"}, "owner"),
    ],
)
def test_create_validation_errors(client, payload, field):
    response = client.post("/tasks", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert field in [detail["field"] for detail in body["details"]]


def test_list_defaults_and_filters(client):
    _post(client, title="a", category="Work", priority="Low")
    b = _post(client, title="b", category="Personal", priority="High")
    _post(client, title="c", category="Work", priority="High")
    client.put(f"/tasks/{b['id']}", json={"completed": True})

    assert len(client.get("/tasks").json()) == 3

    work = client.get("/tasks", params={"category": "Work", "sortBy": "title", "sortOrder": "asc"}).json()
    assert [t["title"] for t in work] == ["a", "c"]

    high = client.get("/tasks", params={"priority": "High", "sortBy": "title"}).json()
    assert [t["title"] for t in high] == ["c", "b"]

    done = client.get("/tasks", params={"completed": "true"}).json()
    assert [t["title"] for t in done] == ["b"]

    pending = client.get("/tasks", params={"completed": "nope", "sortBy": "title", "sortOrder": "asc"}).json()
    assert [t["title"] for t in pending] == ["a", "c"]


def test_list_deadline_window(client):
    soon = (utc_now() + timedelta(days=2)).date().isoformat()
    later = (utc_now() + timedelta(days=60)).date().isoformat()
    _post(client, title="soon", deadline=soon + "T12:00:00Z")
    _post(client, title="later", deadline=later + "T12:00:00Z")
    _post(client, title="none")

    titles = [t["title"] for t in client.get("/tasks", params={"deadlineFrom": soon, "deadlineTo": soon}).json()]
    assert titles == ["soon"]

    titles = [t["title"] for t in client.get("/tasks", params={"deadlineFrom": soon, "sortBy": "deadline", "sortOrder": "asc"}).json()]
    assert titles == ["soon", "later"]


@pytest.mark.parametrize("params", [{"sortOrder": "up"}, {"sortBy": "color"}])
def test_list_rejects_out_of_range_sort_parameters(client, params):
    response = client.get("/tasks", params=params)

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


@pytest.mark.parametrize(
    "params, message",
    [
        ({"category": "Hobby"}, "category must be one of: Work, Personal, Shopping, Health, Education, Other"),
        ({"priority": "Urgent"}, "priority must be one of: Low, Medium, High"),
    ],
)
def test_list_rejects_unknown_category_and_priority(client, params, message):
    response = client.get("/tasks", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid query", "message": message, "status": 400}


def test_list_treats_empty_category_and_priority_as_absent(client):
    _post(client, title="a", category="Work", priority="Low")
    _post(client, title="b", category="Health", priority="High")

    response = client.get("/tasks", params={"category": "", "priority": "", "sortBy": "title", "sortOrder": "asc"})

    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["a", "b"]


def test_list_sorts_by_category_completed_and_description(client):
    a = _post(client, title="a", category="Work", description="zeta")
    _post(client, title="b", category="Education", description="alpha")
    _post(client, title="c", category="Personal", description="mid")
    client.put(f"/tasks/{a['id']}", json={"completed": True})

    def titles(**params):
        response = client.get("/tasks", params=params)
        assert response.status_code == 200
        return [t["title"] for t in response.json()]

    assert titles(sortBy="category", sortOrder="asc") == ["b", "c", "a"]
    assert titles(sortBy="description", sortOrder="desc") == ["a", "c", "b"]
    assert titles(sortBy="completed", sortOrder="desc")[0] == "a"


def test_list_rejects_unparseable_deadline(client):
    response = client.get("/tasks", params={"deadlineFrom": "yesterday"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid query"
    assert response.json()["status"] == 400


def test_stats_empty(client):
    assert client.get("/tasks/stats").json() == {
        "total": 0,
        "completed": 0,
        "pending": 0,
        "overdue": 0,
        "byCategory": {},
        "byPriority": {},
    }


def test_stats_counts_overdue_from_stored_deadlines(client, store):
    now = utc_now()
    store.create({"title": "late", "category": Category.WORK, "priority": Priority.HIGH, "deadline": now - timedelta(days=1)})
    store.create({"title": "done", "category": Category.PERSONAL, "priority": Priority.LOW, "completed": True})
    store.create({"title": "next", "category": Category.WORK, "priority": Priority.MEDIUM, "deadline": now + timedelta(days=1)})

    assert client.get("/tasks/stats").json() == {
        "total": 3,
        "completed": 1,
        "pending": 2,
        "overdue": 1,
        "byCategory": {"Work": 2, "Personal": 1},
        "byPriority": {"High": 1, "Low": 1, "Medium": 1},
    }


def test_get_task(client):
    created = _post(client)

    response = client.get(f"/tasks/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_invalid_and_missing_ids(client):
    for method in ("get", "put", "delete"):
        kwargs = {"json": {}} if method == "put" else {}

        response = getattr(client, method)("/tasks/not-a-uuid", **kwargs)
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid ID format",
            "message": "Task ID must be a valid UUID",
            "status": 400,
        }

        response = getattr(client, method)(f"/tasks/{MISSING_ID}", **kwargs)
        assert response.status_code == 404
        assert response.json() == {
            "error": "Task not found",
            "message": "No task found with the provided ID",
            "status": 404,
        }


def test_update_task_partially(client):
    created = _post(client, deadline=FUTURE)

    response = client.put(f"/tasks/{created['id']}", json={"priority": "Low", "completed": True})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == created["id"]
    assert body["priority"] == "Low"
    assert body["completed"] is True
    assert body["title"] == created["title"]
    assert body["deadline"] == created["deadline"]
    assert body["createdAt"] == created["createdAt"]


def test_update_can_clear_deadline(client):
    created = _post(client, deadline=FUTURE)

    body = client.put(f"/tasks/{created['id']}", json={"deadline": None}).json()

    assert body["deadline"] is None


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"title": None}, "title"),
        ({"title": ""}, "title"),
        ({"category": "Hobby"}, "category"),
        ({"deadline": PAST}, "deadline"),
        ({"completed": "maybe"}, "completed"),
        ({"id": MISSING_ID}, "id"),
    ],
)
def test_update_validation_errors(client, payload, field):
    created = _post(client)

    response = client.put(f"/tasks/{created['id']}", json=payload)

    assert response.status_code == 400
    assert field in [detail["field"] for detail in response.json()["details"]]


def test_delete_task(client):
    created = _post(client, title="Buy groceries", category="Shopping", priority="Medium")

    response = client.delete(f"/tasks/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Task deleted successfully",
        "deletedTask": {
            "id": created["id"],
            "title": "Buy groceries",
            "category": "Shopping",
            "priority": "Medium",
            "completed": False,
        },
    }
    assert client.get(f"/tasks/{created['id']}").status_code == 404


def test_unknown_route(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
