"""Tests for the /items API routes.

Each test gets its own application (see the ``client`` fixture in conftest),
so registry state never leaks between tests.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from taskgate.adapters.rate_limit.in_memory import InMemoryIntervalRateLimiter
from taskgate.core.app_factory import create_app
from taskgate.core.config import settings
from taskgate.services.task_registry import Task, TaskRegistry


def _list(client: TestClient) -> list[dict]:
    response = client.get("/items")
    assert response.status_code == 200
    return response.json()


class TestListItems:
    def test_lists_seed_tasks(self, client: TestClient) -> None:
        tasks = _list(client)

        assert len(tasks) == 5
        assert tasks[0] == {"id": 1, "name": "GIT", "done": True}
        assert [t["id"] for t in tasks] == [1, 2, 3, 4, 5]

    def test_apps_do_not_share_state(self) -> None:
        first = TestClient(create_app())
        second = TestClient(create_app())

        first.delete("/items/1")

        assert len(_list(first)) == 4
        assert len(_list(second)) == 5

    def test_custom_registry(self) -> None:
        client = TestClient(create_app(TaskRegistry(seed=[Task(id=7, name="only")])))

        assert _list(client) == [{"id": 7, "name": "only", "done": False}]


class TestGetItem:
    def test_returns_task(self, client: TestClient) -> None:
        response = client.get("/items/2")

        assert response.status_code == 200
        assert response.json() == {"id": 2, "name": "Computer Networks", "done": True}

    def test_unknown_id(self, client: TestClient) -> None:
        response = client.get("/items/99")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "task_not_found"


class TestCreateItem:
    def test_creates_task(self, client: TestClient) -> None:
        response = client.post("/items", json={"name": "X", "done": False})

        assert response.status_code == 201
        assert response.json() == {"id": 6, "name": "X", "done": False}
        assert len(_list(client)) == 6

    def test_done_defaults_to_false(self, client: TestClient) -> None:
        response = client.post("/items", json={"name": "DevOps fundamentals"})

        assert response.status_code == 201
        assert response.json()["done"] is False

    def test_accepts_json_boolean_done(self, client: TestClient) -> None:
        response = client.post("/items", json={"name": "Shipped", "done": True})

        assert response.status_code == 201
        assert response.json()["done"] is True

    def test_empty_body_is_rejected(self, client: TestClient) -> None:
        response = client.post("/items")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"
        assert len(_list(client)) == 5

    def test_malformed_json_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/items",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"done": True},
            {"name": ["a"]},
            {"name": "ok", "done": "maybe"},
            {"name": "ok", "done": "true"},
            {"name": "ok", "done": "yes"},
            {"name": "ok", "done": 1},
            {"name": "ok", "done": 0},
        ],
    )
    def test_invalid_payload_is_rejected(self, client: TestClient, payload: dict) -> None:
        response = client.post("/items", json=payload)

        assert response.status_code == 400
        assert len(_list(client)) == 5

    def test_blank_name_is_rejected(self, client: TestClient) -> None:
        response = client.post("/items", json={"name": "   "})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "invalid_field"
        assert body["error"]["details"] == {"field": "name"}


class TestMarkItemDone:
    def test_marks_done_and_persists(self, client: TestClient) -> None:
        response = client.put("/items/5")

        assert response.status_code == 200
        assert response.json() == {"done": 5}
        assert client.get("/items/5").json()["done"] is True

    def test_non_integer_id(self, client: TestClient) -> None:
        response = client.put("/items/five")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_unknown_id(self, client: TestClient) -> None:
        response = client.put("/items/8")

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "task_not_found"
        assert body["error"]["details"] == {"task_id": 8}


class TestDeleteItem:
    def test_end_to_end_scenario(self, client: TestClient) -> None:
        created = client.post("/items", json={"name": "X", "done": False})
        assert created.status_code == 201
        assert created.json() == {"id": 6, "name": "X", "done": False}
        assert len(_list(client)) == 6

        deleted = client.delete("/items/4")
        assert deleted.status_code == 200
        assert deleted.json() == {"deleted": 4}
        tasks = _list(client)
        assert len(tasks) == 5
        assert 4 not in [t["id"] for t in tasks]

        again = client.delete("/items/4")
        assert again.status_code == 400
        assert again.json()["error"]["code"] == "task_not_found"
        assert len(_list(client)) == 5

    def test_non_integer_id(self, client: TestClient) -> None:
        response = client.delete("/items/five")

        assert response.status_code == 400
        assert len(_list(client)) == 5

    def test_preserves_order_of_remaining(self, client: TestClient) -> None:
        client.delete("/items/2")

        assert [t["id"] for t in _list(client)] == [1, 3, 4, 5]


class TestCreateRateLimit:
    @pytest.fixture
    def clock(self) -> Mock:
        return Mock(return_value=1000.0)

    @pytest.fixture
    def gated_client(self, monkeypatch: pytest.MonkeyPatch, clock: Mock) -> TestClient:
        monkeypatch.setattr(settings.app, "rate_limit_enabled", True)
        app = create_app()
        app.state.rate_limiter = InMemoryIntervalRateLimiter(interval_seconds=60, clock=clock)
        return TestClient(app)

    def test_second_create_within_interval_is_throttled(
        self, gated_client: TestClient, clock: Mock
    ) -> None:
        assert gated_client.post("/items", json={"name": "a"}).status_code == 201

        clock.return_value = 1030.0
        response = gated_client.post("/items", json={"name": "b"})

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "rate_limited"
        assert response.headers["Retry-After"] == "30"
        assert len(_list(gated_client)) == 6

        clock.return_value = 1061.0
        assert gated_client.post("/items", json={"name": "c"}).status_code == 201

    def test_retry_after_rounds_up_fractional_cooldown(
        self, gated_client: TestClient, clock: Mock
    ) -> None:
        assert gated_client.post("/items", json={"name": "a"}).status_code == 201

        clock.return_value = 1029.6
        response = gated_client.post("/items", json={"name": "b"})

        assert response.status_code == 429
        retry_after = int(response.headers["Retry-After"])
        assert retry_after == 31

        clock.return_value = 1029.6 + retry_after
        assert gated_client.post("/items", json={"name": "c"}).status_code == 201

    def test_reads_and_other_writes_are_not_gated(self, gated_client: TestClient) -> None:
        gated_client.post("/items", json={"name": "a"})

        assert gated_client.get("/items").status_code == 200
        assert gated_client.put("/items/6").status_code == 200
        assert gated_client.delete("/items/6").status_code == 200

    def test_disabled_by_default(self, client: TestClient) -> None:
        for i in range(3):
            assert client.post("/items", json={"name": f"t{i}"}).status_code == 201
