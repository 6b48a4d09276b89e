"""Unit tests for the task API routes.

Tests run the FastAPI app built by create_app() over the in-memory
repository, checking request validation, outcome mapping and the
infrastructure exception boundary.
"""

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from task_tracker.api.main import create_app
from task_tracker.config.task_config import TaskTrackerConfig
from task_tracker.domain.models.task import TaskStatus
from task_tracker.infrastructure.stubs.task_repository_stub import TaskRepositoryStub


@pytest.fixture
def client(task_repo: TaskRepositoryStub) -> TestClient:
    """Create a test client over the in-memory repository."""
    app = create_app(config=TaskTrackerConfig(), repository_factory=lambda: task_repo)
    return TestClient(app)


class TestListTasksRoute:
    """Tests for GET /tasks."""

    def test_empty_listing(self, client: TestClient) -> None:
        response = client.get("/tasks")

        assert response.status_code == 200
        assert response.json() == {"items": [], "page": 1, "page_size": 10, "total": 0}

    def test_paging_is_clamped(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task_repo.seed(make_task())

        response = client.get("/tasks", params={"page": 0, "pageSize": 200})

        body = response.json()
        assert body["page"] == 1
        assert body["page_size"] == 50
        assert body["total"] == 1
        assert body["items"][0]["status"] == "Pending"
        assert body["items"][0]["created_at"].endswith("Z")

    @pytest.mark.parametrize(("requested", "expected"), [(1, 5), (5, 5), (200, 50)])
    def test_page_size_query_parameter(
        self,
        client: TestClient,
        task_repo: TaskRepositoryStub,
        make_task,
        requested: int,
        expected: int,
    ) -> None:
        task_repo.seed(*(make_task(minutes_ago=i) for i in range(8)))

        response = client.get("/tasks", params={"page": 1, "pageSize": requested})

        body = response.json()
        assert body["page_size"] == expected
        assert len(body["items"]) == min(expected, 8)

    def test_configured_default_page_size(self, task_repo: TaskRepositoryStub) -> None:
        app = create_app(
            config=TaskTrackerConfig(default_page_size=7),
            repository_factory=lambda: task_repo,
        )

        response = TestClient(app).get("/tasks")

        assert response.json()["page_size"] == 7


class TestCreateTaskRoute:
    """Tests for POST /tasks."""

    def test_creates_pending_task(self, client: TestClient) -> None:
        response = client.post("/tasks", json={"description": "New task"})

        assert response.status_code == 201
        body = response.json()
        assert body["description"] == "New task"
        assert body["status"] == "Pending"
        assert response.headers["Location"] == f"/tasks/{body['id']}"

    def test_rejects_long_description(self, client: TestClient) -> None:
        response = client.post("/tasks", json={"description": "x" * 31})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["errors"] == {
            "description": ["Description must be at most 30 characters."]
        }

    def test_rejects_blank_description(self, client: TestClient) -> None:
        response = client.post("/tasks", json={"description": "   "})

        assert response.status_code == 400
        assert response.json()["errors"]["description"] == ["Description is required."]

    def test_rejects_missing_description(self, client: TestClient) -> None:
        response = client.post("/tasks", json={})

        assert response.status_code == 400
        assert "description" in response.json()["errors"]


class TestUpdateStatusRoute:
    """Tests for PUT /tasks/{task_id}/status."""

    def test_success(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task = make_task(TaskStatus.PENDING)
        task_repo.seed(task)

        response = client.put(f"/tasks/{task.id}/status", json={"status": "inprogress"})

        assert response.status_code == 200
        assert response.json()["status"] == "InProgress"

    def test_not_found(self, client: TestClient) -> None:
        response = client.put(f"/tasks/{uuid4()}/status", json={"status": "InProgress"})

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "Task.NotFound"
        assert body["title"] == "Task.NotFound"

    def test_locked(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task = make_task(TaskStatus.FINISHED)
        task_repo.seed(task)

        response = client.put(f"/tasks/{task.id}/status", json={"status": "Pending"})

        assert response.status_code == 403
        assert response.json()["code"] == "Task.Locked"

    def test_invalid_transition(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task = make_task(TaskStatus.PENDING)
        task_repo.seed(task)

        response = client.put(f"/tasks/{task.id}/status", json={"status": "Finished"})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "Task.InvalidTransition"
        assert "Pending" in body["detail"] and "Finished" in body["detail"]

    def test_invalid_status_rejected_before_service(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task = make_task(TaskStatus.PENDING)
        task_repo.seed(task)

        response = client.put(f"/tasks/{task.id}/status", json={"status": "Done"})

        assert response.status_code == 400
        assert response.json()["errors"] == {"status": ["Invalid status value."]}
        assert task_repo.commit_count == 0

    def test_empty_id(self, client: TestClient) -> None:
        response = client.put(
            f"/tasks/{UUID(int=0)}/status", json={"status": "InProgress"}
        )

        assert response.status_code == 400
        assert response.json()["errors"] == {"task_id": ["Task id is required."]}

    def test_malformed_id(self, client: TestClient) -> None:
        response = client.put("/tasks/not-a-uuid/status", json={"status": "Finished"})

        assert response.status_code == 400
        assert "task_id" in response.json()["errors"]


class TestBulkUpdateStatusRoute:
    """Tests for PUT /tasks/status/bulk."""

    def test_success(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        a, b = make_task(TaskStatus.PENDING), make_task(TaskStatus.PENDING)
        task_repo.seed(a, b)

        response = client.put(
            "/tasks/status/bulk",
            json={"ids": [str(a.id), str(b.id)], "status": "InProgress"},
        )

        assert response.status_code == 200
        assert response.json() == {"updated": 2}

    def test_mismatch(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        a, b = make_task(TaskStatus.PENDING), make_task(TaskStatus.IN_PROGRESS)
        task_repo.seed(a, b)

        response = client.put(
            "/tasks/status/bulk",
            json={"ids": [str(a.id), str(b.id)], "status": "InProgress"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "Task.BulkStatusMismatch"

    def test_locked_wins_over_mismatch(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        a, b = make_task(TaskStatus.PENDING), make_task(TaskStatus.FINISHED)
        task_repo.seed(a, b)

        response = client.put(
            "/tasks/status/bulk",
            json={"ids": [str(a.id), str(b.id)], "status": "InProgress"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "Task.Locked"

    def test_missing_task(self, client: TestClient) -> None:
        response = client.put(
            "/tasks/status/bulk",
            json={"ids": [str(uuid4())], "status": "InProgress"},
        )

        assert response.status_code == 404

    def test_empty_id_in_batch(
        self, client: TestClient, task_repo: TaskRepositoryStub, make_task
    ) -> None:
        task = make_task(TaskStatus.PENDING)
        task_repo.seed(task)

        response = client.put(
            "/tasks/status/bulk",
            json={"ids": [str(task.id), str(UUID(int=0))], "status": "InProgress"},
        )

        assert response.status_code == 400
        assert response.json()["errors"] == {"ids": ["Task id cannot be empty."]}
        assert task_repo.commit_count == 0

    def test_empty_ids(self, client: TestClient) -> None:
        response = client.put("/tasks/status/bulk", json={"ids": [], "status": "InProgress"})

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "ids": ["At least one task id must be provided."]
        }


class TestExceptionBoundary:
    """Tests for infrastructure failures escaping the services."""

    def test_unavailable_storage_is_retryable(
        self, client: TestClient, task_repo: TaskRepositoryStub
    ) -> None:
        task_repo.set_unavailable(True)

        response = client.get("/tasks")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "5"
        assert response.json()["code"] == "Infra.Unavailable"

    def test_unexpected_error_is_500(self) -> None:
        repo = AsyncMock()
        repo.list_paged = AsyncMock(side_effect=RuntimeError("boom"))
        app = create_app(config=TaskTrackerConfig(), repository_factory=lambda: repo)

        response = TestClient(app, raise_server_exceptions=False).get("/tasks")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "Server.Error"
        assert "boom" not in body["detail"]


class TestCorrelationHeader:
    """Tests for correlation ID propagation."""

    def test_echoes_incoming_id(self, client: TestClient) -> None:
        response = client.get("/tasks", headers={"X-Correlation-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"

    def test_generates_id(self, client: TestClient) -> None:
        response = client.get("/tasks")

        assert response.headers["X-Correlation-ID"]
