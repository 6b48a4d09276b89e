"""
Pytest configuration and shared fixtures for Task Tracker tests.

Testing Standards:
- Async tests run in asyncio auto mode (configured in pyproject.toml)
- Use AsyncMock for async collaborator mocking
- Unit tests go in tests/unit/<layer>/
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from task_tracker.domain.models.task import Task, TaskStatus
from task_tracker.infrastructure.stubs.task_repository_stub import TaskRepositoryStub


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from task_tracker import __version__

    return __version__


@pytest.fixture
def task_repo() -> TaskRepositoryStub:
    """Create a fresh in-memory task repository."""
    return TaskRepositoryStub()


@pytest.fixture
def make_task():
    """Factory for tasks with a given status and age."""

    def _make(
        status: TaskStatus = TaskStatus.PENDING,
        description: str = "Write tests",
        minutes_ago: int = 0,
    ) -> Task:
        return Task(
            id=uuid4(),
            description=description,
            status=status,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        )

    return _make
