"""Unit tests for PostgresTaskRepository using a mocked session factory."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from task_tracker.domain.errors import (
    ConcurrentModificationError,
    RepositoryError,
    RepositoryUnavailableError,
)
from task_tracker.domain.models.task import Task, TaskStatus
from task_tracker.infrastructure.adapters.persistence.task_repository import (
    PostgresTaskRepository,
)


def _async_cm(value=None) -> MagicMock:
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=value)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


def _result(rows=None, rowcount: int = 0, scalar=None) -> MagicMock:
    result = MagicMock()
    rows = rows or []
    result.fetchone.return_value = rows[0] if rows else None
    result.fetchall.return_value = rows
    result.rowcount = rowcount
    result.scalar.return_value = scalar
    return result


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.begin = MagicMock(return_value=_async_cm())
    return session


@pytest.fixture
def repository(session: MagicMock) -> PostgresTaskRepository:
    factory = MagicMock(return_value=_async_cm(session))
    return PostgresTaskRepository(session_factory=factory)


def _row(task: Task) -> SimpleNamespace:
    return SimpleNamespace(
        id=task.id,
        description=task.description,
        status=task.status.value,
        created_at=task.created_at,
        version=task.version,
    )


class TestReads:
    """Tests for read operations."""

    @pytest.mark.asyncio
    async def test_get_by_id_maps_row(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        task = Task(
            id=uuid4(),
            description="Mapped",
            status=TaskStatus.IN_PROGRESS,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            version=4,
        )
        session.execute.return_value = _result(rows=[_row(task)])

        assert await repository.get_by_id(task.id) == task

    @pytest.mark.asyncio
    async def test_get_by_id_missing(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        session.execute.return_value = _result()

        assert await repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_get_many_empty_skips_query(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        assert await repository.get_many([]) == []
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_paged(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        task = Task.create("Listed")
        session.execute.side_effect = [_result(scalar=12), _result(rows=[_row(task)])]

        items, total = await repository.list_paged(offset=10, limit=5)

        assert items == [task]
        assert total == 12
        assert session.execute.await_args_list[1].args[1] == {"limit": 5, "offset": 10}

    @pytest.mark.asyncio
    async def test_operational_error_is_unavailable(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        with pytest.raises(RepositoryUnavailableError):
            await repository.get_by_id(uuid4())


class TestCommit:
    """Tests for staged writes and commit()."""

    @pytest.mark.asyncio
    async def test_empty_commit_is_noop(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        await repository.commit()
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guarded_update(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        task = Task.create("Update").with_status(TaskStatus.IN_PROGRESS)
        session.execute.return_value = _result(rowcount=1)

        await repository.add(task)
        await repository.commit()

        assert session.execute.await_count == 1
        params = session.execute.await_args.args[1]
        assert params["status"] == "InProgress"
        assert params["version"] == 0

    @pytest.mark.asyncio
    async def test_unknown_task_is_inserted(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        task = Task.create("Insert")
        session.execute.side_effect = [_result(rowcount=0), _result(), _result(rowcount=1)]

        await repository.add(task)
        await repository.commit()

        assert session.execute.await_count == 3
        insert_sql = str(session.execute.await_args_list[2].args[0])
        assert insert_sql.startswith("INSERT INTO tasks")

    @pytest.mark.asyncio
    async def test_version_mismatch_raises_conflict(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        task = Task.create("Stale")
        session.execute.side_effect = [
            _result(rowcount=0),
            _result(rows=[SimpleNamespace()]),
        ]

        await repository.add(task)
        with pytest.raises(ConcurrentModificationError) as exc_info:
            await repository.commit()

        assert exc_info.value.task_ids == [task.id]

    @pytest.mark.asyncio
    async def test_other_sql_errors_are_repository_errors(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        session.execute.side_effect = ProgrammingError("UPDATE", {}, Exception("boom"))

        await repository.add(Task.create("Broken"))
        with pytest.raises(RepositoryError) as exc_info:
            await repository.commit()

        assert not isinstance(exc_info.value, RepositoryUnavailableError)

    @pytest.mark.asyncio
    async def test_rollback_clears_staged(
        self, repository: PostgresTaskRepository, session: MagicMock
    ) -> None:
        await repository.add(Task.create("Dropped"))
        await repository.rollback()
        await repository.commit()

        session.execute.assert_not_awaited()
