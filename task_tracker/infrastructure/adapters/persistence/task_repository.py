"""PostgreSQL task repository (SQLAlchemy async).

Implements TaskRepositoryProtocol over a ``tasks`` table:

    CREATE TABLE tasks (
        id          UUID PRIMARY KEY,
        description VARCHAR(30) NOT NULL,
        status      VARCHAR(16) NOT NULL,
        created_at  TIMESTAMPTZ NOT NULL,
        version     INTEGER NOT NULL DEFAULT 0
    );

Staged writes are applied in a single transaction. Updates are guarded by
the version read with the task (UPDATE ... WHERE id = :id AND version =
:version); any guard miss rolls back the whole commit and raises
ConcurrentModificationError.

One instance holds one unit of work; create a fresh instance per request.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any
from uuid import UUID

from sqlalchemy import bindparam, text
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from task_tracker.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from task_tracker.domain.errors.repository import (
    RepositoryError,
    RepositoryUnavailableError,
)
from task_tracker.domain.models.task import Task, TaskStatus

logger = get_logger()

_SELECT_COLUMNS = "id, description, status, created_at, version"


def _row_to_task(row: Any) -> Task:
    return Task(
        id=row.id,
        description=row.description,
        status=TaskStatus(row.status),
        created_at=row.created_at,
        version=row.version,
    )


def _translate_error(exc: SQLAlchemyError) -> RepositoryError:
    """Map a SQLAlchemy failure onto the repository error hierarchy."""
    if isinstance(exc, OperationalError) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return RepositoryUnavailableError(f"Task storage is unavailable: {exc}")
    return RepositoryError(f"Task storage failure: {exc}")


class PostgresTaskRepository:
    """SQLAlchemy-backed implementation of TaskRepositoryProtocol.

    Attributes:
        _session_factory: Factory for AsyncSession instances.
        _staged: Writes waiting for the next commit, by id.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._staged: dict[UUID, Task] = {}
        self._log = logger.bind(component="task_repository")

    async def get_by_id(self, task_id: UUID) -> Task | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    text(f"SELECT {_SELECT_COLUMNS} FROM tasks WHERE id = :id"),
                    {"id": task_id},
                )
                row = result.fetchone()
        except SQLAlchemyError as exc:
            raise _translate_error(exc) from exc
        return _row_to_task(row) if row else None

    async def get_many(self, task_ids: Collection[UUID]) -> list[Task]:
        if not task_ids:
            return []
        statement = text(
            f"SELECT {_SELECT_COLUMNS} FROM tasks WHERE id IN :ids"
        ).bindparams(bindparam("ids", expanding=True))
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement, {"ids": list(task_ids)})
                rows = result.fetchall()
        except SQLAlchemyError as exc:
            raise _translate_error(exc) from exc
        return [_row_to_task(row) for row in rows]

    async def list_paged(self, offset: int, limit: int) -> tuple[list[Task], int]:
        try:
            async with self._session_factory() as session:
                total_result = await session.execute(text("SELECT COUNT(*) FROM tasks"))
                total = total_result.scalar() or 0
                result = await session.execute(
                    text(
                        f"SELECT {_SELECT_COLUMNS} FROM tasks "
                        "ORDER BY created_at DESC "
                        "LIMIT :limit OFFSET :offset"
                    ),
                    {"limit": limit, "offset": offset},
                )
                rows = result.fetchall()
        except SQLAlchemyError as exc:
            raise _translate_error(exc) from exc
        return [_row_to_task(row) for row in rows], total

    async def add(self, task: Task) -> None:
        self._staged[task.id] = task

    async def commit(self) -> None:
        """Apply every staged write in one transaction.

        Raises:
            ConcurrentModificationError: If any guarded update matched no row
                while the task still exists. The transaction is rolled back.
            RepositoryError: On any other storage failure.
        """
        staged, self._staged = self._staged, {}
        if not staged:
            return

        log = self._log.bind(staged_count=len(staged))
        conflicts: list[UUID] = []
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    for task in staged.values():
                        if not await self._write(session, task):
                            conflicts.append(task.id)
                    if conflicts:
                        # Leaving the block with an exception rolls back
                        raise ConcurrentModificationError(task_ids=conflicts)
        except SQLAlchemyError as exc:
            log.error("task_commit_failed", error=str(exc))
            raise _translate_error(exc) from exc
        except ConcurrentModificationError:
            log.warning(
                "task_commit_conflict",
                conflicting_ids=[str(task_id) for task_id in conflicts],
            )
            raise

        log.debug("task_commit_applied")

    async def rollback(self) -> None:
        self._staged.clear()

    async def _write(self, session: AsyncSession, task: Task) -> bool:
        """Write one task inside the open transaction.

        Returns:
            False if the task exists with a different version.
        """
        updated = await session.execute(
            text(
                "UPDATE tasks SET status = :status, description = :description, "
                "version = version + 1 "
                "WHERE id = :id AND version = :version"
            ),
            {
                "id": task.id,
                "status": task.status.value,
                "description": task.description,
                "version": task.version,
            },
        )
        if updated.rowcount == 1:
            return True

        exists = await session.execute(
            text("SELECT 1 FROM tasks WHERE id = :id"), {"id": task.id}
        )
        if exists.fetchone() is not None:
            return False

        await session.execute(
            text(
                "INSERT INTO tasks (id, description, status, created_at, version) "
                "VALUES (:id, :description, :status, :created_at, :version)"
            ),
            {
                "id": task.id,
                "description": task.description,
                "status": task.status.value,
                "created_at": task.created_at,
                "version": task.version,
            },
        )
        return True
