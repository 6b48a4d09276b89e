"""Task repository stub implementation.

In-memory implementation of TaskRepositoryProtocol for development and
testing. Staged writes are applied under a lock, with a version check per
task, so commits are all-or-nothing just like the database adapter.
"""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from dataclasses import replace
from uuid import UUID

from task_tracker.application.ports.task_repository import TaskRepositoryProtocol
from task_tracker.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from task_tracker.domain.errors.repository import RepositoryUnavailableError
from task_tracker.domain.models.task import Task


class TaskRepositoryStub(TaskRepositoryProtocol):
    """In-memory stub implementation of TaskRepositoryProtocol.

    NOT suitable for production use.

    Attributes:
        _tasks: Committed tasks by id.
        _staged: Writes waiting for the next commit, by id.
        commit_count: Number of successful commits (for tests).
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._tasks: dict[UUID, Task] = {}
        self._staged: dict[UUID, Task] = {}
        self._commit_lock = asyncio.Lock()
        self._unavailable = False
        self.commit_count = 0

    async def get_by_id(self, task_id: UUID) -> Task | None:
        self._check_available()
        return self._tasks.get(task_id)

    async def get_many(self, task_ids: Collection[UUID]) -> list[Task]:
        self._check_available()
        wanted = set(task_ids)
        return [task for task_id, task in self._tasks.items() if task_id in wanted]

    async def list_paged(self, offset: int, limit: int) -> tuple[list[Task], int]:
        self._check_available()
        ordered = sorted(self._tasks.values(), key=lambda t: t.created_at, reverse=True)
        return ordered[offset : offset + limit], len(ordered)

    async def add(self, task: Task) -> None:
        self._staged[task.id] = task

    async def commit(self) -> None:
        """Apply every staged write, or none of them.

        Raises:
            RepositoryUnavailableError: If the stub is marked unavailable.
            ConcurrentModificationError: If a staged task's version no
                longer matches the committed one.
        """
        async with self._commit_lock:
            staged, self._staged = self._staged, {}
            self._check_available()

            conflicts = [
                task_id
                for task_id, task in staged.items()
                if task_id in self._tasks
                and self._tasks[task_id].version != task.version
            ]
            if conflicts:
                raise ConcurrentModificationError(task_ids=conflicts)

            for task_id, task in staged.items():
                if task_id in self._tasks:
                    self._tasks[task_id] = replace(task, version=task.version + 1)
                else:
                    self._tasks[task_id] = task
            self.commit_count += 1

    async def rollback(self) -> None:
        self._staged.clear()

    # Test helpers

    def seed(self, *tasks: Task) -> None:
        """Store tasks directly, bypassing staging (for testing)."""
        for task in tasks:
            self._tasks[task.id] = task

    def set_unavailable(self, unavailable: bool) -> None:
        """Make every storage call raise RepositoryUnavailableError (for testing)."""
        self._unavailable = unavailable

    def bump_version(self, task_id: UUID) -> None:
        """Simulate a concurrent write to ``task_id`` (for testing)."""
        task = self._tasks[task_id]
        self._tasks[task_id] = replace(task, version=task.version + 1)

    @property
    def staged_count(self) -> int:
        return len(self._staged)

    def clear(self) -> None:
        """Clear all tasks (for testing)."""
        self._tasks.clear()
        self._staged.clear()
        self.commit_count = 0

    def _check_available(self) -> None:
        if self._unavailable:
            raise RepositoryUnavailableError("Task storage is unavailable")
