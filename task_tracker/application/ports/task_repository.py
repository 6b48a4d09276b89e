"""Task repository port.

This module defines the abstract interface for task storage used by the
task services.

Rules for implementations:
1. FAIL LOUD - Infrastructure failures raise TaskTrackerError subclasses
2. STAGE THEN COMMIT - add() only stages; nothing is visible until commit()
3. ALL OR NOTHING - commit() applies every staged write or none of them
4. DETECT CONFLICTS - a staged write whose task changed since it was read
   raises ConcurrentModificationError instead of overwriting
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol
from uuid import UUID

from task_tracker.domain.models.task import Task


class TaskRepositoryProtocol(Protocol):
    """Protocol for task storage operations.

    Implementations may use PostgreSQL, in-memory storage, or other
    backends.

    Methods:
        get_by_id: Retrieve one task
        get_many: Retrieve the existing tasks among a set of ids
        list_paged: Retrieve one page ordered by creation time (newest first)
        add: Stage a new or updated task
        commit: Atomically apply all staged writes
        rollback: Discard all staged writes
    """

    async def get_by_id(self, task_id: UUID) -> Task | None:
        """Retrieve a task by ID.

        Args:
            task_id: The unique task identifier.

        Returns:
            The task if found, None otherwise.
        """
        ...

    async def get_many(self, task_ids: Collection[UUID]) -> list[Task]:
        """Retrieve every existing task among ``task_ids``.

        Missing ids are silently skipped. Order is not guaranteed.

        Args:
            task_ids: Ids to resolve.

        Returns:
            The tasks that exist.
        """
        ...

    async def list_paged(self, offset: int, limit: int) -> tuple[list[Task], int]:
        """List tasks ordered by created_at descending.

        Args:
            offset: Number of tasks to skip.
            limit: Maximum number of tasks to return.

        Returns:
            Tuple of (page of tasks, total task count).
        """
        ...

    async def add(self, task: Task) -> None:
        """Stage a task for the next commit.

        A task whose id is unknown is inserted; a known id is updated,
        guarded by the task's ``version``.

        Args:
            task: The task to stage.
        """
        ...

    async def commit(self) -> None:
        """Apply all staged writes as one unit.

        Raises:
            ConcurrentModificationError: If any staged task was modified
                since it was read. Nothing is applied.
            RepositoryError: On any other storage failure.
        """
        ...

    async def rollback(self) -> None:
        """Discard all staged writes."""
        ...
