"""Task listing and creation service.

Operations:
- list_tasks: one page of tasks, newest first, after pagination clamping
- create_task: a new task in Pending state
"""

from __future__ import annotations

import asyncio

from task_tracker.application.ports.task_repository import TaskRepositoryProtocol
from task_tracker.application.services.base import LoggingMixin
from task_tracker.domain.models.outcome import Outcome
from task_tracker.domain.models.pagination import PagedResult, PageRequest
from task_tracker.domain.models.task import Task


class TaskService(LoggingMixin):
    """Service for listing and creating tasks.

    Attributes:
        _repository: Task repository.
    """

    def __init__(self, repository: TaskRepositoryProtocol) -> None:
        self._repository = repository
        self._init_logger(component="tasks")

    async def list_tasks(
        self,
        page: int | None = None,
        page_size: int | None = None,
    ) -> Outcome[PagedResult[Task]]:
        """List one page of tasks ordered by creation time, newest first.

        Args:
            page: Requested page (None for 1). Raised to at least 1.
            page_size: Requested size (None for 10). Clamped to [5, 50].

        Returns:
            Outcome carrying the page with the normalized page numbers.
        """
        request = PageRequest.normalize(page, page_size)
        log = self._log_operation(
            "list_tasks", page=request.page, page_size=request.page_size
        )

        items, total = await self._repository.list_paged(
            offset=request.offset, limit=request.limit
        )

        log.debug("tasks_listed", returned=len(items), total=total)
        return Outcome.ok(
            PagedResult(
                items=items,
                page=request.page,
                page_size=request.page_size,
                total=total,
            )
        )

    async def create_task(
        self,
        description: str,
        cancel: asyncio.Event | None = None,
    ) -> Outcome[Task]:
        """Create a task in Pending state.

        Args:
            description: Task text, validated upstream (1 to 30 characters).
            cancel: Optional cancellation signal checked before the write.

        Returns:
            Outcome carrying the created task.

        Raises:
            asyncio.CancelledError: If ``cancel`` was set before the write.
            TaskTrackerError: On repository failure.
        """
        task = Task.create(description)
        log = self._log_operation("create_task", task_id=str(task.id))

        if cancel is not None and cancel.is_set():
            raise asyncio.CancelledError()

        await self._shielded_write(self._persist(task), log)

        log.info("task_created")
        return Outcome.ok(task)

    async def _persist(self, task: Task) -> None:
        try:
            await self._repository.add(task)
            await self._repository.commit()
        except Exception:
            await self._repository.rollback()
            raise
