"""Task status transition service.

Evaluates and applies status changes for one task or for a batch of tasks.

Single-task gates (first failure is the only error):
1. Task exists                        -> Task.NotFound (NotFound)
2. Task is not Finished               -> Task.Locked (Forbidden)
3. Requested status parses            (validated upstream)
4. Transition is an edge of the graph -> Task.InvalidTransition (Conflict)
5. Stage and commit the new status

Bulk gates (first failure rejects the whole batch):
1. Every distinct id resolves         -> Task.NotFound (NotFound)
2. No task is Finished                -> Task.Locked (Forbidden)
3. All tasks share one status         -> Task.BulkStatusMismatch (Conflict)
4. Transition is an edge of the graph -> Task.InvalidTransition (Conflict)
5. Stage every task, commit once

Gate order is load-bearing: a batch that is both locked and mixed reports
Task.Locked. Gates 1-4 never write. The write step runs shielded from task
cancellation so a commit is never half-applied.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from uuid import UUID

from task_tracker.application.ports.task_repository import TaskRepositoryProtocol
from task_tracker.application.services.base import LoggingMixin
from task_tracker.domain.models.outcome import Outcome, TaskErrors
from task_tracker.domain.models.task import (
    Task,
    TaskStatus,
    can_transition,
    parse_status,
)


def _raise_if_cancelled(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise asyncio.CancelledError()


class TaskStatusService(LoggingMixin):
    """Service deciding and applying task status transitions.

    Attributes:
        _repository: Task repository.
    """

    def __init__(self, repository: TaskRepositoryProtocol) -> None:
        """Initialize the task status service.

        Args:
            repository: Repository for task persistence.
        """
        self._repository = repository
        self._init_logger(component="tasks")

    async def update_status(
        self,
        task_id: UUID,
        status: str,
        cancel: asyncio.Event | None = None,
    ) -> Outcome[Task]:
        """Move one task to ``status``.

        Args:
            task_id: Task to update.
            status: Requested status name, already accepted by
                is_valid_status_name().
            cancel: Optional cancellation signal. If set before the write
                step, the call aborts with no side effects.

        Returns:
            Outcome carrying the updated task, or a single classified error.

        Raises:
            asyncio.CancelledError: If ``cancel`` was set before the write.
            ValueError: If ``status`` was not validated upstream.
            TaskTrackerError: On repository failure.
        """
        log = self._log_operation(
            "update_status", task_id=str(task_id), requested_status=status
        )

        task = await self._repository.get_by_id(task_id)
        if task is None:
            log.info("status_update_rejected", code=TaskErrors.NOT_FOUND)
            return Outcome.fail([TaskErrors.not_found()])

        if task.status.is_terminal():
            log.info("status_update_rejected", code=TaskErrors.LOCKED)
            return Outcome.fail([TaskErrors.locked()])

        requested = parse_status(status)

        if not can_transition(task.status, requested):
            log.info(
                "status_update_rejected",
                code=TaskErrors.INVALID_TRANSITION,
                current_status=task.status.value,
            )
            return Outcome.fail(
                [TaskErrors.invalid_transition(task.status, requested)]
            )

        _raise_if_cancelled(cancel)

        updated = task.with_status(requested)
        await self._shielded_write(self._apply([updated]), log)

        log.info(
            "task_status_updated",
            from_status=task.status.value,
            to_status=requested.value,
        )
        return Outcome.ok(updated)

    async def bulk_update_status(
        self,
        task_ids: Sequence[UUID],
        status: str,
        cancel: asyncio.Event | None = None,
    ) -> Outcome[int]:
        """Move every task in ``task_ids`` to ``status`` as one unit.

        Duplicate ids are resolved once.

        Args:
            task_ids: Ordered, non-empty ids of the tasks to update.
            status: Requested status name, already accepted by
                is_valid_status_name().
            cancel: Optional cancellation signal. If set before the write
                step, the call aborts with no side effects.

        Returns:
            Outcome carrying the number of tasks updated, or a single
            classified error. No task is written unless all gates pass.

        Raises:
            asyncio.CancelledError: If ``cancel`` was set before the write.
            ValueError: If ``status`` was not validated upstream.
            TaskTrackerError: On repository failure.
        """
        distinct_ids = list(dict.fromkeys(task_ids))
        log = self._log_operation(
            "bulk_update_status",
            task_count=len(distinct_ids),
            requested_status=status,
        )

        if not distinct_ids:
            log.info("bulk_status_rejected", code="Request.Invalid")
            return Outcome.fail(
                [
                    TaskErrors.validation(
                        "ids", "At least one task id must be provided."
                    )
                ]
            )

        tasks = await self._repository.get_many(distinct_ids)
        if len(tasks) != len(distinct_ids):
            log.info(
                "bulk_status_rejected",
                code=TaskErrors.NOT_FOUND,
                resolved_count=len(tasks),
            )
            return Outcome.fail([TaskErrors.not_found(bulk=True)])

        if any(task.status.is_terminal() for task in tasks):
            log.info("bulk_status_rejected", code=TaskErrors.LOCKED)
            return Outcome.fail([TaskErrors.locked()])

        current_statuses: set[TaskStatus] = {task.status for task in tasks}
        if len(current_statuses) != 1:
            log.info(
                "bulk_status_rejected",
                code=TaskErrors.BULK_STATUS_MISMATCH,
                current_statuses=sorted(s.value for s in current_statuses),
            )
            return Outcome.fail([TaskErrors.bulk_status_mismatch()])

        requested = parse_status(status)
        (current,) = current_statuses

        if not can_transition(current, requested):
            log.info(
                "bulk_status_rejected",
                code=TaskErrors.INVALID_TRANSITION,
                current_status=current.value,
            )
            return Outcome.fail([TaskErrors.invalid_transition(current, requested)])

        _raise_if_cancelled(cancel)

        await self._shielded_write(
            self._apply([task.with_status(requested) for task in tasks]), log
        )

        log.info(
            "bulk_status_updated",
            from_status=current.value,
            to_status=requested.value,
            updated_count=len(tasks),
        )
        return Outcome.ok(len(tasks))

    async def _apply(self, tasks: list[Task]) -> None:
        """Stage ``tasks`` and commit them together.

        Staged writes are discarded if the commit fails.
        """
        try:
            for task in tasks:
                await self._repository.add(task)
            await self._repository.commit()
        except Exception:
            await self._repository.rollback()
            raise
