"""Concurrent modification error for optimistic commits.

Raised by repository adapters when a staged write targets a task whose
stored version changed after it was read. The whole commit is discarded.
"""

from __future__ import annotations

from uuid import UUID

from task_tracker.domain.errors.repository import RepositoryError


class ConcurrentModificationError(RepositoryError):
    """Raised when a commit fails due to a concurrent write.

    This is a recoverable error - the caller should re-read the task(s)
    and decide whether to retry. No staged write from the failed commit
    has been applied.

    Attributes:
        task_ids: Tasks whose stored version no longer matched.
        retry_after_seconds: Suggested delay before retrying.
    """

    def __init__(
        self,
        task_ids: list[UUID],
        retry_after_seconds: int = 1,
    ) -> None:
        """Initialize concurrent modification error.

        Args:
            task_ids: Tasks that were modified concurrently.
            retry_after_seconds: Suggested retry delay in seconds.
        """
        self.task_ids = list(task_ids)
        self.retry_after_seconds = retry_after_seconds
        ids = ", ".join(str(task_id) for task_id in self.task_ids)
        super().__init__(
            f"Concurrent modification detected for task(s) {ids}. "
            "Another request has modified them; no changes were applied."
        )
