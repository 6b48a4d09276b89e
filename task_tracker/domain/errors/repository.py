"""Repository infrastructure errors.

These errors are raised by repository adapters, never by the evaluators.
The API exception boundary maps them to HTTP responses.
"""

from __future__ import annotations

from task_tracker.domain.exceptions import TaskTrackerError


class RepositoryError(TaskTrackerError):
    """Raised when the persistence collaborator fails unexpectedly."""

    pass


class RepositoryUnavailableError(RepositoryError):
    """Raised when the persistence backend cannot be reached.

    This is a retryable condition: the caller may repeat the request
    once the backend recovers.

    Attributes:
        retry_after_seconds: Suggested delay before retrying.
    """

    def __init__(self, message: str, retry_after_seconds: int = 5) -> None:
        """Initialize repository unavailable error.

        Args:
            message: Description of the failure.
            retry_after_seconds: Suggested retry delay in seconds.
        """
        self.retry_after_seconds = retry_after_seconds
        super().__init__(message)
