"""Base exception classes for the Task Tracker domain layer."""


class TaskTrackerError(Exception):
    """Base exception for all infrastructure-level errors.

    Domain rule violations (missing task, locked task, invalid transition)
    are NOT exceptions; they are returned as Outcome failures. Exceptions
    deriving from this class represent faults the core cannot decide on,
    and are converted to ``Unexpected`` errors at the outer boundary.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
