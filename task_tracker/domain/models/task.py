"""Task domain model and status lifecycle.

This module defines the single persisted entity of the system and the
directed graph its status moves along.

Lifecycle:
    Pending -> InProgress -> Finished

Rules:
- Finished is terminal; no edge leaves it.
- No self-loops: requesting the currently-held status is never valid.
- No skipping: Pending cannot reach Finished directly.
- Status names parse case-insensitively, but only after
  is_valid_status_name() has accepted them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar
from uuid import UUID, uuid4


class TaskStatus(Enum):
    """State in the task lifecycle.

    States:
        PENDING: Initial state for every new task
        IN_PROGRESS: Work has started
        FINISHED: Work is done (terminal, immutable)
    """

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"

    def is_terminal(self) -> bool:
        """Check if this state has no outgoing transitions.

        Returns:
            True for FINISHED, False otherwise.
        """
        return self in TERMINAL_STATUSES

    def valid_transitions(self) -> frozenset[TaskStatus]:
        """Get valid target states from this state.

        Returns:
            Frozenset of reachable states. Empty for terminal states.
        """
        return STATUS_TRANSITION_MATRIX.get(self, frozenset())


TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset({TaskStatus.FINISHED})

# Maps each status to the statuses it may move to
STATUS_TRANSITION_MATRIX: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.FINISHED}),
    TaskStatus.FINISHED: frozenset(),
}

_STATUS_BY_FOLDED_NAME: dict[str, TaskStatus] = {
    status.value.casefold(): status for status in TaskStatus
}


def is_valid_status_name(name: object) -> bool:
    """Check whether a raw string names a status, ignoring case.

    Args:
        name: Raw external input.

    Returns:
        True if ``name`` matches one of Pending, InProgress, Finished.
    """
    if not isinstance(name, str):
        return False
    return name.casefold() in _STATUS_BY_FOLDED_NAME


def parse_status(name: str) -> TaskStatus:
    """Parse a validated status name into a TaskStatus.

    Callers must check is_valid_status_name() first.

    Args:
        name: A status name accepted by is_valid_status_name().

    Returns:
        The matching TaskStatus.

    Raises:
        ValueError: If ``name`` does not name a status.
    """
    if not is_valid_status_name(name):
        raise ValueError(f"Invalid task status: {name!r}")
    return _STATUS_BY_FOLDED_NAME[name.casefold()]


def can_transition(current: TaskStatus, new: TaskStatus) -> bool:
    """Check whether ``current`` may move to ``new``.

    Not symmetric: can_transition(a, b) says nothing about (b, a).

    Args:
        current: The status the task holds now.
        new: The requested status.

    Returns:
        True only for Pending -> InProgress and InProgress -> Finished.
    """
    return new in current.valid_transitions()


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Task:
    """A tracked unit of work.

    Attributes:
        id: Unique identifier.
        description: Short text (1 to 30 characters).
        status: Current lifecycle status.
        created_at: Creation timestamp (UTC).
        version: Write counter used for optimistic concurrency.
    """

    id: UUID
    description: str
    status: TaskStatus = field(default=TaskStatus.PENDING)
    created_at: datetime = field(default_factory=_utc_now)
    version: int = field(default=0)

    MAX_DESCRIPTION_LENGTH: ClassVar[int] = 30

    def __post_init__(self) -> None:
        """Validate task fields."""
        if len(self.description) > self.MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Task description exceeds maximum length of "
                f"{self.MAX_DESCRIPTION_LENGTH} characters"
            )

    @classmethod
    def create(cls, description: str) -> Task:
        """Create a new Pending task with a fresh id."""
        return cls(id=uuid4(), description=description)

    def with_status(self, new_status: TaskStatus) -> Task:
        """Return a copy carrying ``new_status``.

        No lifecycle check happens here; the evaluators decide legality
        before calling this.
        """
        return replace(self, status=new_status)
