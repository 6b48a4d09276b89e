"""Unit tests for the task status model.

Tests cover:
- is_valid_status_name() case-insensitive matching
- parse_status() precondition contract
- can_transition() edges of the linear lifecycle
- Task construction and with_status()
"""

from uuid import uuid4

import pytest

from task_tracker.domain.models.task import (
    STATUS_TRANSITION_MATRIX,
    TERMINAL_STATUSES,
    Task,
    TaskStatus,
    can_transition,
    is_valid_status_name,
    parse_status,
)

ALL_STATUSES = list(TaskStatus)


class TestStatusNames:
    """Tests for is_valid_status_name() and parse_status()."""

    @pytest.mark.parametrize(
        "name",
        ["Pending", "pending", "PENDING", "InProgress", "inprogress", "Finished", "fInIsHeD"],
    )
    def test_valid_names_accepted_case_insensitively(self, name: str) -> None:
        assert is_valid_status_name(name) is True

    @pytest.mark.parametrize(
        "name", ["", " ", "Done", "In Progress", "IN_PROGRESS", "Pending ", "0", None, 1]
    )
    def test_invalid_names_rejected(self, name: object) -> None:
        assert is_valid_status_name(name) is False

    def test_parse_returns_canonical_status(self) -> None:
        assert parse_status("inprogress") is TaskStatus.IN_PROGRESS
        assert parse_status("PENDING") is TaskStatus.PENDING
        assert parse_status("Finished") is TaskStatus.FINISHED

    def test_parse_rejects_unvalidated_input(self) -> None:
        with pytest.raises(ValueError, match="Invalid task status"):
            parse_status("Archived")

    def test_canonical_values(self) -> None:
        assert [s.value for s in TaskStatus] == ["Pending", "InProgress", "Finished"]


class TestCanTransition:
    """Tests for the lifecycle graph."""

    @pytest.mark.parametrize("target", ALL_STATUSES)
    def test_finished_has_no_outgoing_edges(self, target: TaskStatus) -> None:
        assert can_transition(TaskStatus.FINISHED, target) is False

    def test_pending_only_reaches_in_progress(self) -> None:
        allowed = [s for s in ALL_STATUSES if can_transition(TaskStatus.PENDING, s)]
        assert allowed == [TaskStatus.IN_PROGRESS]

    def test_in_progress_only_reaches_finished(self) -> None:
        allowed = [s for s in ALL_STATUSES if can_transition(TaskStatus.IN_PROGRESS, s)]
        assert allowed == [TaskStatus.FINISHED]

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_no_self_loops(self, status: TaskStatus) -> None:
        assert can_transition(status, status) is False

    def test_not_symmetric(self) -> None:
        assert can_transition(TaskStatus.PENDING, TaskStatus.IN_PROGRESS) is True
        assert can_transition(TaskStatus.IN_PROGRESS, TaskStatus.PENDING) is False

    def test_matrix_covers_every_status(self) -> None:
        assert set(STATUS_TRANSITION_MATRIX) == set(TaskStatus)
        assert TERMINAL_STATUSES == frozenset({TaskStatus.FINISHED})
        assert TaskStatus.FINISHED.is_terminal()
        assert not TaskStatus.PENDING.is_terminal()


class TestTask:
    """Tests for the Task entity."""

    def test_create_defaults_to_pending(self) -> None:
        task = Task.create("Read requirements")

        assert task.status is TaskStatus.PENDING
        assert task.version == 0
        assert task.created_at.tzinfo is not None

    def test_description_length_limit(self) -> None:
        Task(id=uuid4(), description="x" * 30)
        with pytest.raises(ValueError, match="maximum length of 30"):
            Task(id=uuid4(), description="x" * 31)

    def test_with_status_returns_copy(self) -> None:
        task = Task.create("Deploy")
        moved = task.with_status(TaskStatus.IN_PROGRESS)

        assert moved.status is TaskStatus.IN_PROGRESS
        assert task.status is TaskStatus.PENDING
        assert moved.id == task.id
        assert moved.version == task.version
