"""Persistence adapters."""

from task_tracker.infrastructure.adapters.persistence.task_repository import (
    PostgresTaskRepository,
)

__all__: list[str] = ["PostgresTaskRepository"]
