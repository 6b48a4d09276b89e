"""Application ports (interfaces implemented by infrastructure adapters)."""

from task_tracker.application.ports.task_repository import TaskRepositoryProtocol

__all__: list[str] = ["TaskRepositoryProtocol"]
