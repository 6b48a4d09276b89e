"""Application services."""

from task_tracker.application.services.task_service import TaskService
from task_tracker.application.services.task_status_service import TaskStatusService

__all__: list[str] = ["TaskService", "TaskStatusService"]
