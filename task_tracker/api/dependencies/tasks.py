"""Task API dependencies.

Collaborators are created by the application factory and kept on
``app.state``; nothing here is a module-level singleton. Each request gets
its own repository unit of work, shared by the services it uses.
"""

from fastapi import Depends, Request

from task_tracker.application.ports.task_repository import TaskRepositoryProtocol
from task_tracker.application.services.task_service import TaskService
from task_tracker.application.services.task_status_service import TaskStatusService


def get_task_repository(request: Request) -> TaskRepositoryProtocol:
    """Get the repository for the current request."""
    return request.app.state.repository_factory()


def get_task_service(
    repository: TaskRepositoryProtocol = Depends(get_task_repository),
) -> TaskService:
    return TaskService(repository=repository)


def get_task_status_service(
    repository: TaskRepositoryProtocol = Depends(get_task_repository),
) -> TaskStatusService:
    return TaskStatusService(repository=repository)
