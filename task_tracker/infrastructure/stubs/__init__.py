"""In-memory stub implementations of application ports.

For development and testing only.
"""

from task_tracker.infrastructure.stubs.task_repository_stub import TaskRepositoryStub

__all__: list[str] = ["TaskRepositoryStub"]
