"""API routers."""

from task_tracker.api.routes.tasks import router as tasks_router

__all__ = ["tasks_router"]
