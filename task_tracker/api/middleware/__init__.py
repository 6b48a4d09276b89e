"""HTTP middleware."""

from task_tracker.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
