"""FastAPI application entry point for Task Tracker.

Run with:
    uvicorn task_tracker.api.main:app
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from task_tracker import __version__
from task_tracker.api.error_mapping import register_exception_handlers
from task_tracker.api.middleware.logging_middleware import LoggingMiddleware
from task_tracker.api.routes.tasks import router as tasks_router
from task_tracker.application.ports.task_repository import TaskRepositoryProtocol
from task_tracker.bootstrap.database import close_database_engine, get_session_factory
from task_tracker.config.task_config import TaskTrackerConfig
from task_tracker.infrastructure.adapters.persistence.task_repository import (
    PostgresTaskRepository,
)
from task_tracker.infrastructure.observability import configure_structlog
from task_tracker.infrastructure.stubs.task_repository_stub import TaskRepositoryStub

RepositoryFactory = Callable[[], TaskRepositoryProtocol]


def _default_repository_factory(config: TaskTrackerConfig) -> RepositoryFactory:
    if config.database_url:
        session_factory = get_session_factory(config.database_url)
        return lambda: PostgresTaskRepository(session_factory)

    stub = TaskRepositoryStub()
    return lambda: stub


def create_app(
    config: TaskTrackerConfig | None = None,
    repository_factory: RepositoryFactory | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Runtime configuration. Read from the environment if None.
        repository_factory: Callable returning the repository for one
            request. Defaults to PostgreSQL when DATABASE_URL is set,
            otherwise a shared in-memory repository.

    Returns:
        Configured FastAPI application.
    """
    config = config or TaskTrackerConfig.from_environment()
    configure_structlog(environment=config.environment)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if config.uses_database:
            await close_database_engine()

    app = FastAPI(
        title="Task Tracker API",
        description="Task tracking with a Pending -> InProgress -> Finished lifecycle",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.repository_factory = repository_factory or _default_repository_factory(
        config
    )

    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(tasks_router)
    return app


load_dotenv()
app = create_app()
