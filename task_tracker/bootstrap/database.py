"""Async SQLAlchemy engine and session factory for the PostgreSQL repository.

One engine per process, created lazily by get_session_factory() and
disposed by close_database_engine() from the application lifespan.
SQLALCHEMY_ECHO=1 logs every statement.
"""

from __future__ import annotations

import os

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

ASYNC_DRIVER = "postgresql+asyncpg"

logger = get_logger()

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def to_async_url(url: str) -> str:
    """Rewrite a PostgreSQL URL to use the asyncpg driver.

    Accepts postgres://, postgresql://, an already-async URL, or a bare
    ``user:password@host/db`` string.
    """
    if "://" not in url:
        url = f"postgresql://{url}"
    parsed = make_url(url)
    if parsed.drivername in ("postgres", "postgresql"):
        parsed = parsed.set(drivername=ASYNC_DRIVER)
    return parsed.render_as_string(hide_password=False)


def _echo_enabled() -> bool:
    return os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes")


def get_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating it on first use.

    Raises:
        ValueError: If ``database_url`` is empty.
    """
    global _engine, _session_factory

    if not database_url:
        raise ValueError("database_url is required for the PostgreSQL repository")

    if _session_factory is None:
        url = make_url(to_async_url(database_url))
        log = logger.bind(component="database_bootstrap")
        log.info(
            "creating_database_engine",
            url=url.render_as_string(hide_password=True),
        )

        _engine = create_async_engine(url, echo=_echo_enabled(), pool_pre_ping=True)
        _session_factory = async_sessionmaker(
            bind=_engine, class_=AsyncSession, expire_on_commit=False
        )

    return _session_factory


def reset_database_bootstrap() -> None:
    """Forget the cached engine without disposing it (tests only)."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None


async def close_database_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("database_engine_closed", component="database_bootstrap")
