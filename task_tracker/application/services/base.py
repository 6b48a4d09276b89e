"""Structured logging shared by the application services."""

import asyncio
from collections.abc import Coroutine
from functools import partial
from typing import Any

import structlog


def _log_detached_write(
    log: structlog.BoundLogger, write: "asyncio.Future[None]"
) -> None:
    if write.cancelled():
        log.warning("detached_write_cancelled")
        return
    exc = write.exception()
    if exc is not None:
        log.error(
            "detached_write_failed",
            error_type=type(exc).__name__,
            exc_info=exc,
        )
    else:
        log.info("detached_write_completed")


class LoggingMixin:
    """Gives a service a structlog logger bound to its class name.

    Call ``_init_logger()`` from ``__init__``, then open one logger per
    operation with ``_log_operation()``::

        log = self._log_operation("update_status", task_id=str(task_id))
        log.info("task_status_updated", new_status=status.value)

    The correlation id is added to every event by the structlog
    configuration, not bound here.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "tasks") -> None:
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        return self._log.bind(operation=operation, **context)

    async def _shielded_write(
        self,
        write: Coroutine[Any, Any, None],
        log: structlog.BoundLogger,
    ) -> None:
        """Run ``write`` so that cancelling the caller cannot interrupt it.

        If the caller is cancelled mid-write, the write keeps running
        detached and its outcome is logged when it finishes.
        """
        task = asyncio.ensure_future(write)
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                task.add_done_callback(partial(_log_detached_write, log))
            raise
