"""Task Tracker configuration.

Environment Variables:
- TASK_TRACKER_ENV: 'production' for JSON logs, anything else for console
  logs (default: development)
- DATABASE_URL: PostgreSQL connection string; when unset the in-memory
  repository is used
- TASK_DEFAULT_PAGE_SIZE: Page size used when a listing request omits it
  (default: 10, still clamped to [5, 50])
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from task_tracker.domain.models.pagination import DEFAULT_PAGE_SIZE


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class TaskTrackerConfig:
    """Runtime configuration.

    Attributes:
        environment: Deployment environment name.
        database_url: PostgreSQL URL, or None for in-memory storage.
        default_page_size: Page size applied when a request omits one.
    """

    environment: str = "development"
    database_url: str | None = None
    default_page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.environment:
            raise ValueError("environment must not be empty")
        if self.default_page_size < 1:
            raise ValueError(
                f"default_page_size must be positive, got {self.default_page_size}"
            )

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)

    @classmethod
    def from_environment(cls) -> TaskTrackerConfig:
        """Create config from environment variables with defaults."""
        return cls(
            environment=os.environ.get("TASK_TRACKER_ENV", "development"),
            database_url=os.environ.get("DATABASE_URL") or None,
            default_page_size=_get_int_env(
                "TASK_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE
            ),
        )
