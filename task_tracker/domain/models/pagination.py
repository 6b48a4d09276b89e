"""Pagination policy for task listings.

Requested page and page size are normalized before any offset or limit
reaches storage:
- page defaults to 1 and is raised to at least 1 (no upper bound)
- page size defaults to 10 and is clamped to [5, 50]

Normalization is applied the same way whatever default the caller used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class PageRequest:
    """A normalized page request.

    Attributes:
        page: 1-based page number (>= 1).
        page_size: Items per page, within [MIN_PAGE_SIZE, MAX_PAGE_SIZE].
    """

    page: int
    page_size: int

    @classmethod
    def normalize(
        cls,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PageRequest:
        """Build a PageRequest from raw, possibly absent, values.

        Args:
            page: Requested page, None for the default.
            page_size: Requested page size, None for the default.

        Returns:
            PageRequest with both values inside the allowed bounds.
        """
        raw_page = DEFAULT_PAGE if page is None else page
        raw_size = DEFAULT_PAGE_SIZE if page_size is None else page_size
        return cls(
            page=max(1, raw_page),
            page_size=min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, raw_size)),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of items plus the total matching count."""

    items: list[T]
    page: int
    page_size: int
    total: int
