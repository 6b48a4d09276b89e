"""Task API request/response models.

Pydantic models for the task endpoints. Request models are the upstream
validator: by the time a service runs, status strings name a real status,
ids are UUIDs and descriptions fit the length limit.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer, field_validator

from task_tracker.domain.models.pagination import PagedResult
from task_tracker.domain.models.task import Task, is_valid_status_name

# The all-zero UUID never identifies a task
EMPTY_TASK_ID = UUID(int=0)

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


def _validate_status(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Status is required.")
    if not is_valid_status_name(value):
        raise ValueError("Invalid status value.")
    return value


class CreateTaskRequest(BaseModel):
    """Request body for creating a task.

    Attributes:
        description: Task text, 1 to 30 characters after trimming.
    """

    description: str = Field(
        ...,
        description="Task description (max 30 characters)",
        examples=["Read project requirements"],
    )

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        """Reject blank descriptions and enforce the length limit."""
        if not v or not v.strip():
            raise ValueError("Description is required.")
        if len(v) > Task.MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Description must be at most {Task.MAX_DESCRIPTION_LENGTH} characters."
            )
        return v


class UpdateTaskStatusRequest(BaseModel):
    """Request body for changing one task's status."""

    status: str = Field(
        ...,
        description="Target status (Pending, InProgress or Finished; case-insensitive)",
        examples=["InProgress"],
    )

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _validate_status(v)


class BulkUpdateTaskStatusRequest(BaseModel):
    """Request body for changing the status of several tasks at once."""

    ids: list[UUID] = Field(
        ...,
        description="Ids of the tasks to update (duplicates are resolved once)",
    )
    status: str = Field(
        ...,
        description="Target status (Pending, InProgress or Finished; case-insensitive)",
    )

    @field_validator("ids")
    @classmethod
    def validate_ids(cls, v: list[UUID]) -> list[UUID]:
        if not v:
            raise ValueError("At least one task id must be provided.")
        if EMPTY_TASK_ID in v:
            raise ValueError("Task id cannot be empty.")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _validate_status(v)


class TaskResponse(BaseModel):
    """A task as returned by the API."""

    id: UUID
    description: str
    status: str
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            description=task.description,
            status=task.status.value,
            created_at=task.created_at,
        )


class PagedTaskResponse(BaseModel):
    """One page of tasks."""

    items: list[TaskResponse]
    page: int
    page_size: int
    total: int

    @classmethod
    def from_domain(cls, paged: PagedResult[Task]) -> "PagedTaskResponse":
        return cls(
            items=[TaskResponse.from_domain(task) for task in paged.items],
            page=paged.page,
            page_size=paged.page_size,
            total=paged.total,
        )


class BulkUpdateTaskStatusResponse(BaseModel):
    """Result of a bulk status change."""

    updated: int


class ProblemResponse(BaseModel):
    """RFC 7807 problem details body."""

    type: str
    title: str
    status: int
    detail: str | None = None
    code: str | None = None
    instance: str | None = None
    errors: dict[str, list[str]] | None = None
