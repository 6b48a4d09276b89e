"""Task API routes.

FastAPI router for listing, creating and updating tasks.

Request bodies are validated by the pydantic models before any service
runs. Services return Outcomes; failures are mapped to problem responses
by ``failure_to_response``. Infrastructure exceptions are left to the
application exception handlers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from task_tracker.api.dependencies.tasks import (
    get_task_service,
    get_task_status_service,
)
from task_tracker.api.error_mapping import failure_to_response
from task_tracker.api.models.task import (
    BulkUpdateTaskStatusRequest,
    BulkUpdateTaskStatusResponse,
    CreateTaskRequest,
    EMPTY_TASK_ID,
    PagedTaskResponse,
    ProblemResponse,
    TaskResponse,
    UpdateTaskStatusRequest,
)
from task_tracker.application.services.task_service import TaskService
from task_tracker.application.services.task_status_service import TaskStatusService
from task_tracker.domain.models.outcome import Outcome, TaskErrors

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=PagedTaskResponse,
    summary="List tasks (paged)",
    description="Returns tasks newest first. page >= 1, pageSize within [5, 50].",
)
async def list_tasks(
    request: Request,
    page: int | None = Query(default=None),
    page_size: int | None = Query(default=None, alias="pageSize"),
    service: TaskService = Depends(get_task_service),
) -> PagedTaskResponse | JSONResponse:
    if page_size is None:
        page_size = request.app.state.config.default_page_size
    outcome = await service.list_tasks(page=page, page_size=page_size)
    if outcome.is_failure:
        return failure_to_response(outcome, request)
    return PagedTaskResponse.from_domain(outcome.value)


@router.post(
    "",
    response_model=TaskResponse,
    status_code=201,
    responses={400: {"model": ProblemResponse, "description": "Invalid description"}},
    summary="Create a task",
    description="Creates a new task. The status is always set to Pending.",
)
async def create_task(
    body: CreateTaskRequest,
    request: Request,
    response: Response,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse | JSONResponse:
    outcome = await service.create_task(body.description)
    if outcome.is_failure:
        return failure_to_response(outcome, request)
    task = outcome.value
    response.headers["Location"] = f"/tasks/{task.id}"
    return TaskResponse.from_domain(task)


@router.put(
    "/status/bulk",
    response_model=BulkUpdateTaskStatusResponse,
    responses={
        400: {"model": ProblemResponse, "description": "Invalid ids or status"},
        403: {"model": ProblemResponse, "description": "A selected task is Finished"},
        404: {"model": ProblemResponse, "description": "One or more tasks not found"},
        409: {
            "model": ProblemResponse,
            "description": "Mixed current statuses or invalid transition",
        },
    },
    summary="Update status in bulk",
    description=(
        "Updates several tasks at once. All selected tasks must share the same "
        "current status and none can be Finished."
    ),
)
async def bulk_update_task_status(
    body: BulkUpdateTaskStatusRequest,
    request: Request,
    service: TaskStatusService = Depends(get_task_status_service),
) -> BulkUpdateTaskStatusResponse | JSONResponse:
    outcome = await service.bulk_update_status(body.ids, body.status)
    if outcome.is_failure:
        return failure_to_response(outcome, request)
    return BulkUpdateTaskStatusResponse(updated=outcome.value)


@router.put(
    "/{task_id}/status",
    response_model=TaskResponse,
    responses={
        400: {"model": ProblemResponse, "description": "Empty id or invalid status"},
        403: {"model": ProblemResponse, "description": "Task is Finished"},
        404: {"model": ProblemResponse, "description": "Task not found"},
        409: {"model": ProblemResponse, "description": "Invalid transition"},
    },
    summary="Update a task status",
    description="Updates the status of a task. Finished tasks cannot be updated.",
)
async def update_task_status(
    task_id: UUID,
    body: UpdateTaskStatusRequest,
    request: Request,
    service: TaskStatusService = Depends(get_task_status_service),
) -> TaskResponse | JSONResponse:
    if task_id == EMPTY_TASK_ID:
        return failure_to_response(
            Outcome.fail([TaskErrors.validation("task_id", "Task id is required.")]), request
        )
    outcome = await service.update_status(task_id, body.status)
    if outcome.is_failure:
        return failure_to_response(outcome, request)
    return TaskResponse.from_domain(outcome.value)
