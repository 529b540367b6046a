"""
Task API Routes.

Polls Algolia task status for the tasks returned by index creation.
"""

from concurrent.futures import ThreadPoolExecutor

from fastapi import APIRouter, Depends

from api.errors import APIError
from core.auth import BasicUser, require_auth
from core.logging import get_logger
from relevance.algolia_client import IndexConfigClient
from relevance.models import Task, TasksRequest, TasksResponse, TaskWithStatus

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Tasks"])

PUBLISHED = "published"
FAILED = "failed"
UNKNOWN = "unknown"


def _task_with_status(client: IndexConfigClient, task: Task) -> TaskWithStatus:
    try:
        status = client.get_task_status(task.index_name, task.task_id)
    except Exception as e:
        logger.warning("Failed to get task status", task_id=task.task_id, index=task.index_name, error=str(e))
        status = UNKNOWN

    return TaskWithStatus(**task.model_dump(), status=status)


def summarize_tasks(tasks: list) -> TasksResponse:
    statuses = [task.status for task in tasks]
    completed = statuses.count(PUBLISHED)

    return TasksResponse(
        tasks_with_status=tasks,
        all_completed=completed == len(statuses),
        any_failed=FAILED in statuses,
        completed_count=completed,
        total_count=len(statuses),
    )


@router.post("/tasks", response_model=TasksResponse, summary="Check task status")
def check_tasks(
    body: TasksRequest,
    user: BasicUser = Depends(require_auth),
) -> TasksResponse:
    """
    Look up the status of each task.

    A task whose status can't be read is reported as "unknown" rather than
    failing the whole request.
    """
    try:
        with IndexConfigClient(body.app_id, body.write_api_key) as client:
            if body.tasks:
                with ThreadPoolExecutor(max_workers=min(len(body.tasks), 8)) as pool:
                    tasks = list(pool.map(lambda task: _task_with_status(client, task), body.tasks))
            else:
                tasks = []
    except Exception as e:
        logger.error("Failed to check task status", error=str(e))
        raise APIError(str(e) or "Failed to check task status")

    return summarize_tasks(tasks)
