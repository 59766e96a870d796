from fastapi import APIRouter

from vaulttasks.models.tasks import ListTasksResponse, QueryTasksRequest
from vaulttasks.services import tasks as tasks_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model_exclude_none=True)
def list_tasks(path: str | None = None) -> ListTasksResponse:
    tasks = tasks_service.list_tasks(path)
    return ListTasksResponse(tasks=tasks, result_count=len(tasks))


@router.post("/query", response_model_exclude_none=True)
def query_tasks(request: QueryTasksRequest) -> ListTasksResponse:
    tasks = tasks_service.query_tasks(request.query, request.path)
    return ListTasksResponse(tasks=tasks, result_count=len(tasks))
