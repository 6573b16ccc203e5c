from fastapi import APIRouter

from gtasks_mcp.models.tasks import (
    CreateTaskRequest,
    TaskItem,
    TaskListInfo,
    TaskPage,
    TaskResourceContent,
    TaskResourceList,
    ToolCallRequest,
    ToolResult,
    UpdateTaskRequest,
)
from gtasks_mcp.services import aggregation, operations, resources
from gtasks_mcp.services.tasks import get_tasks_client

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# --- Resources ---


@router.get("/resources")
def list_resources(cursor: str | None = None, account: str = "default") -> TaskResourceList:
    return resources.list_task_resources(get_tasks_client(account), cursor)


@router.get("/resources/read")
def read_resource(uri: str, account: str = "default") -> TaskResourceContent:
    return resources.read_task_resource(get_tasks_client(account), uri)


# --- Task Lists ---


@router.get("/lists")
def list_task_lists(max_results: int = aggregation.MAX_TASK_RESULTS, account: str = "default") -> list[TaskListInfo]:
    return get_tasks_client(account).list_task_lists(max_results)


@router.post("/lists/{tasklist_id}/clear")
def clear_completed(tasklist_id: str, account: str = "default") -> ToolResult:
    return operations.clear_completed(get_tasks_client(account), tasklist_id)


# --- Tasks ---


@router.get("/lists/{tasklist_id}/tasks")
def list_tasks(
    tasklist_id: str,
    max_results: int = aggregation.MAX_TASK_RESULTS,
    page_token: str | None = None,
    account: str = "default",
) -> TaskPage:
    return get_tasks_client(account).list_tasks(tasklist_id, max_results, page_token)


@router.get("/items/{task_id}")
def find_task(task_id: str, account: str = "default") -> TaskItem:
    """Look a task up by id across every task list."""
    return aggregation.find_task(get_tasks_client(account), task_id)


@router.post("/lists/{tasklist_id}/tasks")
def create_task(tasklist_id: str, request: CreateTaskRequest, account: str = "default") -> ToolResult:
    return operations.create_task(get_tasks_client(account), request.title, tasklist_id, request.notes, request.due)


@router.patch("/lists/{tasklist_id}/tasks/{task_id}")
def update_task(tasklist_id: str, task_id: str, request: UpdateTaskRequest, account: str = "default") -> ToolResult:
    return operations.update_task(
        get_tasks_client(account),
        task_id,
        tasklist_id,
        request.title,
        request.notes,
        request.status.value if request.status else None,
        request.due,
    )


@router.delete("/lists/{tasklist_id}/tasks/{task_id}")
def delete_task(tasklist_id: str, task_id: str, account: str = "default") -> ToolResult:
    return operations.delete_task(get_tasks_client(account), task_id, tasklist_id)


# --- Tool calls ---


@router.post("/tools/{operation}")
def call_tool(operation: str, request: ToolCallRequest) -> ToolResult:
    return operations.dispatch(get_tasks_client(request.account), operation, request.arguments)
