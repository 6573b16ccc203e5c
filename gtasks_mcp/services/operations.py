"""Tool operations over Google Tasks.

Each handler validates its arguments and normalizes ``due`` before making
any backend call, then renders a ``ToolResult``. Handlers raise; the MCP and
REST surfaces decide how errors are reported.
"""

import logging
from enum import Enum

from gtasks_mcp.config import get_settings
from gtasks_mcp.exceptions import TaskValidationError, UnknownOperationError
from gtasks_mcp.models.tasks import TaskStatus, ToolResult
from gtasks_mcp.services.aggregation import MAX_TASK_RESULTS, list_all_tasks
from gtasks_mcp.services.dates import normalize_due_date
from gtasks_mcp.services.formatting import filter_tasks, format_task_list
from gtasks_mcp.services.tasks import TasksClient

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    SEARCH = "search"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CLEAR = "clear"
    LISTS = "lists"


def _resolve_tasklist(tasklist_id: str | None) -> str:
    return tasklist_id or get_settings().default_tasklist


def _due_suffix(due: str | None) -> str:
    return f" (Due: {due})" if due else ""


def _parse_status(status: str | None) -> str | None:
    if status is None:
        return None
    try:
        return TaskStatus(status).value
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise TaskValidationError(f'Invalid task status: "{status}". Expected one of: {allowed}.') from None


# --- Read operations ---


def search_tasks(client: TasksClient, query: str | None) -> ToolResult:
    if not query:
        raise TaskValidationError("Search query is required")
    matches = filter_tasks(list_all_tasks(client, MAX_TASK_RESULTS).tasks, query)
    return ToolResult(text=f"Found {len(matches)} tasks:\n{format_task_list(matches)}")


def list_tasks(client: TasksClient, cursor: str | None = None) -> ToolResult:
    tasks = list_all_tasks(client, MAX_TASK_RESULTS, cursor).tasks
    return ToolResult(text=f"Found {len(tasks)} tasks:\n{format_task_list(tasks)}")


def list_task_lists(client: TasksClient) -> ToolResult:
    task_lists = client.list_task_lists(MAX_TASK_RESULTS)
    lines = "\n".join(f"{tl.title} - ID: {tl.id}" for tl in task_lists)
    return ToolResult(text=f"Found {len(task_lists)} task lists:\n{lines}")


# --- Write operations ---


def create_task(
    client: TasksClient,
    title: str | None,
    tasklist_id: str | None = None,
    notes: str | None = None,
    due: str | None = None,
) -> ToolResult:
    if not title:
        raise TaskValidationError("Task title is required")
    parsed_due = normalize_due_date(due)

    body: dict = {"title": title}
    if notes is not None:
        body["notes"] = notes
    if parsed_due:
        body["due"] = parsed_due
    task = client.insert_task(_resolve_tasklist(tasklist_id), body)
    return ToolResult(text=f"Task created: {task.title}{_due_suffix(parsed_due)}")


def update_task(
    client: TasksClient,
    task_id: str | None,
    tasklist_id: str | None = None,
    title: str | None = None,
    notes: str | None = None,
    status: str | None = None,
    due: str | None = None,
) -> ToolResult:
    """Change only the provided fields of an existing task."""
    if not task_id:
        raise TaskValidationError("Task ID is required")
    parsed_status = _parse_status(status)
    parsed_due = normalize_due_date(due)

    tasklist = _resolve_tasklist(tasklist_id)
    # Fetch current task first to merge fields; update replaces the whole resource
    current = client.get_raw_task(tasklist, task_id)
    if title is not None:
        current["title"] = title
    if notes is not None:
        current["notes"] = notes
    if parsed_status is not None:
        current["status"] = parsed_status
    if parsed_due is not None:
        current["due"] = parsed_due
    task = client.update_task(tasklist, task_id, current)
    return ToolResult(text=f"Task updated: {task.title}{_due_suffix(parsed_due)}")


def delete_task(client: TasksClient, task_id: str | None, tasklist_id: str | None = None) -> ToolResult:
    if not task_id:
        raise TaskValidationError("Task ID is required")
    client.delete_task(_resolve_tasklist(tasklist_id), task_id)
    return ToolResult(text=f"Task {task_id} deleted")


def clear_completed(client: TasksClient, tasklist_id: str | None) -> ToolResult:
    if not tasklist_id:
        raise TaskValidationError("Task list ID is required")
    client.clear_completed(tasklist_id)
    return ToolResult(text=f"Tasks from tasklist {tasklist_id} cleared")


# --- Dispatch ---


def dispatch(client: TasksClient, operation: str, arguments: dict | None = None) -> ToolResult:
    """Run a tool call given its wire name and arguments.

    Argument keys follow the tool input schema: ``taskListId``, ``id``,
    ``title``, ``notes``, ``status``, ``due``, ``query`` and ``cursor``.
    """
    try:
        op = Operation(operation)
    except ValueError:
        raise UnknownOperationError(f"Tool not found: {operation}") from None
    args = arguments or {}
    logger.info("Dispatching tool %s", op.value)

    if op is Operation.SEARCH:
        return search_tasks(client, args.get("query"))
    if op is Operation.LIST:
        return list_tasks(client, args.get("cursor"))
    if op is Operation.CREATE:
        return create_task(client, args.get("title"), args.get("taskListId"), args.get("notes"), args.get("due"))
    if op is Operation.UPDATE:
        return update_task(
            client,
            args.get("id"),
            args.get("taskListId"),
            args.get("title"),
            args.get("notes"),
            args.get("status"),
            args.get("due"),
        )
    if op is Operation.DELETE:
        return delete_task(client, args.get("id"), args.get("taskListId"))
    if op is Operation.CLEAR:
        return clear_completed(client, args.get("taskListId"))
    if op is Operation.LISTS:
        return list_task_lists(client)
    raise UnknownOperationError(f"Tool not found: {operation}")
