import logging

from fastmcp import FastMCP
from mcp import types

from gtasks_mcp.auth import _get_token_store
from gtasks_mcp.exceptions import (
    BACKEND_ERRORS,
    AuthenticationError,
    DueDateParseError,
    IntegrationError,
    RateLimitError,
    TaskNotFoundError,
    TaskValidationError,
)
from gtasks_mcp.models.tasks import ToolResult
from gtasks_mcp.services import operations
from gtasks_mcp.services import resources
from gtasks_mcp.services.tasks import get_tasks_client

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "gtasks",
    instructions=(
        "Google Tasks across all of the user's task lists. Tasks are also readable as "
        "gtasks:///{task_id} resources. Due dates are stored as dates only and returned "
        "as YYYY-MM-DDT00:00:00.000Z. Ambiguous dashed dates such as 01-02-2025 are read "
        "month first."
    ),
)

TOOL_ERRORS = BACKEND_ERRORS + (TaskValidationError, DueDateParseError)


def _handle_mcp_error(operation: str, e: Exception) -> dict:
    """Convert exceptions to agent-friendly error results."""
    logger.error("Error calling tool %s: %s", operation, e)
    if isinstance(e, AuthenticationError):
        code = "auth_error"
    elif isinstance(e, RateLimitError):
        code = "rate_limit"
    elif isinstance(e, TaskValidationError):
        code = "validation_error"
    elif isinstance(e, DueDateParseError):
        code = "invalid_date"
    elif isinstance(e, TaskNotFoundError):
        code = "not_found"
    elif isinstance(e, IntegrationError):
        code = "integration_error"
    else:
        code = "unknown_error"
    return ToolResult(text=str(e), is_error=True, error=code).model_dump()


# --- Tools ---

@mcp.tool(name="search")
def tasks_search(query: str, account: str = "default") -> dict:
    """Search for tasks in Google Tasks. Matches the query case-insensitively against
    task titles and notes across every task list."""
    try:
        return operations.search_tasks(get_tasks_client(account), query).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("search", e)


@mcp.tool(name="list")
def tasks_list(cursor: str | None = None, account: str = "default") -> dict:
    """List all tasks in Google Tasks, across every task list.
    Pass the cursor from a previous page to continue."""
    try:
        return operations.list_tasks(get_tasks_client(account), cursor).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("list", e)


@mcp.tool(name="lists")
def tasks_lists(account: str = "default") -> dict:
    """List the task lists (titles and IDs) in Google Tasks."""
    try:
        return operations.list_task_lists(get_tasks_client(account)).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("lists", e)


@mcp.tool(name="create")
def tasks_create(
    title: str,
    tasklist_id: str | None = None,
    notes: str | None = None,
    due: str | None = None,
    account: str = "default",
) -> dict:
    """Create a new task in Google Tasks. Defaults to the primary task list.
    due accepts YYYY-MM-DD, RFC 3339, MM/DD/YYYY, DD-MM-YYYY, YYYY/MM/DD or a written-out date."""
    try:
        return operations.create_task(get_tasks_client(account), title, tasklist_id, notes, due).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("create", e)


@mcp.tool(name="update")
def tasks_update(
    task_id: str,
    tasklist_id: str | None = None,
    title: str | None = None,
    notes: str | None = None,
    status: str | None = None,
    due: str | None = None,
    account: str = "default",
) -> dict:
    """Update a task in Google Tasks. Only provided fields are changed.
    status is needsAction or completed."""
    try:
        return operations.update_task(
            get_tasks_client(account), task_id, tasklist_id, title, notes, status, due,
        ).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("update", e)


@mcp.tool(name="delete")
def tasks_delete(task_id: str, tasklist_id: str | None = None, account: str = "default") -> dict:
    """Delete a task in Google Tasks."""
    try:
        return operations.delete_task(get_tasks_client(account), task_id, tasklist_id).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("delete", e)


@mcp.tool(name="clear")
def tasks_clear(tasklist_id: str, account: str = "default") -> dict:
    """Clear completed tasks from a Google Tasks task list."""
    try:
        return operations.clear_completed(get_tasks_client(account), tasklist_id).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error("clear", e)


@mcp.tool(name="status")
def tasks_status() -> dict:
    """Check which Google accounts are authenticated for Tasks."""
    accounts = _get_token_store().list_accounts()
    return {
        "authenticated_accounts": accounts,
        "message": (
            f"{len(accounts)} account(s) ready: {', '.join(accounts)}"
            if accounts
            else "No accounts authenticated. Run `gtasks-mcp auth` or visit /auth/tasks/setup"
        ),
    }


# --- Resources ---

@mcp.resource("gtasks:///{task_id}", mime_type="text/plain")
def task_resource(task_id: str) -> str:
    """A single task rendered as plain text."""
    return resources.read_task_resource(get_tasks_client(), resources.task_uri(task_id)).text


async def list_task_resources(request: types.ListResourcesRequest) -> types.ServerResult:
    """Enumerate tasks as resources, one page per request.

    Replaces FastMCP's resources/list handler, which only knows about static
    resources and drops the client's cursor.
    """
    cursor = request.params.cursor if request.params else None
    try:
        page = resources.list_task_resources(get_tasks_client(), cursor)
    except BACKEND_ERRORS as e:
        logger.error("Error listing task resources: %s", e)
        raise
    return types.ServerResult(
        types.ListResourcesResult(
            resources=[
                types.Resource(uri=r.uri, name=r.name or r.uri, mimeType=r.mime_type)
                for r in page.resources
            ],
            nextCursor=page.next_cursor,
        )
    )


mcp._mcp_server.request_handlers[types.ListResourcesRequest] = list_task_resources
