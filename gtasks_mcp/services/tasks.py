"""Google Tasks v1 backend client.

``TasksClient`` wraps an already-authenticated discovery resource. Everything
above this module receives the client as an argument and never touches
credentials itself.
"""

import logging
from functools import lru_cache

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gtasks_mcp.auth import get_tasks_credentials
from gtasks_mcp.exceptions import AuthenticationError, IntegrationError, RateLimitError, TaskNotFoundError
from gtasks_mcp.models.tasks import TaskItem, TaskListInfo, TaskPage

logger = logging.getLogger(__name__)


def _handle_api_error(e: HttpError, not_found_statuses: tuple[int, ...] = (404,)):
    if e.resp.status == 429:
        raise RateLimitError("Tasks API rate limit exceeded. Try again shortly.") from e
    if e.resp.status in (401, 403):
        raise AuthenticationError(
            "Tasks credentials expired or revoked. Run `gtasks-mcp auth` or visit /auth/tasks/setup to re-authenticate."
        ) from e
    if e.resp.status in not_found_statuses:
        raise TaskNotFoundError(f"Tasks API returned not found: {e}") from e
    raise IntegrationError(f"Tasks API error: {e}") from e


def _parse_task(task: dict) -> TaskItem:
    return TaskItem(
        id=task["id"],
        title=task.get("title"),
        notes=task.get("notes"),
        status=task.get("status"),
        due=task.get("due"),
        completed=task.get("completed"),
        parent=task.get("parent"),
        position=task.get("position"),
        hidden=task.get("hidden"),
        deleted=task.get("deleted"),
        updated=task.get("updated"),
        etag=task.get("etag"),
        links=task.get("links"),
        kind=task.get("kind"),
        self_link=task.get("selfLink"),
    )


def _parse_task_list(tl: dict) -> TaskListInfo:
    return TaskListInfo(id=tl["id"], title=tl.get("title", ""), updated=tl.get("updated"))


class TasksClient:
    """Thin wrapper over the ``tasks`` v1 discovery resource.

    Every failure of a request surfaces as one of the package exceptions:
    HTTP errors by status, token refresh failures as AuthenticationError and
    network failures (timeouts, dropped connections) as IntegrationError.
    """

    def __init__(self, service):
        self.service = service

    def _execute(self, request, not_found_statuses: tuple[int, ...] = (404,)):
        try:
            return request.execute(num_retries=3)
        except HttpError as e:
            _handle_api_error(e, not_found_statuses)
        except RefreshError as e:
            raise AuthenticationError(
                f"Tasks token refresh failed: {e}. Run `gtasks-mcp auth` to re-authenticate."
            ) from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            raise IntegrationError(f"Tasks API unreachable: {e!r}") from e

    # --- Task Lists ---

    def list_task_lists(self, max_results: int = 100) -> list[TaskListInfo]:
        """List task lists for the authenticated user. Lists without an id are dropped."""
        result = self._execute(self.service.tasklists().list(maxResults=max_results))
        return [_parse_task_list(tl) for tl in result.get("items", []) if tl.get("id")]

    # --- Tasks ---

    def list_tasks(self, tasklist_id: str, max_results: int = 100, page_token: str | None = None) -> TaskPage:
        """Fetch one page of tasks from a single list."""
        params = {"tasklist": tasklist_id, "maxResults": max_results}
        if page_token:
            params["pageToken"] = page_token
        result = self._execute(self.service.tasks().list(**params))
        return TaskPage(
            tasks=[_parse_task(t) for t in result.get("items", [])],
            next_page_token=result.get("nextPageToken"),
        )

    def get_task(self, tasklist_id: str, task_id: str) -> TaskItem:
        """Get a single task. A foreign task id comes back as 400 or 404."""
        return _parse_task(self.get_raw_task(tasklist_id, task_id))

    def get_raw_task(self, tasklist_id: str, task_id: str) -> dict:
        """Get a task as the API returns it, for read-modify-write updates."""
        return self._execute(self.service.tasks().get(tasklist=tasklist_id, task=task_id), (400, 404))

    def insert_task(self, tasklist_id: str, body: dict) -> TaskItem:
        return _parse_task(self._execute(self.service.tasks().insert(tasklist=tasklist_id, body=body)))

    def update_task(self, tasklist_id: str, task_id: str, body: dict) -> TaskItem:
        request = self.service.tasks().update(tasklist=tasklist_id, task=task_id, body=body)
        return _parse_task(self._execute(request))

    def delete_task(self, tasklist_id: str, task_id: str) -> None:
        self._execute(self.service.tasks().delete(tasklist=tasklist_id, task=task_id))

    def clear_completed(self, tasklist_id: str) -> None:
        """Hide all completed tasks in a list."""
        self._execute(self.service.tasks().clear(tasklist=tasklist_id))


@lru_cache
def _load_credentials(account: str) -> Credentials:
    """Load an account's credentials once per process; google-auth refreshes them in place."""
    try:
        return get_tasks_credentials(account)
    except FileNotFoundError as e:
        raise AuthenticationError(str(e)) from e
    except Exception as e:
        raise AuthenticationError(
            f"Failed to obtain Tasks credentials: {e}. Run `gtasks-mcp auth --account {account}`."
        ) from e


def get_tasks_client(account: str = "default") -> TasksClient:
    """Build a client for one request.

    httplib2 connections are not thread-safe, so each client gets its own
    discovery resource and HTTP transport; only the credentials are shared.
    """
    creds = _load_credentials(account)
    return TasksClient(build("tasks", "v1", credentials=creds, cache_discovery=False))
