import pytest
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError

from gtasks_mcp.auth import TokenStore, _token_key
from gtasks_mcp.config import get_settings
from gtasks_mcp.models.tasks import TaskItem, TaskListInfo, TaskPage
from gtasks_mcp.services.tasks import TasksClient, _load_credentials


# --- Canned API responses ---

TASKS_API_TASK = {
    "kind": "tasks#task",
    "id": "task123",
    "etag": '"etag-1"',
    "title": "Buy groceries",
    "notes": "Milk, eggs, bread",
    "status": "needsAction",
    "due": "2025-12-15T00:00:00.000Z",
    "updated": "2025-12-01T10:00:00.000Z",
    "selfLink": "https://www.googleapis.com/tasks/v1/lists/list1/tasks/task123",
    "position": "00000000000000000001",
    "hidden": False,
    "links": [],
}

TASKS_API_LISTS = {
    "kind": "tasks#taskLists",
    "items": [
        {"kind": "tasks#taskList", "id": "list1", "title": "My Tasks", "updated": "2025-12-01T10:00:00.000Z"},
        {"kind": "tasks#taskList", "id": "list2", "title": "Work", "updated": "2025-12-02T10:00:00.000Z"},
    ],
}

TASKS_API_PAGE = {
    "kind": "tasks#tasks",
    "items": [TASKS_API_TASK],
    "nextPageToken": "page2",
}

SAMPLE_LISTS = [
    TaskListInfo(id="list1", title="My Tasks"),
    TaskListInfo(id="list2", title="Work"),
    TaskListInfo(id="list3", title="Errands"),
]


def make_http_error(status: int) -> HttpError:
    resp = MagicMock()
    resp.status = status
    return HttpError(resp=resp, content=b"error")


def make_task(task_id: str, title: str | None = None, notes: str | None = None, **fields) -> TaskItem:
    return TaskItem(id=task_id, title=title, notes=notes, **fields)


def _has_tasks_token() -> bool:
    try:
        return TokenStore(get_settings().token_file).has_valid_token(_token_key("default"))
    except Exception:
        return False


requires_tasks = pytest.mark.skipif(not _has_tasks_token(), reason="No Google Tasks token in the token store")


@pytest.fixture(autouse=True)
def clear_caches():
    _load_credentials.cache_clear()
    get_settings.cache_clear()
    yield
    _load_credentials.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def mock_tasks_service():
    """Mocked googleapiclient Tasks v1 resource."""
    return MagicMock()


@pytest.fixture
def tasks_client(mock_tasks_service):
    return TasksClient(mock_tasks_service)


@pytest.fixture
def fake_client():
    """A TasksClient stand-in holding three lists with no tasks."""
    client = MagicMock(spec=TasksClient)
    client.list_task_lists.return_value = SAMPLE_LISTS
    client.list_tasks.return_value = TaskPage()
    return client


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from fastapi.testclient import TestClient

    from gtasks_mcp.main import api
    return TestClient(api)
