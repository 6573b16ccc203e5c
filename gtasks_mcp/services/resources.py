from gtasks_mcp.config import get_settings
from gtasks_mcp.exceptions import TaskValidationError
from gtasks_mcp.models.tasks import TaskResource, TaskResourceContent, TaskResourceList
from gtasks_mcp.services.aggregation import find_task, list_all_tasks
from gtasks_mcp.services.formatting import format_task_details
from gtasks_mcp.services.tasks import TasksClient

URI_PREFIX = "gtasks:///"


def task_uri(task_id: str) -> str:
    return f"{URI_PREFIX}{task_id}"


def task_id_from_uri(uri: str) -> str:
    if not uri.startswith(URI_PREFIX) or len(uri) == len(URI_PREFIX):
        raise TaskValidationError(f'Invalid task URI: "{uri}". Expected {URI_PREFIX}{{task_id}}.')
    return uri.removeprefix(URI_PREFIX)


def list_task_resources(client: TasksClient, cursor: str | None = None) -> TaskResourceList:
    """Enumerate tasks across all lists as resources, one small page at a time."""
    page = list_all_tasks(client, get_settings().resource_page_size, cursor)
    return TaskResourceList(
        resources=[TaskResource(uri=task_uri(task.id), name=task.title) for task in page.tasks],
        next_cursor=page.next_page_token,
    )


def read_task_resource(client: TasksClient, uri: str) -> TaskResourceContent:
    task = find_task(client, task_id_from_uri(uri))
    return TaskResourceContent(uri=uri, text=format_task_details(task))
