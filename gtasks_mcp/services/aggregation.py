"""Cross-list reads.

The Tasks API only lists tasks one task list at a time. These helpers walk
every list the user owns, in the order the API returns them, one request
after another.
"""

import logging

from gtasks_mcp.exceptions import BACKEND_ERRORS, TaskNotFoundError
from gtasks_mcp.models.tasks import TaskItem, TaskPage
from gtasks_mcp.services.tasks import TasksClient

logger = logging.getLogger(__name__)

MAX_TASK_RESULTS = 100


def list_all_tasks(client: TasksClient, page_size: int, page_token: str | None = None) -> TaskPage:
    """Concatenate one page of tasks from every list.

    The same ``page_token`` is sent to every list, and the returned
    ``next_page_token`` is the last non-empty token any list reported. This
    is an approximation: a token minted by one list is not meaningful to
    another, and tokens from earlier lists are dropped.

    A list whose fetch fails is logged and skipped, so one broken list does
    not hide the others. Failing to fetch the lists themselves propagates.
    """
    task_lists = client.list_task_lists(MAX_TASK_RESULTS)

    tasks: list[TaskItem] = []
    next_page_token = None
    for task_list in task_lists:
        try:
            page = client.list_tasks(task_list.id, page_size, page_token)
        except BACKEND_ERRORS as e:
            logger.warning("Error fetching tasks for list %s: %s", task_list.id, e)
            continue
        tasks.extend(page.tasks)
        if page.next_page_token:
            next_page_token = page.next_page_token

    return TaskPage(tasks=tasks, next_page_token=next_page_token)


def find_task(client: TasksClient, task_id: str) -> TaskItem:
    """Locate a task by id without knowing its list.

    Lists are searched in order and the first one holding the task wins. A
    not-found answer moves on to the next list; any other backend error is
    raised as-is.
    """
    for task_list in client.list_task_lists(MAX_TASK_RESULTS):
        try:
            return client.get_task(task_list.id, task_id)
        except TaskNotFoundError:
            logger.debug("Task %s not in list %s", task_id, task_list.id)
    raise TaskNotFoundError(f"Task not found: {task_id}")
