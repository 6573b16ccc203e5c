import pytest

from gtasks_mcp.models.tasks import TaskListInfo
from gtasks_mcp.services import aggregation, operations
from gtasks_mcp.services.tasks import get_tasks_client
from conftest import requires_tasks


@requires_tasks
class TestListTaskLists:
    def test_returns_list(self):
        lists = get_tasks_client().list_task_lists()
        # Every Google account has at least one default task list
        assert len(lists) >= 1
        assert isinstance(lists[0], TaskListInfo)
        assert lists[0].id


@requires_tasks
class TestTaskLifecycle:
    @pytest.fixture(autouse=True)
    def setup_task(self):
        self.client = get_tasks_client()
        self.task = self.client.insert_task("@default", {"title": "gtasks_mcp_test_task", "notes": "zebra-notes"})
        yield
        self.client.delete_task("@default", self.task.id)

    def test_found_across_lists(self):
        found = aggregation.find_task(self.client, self.task.id)
        assert found.title == "gtasks_mcp_test_task"

    def test_search_by_notes(self):
        result = operations.search_tasks(self.client, "ZEBRA-NOTES")
        assert self.task.id in result.text

    def test_update_due_and_status(self):
        operations.update_task(self.client, self.task.id, due="12/15/2025", status="completed")
        updated = self.client.get_task("@default", self.task.id)
        assert updated.due == "2025-12-15T00:00:00.000Z"
        assert updated.status == "completed"
