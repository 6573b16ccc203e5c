from enum import Enum

from pydantic import BaseModel


class TaskStatus(str, Enum):
    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"


class TaskListInfo(BaseModel):
    id: str
    title: str
    updated: str | None = None


class TaskItem(BaseModel):
    id: str
    title: str | None = None
    notes: str | None = None
    status: str | None = None  # "needsAction" or "completed"
    due: str | None = None
    completed: str | None = None
    parent: str | None = None
    position: str | None = None
    hidden: bool | None = None
    deleted: bool | None = None
    updated: str | None = None
    etag: str | None = None
    links: list[dict] | None = None
    kind: str | None = None
    self_link: str | None = None


class TaskPage(BaseModel):
    tasks: list[TaskItem] = []
    next_page_token: str | None = None


class TaskResource(BaseModel):
    uri: str
    name: str | None = None
    mime_type: str = "text/plain"


class TaskResourceList(BaseModel):
    resources: list[TaskResource]
    next_cursor: str | None = None


class TaskResourceContent(BaseModel):
    uri: str
    mime_type: str = "text/plain"
    text: str


class ToolResult(BaseModel):
    text: str
    is_error: bool = False
    error: str | None = None


class CreateTaskRequest(BaseModel):
    title: str
    notes: str | None = None
    due: str | None = None


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    notes: str | None = None
    status: TaskStatus | None = None
    due: str | None = None


class ToolCallRequest(BaseModel):
    arguments: dict = {}
    account: str = "default"
