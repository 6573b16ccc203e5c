from gtasks_mcp.models.tasks import TaskItem


def format_task(task: TaskItem) -> str:
    """One-line summary used by the list and search tools."""
    return (
        f"{task.title}\n (Due: {task.due or 'Not set'}) - Notes: {task.notes} - ID: {task.id}"
        f" - Status: {task.status} - URI: {task.self_link} - Hidden: {task.hidden}"
        f" - Parent: {task.parent} - Deleted?: {task.deleted} - Completed Date: {task.completed}"
        f" - Position: {task.position} - Updated Date: {task.updated} - ETag: {task.etag}"
        f" - Links: {task.links} - Kind: {task.kind}"
    )


def format_task_list(tasks: list[TaskItem]) -> str:
    return "\n".join(format_task(task) for task in tasks)


def format_task_details(task: TaskItem) -> str:
    """Multi-line rendering for resource reads."""
    return "\n".join([
        f"Title: {task.title or 'No title'}",
        f"Status: {task.status or 'Unknown'}",
        f"Due: {task.due or 'Not set'}",
        f"Notes: {task.notes or 'No notes'}",
        f"Hidden: {task.hidden if task.hidden is not None else 'Unknown'}",
        f"Parent: {task.parent or 'Unknown'}",
        f"Deleted?: {task.deleted if task.deleted is not None else 'Unknown'}",
        f"Completed Date: {task.completed or 'Unknown'}",
        f"Position: {task.position or 'Unknown'}",
        f"ETag: {task.etag or 'Unknown'}",
        f"Links: {task.links or 'Unknown'}",
        f"Kind: {task.kind or 'Unknown'}",
        f"Updated: {task.updated or 'Unknown'}",
    ])


def matches_query(task: TaskItem, query: str) -> bool:
    """Case-insensitive substring match against title or notes."""
    needle = query.lower()
    return any(needle in field.lower() for field in (task.title, task.notes) if field)


def filter_tasks(tasks: list[TaskItem], query: str) -> list[TaskItem]:
    return [task for task in tasks if matches_query(task, query)]
