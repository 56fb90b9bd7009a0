from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from taskboard.domain.entities import UNSET, TaskChanges, TaskEntity
from taskboard.domain.enums import SortDirection, SortField, TaskStatus

STATUS_LABELS = {
    TaskStatus.PENDING: "Очікує",
    TaskStatus.IN_PROGRESS: "У роботі",
    TaskStatus.COMPLETED: "Виконано",
}

STATUS_COLORS = {
    TaskStatus.PENDING: "#E0B25B",
    TaskStatus.IN_PROGRESS: "#2563EB",
    TaskStatus.COMPLETED: "#7CC4A1",
}

SORT_LABELS = {
    SortField.DUE_DATE: "Дедлайн",
    SortField.CREATED_AT: "Дата створення",
    SortField.TITLE: "Назва",
}

DIRECTION_LABELS = {
    SortDirection.ASC: "За зростанням",
    SortDirection.DESC: "За спаданням",
}

BOARD_ORDER = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_overdue(task: TaskEntity, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    return task.status != TaskStatus.COMPLETED and task.due_date < now


def group_by_status(tasks: Iterable[TaskEntity]) -> dict[TaskStatus, list[TaskEntity]]:
    columns: dict[TaskStatus, list[TaskEntity]] = {status: [] for status in BOARD_ORDER}
    for task in tasks:
        columns[task.status].append(task)
    return columns


def format_due(value: datetime) -> str:
    value = to_local(value)
    if value.hour == 0 and value.minute == 0:
        return value.strftime("%d.%m.%Y")
    return value.strftime("%d.%m.%Y %H:%M")


def replace_task(tasks: list[TaskEntity], updated: TaskEntity) -> list[TaskEntity]:
    return [updated if task.id == updated.id else task for task in tasks]


def remove_task(tasks: list[TaskEntity], task_id: int) -> list[TaskEntity]:
    return [task for task in tasks if task.id != task_id]


def merge_task(
    tasks: list[TaskEntity], task: TaskEntity, status_filter: Optional[TaskStatus] = None
) -> list[TaskEntity]:
    """Put a created or updated task into the visible list, honouring the status filter."""
    if status_filter is not None and task.status != status_filter:
        return remove_task(tasks, task.id)
    if any(existing.id == task.id for existing in tasks):
        return replace_task(tasks, task)
    return [*tasks, task]


def edited_fields(
    task: TaskEntity,
    title: str,
    description: Optional[str],
    due_date: datetime,
    status: TaskStatus,
) -> TaskChanges:
    """Only the fields that differ from ``task``.

    Form inputs arrive stripped and minute-precise, so the stored values are
    normalised the same way before comparing.
    """
    original_title = task.title.strip()
    original_description = (task.description or "").strip() or None
    original_due = task.due_date.replace(second=0, microsecond=0)
    return TaskChanges(
        title=title if title != original_title else UNSET,
        description=description if description != original_description else UNSET,
        due_date=(
            due_date if due_date.replace(second=0, microsecond=0) != original_due else UNSET
        ),
        status=status if status != task.status else UNSET,
    )


def to_local(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def drag_text(task_id: int) -> str:
    return f"task:{task_id}"


def task_id_from_drag_text(text: str) -> int | None:
    if not text.startswith("task:"):
        return None
    try:
        return int(text.split(":", 1)[1])
    except ValueError:
        return None
