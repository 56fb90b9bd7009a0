from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional

from .enums import TaskStatus


class _Unset:
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class TaskEntity:
    id: int
    title: str
    description: Optional[str]
    due_date: datetime
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TaskDraft:
    title: str
    due_date: datetime
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING


@dataclass(frozen=True)
class TaskChanges:
    """Partial update of a task.

    Fields left as ``UNSET`` are not touched. ``description=None`` clears the
    description, which is different from leaving it ``UNSET``.
    """

    title: str = field(default=UNSET)
    description: Optional[str] = field(default=UNSET)
    due_date: datetime = field(default=UNSET)
    status: TaskStatus = field(default=UNSET)

    def as_dict(self) -> dict[str, Any]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.as_dict()
