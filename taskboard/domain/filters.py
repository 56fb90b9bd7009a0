from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import SortDirection, SortField, TaskStatus


@dataclass(frozen=True)
class TaskQuery:
    status: Optional[TaskStatus] = None
    sort_by: SortField = SortField.DUE_DATE
    sort_direction: SortDirection = SortDirection.ASC
