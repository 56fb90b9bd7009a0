from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.domain.entities import UNSET, TaskChanges, TaskDraft, TaskEntity
from taskboard.domain.enums import SortDirection, SortField, TaskStatus
from taskboard.domain.filters import TaskQuery

# Ids travel as JSON integers and must fit the INTEGER primary key column.
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1
TaskId = Annotated[int, Field(strict=True, ge=ID_MIN, le=ID_MAX)]


def coerce_datetime(value: Any) -> Any:
    """Accept plain dates and date-only strings where a datetime is expected."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return datetime.combine(date.fromisoformat(value.strip()), time.min)
        except ValueError:
            return value
    return value


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class CreateTaskInput(BaseModel):
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def due_date_coerce(cls, v: Any) -> Any:
        return coerce_datetime(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    def to_draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            status=self.status,
        )


class UpdateTaskInput(BaseModel):
    """All fields except ``id`` are optional; only the ones sent are changed."""

    id: TaskId
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "due_date", "status", mode="before")
    @classmethod
    def not_null_when_present(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Title is required")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def due_date_coerce(cls, v: Any) -> Any:
        return coerce_datetime(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    def to_changes(self) -> TaskChanges:
        provided = self.model_fields_set
        return TaskChanges(
            title=self.title if "title" in provided else UNSET,
            description=self.description if "description" in provided else UNSET,
            due_date=self.due_date if "due_date" in provided else UNSET,
            status=self.status if "status" in provided else UNSET,
        )


class GetTasksQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[TaskStatus] = None
    sort_by: SortField = Field(SortField.DUE_DATE, alias="sortBy")
    sort_direction: SortDirection = Field(SortDirection.ASC, alias="sortDirection")

    def to_query(self) -> TaskQuery:
        return TaskQuery(
            status=self.status,
            sort_by=self.sort_by,
            sort_direction=self.sort_direction,
        )


class TaskIdInput(BaseModel):
    id: TaskId


class TaskOut(BaseModel):
    """Schema for returning a task"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str]
    due_date: datetime
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, task: TaskEntity) -> TaskOut:
        return cls.model_validate(task)


class DeleteResult(BaseModel):
    success: bool


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
