from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.domain.entities import TaskChanges, TaskDraft, TaskEntity
from taskboard.domain.enums import SortDirection, SortField, TaskStatus
from taskboard.domain.errors import NotFoundError, StoreError, ValidationError
from taskboard.domain.filters import TaskQuery

from .db import Database
from .models import TaskModel, utcnow

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    SortField.DUE_DATE: TaskModel.due_date,
    SortField.CREATED_AT: TaskModel.created_at,
    SortField.TITLE: TaskModel.title,
}


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        due_date=model.due_date,
        status=TaskStatus(model.status),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _apply_query(stmt, query: TaskQuery):
    if query.status is not None:
        stmt = stmt.where(TaskModel.status == query.status)

    column = SORT_COLUMNS[query.sort_by]
    ordering = column.desc() if query.sort_direction == SortDirection.DESC else column.asc()
    return stmt.order_by(ordering, TaskModel.id.asc())


class TaskRepository:
    def __init__(self, database: Database, clock: Callable[[], datetime] = utcnow) -> None:
        self._db = database
        self._clock = clock

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        with self._db.session() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Failed to %s: %s", action, exc)
                raise StoreError(f"Failed to {action}") from exc

    def list_tasks(self, query: TaskQuery) -> list[TaskEntity]:
        with self._session("fetch tasks") as session:
            stmt = _apply_query(select(TaskModel), query)
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with self._session(f"fetch task {task_id}") as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create_task(self, draft: TaskDraft) -> TaskEntity:
        if not draft.title:
            raise ValidationError.single("title", "Title is required")

        now = self._clock()
        with self._session("create task") as session:
            task = TaskModel(
                title=draft.title,
                description=draft.description,
                due_date=draft.due_date,
                status=draft.status,
                created_at=now,
                updated_at=now,
            )
            session.add(task)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def update_task(self, task_id: int, changes: TaskChanges) -> TaskEntity:
        if changes.title == "":
            raise ValidationError.single("title", "Title is required")

        with self._session(f"update task {task_id}") as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError(task_id)

            for key, value in changes.as_dict().items():
                setattr(task, key, value)
            task.updated_at = max(self._clock(), task.created_at)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def delete_task(self, task_id: int) -> None:
        with self._session(f"delete task {task_id}") as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError(task_id)
            session.delete(task)
            session.commit()
