from __future__ import annotations

import logging
from typing import Any

from taskboard.domain.entities import TaskEntity
from taskboard.infra.repository import TaskRepository

from . import validation

logger = logging.getLogger(__name__)


class TaskService:
    """Runs each request through its validator before touching the repository."""

    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    def list_tasks(self, payload: Any = None) -> list[TaskEntity]:
        query = validation.validate_query(payload)
        return self._repo.list_tasks(query)

    def get_task(self, payload: Any) -> TaskEntity | None:
        task_id = validation.validate_get(payload)
        return self._repo.get_task(task_id)

    def create_task(self, payload: Any) -> TaskEntity:
        draft = validation.validate_create(payload)
        task = self._repo.create_task(draft)
        logger.info("Task %s created with status %s", task.id, task.status.value)
        return task

    def update_task(self, payload: Any) -> TaskEntity:
        task_id, changes = validation.validate_update(payload)
        task = self._repo.update_task(task_id, changes)
        logger.info("Task %s updated", task.id)
        return task

    def delete_task(self, payload: Any) -> dict[str, bool]:
        task_id = validation.validate_delete(payload)
        self._repo.delete_task(task_id)
        logger.info("Task %s deleted", task_id)
        return {"success": True}
