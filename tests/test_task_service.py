from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from taskboard.domain.entities import TaskChanges, TaskDraft, TaskEntity
from taskboard.domain.enums import SortField, TaskStatus
from taskboard.domain.errors import NotFoundError, ValidationError
from taskboard.domain.filters import TaskQuery
from taskboard.services.task_service import TaskService


class FakeRepo:
    def __init__(self) -> None:
        self.tasks: list[TaskEntity] = []
        self.calls: list[str] = []
        self.last_query: TaskQuery | None = None
        self._id = 1

    def list_tasks(self, query: TaskQuery) -> list[TaskEntity]:
        self.calls.append("list_tasks")
        self.last_query = query
        return self.tasks

    def get_task(self, task_id: int) -> TaskEntity | None:
        self.calls.append("get_task")
        return next((t for t in self.tasks if t.id == task_id), None)

    def create_task(self, draft: TaskDraft) -> TaskEntity:
        self.calls.append("create_task")
        now = datetime(2024, 1, 1, 9, 0)
        task = TaskEntity(
            id=self._id,
            title=draft.title,
            description=draft.description,
            due_date=draft.due_date,
            status=draft.status,
            created_at=now,
            updated_at=now,
        )
        self.tasks.append(task)
        self._id += 1
        return task

    def update_task(self, task_id: int, changes: TaskChanges) -> TaskEntity:
        self.calls.append("update_task")
        task = next((t for t in self.tasks if t.id == task_id), None)
        if not task:
            raise NotFoundError(task_id)
        updated = replace(task, **changes.as_dict(), updated_at=datetime(2024, 1, 2))
        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    def delete_task(self, task_id: int) -> None:
        self.calls.append("delete_task")
        if not any(t.id == task_id for t in self.tasks):
            raise NotFoundError(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]


@pytest.fixture
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def fake_service(fake_repo: FakeRepo) -> TaskService:
    return TaskService(fake_repo)


def test_invalid_create_never_reaches_repository(fake_service, fake_repo) -> None:
    with pytest.raises(ValidationError):
        fake_service.create_task({"title": "", "due_date": "2024-01-10"})

    assert fake_repo.calls == []


def test_invalid_update_never_reaches_repository(fake_service, fake_repo) -> None:
    with pytest.raises(ValidationError):
        fake_service.update_task({"id": 1, "status": "done"})

    assert fake_repo.calls == []


def test_invalid_query_never_reaches_repository(fake_service, fake_repo) -> None:
    with pytest.raises(ValidationError):
        fake_service.list_tasks({"sortDirection": "sideways"})

    assert fake_repo.calls == []


def test_create_task_passes_validated_draft(fake_service, fake_repo) -> None:
    task = fake_service.create_task({"title": "Plan sprint", "due_date": "2024-01-10"})

    assert task.status == TaskStatus.PENDING
    assert task.due_date == datetime(2024, 1, 10)
    assert fake_repo.calls == ["create_task"]


def test_list_tasks_passes_query(fake_service, fake_repo) -> None:
    fake_service.list_tasks({"status": "in_progress", "sortBy": "title"})

    assert fake_repo.last_query == TaskQuery(
        status=TaskStatus.IN_PROGRESS, sort_by=SortField.TITLE
    )


def test_get_task_returns_none_for_missing(fake_service) -> None:
    assert fake_service.get_task({"id": 42}) is None


def test_update_task_applies_only_sent_fields(fake_service) -> None:
    created = fake_service.create_task(
        {"title": "Original", "description": "Keep", "due_date": "2024-01-10"}
    )

    updated = fake_service.update_task({"id": created.id, "status": "completed"})

    assert updated.status == TaskStatus.COMPLETED
    assert updated.title == "Original"
    assert updated.description == "Keep"


def test_delete_task_acknowledges_success(fake_service) -> None:
    created = fake_service.create_task({"title": "Temp", "due_date": "2024-01-10"})

    assert fake_service.delete_task({"id": created.id}) == {"success": True}
    assert fake_service.get_task({"id": created.id}) is None


def test_delete_missing_task_propagates_not_found(fake_service) -> None:
    with pytest.raises(NotFoundError):
        fake_service.delete_task({"id": 7})
