from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from taskboard.api.rpc import create_app
from taskboard.config import Settings
from taskboard.domain.entities import TaskDraft
from taskboard.domain.enums import TaskStatus
from taskboard.infra.db import Database
from taskboard.infra.repository import TaskRepository
from taskboard.services.task_service import TaskService


class FakeClock:
    """Returns a strictly increasing time, one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.init(create_schema=True)
    yield db
    db.drop_schema()
    db.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo(database: Database, clock: FakeClock) -> TaskRepository:
    return TaskRepository(database, clock=clock)


@pytest.fixture
def service(repo: TaskRepository) -> TaskService:
    return TaskService(repo)


@pytest.fixture
def client(database: Database):
    app = create_app(Settings(), database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_task(repo: TaskRepository):
    def _make(
        title: str = "Task",
        due_date: datetime = datetime(2024, 1, 10),
        status: TaskStatus = TaskStatus.PENDING,
        description: str | None = None,
    ):
        return repo.create_task(
            TaskDraft(title=title, due_date=due_date, status=status, description=description)
        )

    return _make
