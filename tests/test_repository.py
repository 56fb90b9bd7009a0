from __future__ import annotations

from datetime import datetime

import pytest

from taskboard.domain.entities import UNSET, TaskChanges, TaskDraft
from taskboard.domain.enums import SortDirection, SortField, TaskStatus
from taskboard.domain.errors import NotFoundError, StoreError, ValidationError
from taskboard.domain.filters import TaskQuery


def test_create_task_assigns_id_and_timestamps(repo) -> None:
    task = repo.create_task(TaskDraft(title="Write report", due_date=datetime(2024, 1, 10)))

    assert task.id > 0
    assert task.title == "Write report"
    assert task.status == TaskStatus.PENDING
    assert task.created_at == task.updated_at
    assert task.due_date == datetime(2024, 1, 10)


def test_create_task_keeps_given_status(make_task) -> None:
    task = make_task(status=TaskStatus.IN_PROGRESS)
    assert task.status == TaskStatus.IN_PROGRESS


def test_create_task_rejects_empty_title(repo) -> None:
    with pytest.raises(ValidationError) as exc_info:
        repo.create_task(TaskDraft(title="", due_date=datetime(2024, 1, 10)))
    assert exc_info.value.errors[0].field == "title"
    assert repo.list_tasks(TaskQuery()) == []


def test_ids_strictly_increase(make_task) -> None:
    ids = [make_task(title=f"Task {index}").id for index in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_ids_are_not_reused_after_delete(repo, make_task) -> None:
    make_task(title="First")
    last = make_task(title="Second")
    repo.delete_task(last.id)

    replacement = make_task(title="Third")

    assert replacement.id > last.id


def test_get_task_returns_none_when_missing(repo) -> None:
    assert repo.get_task(9999) is None


def test_null_description_round_trips_as_none(repo, make_task) -> None:
    without = make_task(title="No description", description=None)
    empty = make_task(title="Empty description", description="")

    assert repo.get_task(without.id).description is None
    assert repo.get_task(empty.id).description == ""


def test_update_without_status_keeps_status(repo, make_task) -> None:
    task = make_task(status=TaskStatus.IN_PROGRESS)

    updated = repo.update_task(task.id, TaskChanges(title="Renamed"))

    assert updated.title == "Renamed"
    assert updated.status == TaskStatus.IN_PROGRESS


def test_update_status_changes_only_status_and_updated_at(repo, make_task) -> None:
    task = make_task(title="Original", description="Keep me", due_date=datetime(2024, 2, 1))

    updated = repo.update_task(task.id, TaskChanges(status=TaskStatus.COMPLETED))

    assert updated.status == TaskStatus.COMPLETED
    assert updated.title == task.title
    assert updated.description == task.description
    assert updated.due_date == task.due_date
    assert updated.created_at == task.created_at
    assert updated.updated_at > task.updated_at


def test_update_all_fields(repo, make_task) -> None:
    task = make_task()

    updated = repo.update_task(
        task.id,
        TaskChanges(
            title="Updated Task Title",
            description="Updated description",
            due_date=datetime(2025, 1, 15),
            status=TaskStatus.IN_PROGRESS,
        ),
    )

    assert updated.id == task.id
    assert updated.title == "Updated Task Title"
    assert updated.description == "Updated description"
    assert updated.due_date == datetime(2025, 1, 15)
    assert updated.status == TaskStatus.IN_PROGRESS
    assert repo.get_task(task.id) == updated


def test_update_can_clear_description(repo, make_task) -> None:
    task = make_task(description="Initial description")

    cleared = repo.update_task(task.id, TaskChanges(description=None))
    untouched = repo.update_task(task.id, TaskChanges(description=UNSET, title="Still none"))

    assert cleared.description is None
    assert untouched.description is None


def test_update_with_no_fields_still_refreshes_updated_at(repo, make_task) -> None:
    task = make_task()

    updated = repo.update_task(task.id, TaskChanges())

    assert updated.updated_at > task.updated_at
    assert updated.updated_at >= updated.created_at


def test_update_missing_task_raises_not_found(repo) -> None:
    with pytest.raises(NotFoundError, match="Task with id 9999 not found"):
        repo.update_task(9999, TaskChanges(title="Nope"))


def test_update_deleted_task_raises_not_found(repo, make_task) -> None:
    task = make_task()
    repo.delete_task(task.id)

    with pytest.raises(NotFoundError):
        repo.update_task(task.id, TaskChanges(status=TaskStatus.COMPLETED))


def test_delete_then_get_returns_none(repo, make_task) -> None:
    task = make_task()

    repo.delete_task(task.id)

    assert repo.get_task(task.id) is None


def test_delete_missing_task_raises_not_found(repo) -> None:
    with pytest.raises(NotFoundError, match="Task with id 99999 not found"):
        repo.delete_task(99999)


def test_delete_leaves_other_tasks_untouched(repo, make_task) -> None:
    first = make_task(title="First", description="one")
    second = make_task(title="Second", status=TaskStatus.IN_PROGRESS)
    third = make_task(title="Third", description="three", status=TaskStatus.COMPLETED)

    repo.delete_task(second.id)

    remaining = repo.list_tasks(TaskQuery(sort_by=SortField.CREATED_AT))
    assert remaining == [first, third]


def test_list_tasks_empty(repo) -> None:
    assert repo.list_tasks(TaskQuery()) == []


def test_list_tasks_filters_by_status(repo, make_task) -> None:
    make_task(title="A", status=TaskStatus.PENDING)
    make_task(title="B", status=TaskStatus.IN_PROGRESS)
    make_task(title="C", status=TaskStatus.COMPLETED)
    make_task(title="D", status=TaskStatus.PENDING)

    pending = repo.list_tasks(TaskQuery(status=TaskStatus.PENDING))
    everything = repo.list_tasks(TaskQuery())

    assert {task.title for task in pending} == {"A", "D"}
    assert all(task.status == TaskStatus.PENDING for task in pending)
    assert len(everything) == 4


def test_list_tasks_sorts_by_title(repo, make_task) -> None:
    for title in ["banana", "Apple", "cherry", "apple"]:
        make_task(title=title)

    ascending = [t.title for t in repo.list_tasks(TaskQuery(sort_by=SortField.TITLE))]
    descending = [
        t.title
        for t in repo.list_tasks(
            TaskQuery(sort_by=SortField.TITLE, sort_direction=SortDirection.DESC)
        )
    ]

    assert ascending == sorted(ascending)
    assert ascending == ["Apple", "apple", "banana", "cherry"]
    assert descending == list(reversed(ascending))


def test_list_tasks_sorts_by_due_date_desc(repo, make_task) -> None:
    make_task(title="Middle", due_date=datetime(2024, 1, 15))
    make_task(title="Latest", due_date=datetime(2024, 1, 25))
    make_task(title="Earliest", due_date=datetime(2024, 1, 5))

    tasks = repo.list_tasks(
        TaskQuery(sort_by=SortField.DUE_DATE, sort_direction=SortDirection.DESC)
    )

    assert [task.title for task in tasks] == ["Latest", "Middle", "Earliest"]


def test_list_tasks_sorts_by_created_at(repo, make_task) -> None:
    created = [make_task(title=f"Task {index}") for index in range(3)]

    newest_first = repo.list_tasks(
        TaskQuery(sort_by=SortField.CREATED_AT, sort_direction=SortDirection.DESC)
    )

    assert [task.id for task in newest_first] == [task.id for task in reversed(created)]


def test_list_tasks_breaks_ties_by_id(repo, make_task) -> None:
    same_day = datetime(2024, 3, 1)
    ids = [make_task(title="Same", due_date=same_day).id for _ in range(3)]

    tasks = repo.list_tasks(TaskQuery(sort_by=SortField.DUE_DATE))

    assert [task.id for task in tasks] == ids


def test_filter_and_sort_compose(repo, make_task) -> None:
    make_task(title="Task 1", due_date=datetime(2024, 1, 20), status=TaskStatus.PENDING)
    make_task(title="Task 2", due_date=datetime(2024, 1, 15), status=TaskStatus.IN_PROGRESS)
    make_task(title="Task 3", due_date=datetime(2024, 1, 10), status=TaskStatus.COMPLETED)
    make_task(title="Task 4", due_date=datetime(2024, 1, 25), status=TaskStatus.PENDING)

    tasks = repo.list_tasks(
        TaskQuery(
            status=TaskStatus.PENDING,
            sort_by=SortField.DUE_DATE,
            sort_direction=SortDirection.ASC,
        )
    )

    assert [task.title for task in tasks] == ["Task 1", "Task 4"]
    assert tasks[0].due_date < tasks[1].due_date


def test_store_failure_raises_store_error(database, repo) -> None:
    database.drop_schema()

    with pytest.raises(StoreError, match="Failed to fetch tasks"):
        repo.list_tasks(TaskQuery())
