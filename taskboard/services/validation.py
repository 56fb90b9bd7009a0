from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from taskboard.api.schemas import CreateTaskInput, GetTasksQuery, TaskIdInput, UpdateTaskInput
from taskboard.domain.entities import TaskChanges, TaskDraft
from taskboard.domain.errors import FieldError, ValidationError
from taskboard.domain.filters import TaskQuery

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def _field_errors(exc: PydanticValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "input"
        message = error["msg"]
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        errors.append(FieldError(field, message))
    return errors


def _parse(model: type[ModelT], payload: Any) -> ModelT:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError.single("input", "Expected an object")
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors(exc)) from exc


def validate_create(payload: Any) -> TaskDraft:
    return _parse(CreateTaskInput, payload).to_draft()


def validate_update(payload: Any) -> tuple[int, TaskChanges]:
    data = _parse(UpdateTaskInput, payload)
    return data.id, data.to_changes()


def validate_query(payload: Any) -> TaskQuery:
    return _parse(GetTasksQuery, payload).to_query()


def validate_get(payload: Any) -> int:
    return _parse(TaskIdInput, payload).id


def validate_delete(payload: Any) -> int:
    return _parse(TaskIdInput, payload).id
