from __future__ import annotations

from dataclasses import dataclass


class TaskboardError(Exception):
    """Base class for errors surfaced to callers."""


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationError(TaskboardError):
    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(
            "; ".join(f"{error.field}: {error.message}" for error in self.errors)
            or "Invalid input"
        )

    @classmethod
    def single(cls, field: str, message: str) -> ValidationError:
        return cls([FieldError(field, message)])


class NotFoundError(TaskboardError):
    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")


class StoreError(TaskboardError):
    pass
