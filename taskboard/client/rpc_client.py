from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from taskboard.api.schemas import TaskOut
from taskboard.domain.entities import TaskChanges, TaskEntity
from taskboard.domain.enums import SortDirection, SortField, TaskStatus
from taskboard.domain.errors import (
    FieldError,
    NotFoundError,
    StoreError,
    TaskboardError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class RpcTransportError(TaskboardError):
    """The server could not be reached or answered with something other than an envelope."""


class RpcCallError(TaskboardError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def _encode(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in payload.items()
    }


def _to_entity(data: dict[str, Any]) -> TaskEntity:
    return TaskEntity(**TaskOut.model_validate(data).model_dump())


def _raise_for_error(error: dict[str, Any], payload: dict[str, Any]) -> None:
    code = error.get("code", "")
    message = error.get("message", "Request failed")
    if code == "BAD_REQUEST":
        fields = [FieldError(item["field"], item["message"]) for item in error.get("fields", [])]
        raise ValidationError(fields or [FieldError("input", message)])
    if code == "NOT_FOUND" and "id" in payload:
        raise NotFoundError(payload["id"])
    if code == "INTERNAL_SERVER_ERROR":
        raise StoreError(message)
    raise RpcCallError(code, message)


class TaskRpcClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:2022",
        timeout: float = 10.0,
        http: httpx.Client | None = None,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _call(self, procedure: str, payload: Optional[dict[str, Any]] = None) -> Any:
        payload = payload or {}
        try:
            response = self._http.post(f"/rpc/{procedure}", json=_encode(payload))
        except httpx.HTTPError as exc:
            logger.error("RPC %s failed: %s", procedure, exc)
            raise RpcTransportError(f"Cannot reach the task server: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise RpcTransportError(
                f"Unexpected response from the task server ({response.status_code})"
            ) from exc

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            _raise_for_error(body["error"], payload)
        if not isinstance(body, dict) or not isinstance(body.get("result"), dict):
            raise RpcTransportError(
                f"Unexpected response from the task server ({response.status_code})"
            )
        return body["result"].get("data")

    def healthcheck(self) -> dict[str, Any]:
        return self._call("healthcheck")

    def create_task(
        self,
        title: str,
        due_date: datetime,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> TaskEntity:
        payload: dict[str, Any] = {
            "title": title,
            "description": description,
            "due_date": due_date,
        }
        if status is not None:
            payload["status"] = status
        return _to_entity(self._call("createTask", payload))

    def get_tasks(
        self,
        status: Optional[TaskStatus] = None,
        sort_by: SortField = SortField.DUE_DATE,
        sort_direction: SortDirection = SortDirection.ASC,
    ) -> list[TaskEntity]:
        payload: dict[str, Any] = {"sortBy": sort_by, "sortDirection": sort_direction}
        if status is not None:
            payload["status"] = status
        return [_to_entity(item) for item in self._call("getTasks", payload)]

    def get_task_by_id(self, task_id: int) -> Optional[TaskEntity]:
        data = self._call("getTaskById", {"id": task_id})
        return _to_entity(data) if data is not None else None

    def update_task(self, task_id: int, changes: TaskChanges) -> TaskEntity:
        payload = {"id": task_id, **changes.as_dict()}
        return _to_entity(self._call("updateTask", payload))

    def delete_task(self, task_id: int) -> bool:
        return bool(self._call("deleteTask", {"id": task_id})["success"])
