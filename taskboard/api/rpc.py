from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from taskboard import __version__
from taskboard.config import Settings, load_settings
from taskboard.domain.errors import FieldError, NotFoundError, StoreError, ValidationError
from taskboard.infra.db import Database
from taskboard.infra.repository import TaskRepository
from taskboard.services.task_service import TaskService

from .schemas import DeleteResult, HealthStatus, TaskOut

logger = logging.getLogger(__name__)


class RpcError(Exception):
    def __init__(self, code: str, message: str, status_code: int) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


def healthcheck(service: TaskService, payload: Any) -> dict:
    health = HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))
    return health.model_dump(mode="json")


def create_task(service: TaskService, payload: Any) -> dict:
    return TaskOut.from_entity(service.create_task(payload)).model_dump(mode="json")


def get_tasks(service: TaskService, payload: Any) -> list[dict]:
    return [TaskOut.from_entity(task).model_dump(mode="json") for task in service.list_tasks(payload)]


def get_task_by_id(service: TaskService, payload: Any) -> Optional[dict]:
    task = service.get_task(payload)
    return TaskOut.from_entity(task).model_dump(mode="json") if task else None


def update_task(service: TaskService, payload: Any) -> dict:
    return TaskOut.from_entity(service.update_task(payload)).model_dump(mode="json")


def delete_task(service: TaskService, payload: Any) -> dict:
    return DeleteResult(**service.delete_task(payload)).model_dump(mode="json")


PROCEDURES: dict[str, Callable[[TaskService, Any], Any]] = {
    "healthcheck": healthcheck,
    "createTask": create_task,
    "getTasks": get_tasks,
    "getTaskById": get_task_by_id,
    "updateTask": update_task,
    "deleteTask": delete_task,
}


def _error(
    status_code: int, code: str, message: str, fields: list[FieldError] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "fields": [item.as_dict() for item in fields or []],
            }
        },
    )


async def _read_input(request: Request) -> Any:
    try:
        if request.method == "GET":
            raw = request.query_params.get("input", "")
        else:
            raw = (await request.body()).decode("utf-8")
        if not raw.strip():
            return None
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RpcError(
            "PARSE_ERROR", f"Malformed JSON input: {exc.msg}", status.HTTP_400_BAD_REQUEST
        ) from exc
    except UnicodeDecodeError as exc:
        raise RpcError(
            "PARSE_ERROR", "Request body is not valid UTF-8", status.HTTP_400_BAD_REQUEST
        ) from exc


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or load_settings()
    owns_database = database is None
    if database is None:
        database = Database(settings.require_database_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Taskboard RPC server")
        database.init(create_schema=settings.auto_create_schema)
        yield
        logger.info("Shutting down Taskboard RPC server")
        if owns_database:
            database.dispose()

    app = FastAPI(
        title="Taskboard",
        version=__version__,
        description="Task tracking RPC API",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.service = TaskService(TaskRepository(database))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.api_route("/rpc/{procedure}", methods=["GET", "POST"], tags=["RPC"])
    async def rpc(procedure: str, request: Request) -> JSONResponse:
        try:
            handler = PROCEDURES.get(procedure)
            if handler is None:
                raise RpcError(
                    "METHOD_NOT_FOUND",
                    f"Unknown procedure '{procedure}'",
                    status.HTTP_404_NOT_FOUND,
                )
            payload = await _read_input(request)
            data = await run_in_threadpool(handler, request.app.state.service, payload)
        except RpcError as exc:
            return _error(exc.status_code, exc.code, exc.message)
        except ValidationError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(exc), exc.errors)
        except NotFoundError as exc:
            return _error(status.HTTP_404_NOT_FOUND, "NOT_FOUND", str(exc))
        except StoreError as exc:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR", str(exc))
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected error in procedure %s", procedure)
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_SERVER_ERROR",
                "An unexpected error occurred",
            )
        return JSONResponse(content={"result": {"data": data}})

    return app
