from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    log_level: str = "INFO"
    log_dir: str = "logs"
    server_host: str = "127.0.0.1"
    server_port: int = 2022
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    rpc_url: str = "http://127.0.0.1:2022"
    rpc_timeout: float = 10.0
    auto_create_schema: bool = False

    def require_database_url(self) -> str:
        if not self.database_url:
            raise RuntimeError(
                "DATABASE_URL is not set. Create a .env file with your connection string."
            )
        return self.database_url


def load_settings() -> Settings:
    load_env()
    return Settings(
        database_url=os.getenv("DATABASE_URL", "").strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        server_host=os.getenv("SERVER_HOST", "127.0.0.1"),
        server_port=int(os.getenv("SERVER_PORT", "2022")),
        cors_origins=_parse_list(os.getenv("CORS_ORIGINS", "*")),
        rpc_url=os.getenv("RPC_URL", "http://127.0.0.1:2022").rstrip("/"),
        rpc_timeout=float(os.getenv("RPC_TIMEOUT", "10")),
        auto_create_schema=_parse_bool(os.getenv("AUTO_CREATE_SCHEMA", "false")),
    )
