from __future__ import annotations

import pytest

from taskboard.config import Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "pytest")
    for name in (
        "DATABASE_URL",
        "LOG_LEVEL",
        "SERVER_PORT",
        "CORS_ORIGINS",
        "RPC_URL",
        "AUTO_CREATE_SCHEMA",
    ):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_load_settings_reads_environment(clean_env) -> None:
    clean_env.setenv("DATABASE_URL", "sqlite:///tasks.db")
    clean_env.setenv("SERVER_PORT", "8080")
    clean_env.setenv("CORS_ORIGINS", "http://localhost:3000, http://localhost:5173")
    clean_env.setenv("RPC_URL", "http://localhost:8080/")
    clean_env.setenv("AUTO_CREATE_SCHEMA", "true")

    settings = load_settings()

    assert settings.database_url == "sqlite:///tasks.db"
    assert settings.server_port == 8080
    assert settings.cors_origins == ("http://localhost:3000", "http://localhost:5173")
    assert settings.rpc_url == "http://localhost:8080"
    assert settings.auto_create_schema is True


def test_load_settings_reads_env_file(clean_env, tmp_path) -> None:
    (tmp_path / ".env").write_text("DATABASE_URL=sqlite:///from-file.db\nLOG_LEVEL=DEBUG\n")

    settings = load_settings()

    assert settings.database_url == "sqlite:///from-file.db"
    assert settings.log_level == "DEBUG"


def test_require_database_url() -> None:
    with pytest.raises(RuntimeError, match="DATABASE_URL is not set"):
        Settings().require_database_url()

    assert Settings(database_url="sqlite://").require_database_url() == "sqlite://"
