from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # one shared connection, otherwise every thread sees its own empty database
        options["poolclass"] = StaticPool
    return options


class Database:
    """Store handle owned by the process and passed to the repository."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.url = database_url
        self.engine: Engine = create_engine(
            database_url, echo=echo, **_engine_options(database_url)
        )
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    def session(self) -> Session:
        return self._session_factory()

    def init(self, create_schema: bool = False) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        if create_schema:
            # Importing models registers the tasks table on Base.metadata.
            from . import models  # noqa: F401

            Base.metadata.create_all(bind=self.engine)
            logger.info("Database schema created")

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
