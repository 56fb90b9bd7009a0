from __future__ import annotations

import logging

import uvicorn

from taskboard.api.rpc import create_app
from taskboard.config import load_settings
from taskboard.infra.db import Database
from taskboard.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    setup_logging(settings, "server.log")
    database = Database(settings.require_database_url())
    app = create_app(settings, database)
    logger.info("RPC server listening on %s:%s", settings.server_host, settings.server_port)
    try:
        uvicorn.run(
            app,
            host=settings.server_host,
            port=settings.server_port,
            log_config=None,
        )
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
