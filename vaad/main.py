"""Main application entry point: report API server."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vaad import __version__
from vaad.api.reports import router as reports_router
from vaad.services.config import AppConfig, load_config
from vaad.services.db import create_engine_for_url, create_schema, create_session_factory
from vaad.services.logging import parse_log_level, setup_server_logging

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Loaded configuration (default: load from environment)
        session_factory: Pre-built session factory; when given, no engine is created

    Returns:
        FastAPI app with the report router mounted
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if getattr(app.state, "session_factory", None) is None:
            engine = create_engine_for_url(config.database_url)
            await create_schema(engine)
            app.state.session_factory = create_session_factory(engine)
            logger.info("Database ready at %s", config.database_url)
        yield
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="Vaad Ledger",
        description="Building committee debts, balances and maintenance schedule",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory
    app.include_router(reports_router)
    return app


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Vaad Ledger report server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    args = parser.parse_args()

    config = load_config()
    root_level = parse_log_level(config.log_level)
    setup_server_logging(
        config.log_file,
        log_level=root_level,
        ledger_log_level=parse_log_level(config.ledger_log_level, default=root_level),
    )
    logger.info("Starting report server on %s:%d", args.host, args.port)

    uvicorn.run(create_app(config), host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
