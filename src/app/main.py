from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from infra.db import create_engine, create_session_factory, wait_for_db
from src.app.api.v1.ingestion import router as ingestion_router
from src.config import Settings, get_settings, setup_logging

logger = logging.getLogger("csv_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # startup: движок живёт ровно столько, сколько приложение
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    await wait_for_db(engine)

    yield

    # shutdown
    await engine.dispose()
    logger.info("DB engine disposed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, component="api")

    app = FastAPI(title="CSV Ingestion API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(ingestion_router)

    @app.get("/api/v1/health", tags=["system"])
    async def healthcheck() -> dict:
        return {"status": "ok", "env": settings.app_env}

    return app


app = create_app()
