# src/authgateway/app/main.py
"""
Application factory.

Every collaborator (identity provider, repository, queue facade) can be
injected; anything not injected is built from Settings. One app instance per
worker process, so each worker owns its own broker connection.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from authgateway import __version__
from authgateway.app.api.routes.auth import router as auth_router
from authgateway.app.api.routes.health import router as health_router
from authgateway.app.core.config import Settings, load_settings
from authgateway.app.core.errors import register_error_handlers
from authgateway.app.core.logging import setup_logging
from authgateway.app.db.session import build_engine, build_sessionmaker, init_models
from authgateway.app.queue.client import AmqpQueueClient
from authgateway.app.queue.helper import QueueHelper
from authgateway.app.queue.service import QueueService
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.services.cognito import CognitoService
from authgateway.app.usecases.factory import UseCaseFactory

_log = logging.getLogger("authgateway.main")


def build_queue(settings: Settings) -> QueueHelper:
    client = AmqpQueueClient(settings.queue)
    return QueueHelper(QueueService(client, settings.queue.queues))


def create_app(
    settings: Optional[Settings] = None,
    *,
    identity: Optional[CognitoService] = None,
    repository: Optional[AuthRepository] = None,
    queue: Optional[QueueHelper] = None,
) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    engine = None
    if repository is None:
        engine = build_engine(settings.database_url)
        repository = AuthRepository(build_sessionmaker(engine))
    if identity is None:
        identity = CognitoService(settings.cognito)
    if queue is None:
        queue = build_queue(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None and settings.auto_create_tables:
            await init_models(engine)
            _log.info("database tables ensured")

        # a broker outage must not keep the worker from serving
        try:
            await queue.ensure_initialized()
        except Exception as exc:
            _log.error("queue not available at startup: %s", exc)

        yield

        try:
            if queue.is_connected:
                await queue.disconnect()
        except Exception as exc:
            _log.error("error disconnecting queue on shutdown: %s", exc)
        if engine is not None:
            await engine.dispose()
        _log.info("shutdown complete")

    app = FastAPI(title="Auth Gateway", version=__version__, lifespan=lifespan)
    register_error_handlers(app)

    app.state.settings = settings
    app.state.factory = UseCaseFactory(identity, repository, queue)
    app.state.queue = queue
    app.state.engine = engine

    app.include_router(health_router)
    app.include_router(auth_router)
    return app


__all__ = ["build_queue", "create_app"]
