from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from lupulse.db.init_db import init_db
from lupulse.db.session import create_db_engine, create_session_factory
from lupulse.errors import install_error_handlers
from lupulse.logging_config import configure_app_logging
from lupulse.media import CloudinaryClient, MediaConfig
from lupulse.routers import events, health, media, notices, session, users
from lupulse.security.config import load_security_config
from lupulse.security.dependencies import enforce_security
from lupulse.security.tokens import TokenCodec
from lupulse.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    session_factory: sessionmaker[Session] | None = None,
    token_codec: TokenCodec | None = None,
    media_client: CloudinaryClient | None = None,
) -> FastAPI:
    """
    Build the application with explicitly constructed collaborators.

    Anything not passed in is built from `settings`; tests pass an in-memory
    engine/session factory and a codec with a known secret.
    """

    settings = settings or get_settings()
    owns_engine = engine is None
    engine = engine or create_db_engine(settings.resolved_db_url())
    session_factory = session_factory or create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning environment=%s", settings.environment)

        init_db(engine, session_factory, settings.bootstrap_superadmin)
        logger.info("Database initialized (tables ensured)")

        yield
        # Injected engines belong to the caller.
        if owns_engine:
            engine.dispose()

    # Global dependency: every route goes through the configured security rules.
    app = FastAPI(title="LuPulse API", dependencies=[Depends(enforce_security)], lifespan=lifespan)

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.security_config = load_security_config(settings.resolved_security_config_path())
    app.state.token_codec = token_codec or TokenCodec(settings.jwt_secret, ttl_seconds=settings.token_ttl_seconds)
    app.state.media_client = media_client or CloudinaryClient(MediaConfig.from_settings(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(users.router)
    app.include_router(events.router)
    app.include_router(notices.router)
    app.include_router(media.router)

    return app
