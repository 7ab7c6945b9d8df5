"""
Pytest fixtures for the test suite.

Storage is an in-memory SQLite engine shared across threads (StaticPool), so
both direct data-layer tests and TestClient requests see the same database.
Each test gets a fresh engine.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lupulse.db.session import create_session_factory
from lupulse.main import create_app
from lupulse.media import CloudinaryClient, MediaConfig
from lupulse.models.security import User
from lupulse.security.tokens import TokenClaims, TokenCodec
from lupulse.settings import Settings

TEST_DB_URL = "sqlite://"
TEST_SECRET = "test-signing-secret-" + "x" * 32


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from lupulse.db.base import Base
    from lupulse.models import campus, security  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """
    Provide a Session bound to the test DB; roll back after each test.
    """
    connection = tables.connect()
    transaction = connection.begin()
    TestSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )
    session = TestSession()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def media_config():
    return MediaConfig(
        cloud_name="demo-cloud",
        api_key="api-key",
        api_secret="api-secret",
        folder="LuPulse",
        timeout_seconds=5,
    )


@pytest.fixture
def app(tables, codec, media_config):
    settings = Settings(jwt_secret=TEST_SECRET, db_url=TEST_DB_URL)
    return create_app(
        settings,
        engine=tables,
        session_factory=create_session_factory(tables),
        token_codec=codec,
        media_client=CloudinaryClient(media_config),
    )


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def add_user(app):
    """Insert a user straight into storage. Returns the stored email."""

    def _add(
        email: str,
        *,
        role: str | None = "user",
        department: str = "CSE",
        user_type: str = "student",
        full_name: str = "Test User",
    ) -> str:
        with app.state.session_factory() as db:
            db.add(
                User(
                    email=email,
                    full_name=full_name,
                    institutional_id=f"ID-{email.split('@')[0]}",
                    user_type=user_type,
                    department=department,
                    role=role,
                )
            )
            db.commit()
        return email

    return _add


@pytest.fixture
def login_as(client, codec):
    """Put a valid credential for `email` in the client's cookie jar."""

    def _login(email: str) -> None:
        token = codec.issue(
            TokenClaims(uid="uid-1", email=email, email_verified=True, role=None, department=None)
        )
        client.cookies.set("token", token)

    return _login


@pytest.fixture
def expired_codec():
    """Same secret as `codec`, but issues credentials that expired one second ago."""
    return TokenCodec(
        TEST_SECRET,
        clock=lambda: datetime.now(timezone.utc) - timedelta(hours=1, seconds=1),
    )
