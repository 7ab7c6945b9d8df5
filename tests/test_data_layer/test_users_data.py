"""
Tests for user storage helpers and startup initialization.
"""
from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from lupulse.db.init_db import init_db
from lupulse.models.security import User
from lupulse.security.auth import load_user


def _user(email: str, role: str | None = "user") -> User:
    return User(
        email=email,
        full_name="Rafi Ahmed",
        institutional_id="0182210012101001",
        user_type="faculty",
        department="CSE",
        role=role,
    )


def test_load_user_is_case_insensitive(db_session):
    db_session.add(_user("rafi@uni.edu"))
    db_session.commit()

    loaded = load_user(db_session, "  Rafi@UNI.edu ")

    assert loaded is not None
    assert loaded.full_name == "Rafi Ahmed"
    assert loaded.created_at is not None


def test_load_user_returns_none_when_missing(db_session):
    assert load_user(db_session, "ghost@uni.edu") is None


def test_init_db_promotes_bootstrap_superadmin(engine):
    factory = sessionmaker(bind=engine)
    init_db(engine, factory)
    with factory() as db:
        db.add(_user("root@uni.edu"))
        db.commit()

    init_db(engine, factory, bootstrap_superadmin="Root@uni.edu")

    with factory() as db:
        assert db.get(User, "root@uni.edu").role == "superadmin"


def test_init_db_skips_unknown_bootstrap_superadmin(engine):
    factory = sessionmaker(bind=engine)
    init_db(engine, factory, bootstrap_superadmin="nobody@uni.edu")

    with factory() as db:
        assert db.get(User, "nobody@uni.edu") is None
