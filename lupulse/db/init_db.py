from __future__ import annotations

import logging

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from lupulse.db.base import Base
from lupulse.models import campus as _campus  # noqa: F401  (register tables)
from lupulse.models import security as _security  # noqa: F401  (register tables)
from lupulse.security.auth import load_user
from lupulse.security.context import Role

logger = logging.getLogger(__name__)


def init_db(engine: Engine, session_factory: sessionmaker[Session], bootstrap_superadmin: str | None = None) -> None:
    """
    Create tables and, optionally, promote the bootstrap superadmin.

    There is no endpoint that creates a superadmin, so the first one is named in
    `APP_BOOTSTRAP_SUPERADMIN`. The account must already exist (signed up).
    """

    Base.metadata.create_all(bind=engine)

    if not bootstrap_superadmin:
        return

    with session_factory() as db:
        _promote_superadmin(db, bootstrap_superadmin)


def _promote_superadmin(db: Session, email: str) -> None:
    user = load_user(db, email)
    if user is None:
        logger.warning("Bootstrap superadmin %s has not signed up yet; skipping", email)
        return
    if user.role == Role.SUPERADMIN.value:
        return

    user.role = Role.SUPERADMIN.value
    db.commit()
    logger.info("Promoted bootstrap superadmin email=%s", user.email)
