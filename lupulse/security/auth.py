"""
Session resolver: credential -> claims -> IdentityContext.

Each step is a plain function so the chain can be tested without an HTTP
harness. ``authenticate`` composes them:

    missing cookie            -> Unauthenticated   (401)
    signature/expiry failure  -> InvalidCredential (403)
    no user for the email     -> IdentityNotFound  (404)
"""

from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from lupulse.errors import IdentityNotFound, InvalidCredential, Unauthenticated
from lupulse.models.security import User
from lupulse.security.config import SecurityConfig
from lupulse.security.context import IdentityContext, normalize_email
from lupulse.security.roles import normalize_role
from lupulse.security.tokens import InvalidTokenError, TokenClaims, TokenCodec

logger = logging.getLogger(__name__)


def extract_token(request: Request, config: SecurityConfig) -> str | None:
    """Return the raw credential from the session cookie, or None when absent."""

    cookie_name = config.auth.cookie_name
    token = request.cookies.get(cookie_name)
    if not token:
        logger.info("Missing %s cookie (auth required) path=%s method=%s", cookie_name, request.url.path, request.method)
        return None
    return token


def decode_credential(codec: TokenCodec, token: str) -> TokenClaims:
    try:
        return codec.verify(token)
    except InvalidTokenError as exc:
        raise InvalidCredential() from exc


def load_user(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()


def load_identity(db: Session, claims: TokenClaims) -> IdentityContext:
    """
    Re-read the account behind a verified credential.

    Guards against deleted accounts holding a still-valid token. Role, department
    and user type always come from the stored record, never from the claims.
    """

    user = load_user(db, claims.email)
    if user is None:
        logger.info("Credential references unknown user email=%s", claims.email)
        raise IdentityNotFound()

    return IdentityContext(
        email=user.email,
        role=normalize_role(user.role),
        department=user.department,
        user_type=user.user_type,
    )


def authenticate(db: Session, codec: TokenCodec, token: str | None) -> IdentityContext:
    if not token:
        raise Unauthenticated()
    claims = decode_credential(codec, token)
    return load_identity(db, claims)
