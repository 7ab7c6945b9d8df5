from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lupulse.db.session import get_db
from lupulse.errors import Conflict, Forbidden, NotFound
from lupulse.models.security import User
from lupulse.schemas.common import MessageOut
from lupulse.schemas.security import LoginIn, LoginOut, SignupIn, SignupOut, UserOut
from lupulse.security.auth import load_user
from lupulse.security.config import SecurityConfig
from lupulse.security.context import Role, normalize_email
from lupulse.security.dependencies import get_security_config, get_token_codec
from lupulse.security.roles import normalize_role
from lupulse.security.tokens import TokenClaims, TokenCodec
from lupulse.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


def _cookie_options(request: Request) -> dict[str, object]:
    # Cross-site frontends in production need SameSite=None, which browsers only accept with Secure.
    settings: Settings = request.app.state.settings
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none"}
    return {"httponly": True, "secure": False, "samesite": "lax"}


@router.post("/signup", response_model=SignupOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, db: Session = Depends(get_db)) -> SignupOut:
    email = normalize_email(payload.email)
    if load_user(db, email) is not None:
        raise Conflict("User already exists")

    user = User(
        email=email,
        full_name=payload.full_name,
        institutional_id=payload.institutional_id,
        user_type=payload.user_type,
        department=payload.department,
        designation=payload.designation,
        image=payload.image,
        role=Role.USER.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent signup for the same email won the insert.
        db.rollback()
        raise Conflict("User already exists") from None
    db.refresh(user)

    logger.info("Registered user email=%s type=%s department=%s", user.email, user.user_type, user.department)
    return SignupOut(message="User registered successfully", user=UserOut.model_validate(user))


@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    config: SecurityConfig = Depends(get_security_config),
) -> LoginOut:
    """
    Mint the session credential for an identity the front-end has already verified.

    No password is checked here; `emailVerified` must be true in the payload.
    """

    user = load_user(db, payload.email)
    if user is None:
        raise NotFound("User not found")

    if not payload.email_verified:
        raise Forbidden("Email is not verified. Please verify your email before logging in.")

    token = codec.issue(
        TokenClaims(
            uid=payload.uid,
            email=user.email,
            email_verified=True,
            role=normalize_role(user.role).value,
            department=user.department,
        )
    )
    response.set_cookie(
        config.auth.cookie_name,
        token,
        max_age=codec.ttl_seconds,
        **_cookie_options(request),
    )

    logger.info("Login email=%s", user.email)
    return LoginOut(message="Login successful", success=True)


@router.post("/logout", response_model=MessageOut)
def logout(
    request: Request,
    response: Response,
    config: SecurityConfig = Depends(get_security_config),
) -> MessageOut:
    response.delete_cookie(config.auth.cookie_name, **_cookie_options(request))
    return MessageOut(message="Logout successful")
