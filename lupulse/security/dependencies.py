from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from lupulse.db.session import get_db
from lupulse.errors import Unauthenticated
from lupulse.security.auth import authenticate, extract_token
from lupulse.security.config import SecurityConfig
from lupulse.security.context import IdentityContext
from lupulse.security.roles import require_role
from lupulse.security.tokens import TokenCodec


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Was the app built with create_app()?")
    return config


def get_token_codec(request: Request) -> TokenCodec:
    codec = getattr(request.app.state, "token_codec", None)
    if codec is None:
        raise RuntimeError("Token codec not configured. Was the app built with create_app()?")
    return codec


def get_current_identity(request: Request) -> IdentityContext:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise Unauthenticated("Authentication required")
    return identity


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    codec: TokenCodec = Depends(get_token_codec),
    db: Session = Depends(get_db),
) -> None:
    """
    Global security dependency.

    Runs after routing for every path operation: looks up the route rule, and
    when the rule requires it, resolves the caller's identity and applies the
    role gate. Handlers read the result through `get_current_identity`.
    """

    rule = config.match(request.url.path, request.method)
    if not rule.auth_required:
        return

    token = extract_token(request, config)
    identity = authenticate(db, codec, token)
    request.state.identity = identity

    if rule.min_role is not None:
        require_role(identity, rule.min_role)
