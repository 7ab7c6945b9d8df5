"""
Authorization gate.

Three stackable checks, applied after the session resolver produced an
IdentityContext:

    require_authenticated  -> any identity
    require_admin          -> admin or superadmin
    require_superadmin     -> superadmin only

plus the ownership exception used inline by self-or-admin handlers.
"""

from __future__ import annotations

import logging

from lupulse.errors import Forbidden, Unauthenticated
from lupulse.security.context import IdentityContext, Role

logger = logging.getLogger(__name__)

_FORBIDDEN_MESSAGES = {
    Role.ADMIN: "Forbidden: Admin access required!",
    Role.SUPERADMIN: "Forbidden: Superadmin access required!",
}


def normalize_role(value: object) -> Role:
    """
    Map a stored role value onto the hierarchy.

    Missing roles resolve to `user`; so do unrecognised values (fail closed).
    """

    if isinstance(value, Role):
        return value
    if value is None or value == "":
        return Role.USER
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown stored role %r; treating as 'user'", value)
        return Role.USER


def require_authenticated(identity: IdentityContext | None) -> IdentityContext:
    if identity is None:
        raise Unauthenticated()
    return identity


def require_role(identity: IdentityContext | None, minimum: Role) -> IdentityContext:
    identity = require_authenticated(identity)
    if not identity.role.at_least(minimum):
        logger.info("Role check failed email=%s role=%s required=%s", identity.email, identity.role.value, minimum.value)
        raise Forbidden(_FORBIDDEN_MESSAGES.get(minimum, "Forbidden"))
    return identity


def require_admin(identity: IdentityContext | None) -> IdentityContext:
    return require_role(identity, Role.ADMIN)


def require_superadmin(identity: IdentityContext | None) -> IdentityContext:
    return require_role(identity, Role.SUPERADMIN)


def require_self_or_admin(
    identity: IdentityContext | None,
    email: str,
    message: str = "Forbidden: You can only access your own data!",
) -> IdentityContext:
    """Pass when the caller targets their own record or is admin-or-above."""
    identity = require_authenticated(identity)
    if identity.owns(email) or identity.is_admin:
        return identity
    logger.info("Ownership check failed caller=%s target=%s", identity.email, email)
    raise Forbidden(message)
