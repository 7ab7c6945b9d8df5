"""
Token codec: sign and verify the session credential (an HS256 JWT).

The credential carries exactly five identity claims plus ``iat``/``exp``:

    {uid, email, emailVerified, role, department}

It is minted by ``/login`` after an external identity front-end has already
verified the user, and travels back in the ``token`` cookie. There is no
revocation list: a credential dies when it expires or the secret rotates.

The codec never touches storage; re-checking the account is the session
resolver's job (``lupulse.security.auth``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Raised when a credential cannot be trusted. Do not log the token."""


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by a credential."""

    uid: str | None
    email: str
    email_verified: bool
    role: str | None
    department: str | None

    def to_dict(self) -> dict[str, Any]:
        """Return the claims under their wire names."""
        return {
            "uid": self.uid,
            "email": self.email,
            "emailVerified": self.email_verified,
            "role": self.role,
            "department": self.department,
        }


def _extract_claims(payload: dict[str, Any]) -> TokenClaims:
    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise InvalidTokenError("Invalid token: missing email")

    uid = payload.get("uid")
    role = payload.get("role")
    department = payload.get("department")
    return TokenClaims(
        uid=str(uid) if uid is not None else None,
        email=email,
        email_verified=bool(payload.get("emailVerified", False)),
        role=str(role) if role is not None else None,
        department=str(department) if department is not None else None,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Issues and verifies credentials with a process-wide secret.

    ``clock`` stamps ``iat``/``exp`` at issuance and is the "now" that
    ``exp`` is checked against at verification, so one codec with a movable
    clock can observe a credential expiring.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("APP_JWT_SECRET must be set")
        if ttl_seconds <= 0:
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._algorithm = algorithm
        self._clock = clock or _utcnow

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, claims: TokenClaims) -> str:
        now = self._clock()
        payload = {
            **claims.to_dict(),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises InvalidTokenError for every failure (bad signature, malformed
        token, missing claims, expired); callers treat them all the same.
        """
        try:
            # Time claims are checked below against the codec clock, not wall time.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "email"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.info("Token invalid: %s", type(e).__name__)
            raise InvalidTokenError("Invalid token") from e

        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError("Invalid token: bad exp")
        if exp <= self._clock().timestamp():
            logger.info("Token expired")
            raise InvalidTokenError("Token expired")

        return _extract_claims(payload)
