from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def at_least(self, minimum: Role) -> bool:
        return self.rank >= minimum.rank


_ROLE_ORDER = (Role.USER, Role.ADMIN, Role.SUPERADMIN)


def normalize_email(email: str) -> str:
    """Single case-folding rule used for storing, looking up and comparing emails."""
    return email.strip().lower()


@dataclass(frozen=True)
class IdentityContext:
    """
    Per-request identity.

    Built from a verified credential plus a fresh read of the user record, so it
    reflects the account as it is *now* (a role change applies on the next request).
    Lives on `request.state.identity`; never persisted.
    """

    email: str
    role: Role
    department: str | None
    user_type: str | None

    @property
    def is_admin(self) -> bool:
        return self.role.at_least(Role.ADMIN)

    def owns(self, email: str) -> bool:
        return normalize_email(email) == normalize_email(self.email)
