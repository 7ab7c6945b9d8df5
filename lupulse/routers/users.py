from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from lupulse.db.session import get_db
from lupulse.errors import Conflict, Forbidden, NotFound
from lupulse.models.security import User
from lupulse.schemas.common import MessageOut
from lupulse.schemas.security import ProfileUpdateIn, UserOut, UserUpdateOut
from lupulse.security.auth import load_user
from lupulse.security.context import IdentityContext, Role
from lupulse.security.dependencies import get_current_identity
from lupulse.security.roles import normalize_role, require_self_or_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _get_user_or_404(db: Session, email: str) -> User:
    user = load_user(db, email)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)) -> list[User]:
    return list(db.scalars(select(User).order_by(User.created_at, User.email)).all())


@router.get("/{email}", response_model=UserOut)
def get_user(
    email: str,
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    require_self_or_admin(identity, email)
    return _get_user_or_404(db, email)


@router.patch("/{email}", response_model=UserUpdateOut)
def update_profile(
    email: str,
    payload: ProfileUpdateIn,
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> UserUpdateOut:
    require_self_or_admin(identity, email, "Forbidden: You can only update your own profile.")
    user = _get_user_or_404(db, email)

    user.full_name = payload.full_name
    user.designation = payload.designation
    if payload.image:
        user.image = payload.image
    db.commit()
    db.refresh(user)

    logger.info("Profile updated email=%s by=%s", user.email, identity.email)
    return UserUpdateOut(message="Profile updated successfully", user=UserOut.model_validate(user))


@router.patch("/{email}/role", response_model=MessageOut)
def promote_user(
    email: str,
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageOut:
    user = _get_user_or_404(db, email)
    if normalize_role(user.role).at_least(Role.ADMIN):
        raise Conflict("User is already an admin.")

    user.role = Role.ADMIN.value
    db.commit()

    logger.info("Promoted email=%s to admin by=%s", user.email, identity.email)
    return MessageOut(message="User promoted to admin successfully.")


@router.patch("/{email}/demote", response_model=MessageOut)
def demote_user(
    email: str,
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageOut:
    user = _get_user_or_404(db, email)
    role = normalize_role(user.role)
    if role is Role.SUPERADMIN:
        raise Forbidden("Forbidden: Superadmin accounts cannot be demoted.")
    if role is Role.USER:
        raise Conflict("User is not an admin.")

    user.role = Role.USER.value
    db.commit()

    logger.info("Demoted email=%s to user by=%s", user.email, identity.email)
    return MessageOut(message="User demoted to user successfully.")


@router.delete("/{email}", response_model=MessageOut)
def delete_user(
    email: str,
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageOut:
    user = _get_user_or_404(db, email)
    if normalize_role(user.role) is Role.SUPERADMIN:
        raise Forbidden("Forbidden: Superadmin accounts cannot be deleted.")

    db.delete(user)
    db.commit()

    logger.info("Deleted user email=%s by=%s", email, identity.email)
    return MessageOut(message="User deleted successfully")
