from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from lupulse.db.filters import notice_visibility_criteria
from lupulse.db.session import get_db
from lupulse.errors import NotFound
from lupulse.models.campus import Notice
from lupulse.schemas.campus import NoticeIn, NoticeOut, NoticeWriteOut
from lupulse.schemas.common import MessageOut
from lupulse.security.context import IdentityContext
from lupulse.security.dependencies import get_current_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notices", tags=["notices"])


def _get_notice_or_404(db: Session, id: int) -> Notice:
    notice = db.get(Notice, id)
    if notice is None:
        raise NotFound("Notice not found")
    return notice


@router.get("", response_model=list[NoticeOut])
def list_notices(
    identity: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[Notice]:
    stmt = select(Notice).where(notice_visibility_criteria(identity)).order_by(Notice.id)
    return list(db.scalars(stmt).all())


@router.get("/{id}", response_model=NoticeOut)
def get_notice(id: int, db: Session = Depends(get_db)) -> Notice:
    return _get_notice_or_404(db, id)


@router.post("", response_model=NoticeWriteOut, status_code=status.HTTP_201_CREATED)
def create_notice(payload: NoticeIn, db: Session = Depends(get_db)) -> NoticeWriteOut:
    notice = Notice(**payload.model_dump())
    db.add(notice)
    db.commit()
    db.refresh(notice)

    logger.info("Created notice id=%s audience=%s department=%s", notice.id, notice.target_audience, notice.department)
    return NoticeWriteOut(message="Notice created successfully", notice=NoticeOut.model_validate(notice))


@router.put("/{id}", response_model=NoticeWriteOut)
def update_notice(id: int, payload: NoticeIn, db: Session = Depends(get_db)) -> NoticeWriteOut:
    notice = _get_notice_or_404(db, id)
    for field, value in payload.model_dump().items():
        setattr(notice, field, value)
    db.commit()
    db.refresh(notice)

    return NoticeWriteOut(message="Notice updated successfully", notice=NoticeOut.model_validate(notice))


@router.delete("/{id}", response_model=MessageOut)
def delete_notice(id: int, db: Session = Depends(get_db)) -> MessageOut:
    notice = _get_notice_or_404(db, id)
    db.delete(notice)
    db.commit()

    logger.info("Deleted notice id=%s", id)
    return MessageOut(message="Notice deleted successfully")
