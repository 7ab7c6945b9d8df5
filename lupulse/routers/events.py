from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from lupulse.db.session import get_db
from lupulse.errors import NotFound
from lupulse.models.campus import Event
from lupulse.schemas.campus import EventIn, EventOut, EventWriteOut
from lupulse.schemas.common import MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _get_event_or_404(db: Session, id: int) -> Event:
    event = db.get(Event, id)
    if event is None:
        raise NotFound("Event not found")
    return event


@router.get("", response_model=list[EventOut])
def list_events(db: Session = Depends(get_db)) -> list[Event]:
    return list(db.scalars(select(Event).order_by(Event.id)).all())


@router.get("/{id}", response_model=EventOut)
def get_event(id: int, db: Session = Depends(get_db)) -> Event:
    return _get_event_or_404(db, id)


@router.post("", response_model=EventWriteOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventIn, db: Session = Depends(get_db)) -> EventWriteOut:
    event = Event(**payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("Created event id=%s", event.id)
    return EventWriteOut(message="Event created successfully", event=EventOut.model_validate(event))


@router.put("/{id}", response_model=EventWriteOut)
def update_event(id: int, payload: EventIn, db: Session = Depends(get_db)) -> EventWriteOut:
    event = _get_event_or_404(db, id)
    for field, value in payload.model_dump().items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)

    return EventWriteOut(message="Event updated successfully", event=EventOut.model_validate(event))


@router.delete("/{id}", response_model=MessageOut)
def delete_event(id: int, db: Session = Depends(get_db)) -> MessageOut:
    event = _get_event_or_404(db, id)
    db.delete(event)
    db.commit()

    logger.info("Deleted event id=%s", id)
    return MessageOut(message="Event deleted successfully")
