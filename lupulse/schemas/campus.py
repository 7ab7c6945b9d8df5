from __future__ import annotations

from datetime import datetime

from lupulse.schemas.common import CamelModel, NonEmptyStr


class NoticeIn(CamelModel):
    title: NonEmptyStr
    category: NonEmptyStr
    description: NonEmptyStr
    image: str | None = None
    date: NonEmptyStr
    target_audience: NonEmptyStr
    department: NonEmptyStr


class NoticeOut(CamelModel):
    id: int
    title: str
    category: str
    description: str
    image: str | None
    date: str
    target_audience: str
    department: str
    created_at: datetime
    updated_at: datetime | None


class NoticeWriteOut(CamelModel):
    message: str
    notice: NoticeOut


class EventIn(CamelModel):
    name: NonEmptyStr
    date: NonEmptyStr
    time: NonEmptyStr
    venue: NonEmptyStr
    details: NonEmptyStr
    image: str | None = None


class EventOut(CamelModel):
    id: int
    name: str
    date: str
    time: str
    venue: str
    details: str
    image: str | None
    created_at: datetime
    updated_at: datetime | None


class EventWriteOut(CamelModel):
    message: str
    event: EventOut


class UploadOut(CamelModel):
    success: bool
    message: str
    image_url: str
