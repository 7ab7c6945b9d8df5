from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lupulse.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    # Stored case-folded; see lupulse.security.context.normalize_email.
    email: Mapped[str] = mapped_column(String(254), primary_key=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    institutional_id: Mapped[str] = mapped_column(String(50), nullable=False)
    user_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    department: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Nullable on purpose: records without a role resolve to "user".
    role: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
