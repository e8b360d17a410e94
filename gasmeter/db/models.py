from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class StorageEntry(Base):
    """Pojedynczy wpis magazynu klucz-wartość z wartością w postaci JSON."""

    __tablename__ = "storage_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ActivityEventStatus(str, enum.Enum):
    """Status zdarzenia w dzienniku aktywności."""

    success = "success"
    denied = "denied"
    error = "error"


class ActivityEvent(Base):
    """Dziennik zdarzeń logowania i zmian danych."""

    __tablename__ = "activity_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    identity_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[ActivityEventStatus] = mapped_column(Enum(ActivityEventStatus), nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
