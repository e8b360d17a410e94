import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gasmeter.db.models import ActivityEvent, ActivityEventStatus

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Prosty dziennik zdarzeń przechowywany w bazie danych."""

    def __init__(self, session_factory: Callable[[], Session], enabled: bool = True):
        self._session_factory = session_factory
        self.enabled = enabled

    def log(
        self,
        *,
        event_type: str,
        status: ActivityEventStatus,
        identity_id: str | None = None,
        detail: str | None = None,
    ) -> None:
        """Dodaje wpis dziennika, przy zachowaniu odporności na błędy."""
        if not self.enabled:
            return
        try:
            with self._session_factory() as db:
                entry = ActivityEvent(
                    identity_id=identity_id,
                    event_type=event_type,
                    status=status,
                    detail=detail,
                )
                db.add(entry)
                db.commit()
        except SQLAlchemyError:
            # Nie chcemy zatrzymywać głównego przebiegu w razie błędu logowania.
            logger.warning("Nie udało się zapisać zdarzenia %s", event_type, exc_info=True)

    def recent(self, *, identity_id: str | None = None, limit: int = 50) -> list[ActivityEvent]:
        """Zwraca najnowsze zdarzenia, opcjonalnie zawężone do jednego konta."""
        stmt = select(ActivityEvent)
        if identity_id is not None:
            stmt = stmt.where(ActivityEvent.identity_id == identity_id)
        stmt = stmt.order_by(ActivityEvent.id.desc()).limit(limit)
        with self._session_factory() as db:
            return list(db.execute(stmt).scalars().all())
