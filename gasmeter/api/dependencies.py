from datetime import date

from fastapi import Depends, HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError

from gasmeter.core.config import Settings, get_settings
from gasmeter.db.kv_store import KeyValueStore
from gasmeter.db.session import get_session, session_store
from gasmeter.schemas.auth import IdentityPublic
from gasmeter.schemas.reading import PeriodFilter, PeriodType
from gasmeter.services.config_service import ConfigService
from gasmeter.services.identity_service import IdentityService
from gasmeter.services.logging_service import ActivityLogger
from gasmeter.services.period_filters import current_month, current_week
from gasmeter.services.reading_service import ReadingService
from gasmeter.services.report_service import ReportService


def get_store() -> KeyValueStore:
    """Zwraca magazyn klucz-wartość oparty o bazę danych."""
    return session_store()


def get_app_settings() -> Settings:
    """Dostarcza ustawienia aplikacji."""
    return get_settings()


def get_activity_logger(settings: Settings = Depends(get_app_settings)) -> ActivityLogger:
    return ActivityLogger(get_session, enabled=settings.activity_log_enabled)


def get_identity_service(
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> IdentityService:
    return IdentityService(store, settings, activity)


def get_current_identity(service: IdentityService = Depends(get_identity_service)) -> IdentityPublic:
    """Zapewnia aktywną sesję."""
    identity = service.current_identity()
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Nenhuma sessão ativa.")
    return identity


def get_config_service(
    identity: IdentityPublic = Depends(get_current_identity),
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ConfigService:
    return ConfigService(store, settings, identity, activity)


def get_reading_service(
    identity: IdentityPublic = Depends(get_current_identity),
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ReadingService:
    return ReadingService(store, settings, identity, activity)


def get_report_service(settings: Settings = Depends(get_app_settings)) -> ReportService:
    return ReportService(settings)


def get_period_filter(
    period: PeriodType = Query(default=PeriodType.all),
    month: str | None = Query(default=None, description="Miesiąc YYYY-MM; domyślnie bieżący."),
    week_start: date | None = Query(default=None),
    week_end: date | None = Query(default=None),
) -> PeriodFilter:
    """Buduje selektor okresu, uzupełniając brakujące wartości bieżącym miesiącem lub tygodniem."""
    if period == PeriodType.month and month is None:
        month = current_month()
    if period == PeriodType.week and (week_start is None or week_end is None):
        default_start, default_end = current_week()
        week_start = week_start or default_start
        week_end = week_end or default_end
    try:
        return PeriodFilter(period=period, month=month, week_start=week_start, week_end=week_end)
    except PydanticValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[error["msg"] for error in exc.errors()],
        ) from exc
