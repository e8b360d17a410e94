from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from gasmeter.core.config import get_settings
from gasmeter.db.base import Base
from gasmeter.db.kv_store import SqlKeyValueStore

settings = get_settings()

connect_args: dict[str, object] = {}
if settings.database_url.startswith("sqlite"):
    # Katalog pliku bazy tworzymy przy imporcie; SQLite w pamięci nie ma ścieżki.
    if (path := settings.database_path) is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    connect_args["check_same_thread"] = False

engine = create_engine(settings.database_url, echo=False, future=True, connect_args=connect_args)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, class_=Session)


def get_session() -> Session:
    """Zwraca nową sesję z bieżącej fabryki (testy podmieniają ``SessionLocal``)."""
    return SessionLocal()


def create_tables() -> None:
    """Tworzy tabele magazynu klucz-wartość i dziennika zdarzeń."""
    Base.metadata.create_all(bind=engine)


def session_store() -> SqlKeyValueStore:
    """Magazyn klucz-wartość pracujący na sesjach tej bazy."""
    return SqlKeyValueStore(get_session)
